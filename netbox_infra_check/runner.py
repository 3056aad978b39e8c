"""
Оркестрация запуска: обход настроенных проверок.

Для каждого запуска:
    1. VxLAN из NAM загружаются один раз (общие для всех проверок)
    2. Для каждой проверки - VLAN и префиксы сайта из NetBox
    3. Сверка (core.domain.run_check), отчёт в stdout
    4. При расхождениях - заявка в ESM и уведомление в Slack

Политика ошибок (секция runner в config.yaml):
    on_fetch_error: abort | skip  - ошибка NetBox для одной группы
    on_ticket_error: abort | skip - ошибка создания заявки
Пустой ответ NAM всегда прерывает запуск. Ошибки Slack только логируются.
"""

import sys
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, TextIO

from .clients import ESMClient, NAMClient, SlackNotifier
from .core.config_schema import AppConfig, CheckConfig
from .core.domain import CheckResult, run_check
from .core.exceptions import (
    ConfigError,
    NAMAPIError,
    NetBoxAPIError,
    SlackError,
    TicketError,
    format_error_for_log,
)
from .core.logging import get_logger
from .netbox import NetBoxClient

logger = get_logger(__name__)

BANNER = "=" * 34


@dataclass
class RunSummary:
    """
    Итог запуска.

    Attributes:
        results: Результаты выполненных проверок
        skipped: Группы, пропущенные из-за ошибок
        tickets: Количество созданных заявок
        notifications: Количество отправленных уведомлений Slack
    """
    results: List[CheckResult] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    tickets: int = 0
    notifications: int = 0

    @property
    def has_drift(self) -> bool:
        return any(r.has_drift for r in self.results)


class CheckRunner:
    """
    Выполняет все проверки из конфигурации.

    Клиенты передаются явно (удобно для тестов); build_runner()
    создаёт их из конфигурации.
    """

    def __init__(
        self,
        config: AppConfig,
        netbox: NetBoxClient,
        nam: NAMClient,
        esm: Optional[ESMClient] = None,
        slack: Optional[SlackNotifier] = None,
        out: Optional[TextIO] = None,
    ):
        self.config = config
        self.netbox = netbox
        self.nam = nam
        self.esm = esm
        self.slack = slack
        self.out = out or sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    def _select_checks(self, groups: Optional[Iterable[str]]) -> List[CheckConfig]:
        if not groups:
            return list(self.config.checks)
        wanted = set(groups)
        return [c for c in self.config.checks if c.group in wanted]

    def run(self, groups: Optional[Iterable[str]] = None) -> RunSummary:
        """
        Выполняет проверки.

        Args:
            groups: Ограничить запуск этими группами (None = все)

        Returns:
            RunSummary: Итог запуска

        Raises:
            NAMAPIError: NAM недоступен или вернул пустой список
            NetBoxAPIError: Ошибка NetBox при on_fetch_error=abort
            TicketError: Ошибка ESM при on_ticket_error=abort
        """
        summary = RunSummary()
        checks = self._select_checks(groups)
        if not checks:
            logger.warning("Нет проверок для выполнения")
            return summary

        segments = self.nam.fetch_vxlans()
        if not segments:
            raise NAMAPIError(
                "No NAM VxLANs fetched - check API URL or token", url=self.nam.url
            )
        logger.info(f"Получено VxLAN из NAM: {len(segments)}")

        for check in checks:
            self._print()
            self._print(BANNER)
            self._print(f"Sjekker {self.config.group_label} {check.group.upper()}")
            self._print(BANNER)
            self._print()

            result = self._run_one(check, segments)
            if result is None:
                summary.skipped.append(check.group)
                continue

            summary.results.append(result)
            self.out.write(result.output)

            if result.has_drift:
                if self._create_ticket(result):
                    summary.tickets += 1
                if self._notify(result):
                    summary.notifications += 1

        self._print()
        self._print("=" * 22)
        self._print("Alle sjekker fullført!")
        self._print("=" * 22)
        self._print()
        return summary

    def _run_one(self, check: CheckConfig, segments) -> Optional[CheckResult]:
        check_logger = logger.bind(group=check.group, infra=check.infra, site_id=check.netbox_site_id)
        try:
            vlans = self.netbox.get_vlans(check.netbox_site_id)
            prefixes = self.netbox.get_prefixes(check.netbox_site_id)
            if not vlans:
                raise NetBoxAPIError(
                    f"No Netbox VLANs fetched for site {check.netbox_site_id} "
                    "- check API URL or token",
                    url=self.netbox.url,
                )
        except NetBoxAPIError as e:
            if self.config.runner.on_fetch_error == "abort":
                raise
            check_logger.error(f"Проверка пропущена: {format_error_for_log(e)}")
            return None

        result = run_check(
            check.group,
            check.infra,
            segments,
            vlans,
            prefixes,
            netbox_label=self.config.netbox.url,
            old_marker=self.config.checker.old_site_marker,
            new_marker=self.config.checker.new_site_marker,
        )
        check_logger.info(result.summary(), operation="check")
        return result

    def _create_ticket(self, result: CheckResult) -> bool:
        if self.esm is None:
            return False
        try:
            return self.esm.create_ticket(result)
        except TicketError as e:
            if self.config.runner.on_ticket_error == "abort":
                raise
            logger.error(
                f"Заявка не создана: {format_error_for_log(e)}",
                group=result.group,
                infra=result.infra,
            )
            return False

    def _notify(self, result: CheckResult) -> bool:
        if self.slack is None:
            return False
        try:
            return self.slack.send(result)
        except SlackError as e:
            logger.error(
                f"Уведомление Slack не отправлено: {format_error_for_log(e)}",
                group=result.group,
                infra=result.infra,
            )
            return False


def build_runner(
    config: AppConfig,
    create_tickets: bool = True,
    out: Optional[TextIO] = None,
) -> CheckRunner:
    """
    Создаёт CheckRunner с клиентами из конфигурации.

    Args:
        config: Валидированная конфигурация
        create_tickets: Создавать заявки в ESM (False = только отчёт)
        out: Поток для отчёта (default: stdout)

    Raises:
        ConfigError: Не хватает URL или секретов для клиента
    """
    try:
        netbox = NetBoxClient(
            url=config.netbox.url,
            token=config.netbox.token,
            ssl_verify=config.netbox.verify_ssl,
            timeout=config.netbox.timeout,
        )
        nam = NAMClient(
            url=config.nam.url,
            token=config.nam.token,
            timeout=config.nam.timeout,
            verify_ssl=config.nam.verify_ssl,
        )
        esm = ESMClient(config.esm) if create_tickets and config.esm.enabled else None
    except ValueError as e:
        raise ConfigError(str(e)) from e

    slack = None
    if config.slack.webhook_url:
        slack = SlackNotifier(
            config.slack.webhook_url,
            max_lines=config.slack.max_lines,
            timeout=config.slack.timeout,
            verify_ssl=config.slack.verify_ssl,
        )

    return CheckRunner(config, netbox=netbox, nam=nam, esm=esm, slack=slack, out=out)

