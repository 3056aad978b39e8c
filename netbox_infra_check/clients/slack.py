"""
Уведомления в Slack через incoming webhook.

Отправляет Block Kit сообщение с превью отчёта. Пропускается,
если webhook не настроен или расхождений нет.
"""

from typing import Any, Dict

import requests

from ..core.domain import CheckResult
from ..core.exceptions import SlackError
from ..core.logging import get_logger
from .base import HTTPClientBase

logger = get_logger(__name__)

TRUNCATION_MARKER = "(… truncated …)"
ATTACHMENT_COLOR = "#FF7900"


def truncate_lines(text: str, max_lines: int) -> str:
    """Обрезает текст до max_lines строк с маркером обрезки."""
    lines = text.split("\n")
    if len(lines) <= max_lines:
        return text
    return "\n".join(lines[:max_lines]) + "\n" + TRUNCATION_MARKER


class SlackNotifier(HTTPClientBase):
    """
    Клиент Slack webhook.

    Attributes:
        webhook_url: URL webhook (пустой = уведомления выключены)
        max_lines: Максимум строк отчёта в сообщении
    """

    def __init__(
        self,
        webhook_url: str,
        max_lines: int = 50,
        timeout: int = 10,
        verify_ssl=True,
    ):
        super().__init__(
            webhook_url,
            timeout=timeout,
            verify_ssl=verify_ssl,
            headers={"Content-Type": "application/json"},
        )
        self.webhook_url = webhook_url
        self.max_lines = max_lines

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    def build_payload(self, result: CheckResult) -> Dict[str, Any]:
        """Формирует Block Kit payload."""
        preview = truncate_lines(result.output, self.max_lines)
        blocks = [
            {
                "type": "header",
                "text": {
                    "type": "plain_text",
                    "text": f"VLAN OG PREFIX RAPPORT FOR {result.group.upper()}",
                },
            },
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": (
                        "vlan og prefixer funnet har ikke korrekt 'infrastructure' "
                        "eller navn satt i Netbox, og må korrigeres."
                    ),
                },
            },
            {"type": "divider"},
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": f"```{preview}```"},
            },
        ]
        return {"attachments": [{"color": ATTACHMENT_COLOR, "blocks": blocks}]}

    def send(self, result: CheckResult) -> bool:
        """
        Отправляет уведомление.

        Returns:
            bool: True если отправлено, False если пропущено

        Raises:
            SlackError: Ошибка транспорта или статус != 200
        """
        if not self.enabled or not result.has_drift:
            return False

        try:
            resp = self._session.post(
                self.webhook_url, json=self.build_payload(result), timeout=self.timeout
            )
        except requests.RequestException as e:
            raise SlackError(f"Не удалось отправить уведомление в Slack: {e}") from e

        if resp.status_code != 200:
            raise SlackError(
                f"Slack API вернул статус {resp.status_code}",
                status_code=resp.status_code,
            )

        logger.info("Уведомление отправлено в Slack", group=result.group, infra=result.infra)
        return True
