"""
CLI модуль netbox_infra_check.

Команды:
- check (по умолчанию): сверка всех групп из config.yaml
- validate-config: проверка конфигурации без обращения к API

Примеры использования:
    python -m netbox_infra_check
    python -m netbox_infra_check check --group dc1 --no-ticket
    python -m netbox_infra_check -c config/config.yaml --json-logs check
    python -m netbox_infra_check validate-config

Коды выхода:
    0 - успешно (независимо от наличия расхождений)
    1 - запуск прерван ошибкой внешней системы
    2 - ошибка конфигурации
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import load_config
from .core.exceptions import ConfigError, InfraCheckError, format_error_for_log
from .core.logging import LogConfig, get_logger, setup_logging, setup_logging_from_config

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def setup_parser() -> argparse.ArgumentParser:
    """
    Создаёт парсер аргументов командной строки.

    Returns:
        ArgumentParser: Настроенный парсер
    """
    parser = argparse.ArgumentParser(
        prog="netbox_infra_check",
        description="Сверка VxLAN из NAM с VLAN/префиксами NetBox по группам и infra",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры:
  %(prog)s check
  %(prog)s check --group dc1 --group dc2 --no-ticket
  %(prog)s validate-config -c config/config.yaml
        """,
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Подробный вывод (DEBUG)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Логи в JSON формате",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Путь к файлу конфигурации YAML (default: config.yaml, config/config.yaml)",
    )
    parser.add_argument(
        "--secrets-dir",
        default=None,
        help="Папка с файлами секретов (default: secrets)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Команды")

    # === CHECK ===
    check_parser = subparsers.add_parser("check", help="Сверка NAM и NetBox")
    check_parser.add_argument(
        "-g",
        "--group",
        action="append",
        default=None,
        help="Проверить только эту группу (можно несколько раз)",
    )
    check_parser.add_argument(
        "--no-ticket",
        action="store_true",
        help="Не создавать заявки в ESM (только отчёт)",
    )

    # === VALIDATE-CONFIG ===
    subparsers.add_parser("validate-config", help="Проверить конфигурацию")

    return parser


def _setup_logging(args, config=None) -> None:
    level = logging.DEBUG if args.verbose else logging.INFO
    if config is None:
        setup_logging(json_format=args.json_logs, level=level)
        return

    log_config = LogConfig.from_dict(config.logging.model_dump())
    if args.verbose:
        log_config.level = logging.DEBUG
    setup_logging_from_config(log_config, json_console=args.json_logs)


def cmd_validate_config(args, config) -> int:
    """Обработчик команды validate-config."""
    print(f"Конфигурация валидна. Проверок: {len(config.checks)}")
    for check in config.checks:
        print(f"  - {check.group}: infra={check.infra}, netbox_site_id={check.netbox_site_id}")
    required = [
        ("netbox.url", config.netbox.url),
        ("netbox.token", config.netbox.token),
        ("nam.url", config.nam.url),
        ("nam.token", config.nam.token),
    ]
    if config.esm.enabled:
        required += [
            ("esm.url", config.esm.url),
            ("esm.user", config.esm.user),
            ("esm.password", config.esm.password),
        ]
    missing = [name for name, value in required if not value]
    if missing:
        print(f"Не заданы: {', '.join(missing)}")
        return EXIT_CONFIG
    return EXIT_OK


def cmd_check(args, config) -> int:
    """Обработчик команды check."""
    from .runner import build_runner

    create_tickets = not getattr(args, "no_ticket", False)
    runner = build_runner(config, create_tickets=create_tickets)
    summary = runner.run(groups=getattr(args, "group", None))

    logger.info(
        f"Проверок выполнено: {len(summary.results)}, пропущено: {len(summary.skipped)}, "
        f"заявок: {summary.tickets}, уведомлений: {summary.notifications}"
    )
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Точка входа CLI."""
    parser = setup_parser()
    args = parser.parse_args(argv)
    command = args.command or "check"

    _setup_logging(args)

    try:
        config = load_config(args.config, secrets_dir=args.secrets_dir)
    except ConfigError as e:
        logger.error(format_error_for_log(e))
        return EXIT_CONFIG

    try:
        _setup_logging(args, config)
    except OSError as e:
        error = ConfigError(
            f"Не удалось открыть файл логов: {e}",
            key="logging.file_path",
        )
        logger.error(format_error_for_log(error))
        return EXIT_CONFIG

    try:
        if command == "validate-config":
            return cmd_validate_config(args, config)
        return cmd_check(args, config)
    except ConfigError as e:
        logger.error(format_error_for_log(e))
        return EXIT_CONFIG
    except InfraCheckError as e:
        logger.error(f"✗ {format_error_for_log(e)}")
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
