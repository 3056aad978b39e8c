"""
Загрузчик конфигурации.

Порядок (каждый следующий перекрывает предыдущий):
    1. Значения по умолчанию (AppConfig)
    2. YAML файл (config.yaml / config/config.yaml / .netbox_infra_check.yaml)
    3. Переменные окружения (NETBOX_URL, NETBOX_TOKEN, NAM_URL, NAM_TOKEN,
       ESM_PASSWORD, SLACK_WEBHOOK_URL)
    4. Файлы секретов (secrets/netbox.secret, secrets/nam.secret,
       secrets/esm.secret) - только для секретов, которые всё ещё пустые

Пример:
    from netbox_infra_check.config import load_config

    config = load_config("config/config.yaml")
    config.netbox.url
    config.checks[0].group
"""

import os
from pathlib import Path
from typing import Optional

import yaml

from .core.config_schema import AppConfig, validate_config
from .core.exceptions import ConfigError
from .core.logging import get_logger

logger = get_logger(__name__)

SEARCH_PATHS = (
    "config.yaml",
    "config.yml",
    os.path.join("config", "config.yaml"),
    ".netbox_infra_check.yaml",
)

# (секция, ключ) -> переменная окружения
ENV_OVERRIDES = {
    ("netbox", "url"): "NETBOX_URL",
    ("netbox", "token"): "NETBOX_TOKEN",
    ("nam", "url"): "NAM_URL",
    ("nam", "token"): "NAM_TOKEN",
    ("esm", "password"): "ESM_PASSWORD",
    ("slack", "webhook_url"): "SLACK_WEBHOOK_URL",
}

# (секция, ключ) -> имя файла в папке секретов
SECRET_FILES = {
    ("netbox", "token"): "netbox.secret",
    ("nam", "token"): "nam.secret",
    ("esm", "password"): "esm.secret",
}


def find_config_file(config_file: Optional[str] = None) -> Optional[str]:
    """Возвращает путь к файлу конфигурации или None."""
    if config_file:
        if not os.path.exists(config_file):
            raise ConfigError("Файл конфигурации не найден", config_file=config_file)
        return config_file

    for path in SEARCH_PATHS:
        if os.path.exists(path):
            return path
    return None


def read_yaml(config_file: str) -> dict:
    """Читает YAML файл конфигурации."""
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Ошибка разбора YAML: {e}", config_file=config_file) from e
    except OSError as e:
        raise ConfigError(f"Ошибка чтения файла: {e}", config_file=config_file) from e

    if not isinstance(data, dict):
        raise ConfigError("Корень конфигурации должен быть словарём", config_file=config_file)
    return data


def read_secret_file(path: Path) -> str:
    """Читает секрет из файла, обрезая пробелы и перевод строки."""
    return path.read_text(encoding="utf-8").strip()


def _section(data: dict, name: str) -> dict:
    if not isinstance(data.get(name), dict):
        data[name] = {}
    return data[name]


def _apply_env(data: dict) -> None:
    for (section, key), env_name in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            _section(data, section)[key] = value.strip()
            logger.debug(f"{section}.{key} взят из переменной окружения {env_name}")


def _apply_secret_files(data: dict, secrets_dir: Path) -> None:
    for (section, key), filename in SECRET_FILES.items():
        section_data = _section(data, section)
        if section_data.get(key):
            continue
        path = secrets_dir / filename
        if path.exists():
            try:
                section_data[key] = read_secret_file(path)
            except OSError as e:
                raise ConfigError(
                    f"Не удалось прочитать секрет: {e}",
                    config_file=str(path),
                    key=f"{section}.{key}",
                ) from e
            logger.debug(f"{section}.{key} взят из {path}")


def load_config(
    config_file: Optional[str] = None,
    secrets_dir: Optional[str] = None,
) -> AppConfig:
    """
    Загружает и валидирует конфигурацию.

    Args:
        config_file: Путь к YAML файлу (опционально, иначе поиск по SEARCH_PATHS)
        secrets_dir: Папка с файлами секретов (default: secrets/)

    Returns:
        AppConfig: Валидированная конфигурация

    Raises:
        ConfigError: Файл не найден, не читается или не проходит валидацию
    """
    path = find_config_file(config_file)
    data = read_yaml(path) if path else {}
    if path:
        logger.debug(f"Конфигурация загружена из {path}")
    else:
        logger.warning("Файл конфигурации не найден, используются значения по умолчанию")

    _apply_env(data)
    _apply_secret_files(data, Path(secrets_dir or "secrets"))

    return validate_config(data, config_file=path)
