"""
Pydantic схемы для валидации config.yaml.

Валидация происходит при загрузке конфигурации.
Ошибки валидации выбрасывают ConfigError.

Пример использования:
    from netbox_infra_check.core.config_schema import validate_config

    config_dict = yaml.safe_load(open("config.yaml"))
    validated = validate_config(config_dict)  # raises ConfigError on failure
"""

from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from .exceptions import ConfigError


def _check_url(v: str, system: str) -> str:
    if v and not v.startswith(("http://", "https://")):
        raise PydanticCustomError(
            "invalid_url",
            "{system} URL должен начинаться с http:// или https://",
            {"system": system},
        )
    return v.rstrip("/")


def _check_verify(v: Union[bool, str]) -> Union[bool, str]:
    """verify_ssl: bool, строка "true"/"false" или путь к CA bundle."""
    if isinstance(v, bool):
        return v
    if v.strip().lower() in ("true", "false"):
        return v.strip().lower() == "true"
    if not v.strip():
        raise PydanticCustomError(
            "invalid_verify_ssl", "verify_ssl: ожидается true/false или путь к CA bundle"
        )
    return v


class NetBoxConfig(BaseModel):
    """Настройки NetBox."""
    url: str = ""
    token: str = ""
    verify_ssl: Union[bool, str] = True
    timeout: int = Field(default=30, ge=1, le=300)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _check_url(v, "NetBox")

    @field_validator("verify_ssl")
    @classmethod
    def validate_verify_ssl(cls, v: Union[bool, str]) -> Union[bool, str]:
        return _check_verify(v)


class NAMConfig(BaseModel):
    """Настройки NAM."""
    url: str = ""
    token: str = ""
    verify_ssl: Union[bool, str] = True
    timeout: int = Field(default=30, ge=1, le=300)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _check_url(v, "NAM")

    @field_validator("verify_ssl")
    @classmethod
    def validate_verify_ssl(cls, v: Union[bool, str]) -> Union[bool, str]:
        return _check_verify(v)


class ESMConfig(BaseModel):
    """
    Настройки ESM (создание заявок).

    Поля запроса, которые отличаются между проверкой датацентров
    и VDC, задаются здесь, а не в коде.
    """
    enabled: bool = True
    url: str = ""
    user: str = ""
    password: str = ""
    tenant_id: int = 0
    offering_id: str = ""
    requester_id: str = ""
    service_id: str = ""
    team_id: str = ""
    display_label_prefix: str = "VDC Infra Check"
    verify_ssl: Union[bool, str] = True
    timeout: int = Field(default=30, ge=1, le=300)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _check_url(v, "ESM")

    @field_validator("verify_ssl")
    @classmethod
    def validate_verify_ssl(cls, v: Union[bool, str]) -> Union[bool, str]:
        return _check_verify(v)


class SlackConfig(BaseModel):
    """Настройки Slack. Пустой webhook_url = уведомления выключены."""
    webhook_url: str = ""
    max_lines: int = Field(default=50, ge=1)
    timeout: int = Field(default=10, ge=1, le=300)
    verify_ssl: Union[bool, str] = True

    @field_validator("verify_ssl")
    @classmethod
    def validate_verify_ssl(cls, v: Union[bool, str]) -> Union[bool, str]:
        return _check_verify(v)


class CheckerConfig(BaseModel):
    """Настройки движка сверки."""
    old_site_marker: str = Field(default="nam-01", min_length=1)
    new_site_marker: str = Field(default="nam-03", min_length=1)


class RunnerConfig(BaseModel):
    """Политика обработки ошибок при обходе групп."""
    on_fetch_error: str = Field(default="abort", pattern="^(abort|skip)$")
    on_ticket_error: str = Field(default="abort", pattern="^(abort|skip)$")


class LoggingConfig(BaseModel):
    """Настройки логирования."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    json_format: bool = False
    console: bool = True
    file_path: Optional[str] = None
    rotation: str = Field(default="size", pattern="^(size|time|none)$")
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)  # min 1KB
    backup_count: int = Field(default=5, ge=1, le=100)
    when: str = "midnight"
    interval: int = Field(default=1, ge=1)


class CheckConfig(BaseModel):
    """
    Одна проверка: группа NAM + сайт NetBox + ожидаемый infra.

    Ключ dc_name принимается как синоним group.
    """
    netbox_site_id: int = Field(ge=1)
    infra: str = Field(min_length=1)
    group: str = Field(min_length=1, validation_alias=AliasChoices("group", "dc_name"))


class AppConfig(BaseModel):
    """Полная конфигурация приложения."""
    netbox: NetBoxConfig = Field(default_factory=NetBoxConfig)
    nam: NAMConfig = Field(default_factory=NAMConfig)
    esm: ESMConfig = Field(default_factory=ESMConfig)
    slack: SlackConfig = Field(default_factory=SlackConfig)
    checker: CheckerConfig = Field(default_factory=CheckerConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    group_label: str = "datasenter"
    checks: List[CheckConfig] = Field(default_factory=list)


def validate_config(config_dict: dict, config_file: Optional[str] = None) -> AppConfig:
    """
    Валидирует словарь конфигурации.

    Args:
        config_dict: Словарь из YAML
        config_file: Путь к файлу (для сообщения об ошибке)

    Returns:
        AppConfig: Валидированная конфигурация

    Raises:
        ConfigError: При ошибке валидации
    """
    try:
        return AppConfig.model_validate(config_dict)
    except ValidationError as e:
        errors = e.errors()
        first_error = errors[0] if errors else {}
        loc = ".".join(str(x) for x in first_error.get("loc", []))
        msg = first_error.get("msg", "Unknown error")
        raise ConfigError(
            message=f"Ошибка валидации конфигурации: {loc}: {msg}",
            config_file=config_file,
            key=loc or None,
        ) from e
