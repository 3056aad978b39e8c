"""
Типизированные исключения для NetBox Infra Check.

Иерархия:
    InfraCheckError (базовый)
    ├── APIError (внешние HTTP API)
    │   ├── NetBoxAPIError (NetBox)
    │   ├── NAMAPIError (NAM)
    │   ├── TicketError (ESM, создание заявки)
    │   └── SlackError (Slack webhook)
    └── ConfigError (конфигурация)

Движок сверки (core.domain) исключений не бросает - все ошибки
возникают только в клиентах внешних систем и при загрузке конфигурации.

Пример использования:
    from netbox_infra_check.core.exceptions import NAMAPIError

    try:
        segments = nam.fetch_vxlans()
    except NAMAPIError as e:
        logger.error(f"NAM: {e.status_code} - {e.message}")
"""

from typing import Optional


class InfraCheckError(Exception):
    """
    Базовое исключение для всех ошибок NetBox Infra Check.

    Attributes:
        message: Описание ошибки
        details: Дополнительные детали (dict)
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def to_dict(self) -> dict:
        """Сериализация для логов."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# === API Errors ===

class APIError(InfraCheckError):
    """
    Ошибка при обращении к внешнему HTTP API.

    Attributes:
        url: Базовый URL системы
        status_code: HTTP код ответа (если ответ был)
        endpoint: Вызванный endpoint
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.url = url
        self.status_code = status_code
        self.endpoint = endpoint
        details = details or {}
        if url:
            details["url"] = url
        if status_code:
            details["status_code"] = status_code
        if endpoint:
            details["endpoint"] = endpoint
        super().__init__(message, details)


class NetBoxAPIError(APIError):
    """
    Ошибка NetBox API.

    Пример:
        raise NetBoxAPIError("Not found", status_code=404, endpoint="/api/ipam/vlans/")
    """
    pass


class NAMAPIError(APIError):
    """Ошибка NAM API."""
    pass


class TicketError(APIError):
    """
    Ошибка авторизации или создания заявки в ESM.

    Пример:
        raise TicketError("ESM login did not return OK", status_code=401)
    """
    pass


class SlackError(APIError):
    """Ошибка отправки уведомления в Slack."""
    pass


# === Config Errors ===

class ConfigError(InfraCheckError):
    """
    Ошибка конфигурации.

    Attributes:
        config_file: Путь к файлу конфигурации
        key: Ключ конфигурации с ошибкой

    Пример:
        raise ConfigError("Missing required field", config_file="config.yaml", key="nam.url")
    """

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.config_file = config_file
        self.key = key
        details = details or {}
        if config_file:
            details["config_file"] = config_file
        if key:
            details["key"] = key
        super().__init__(message, details)


def format_error_for_log(error: Exception) -> str:
    """
    Форматирует ошибку для вывода в лог.

    Args:
        error: Исключение

    Returns:
        str: Отформатированная строка ошибки
    """
    if isinstance(error, InfraCheckError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"
