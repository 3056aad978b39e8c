"""
Клиент ESM (SMAX) - создание заявки с отчётом о расхождениях.

Поток:
    1. authenticate() - POST логин/пароль, тело ответа = токен
    2. build_request() - bulk-запрос на создание Request
    3. send_request() - POST /rest/<tenant>/ems/bulk с Bearer токеном

Пример использования:
    esm = ESMClient(config.esm)
    esm.create_ticket(result)
"""

import json
from typing import Any, Dict, Optional

import requests

from ..core.config_schema import ESMConfig
from ..core.domain import CheckResult
from ..core.exceptions import TicketError
from ..core.logging import get_logger
from .base import HTTPClientBase

logger = get_logger(__name__)

AUTH_ENDPOINT = "auth/authentication-endpoint/authenticate/token"
OK_STATUSES = (200, 201)


def to_html_breaks(text: str) -> str:
    """Переводы строк -> <br> (описание заявки в ESM - HTML)."""
    return text.replace("\n", "<br>")


class ESMClient(HTTPClientBase):
    """
    Клиент ESM bulk API.

    Attributes:
        config: Секция esm из конфигурации
    """

    def __init__(self, config: ESMConfig):
        if not config.url:
            raise ValueError("ESM URL не указан. Укажите esm.url")
        if not config.user:
            raise ValueError("ESM пользователь не указан. Укажите esm.user")
        if not config.password:
            raise ValueError(
                "ESM пароль не указан. Укажите ESM_PASSWORD или secrets/esm.secret"
            )
        super().__init__(
            config.url,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
            headers={"Content-Type": "application/json"},
        )
        self.config = config
        self._token: Optional[str] = None

    @property
    def bulk_endpoint(self) -> str:
        return f"rest/{self.config.tenant_id}/ems/bulk"

    def authenticate(self) -> str:
        """
        Получает токен ESM.

        Returns:
            str: Токен (тело ответа)

        Raises:
            TicketError: Ошибка транспорта или статус не 200/201
        """
        body = {"login": self.config.user, "password": self.config.password}
        try:
            resp = self._session.post(
                self._api_url(AUTH_ENDPOINT), json=body, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise TicketError(
                f"Ошибка авторизации в ESM: {e}", url=self.url, endpoint=AUTH_ENDPOINT
            ) from e

        if resp.status_code not in OK_STATUSES:
            raise TicketError(
                "ESM login did not return OK",
                url=self.url,
                status_code=resp.status_code,
                endpoint=AUTH_ENDPOINT,
            )

        self._token = resp.text
        logger.debug("Авторизация в ESM успешна")
        return self._token

    def build_request(self, result: CheckResult) -> Dict[str, Any]:
        """
        Формирует bulk-запрос на создание заявки.

        Args:
            result: Результат сверки с заполненным output

        Returns:
            dict: Тело запроса для ems/bulk
        """
        user_options = {
            "complexTypeProperties": [
                {
                    "properties": {
                        "Tjeneste_c": self.config.service_id,
                        "Team_c": self.config.team_id,
                    }
                }
            ]
        }
        properties = {
            "RequestsOffering": self.config.offering_id,
            "CreationSource": "CreationSourceEss",
            "RequestedByPerson": self.config.requester_id,
            "RequestedForPerson": self.config.requester_id,
            "UserOptions": json.dumps(user_options, separators=(",", ":"), ensure_ascii=False),
            "DisplayLabel": f"{self.config.display_label_prefix} - {result.group} - {result.infra}",
            "Description": to_html_breaks(result.output),
            "PublicScope": "Private",
        }
        return {
            "entities": [{"entity_type": "Request", "properties": properties}],
            "operation": "CREATE",
        }

    def send_request(self, request: Dict[str, Any]) -> None:
        """
        Отправляет bulk-запрос.

        Raises:
            TicketError: Нет токена, ошибка транспорта или статус не 200/201
        """
        if not self._token:
            raise TicketError("ESM: нет токена, сначала вызовите authenticate()", url=self.url)

        try:
            resp = self._session.post(
                self._api_url(self.bulk_endpoint),
                json=request,
                headers={"Authorization": f"Bearer {self._token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TicketError(
                f"Ошибка отправки заявки в ESM: {e}", url=self.url, endpoint=self.bulk_endpoint
            ) from e

        if resp.status_code not in OK_STATUSES:
            raise TicketError(
                f"ESM request returned bad status code: {resp.text[:200]}",
                url=self.url,
                status_code=resp.status_code,
                endpoint=self.bulk_endpoint,
            )

    def create_ticket(self, result: CheckResult) -> bool:
        """
        Создаёт заявку, если есть расхождения.

        Returns:
            bool: True если заявка отправлена, False если расхождений нет
        """
        if not result.has_drift:
            return False

        self.authenticate()
        self.send_request(self.build_request(result))
        logger.info("Заявка создана в ESM", group=result.group, infra=result.infra)
        return True
