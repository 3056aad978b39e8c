"""
NetBox клиент - только чтение VLAN и префиксов сайта.

Использует pynetbox (пагинация на его стороне) поверх NetBoxSession:
requests.Session с таймаутом по умолчанию и повтором при HTTP 429.

Пример использования:
    client = NetBoxClient(url="https://netbox.local", token="xxx")
    vlans = client.get_vlans(site_id=12)
    prefixes = client.get_prefixes(site_id=12)
"""

import time
from typing import Any, Dict, List, Union

import pynetbox
import requests

from ..core.exceptions import NetBoxAPIError
from ..core.logging import get_logger
from ..core.models import DocumentedPrefix, DocumentedVLAN

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30
MAX_RETRIES_429 = 3
DEFAULT_RETRY_DELAY = 2


class NetBoxSession(requests.Session):
    """
    requests.Session для pynetbox.

    - timeout подставляется во все запросы, если не передан явно
    - при 429 Too Many Requests запрос повторяется до MAX_RETRIES_429 раз,
      задержка из Retry-After или DEFAULT_RETRY_DELAY * номер попытки
    """

    def __init__(self, timeout: int = DEFAULT_TIMEOUT, verify: Union[bool, str] = True):
        super().__init__()
        self.timeout = timeout
        self.verify = verify

    def request(self, method, url, *args, **kwargs):
        kwargs.setdefault("timeout", self.timeout)

        response = None
        for attempt in range(1, MAX_RETRIES_429 + 1):
            response = super().request(method, url, *args, **kwargs)
            if response.status_code != 429:
                return response

            delay = self._retry_delay(response, attempt)
            logger.warning(
                f"NetBox 429 Too Many Requests, повтор через {delay}с "
                f"({attempt}/{MAX_RETRIES_429})"
            )
            time.sleep(delay)

        return response

    @staticmethod
    def _retry_delay(response, attempt: int) -> int:
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                return int(retry_after)
            except (TypeError, ValueError):
                pass
        return DEFAULT_RETRY_DELAY * attempt


class NetBoxClient:
    """
    Клиент NetBox API (только чтение).

    Attributes:
        url: URL NetBox сервера
        api: Объект pynetbox.api
    """

    def __init__(
        self,
        url: str,
        token: str,
        ssl_verify: Union[bool, str] = True,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """
        Args:
            url: URL NetBox сервера
            token: API токен
            ssl_verify: Проверять SSL сертификат (True/False или путь к CA bundle)
            timeout: Таймаут запроса в секундах

        Raises:
            ValueError: URL или токен не указаны
        """
        if not url:
            raise ValueError("NetBox URL не указан. Укажите netbox.url или NETBOX_URL")
        if not token:
            raise ValueError(
                "NetBox токен не указан. Укажите NETBOX_TOKEN или secrets/netbox.secret"
            )

        self.url = url
        self.api = pynetbox.api(url, token=token)
        self.api.http_session = NetBoxSession(timeout=timeout, verify=ssl_verify)

        if ssl_verify is False:
            import urllib3
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        logger.info(f"NetBox клиент инициализирован: {self.url}")

    def _fetch(self, endpoint: Any, name: str, **filters) -> List[Dict[str, Any]]:
        """Выполняет filter() и возвращает записи как словари."""
        try:
            return [dict(record) for record in endpoint.filter(**filters)]
        except pynetbox.RequestError as e:
            status = getattr(getattr(e, "req", None), "status_code", None)
            raise NetBoxAPIError(
                f"NetBox вернул ошибку при получении {name}: {e.error}",
                url=self.url,
                status_code=status,
                endpoint=f"/api/ipam/{name}/",
            ) from e
        except (pynetbox.ContentError, requests.RequestException) as e:
            raise NetBoxAPIError(
                f"Не удалось получить {name} из NetBox: {e}",
                url=self.url,
                endpoint=f"/api/ipam/{name}/",
            ) from e

    def get_vlans(self, site_id: int) -> List[DocumentedVLAN]:
        """
        Получает VLAN сайта.

        Args:
            site_id: ID сайта в NetBox

        Returns:
            List[DocumentedVLAN]: VLAN сайта

        Raises:
            NetBoxAPIError: Ошибка API или транспорта
        """
        records = self._fetch(self.api.ipam.vlans, "vlans", site_id=site_id)
        vlans = [DocumentedVLAN.from_dict(r) for r in records]
        logger.debug(f"Получено VLAN: {len(vlans)}", site_id=site_id)
        return vlans

    def get_prefixes(self, site_id: int) -> List[DocumentedPrefix]:
        """
        Получает префиксы сайта.

        Args:
            site_id: ID сайта в NetBox

        Returns:
            List[DocumentedPrefix]: Префиксы сайта

        Raises:
            NetBoxAPIError: Ошибка API или транспорта
        """
        records = self._fetch(self.api.ipam.prefixes, "prefixes", site_id=site_id)
        prefixes = [DocumentedPrefix.from_dict(r) for r in records]
        logger.debug(f"Получено префиксов: {len(prefixes)}", site_id=site_id)
        return prefixes
