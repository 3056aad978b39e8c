"""
Базовый HTTP клиент для внешних систем (NAM, ESM, Slack).

Общая настройка requests.Session: заголовки, проверка SSL, таймаут.
"""

from typing import Dict, Optional, Union

import requests


class HTTPClientBase:
    """
    Базовый класс для REST клиентов.

    Attributes:
        url: Базовый URL системы (без завершающего /)
        timeout: Таймаут запроса в секундах
        verify_ssl: True / False / путь к CA bundle
    """

    def __init__(
        self,
        url: str,
        timeout: int = 30,
        verify_ssl: Union[bool, str] = True,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.url = url.rstrip("/")
        self.timeout = timeout

        # requests принимает: True, False, "/path/to/ca-bundle.crt"
        if isinstance(verify_ssl, str) and verify_ssl.lower() in ("true", "false"):
            self.verify_ssl = verify_ssl.lower() == "true"
        else:
            self.verify_ssl = verify_ssl

        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/json"})
        if headers:
            self._session.headers.update(headers)
        self._session.verify = self.verify_ssl

        if self.verify_ssl is False:
            import urllib3
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def _api_url(self, path: str) -> str:
        """Формирует полный URL для API-запроса."""
        return f"{self.url}/{path.lstrip('/')}"
