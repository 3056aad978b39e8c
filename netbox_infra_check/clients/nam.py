"""
Клиент NAM - получение всех VxLAN с группами (containers).

Пример использования:
    nam = NAMClient(url="https://nam.local", token="xxx")
    segments = nam.fetch_vxlans()
"""

from typing import List

import requests

from ..core.exceptions import NAMAPIError
from ..core.logging import get_logger
from ..core.models import OverlaySegment
from .base import HTTPClientBase

logger = get_logger(__name__)

VXLANS_ENDPOINT = "api/ipam/vxlans/"


class NAMClient(HTTPClientBase):
    """Клиент NAM API (Bearer токен)."""

    def __init__(self, url: str, token: str, timeout: int = 30, verify_ssl=True):
        if not url:
            raise ValueError("NAM URL не указан. Укажите nam.url или NAM_URL")
        if not token:
            raise ValueError("NAM токен не указан. Укажите NAM_TOKEN или secrets/nam.secret")
        super().__init__(
            url,
            timeout=timeout,
            verify_ssl=verify_ssl,
            headers={"Authorization": f"Bearer {token}"},
        )

    def fetch_vxlans(self) -> List[OverlaySegment]:
        """
        Получает все VxLAN (expand=1 - с вложенными containers).

        Returns:
            List[OverlaySegment]: VxLAN из NAM

        Raises:
            NAMAPIError: Ошибка транспорта, статус != 200 или невалидный JSON
        """
        url = self._api_url(VXLANS_ENDPOINT)
        try:
            resp = self._session.get(url, params={"expand": 1}, timeout=self.timeout)
        except requests.RequestException as e:
            raise NAMAPIError(
                f"Не удалось получить VxLAN из NAM: {e}",
                url=self.url,
                endpoint=VXLANS_ENDPOINT,
            ) from e

        if resp.status_code != 200:
            raise NAMAPIError(
                f"NAM API вернул статус {resp.status_code}: {resp.text[:200]}",
                url=self.url,
                status_code=resp.status_code,
                endpoint=VXLANS_ENDPOINT,
            )

        try:
            payload = resp.json()
        except ValueError as e:
            raise NAMAPIError(
                f"Не удалось разобрать ответ NAM: {e}",
                url=self.url,
                endpoint=VXLANS_ENDPOINT,
            ) from e

        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list):
            raise NAMAPIError(
                "Ответ NAM не содержит списка results",
                url=self.url,
                endpoint=VXLANS_ENDPOINT,
            )

        segments = [OverlaySegment.from_dict(r) for r in results if isinstance(r, dict)]
        logger.debug(f"Получено VxLAN из NAM: {len(segments)}")
        return segments
