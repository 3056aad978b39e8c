"""
Клиенты внешних систем: NAM (чтение), ESM (заявки), Slack (уведомления).
"""

from .esm import ESMClient
from .nam import NAMClient
from .slack import SlackNotifier

__all__ = [
    "ESMClient",
    "NAMClient",
    "SlackNotifier",
]
