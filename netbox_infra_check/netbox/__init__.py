"""
NetBox модуль - чтение VLAN и префиксов через pynetbox.
"""

from .client import NetBoxClient, NetBoxSession

__all__ = [
    "NetBoxClient",
    "NetBoxSession",
]
