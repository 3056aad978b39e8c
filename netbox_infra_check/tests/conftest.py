"""
Pytest configuration и общие fixtures для тестов.

Предоставляет фабрики записей NAM и NetBox:
- make_segment: VxLAN из NAM
- make_vlan: VLAN из NetBox
- make_prefix: префикс из NetBox
- app_config: минимальная валидная конфигурация
"""

from typing import Any, Dict, Optional

import pytest

from netbox_infra_check.core.config_schema import AppConfig
from netbox_infra_check.core.models import (
    DocumentedPrefix,
    DocumentedVLAN,
    OverlaySegment,
    SegmentGroup,
    VLANReference,
)


@pytest.fixture
def make_segment():
    """
    Фабрика VxLAN.

    Usage:
        segment = make_segment(100, "srv-100", "DC1")
        segment = make_segment(100, "srv-100", "DC1", "DC2")
    """
    def _make(segment_id: int, name: str, *groups: str) -> OverlaySegment:
        return OverlaySegment(
            id=segment_id,
            name=name,
            groups=tuple(SegmentGroup(id=i + 1, name=g) for i, g in enumerate(groups)),
        )
    return _make


@pytest.fixture
def make_vlan():
    """
    Фабрика VLAN NetBox.

    Usage:
        vlan = make_vlan(100, "srv-100", infra="prod")
    """
    counter = {"id": 0}

    def _make(tag: int, name: str, infra: Optional[Any] = None, **custom: Any) -> DocumentedVLAN:
        counter["id"] += 1
        fields: Dict[str, Any] = dict(custom)
        if infra is not None:
            fields["infra"] = infra
        return DocumentedVLAN(id=counter["id"], tag=tag, name=name, custom_fields=fields)
    return _make


@pytest.fixture
def make_prefix():
    """
    Фабрика префикса NetBox.

    Usage:
        prefix = make_prefix("10.0.0.0/24", tag=500, vlan_name="srv-500", infra="dev")
        prefix = make_prefix("10.0.1.0/24")  # без VLAN
    """
    counter = {"id": 0}

    def _make(
        prefix: str,
        tag: Optional[int] = None,
        vlan_name: str = "",
        infra: Optional[Any] = None,
    ) -> DocumentedPrefix:
        counter["id"] += 1
        vlan = None
        if tag is not None:
            vlan = VLANReference(id=counter["id"] + 1000, tag=tag, name=vlan_name)
        fields = {"infra": infra} if infra is not None else {}
        return DocumentedPrefix(id=counter["id"], prefix=prefix, vlan=vlan, custom_fields=fields)
    return _make


@pytest.fixture
def app_config() -> AppConfig:
    """Конфигурация с одной проверкой и заполненными URL/секретами."""
    return AppConfig.model_validate({
        "netbox": {"url": "https://netbox.example.com", "token": "nb-token"},
        "nam": {"url": "https://nam.example.com", "token": "nam-token"},
        "esm": {
            "url": "https://esm.example.com",
            "user": "svc-infra",
            "password": "secret",
            "tenant_id": 123456,
            "offering_id": "40001",
            "requester_id": "50001",
            "service_id": "60001",
            "team_id": "70001",
        },
        "checks": [
            {"netbox_site_id": 12, "infra": "prod", "dc_name": "DC1"},
        ],
    })
