"""
Data Models для NetBox Infra Check.

Типизированные неизменяемые dataclasses для записей двух систем:
- NAM: OverlaySegment (VxLAN) с группами (containers)
- NetBox: DocumentedVLAN, DocumentedPrefix (с вложенной ссылкой на VLAN)

Модели создаются клиентами из JSON ответов API через from_dict()
и передаются в движок сверки только для чтения.

Использование:
    from netbox_infra_check.core.models import OverlaySegment, DocumentedVLAN

    segment = OverlaySegment.from_dict(nam_json)
    vlan = DocumentedVLAN.from_dict(netbox_json)

    segment.primary_group   # "DC1" или ""
    vlan.infra_class        # "prod" или ""
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

# Имя custom field в NetBox с классом инфраструктуры
INFRA_FIELD = "infra"


def _to_int(value: Any) -> int:
    """Приводит значение из JSON к int, 0 если не получилось."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _freeze(data: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Read-only копия словаря custom fields."""
    if not isinstance(data, Mapping):
        return MappingProxyType({})
    return MappingProxyType(dict(data))


def read_infra(custom_fields: Optional[Mapping[str, Any]]) -> str:
    """
    Читает custom field "infra".

    Никогда не падает: отсутствие поля, null или не-строка дают "".
    Пустая строка не совпадает ни с одним непустым infra, поэтому
    такие записи просто не попадают в выборку.
    """
    if not custom_fields:
        return ""
    value = custom_fields.get(INFRA_FIELD)
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class SegmentGroup:
    """Группа (container в NAM): датацентр или виртуальный датацентр."""
    id: int
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SegmentGroup":
        return cls(id=_to_int(data.get("id")), name=data.get("name") or "")


@dataclass(frozen=True)
class OverlaySegment:
    """
    VxLAN из NAM.

    Attributes:
        id: Номер VxLAN (он же VID для сопоставления с NetBox)
        name: Имя сегмента
        groups: Упорядоченный список групп (может быть пустым)
    """
    id: int
    name: str
    groups: Tuple[SegmentGroup, ...] = ()

    @property
    def primary_group(self) -> str:
        """Имя первой группы или "" если групп нет."""
        if self.groups:
            return self.groups[0].name
        return ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OverlaySegment":
        """Создаёт OverlaySegment из JSON NAM (ключ групп - containers)."""
        containers = data.get("containers") or []
        return cls(
            id=_to_int(data.get("id")),
            name=data.get("name") or "",
            groups=tuple(
                SegmentGroup.from_dict(c) for c in containers if isinstance(c, dict)
            ),
        )


@dataclass(frozen=True)
class DocumentedVLAN:
    """
    VLAN из NetBox.

    Attributes:
        id: ID объекта в NetBox
        tag: VID (сравнивается с OverlaySegment.id)
        name: Имя VLAN
        custom_fields: Custom fields (read-only)
    """
    id: int
    tag: int
    name: str
    custom_fields: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "custom_fields", _freeze(self.custom_fields))

    @property
    def infra_class(self) -> str:
        return read_infra(self.custom_fields)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DocumentedVLAN":
        """Создаёт DocumentedVLAN из JSON NetBox (/api/ipam/vlans/)."""
        return cls(
            id=_to_int(data.get("id")),
            tag=_to_int(data.get("vid")),
            name=data.get("name") or "",
            custom_fields=data.get("custom_fields") or {},
        )


@dataclass(frozen=True)
class VLANReference:
    """Вложенная ссылка на VLAN в префиксе NetBox."""
    id: int
    tag: int
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VLANReference":
        return cls(
            id=_to_int(data.get("id")),
            tag=_to_int(data.get("vid")),
            name=data.get("name") or "",
        )


@dataclass(frozen=True)
class DocumentedPrefix:
    """
    Префикс из NetBox.

    Attributes:
        id: ID объекта в NetBox
        prefix: CIDR строка (10.0.0.0/24)
        vlan: Ссылка на VLAN или None
        custom_fields: Custom fields префикса (свой infra, не VLAN)
    """
    id: int
    prefix: str
    vlan: Optional[VLANReference] = None
    custom_fields: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "custom_fields", _freeze(self.custom_fields))

    @property
    def infra_class(self) -> str:
        return read_infra(self.custom_fields)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DocumentedPrefix":
        """Создаёт DocumentedPrefix из JSON NetBox (/api/ipam/prefixes/)."""
        vlan_data = data.get("vlan")
        return cls(
            id=_to_int(data.get("id")),
            prefix=data.get("prefix") or "",
            vlan=VLANReference.from_dict(vlan_data) if isinstance(vlan_data, dict) else None,
            custom_fields=data.get("custom_fields") or {},
        )
