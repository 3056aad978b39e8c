"""
Domain Layer: сверка VxLAN из NAM с VLAN/префиксами из NetBox.

Чистые функции - не зависят от внешних систем, ничего не пишут
и не изменяют входные данные. Один вызов run_check() = одна пара
(группа, infra); между вызовами состояние не хранится.

Порядок проверок:
    1. Фильтрация: VxLAN группы, VLAN нужного infra
    2. moved        - VLAN переименован под новую площадку, в NAM старое имя
    3. misconfigured - VID не найден среди VLAN этого infra
    4. name mismatch - VID найден, но имя отличается (без misconfigured)
    5. wrong prefix  - префикс привязан к VxLAN, но infra у префикса другой

Пример использования:
    from netbox_infra_check.core.domain import run_check

    result = run_check("DC1", "prod", segments, vlans, prefixes)
    if result.has_drift:
        print(result.output)
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from ..models import DocumentedPrefix, DocumentedVLAN, OverlaySegment

# Маркеры поколений площадки в именах VLAN
OLD_SITE_MARKER = "nam-01"
NEW_SITE_MARKER = "nam-03"


def normalize_name(name: str) -> str:
    """
    Нормализует имя для сравнения.

    Examples:
        >>> normalize_name("  Srv-100 ")
        'srv-100'
    """
    return name.strip().lower()


@dataclass(frozen=True)
class MovedSegment:
    """VLAN уже переименован в NetBox под новую площадку, VxLAN в NAM - нет."""
    segment: OverlaySegment
    vlan: DocumentedVLAN


@dataclass(frozen=True)
class WrongPrefix:
    """Префикс привязан к VxLAN группы, но infra у него другой."""
    segment: OverlaySegment
    prefix: DocumentedPrefix


@dataclass
class CheckResult:
    """
    Результат сверки для одной пары (группа, infra).

    Attributes:
        group: Имя группы (датацентр / VDC)
        infra: Ожидаемый класс инфраструктуры
        moved: Пары VxLAN/VLAN после переезда без переименования в NAM
        misconfigured: VxLAN без VLAN этого infra в NetBox
        name_mismatches: VxLAN с другим именем в NetBox
        wrong_prefixes: Пары VxLAN/префикс с неверным infra
        output: Текстовый отчёт (заполняется render_report)
    """
    group: str
    infra: str
    moved: List[MovedSegment] = field(default_factory=list)
    misconfigured: List[OverlaySegment] = field(default_factory=list)
    name_mismatches: List[OverlaySegment] = field(default_factory=list)
    wrong_prefixes: List[WrongPrefix] = field(default_factory=list)
    output: str = ""

    @property
    def has_drift(self) -> bool:
        """Есть ли хоть одно расхождение."""
        return bool(
            self.moved
            or self.misconfigured
            or self.name_mismatches
            or self.wrong_prefixes
        )

    @property
    def total(self) -> int:
        return (
            len(self.moved)
            + len(self.misconfigured)
            + len(self.name_mismatches)
            + len(self.wrong_prefixes)
        )

    def summary(self) -> str:
        """Краткая сводка для лога."""
        if not self.has_drift:
            return f"{self.group}/{self.infra}: no drift"
        parts = []
        if self.moved:
            parts.append(f"{len(self.moved)} moved")
        if self.misconfigured:
            parts.append(f"{len(self.misconfigured)} misconfigured")
        if self.name_mismatches:
            parts.append(f"{len(self.name_mismatches)} name mismatch")
        if self.wrong_prefixes:
            parts.append(f"{len(self.wrong_prefixes)} wrong prefix")
        return f"{self.group}/{self.infra}: {', '.join(parts)}"


def filter_group_segments(
    segments: Iterable[OverlaySegment], group: str
) -> List[OverlaySegment]:
    """VxLAN, у которых первая группа совпадает с group (точное сравнение)."""
    return [s for s in segments if s.primary_group == group]


def filter_infra_vlans(vlans: Iterable[DocumentedVLAN], infra: str) -> List[DocumentedVLAN]:
    """VLAN с custom field infra == infra (точное сравнение)."""
    return [v for v in vlans if v.infra_class == infra]


def find_moved(
    segments: Sequence[OverlaySegment],
    vlans: Sequence[DocumentedVLAN],
    old_marker: str = OLD_SITE_MARKER,
    new_marker: str = NEW_SITE_MARKER,
) -> List[MovedSegment]:
    """
    Находит VxLAN, переехавшие на новую площадку только в NetBox.

    VLAN считается переехавшим если его имя содержит new_marker, VID
    совпадает с VxLAN, и имя VxLAN равно имени VLAN с заменой
    new_marker -> old_marker. Каждое совпадение VID учитывается
    отдельно, один VxLAN может попасть в список несколько раз.
    """
    moved: List[MovedSegment] = []
    for segment in segments:
        for vlan in vlans:
            if (
                new_marker in vlan.name
                and vlan.tag == segment.id
                and normalize_name(segment.name)
                == normalize_name(vlan.name.replace(new_marker, old_marker))
            ):
                moved.append(MovedSegment(segment=segment, vlan=vlan))
    return moved


def find_misconfigured(
    segments: Sequence[OverlaySegment],
    vlans: Sequence[DocumentedVLAN],
) -> List[OverlaySegment]:
    """VxLAN, для которых среди VLAN нужного infra нет ни одного с тем же VID."""
    tags = {vlan.tag for vlan in vlans}
    return [s for s in segments if s.id not in tags]


def find_name_mismatches(
    segments: Sequence[OverlaySegment],
    vlans: Sequence[DocumentedVLAN],
    misconfigured: Sequence[OverlaySegment],
) -> List[OverlaySegment]:
    """
    VxLAN, у которых VID есть в NetBox, но имя отличается.

    Уже попавшие в misconfigured пропускаются (по id), поэтому VxLAN
    никогда не бывает одновременно в обоих списках. VxLAN без
    подходящего VLAN тоже считается расхождением.
    """
    skip_ids = {s.id for s in misconfigured}
    mismatches: List[OverlaySegment] = []

    for segment in segments:
        if segment.id in skip_ids:
            continue
        name = normalize_name(segment.name)
        matched = any(
            vlan.tag == segment.id and normalize_name(vlan.name) == name
            for vlan in vlans
        )
        if not matched:
            mismatches.append(segment)
    return mismatches


def find_wrong_prefixes(
    segments: Sequence[OverlaySegment],
    prefixes: Sequence[DocumentedPrefix],
    infra: str,
) -> List[WrongPrefix]:
    """
    Префиксы, привязанные к VxLAN группы, но с другим infra.

    Работает по всем префиксам сайта (без фильтра по infra). Имя VLAN
    в префиксе сравнивается с именем VxLAN как есть, без нормализации.
    Префиксы без VLAN пропускаются.
    """
    wrong: List[WrongPrefix] = []
    for segment in segments:
        for prefix in prefixes:
            ref = prefix.vlan
            if ref is None:
                continue
            if (
                ref.tag == segment.id
                and ref.name == segment.name
                and prefix.infra_class != infra
            ):
                wrong.append(WrongPrefix(segment=segment, prefix=prefix))
    return wrong


def compare(
    group: str,
    infra: str,
    segments: Sequence[OverlaySegment],
    vlans: Sequence[DocumentedVLAN],
    prefixes: Sequence[DocumentedPrefix],
    old_marker: str = OLD_SITE_MARKER,
    new_marker: str = NEW_SITE_MARKER,
) -> CheckResult:
    """
    Выполняет все четыре проверки без рендера отчёта.

    Args:
        group: Имя группы (датацентр / VDC)
        infra: Ожидаемый infra
        segments: Все VxLAN из NAM
        vlans: VLAN сайта группы из NetBox
        prefixes: Префиксы сайта группы из NetBox
        old_marker: Маркер старой площадки в именах
        new_marker: Маркер новой площадки в именах

    Returns:
        CheckResult: Результат с пустым output
    """
    group_segments = filter_group_segments(segments, group)
    infra_vlans = filter_infra_vlans(vlans, infra)

    result = CheckResult(group=group, infra=infra)
    result.moved = find_moved(group_segments, infra_vlans, old_marker, new_marker)
    result.misconfigured = find_misconfigured(group_segments, infra_vlans)
    result.name_mismatches = find_name_mismatches(
        group_segments, infra_vlans, result.misconfigured
    )
    result.wrong_prefixes = find_wrong_prefixes(group_segments, prefixes, infra)
    return result


def run_check(
    group: str,
    infra: str,
    segments: Sequence[OverlaySegment],
    vlans: Sequence[DocumentedVLAN],
    prefixes: Sequence[DocumentedPrefix],
    netbox_label: str = "",
    old_marker: str = OLD_SITE_MARKER,
    new_marker: str = NEW_SITE_MARKER,
) -> CheckResult:
    """
    Сверка для одной пары (группа, infra) вместе с текстовым отчётом.

    Args:
        netbox_label: Подпись NetBox в заголовках отчёта (обычно URL)
        остальные - см. compare()

    Returns:
        CheckResult: Результат с заполненным output
    """
    from .report import render_report

    result = compare(group, infra, segments, vlans, prefixes, old_marker, new_marker)
    result.output = render_report(result, netbox_label=netbox_label, new_marker=new_marker)
    return result
