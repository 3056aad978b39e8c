"""
Текстовый отчёт по результату сверки.

Детерминированный вывод: секции всегда в порядке
moved -> misconfigured -> name mismatch -> wrong prefix,
пустые секции не выводятся. Тексты заголовков - на норвежском,
как их читают получатели заявок.

Пример вывода:
    ===========================================================================
    Vxlans i 'DC1' som ikke har samme navn i Netbox (https://netbox.local)
    ===========================================================================
    ✗ [NAM VLAN ID 300]: -> srv-300a
"""

from typing import List

from .checker import NEW_SITE_MARKER, CheckResult

RULE_WIDTH = 75
NO_DRIFT_LINE = "✓ Ingen avvik funnet!"


def _section(lines: List[str], title: str, items: List[str]) -> None:
    rule = "=" * RULE_WIDTH
    lines.append(rule)
    lines.append(title)
    lines.append(rule)
    lines.extend(items)
    lines.append("")


def render_report(
    result: CheckResult,
    netbox_label: str = "",
    new_marker: str = NEW_SITE_MARKER,
) -> str:
    """
    Формирует текстовый отчёт.

    Args:
        result: Результат сверки
        netbox_label: Подпись NetBox в заголовках (URL)
        new_marker: Маркер новой площадки (для заголовка moved)

    Returns:
        str: Отчёт, каждая строка завершается переводом строки
    """
    group, infra = result.group, result.infra
    lines: List[str] = []

    if result.moved:
        _section(
            lines,
            f"Vxlans i '{group}' som ikke er oppdatert i NAM etter flytting "
            f"til {new_marker} for '{infra}'",
            [
                f"✗ [NAM VLAN ID {m.segment.id}] Netbox='{m.vlan.name}' -> NAM='{m.segment.name}'"
                for m in result.moved
            ],
        )

    if result.misconfigured:
        _section(
            lines,
            f"Vxlans i '{group}' som mangler eller ikke er registrert som '{infra}' "
            f"i Netbox ({netbox_label})",
            [f"✗ [NAM VLAN ID {s.id}]: -> {s.name}" for s in result.misconfigured],
        )

    if result.name_mismatches:
        _section(
            lines,
            f"Vxlans i '{group}' som ikke har samme navn i Netbox ({netbox_label})",
            [f"✗ [NAM VLAN ID {s.id}]: -> {s.name}" for s in result.name_mismatches],
        )

    if result.wrong_prefixes:
        _section(
            lines,
            f"Prefixes i '{group}' som har feil 'infra i Netbox ({netbox_label})'",
            [
                f"✗ [NAM VLAN ID {w.segment.id}] -> {w.prefix.prefix} "
                f"har 'infra' = '{w.prefix.infra_class}'"
                for w in result.wrong_prefixes
            ],
        )

    if not result.has_drift:
        lines.append(NO_DRIFT_LINE)

    return "\n".join(lines) + "\n"
