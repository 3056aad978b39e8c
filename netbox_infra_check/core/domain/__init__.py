"""
Domain Layer для NetBox Infra Check.

Бизнес-логика сверки отделена от клиентов API.
Клиенты только получают данные, Domain сравнивает и формирует отчёт.

Использование:
    from netbox_infra_check.core.domain import run_check

    result = run_check("DC1", "prod", segments, vlans, prefixes,
                       netbox_label="https://netbox.local")
"""

from .checker import (
    CheckResult,
    MovedSegment,
    WrongPrefix,
    NEW_SITE_MARKER,
    OLD_SITE_MARKER,
    compare,
    normalize_name,
    run_check,
)
from .report import NO_DRIFT_LINE, render_report

__all__ = [
    "CheckResult",
    "MovedSegment",
    "WrongPrefix",
    "NEW_SITE_MARKER",
    "OLD_SITE_MARKER",
    "NO_DRIFT_LINE",
    "compare",
    "normalize_name",
    "render_report",
    "run_check",
]
