"""
NetBox Infra Check - сверка сетевых сегментов NAM и NetBox.

Для каждой группы (датацентр / VDC) и класса инфраструктуры (infra)
сравнивает VxLAN из NAM с VLAN и префиксами сайта в NetBox и
сообщает о расхождениях:
- VLAN переименован под новую площадку, в NAM старое имя
- VxLAN нет среди VLAN нужного infra
- имя VxLAN отличается от имени VLAN
- префикс VxLAN с неверным infra

Ничего не записывает ни в NAM, ни в NetBox.

Примеры использования:
    # CLI
    python -m netbox_infra_check check --no-ticket

    # Python API
    from netbox_infra_check import run_check

    result = run_check("DC1", "prod", segments, vlans, prefixes)
    print(result.output)
"""

__version__ = "1.0.0"

from .core.domain import CheckResult, run_check
from .core.models import DocumentedPrefix, DocumentedVLAN, OverlaySegment

__all__ = [
    "__version__",
    "CheckResult",
    "run_check",
    "DocumentedPrefix",
    "DocumentedVLAN",
    "OverlaySegment",
]
