"""
Точка входа для запуска модуля.

Позволяет запускать утилиту как:
    python -m netbox_infra_check [команда] [опции]

Примеры:
    python -m netbox_infra_check
    python -m netbox_infra_check check --no-ticket
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
