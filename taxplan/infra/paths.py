from pathlib import Path

from taxplan.utilities.config import DATA_DIR as _CONFIG_DATA_DIR

# Centralized paths for data files (single source of truth)
DATA_DIR = Path(_CONFIG_DATA_DIR).resolve()
TAX_PLANS_FILE = DATA_DIR / 'tax_plans.json'

__all__ = ['DATA_DIR', 'TAX_PLANS_FILE']
