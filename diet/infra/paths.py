from pathlib import Path

from diet.utilities.config import DATA_DIR as _CONFIG_DATA_DIR

# Centralized paths for data files (single source of truth)
DATA_DIR = Path(_CONFIG_DATA_DIR).resolve()
ALLERGIES_FILE = DATA_DIR / 'allergies.json'
DISHES_FILE = DATA_DIR / 'dishes.json'
MEMBERS_FILE = DATA_DIR / 'members.json'
PLAN_FILE = DATA_DIR / 'plans.json'
USAGE_FILE = DATA_DIR / 'usage.json'

__all__ = ['DATA_DIR', 'ALLERGIES_FILE', 'DISHES_FILE', 'MEMBERS_FILE', 'PLAN_FILE', 'USAGE_FILE']
