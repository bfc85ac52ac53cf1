import json
import logging

from diet.domain.Dish import Dish
from diet.infra import paths
from diet.infra.json_store import read_json

logger = logging.getLogger(__name__)


def reading_from_catalog(path=None):
    """Read dishes from the catalog JSON file. Malformed records are skipped."""
    path = path or paths.DISHES_FILE
    try:
        data = read_json(path, None)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in catalog file: {e}")
        return []
    except OSError as e:
        logger.error(f"Error reading catalog: {e}")
        return []
    if data is None:
        logger.warning(f"Catalog file not found: {path}. Returning empty list.")
        return []

    dishes = []
    seen = set()
    for entry in data:
        try:
            dish = Dish.from_dict(entry)
        except (TypeError, ValueError) as e:
            logger.error(f"Skipping catalog record {entry!r}: {e}")
            continue
        if dish.id in seen:
            logger.warning(f"Duplicate dish id '{dish.id}' in catalog, keeping the first one")
            continue
        seen.add(dish.id)
        dishes.append(dish)
    return dishes


__all__ = ["reading_from_catalog"]
