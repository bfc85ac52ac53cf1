import json
import logging
from datetime import date

from diet.domain.Plan import UsageRecord
from diet.infra import paths
from diet.infra.json_store import read_json, atomic_write_json

logger = logging.getLogger(__name__)


def load_usage(path=None):
    """Read usage history. Unreadable history means no variety signal, not a failure."""
    path = path or paths.USAGE_FILE
    try:
        data = read_json(path, [])
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in usage file: {e}")
        return []

    records = []
    for entry in data:
        try:
            records.append(UsageRecord.from_dict(entry))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Skipping usage record {entry!r}: {e}")
    return records


def _write(records, path):
    atomic_write_json(path, [r.to_dict() for r in records])


def append_usage(records, path=None) -> int:
    '''Append records not already stored (keyed by scope, dish, date). Returns how many were added.'''
    path = path or paths.USAGE_FILE
    stored = load_usage(path)
    keys = {r.key for r in stored}
    added = 0
    for r in records:
        if r.key in keys:
            continue
        keys.add(r.key)
        stored.append(r)
        added += 1
    if added:
        _write(stored, path)
    return added


def replace_day_usage(day: date, records, path=None) -> int:
    '''Drop every record dated `day`, then append `records`. Used when a stored day plan is recomposed.'''
    path = path or paths.USAGE_FILE
    kept = [r for r in load_usage(path) if r.used_on != day]
    keys = {r.key for r in kept}
    fresh = []
    for r in records:
        if r.key not in keys:
            keys.add(r.key)
            fresh.append(r)
    _write(kept + fresh, path)
    return len(fresh)


__all__ = ["load_usage", "append_usage", "replace_day_usage"]
