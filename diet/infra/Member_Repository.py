import json
import logging

from diet.domain.Member import Member
from diet.infra import paths
from diet.infra.json_store import read_json, atomic_write_json

logger = logging.getLogger(__name__)


def reading_from_members(path=None):
    """Read household members. Inactive members are returned too."""
    path = path or paths.MEMBERS_FILE
    try:
        data = read_json(path, [])
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in members file: {e}")
        return []
    except OSError as e:
        logger.error(f"Error reading members: {e}")
        return []

    members = []
    for entry in data:
        try:
            members.append(Member.from_dict(entry))
        except (TypeError, ValueError) as e:
            logger.error(f"Skipping member record {entry!r}: {e}")
    return members


def save_members(members, path=None):
    atomic_write_json(path or paths.MEMBERS_FILE, [m.to_dict() for m in members])


def deactivate_member(member_id: str, path=None) -> bool:
    '''Mark a member inactive instead of removing it. Returns False when the id is unknown.'''
    members = reading_from_members(path)
    for m in members:
        if m.id == member_id:
            m.deactivate()
            save_members(members, path)
            logger.info(f"Member '{member_id}' deactivated")
            return True
    return False


__all__ = ["reading_from_members", "save_members", "deactivate_member"]
