import json
import logging

from diet.domain.Allergy import AllergyReference
from diet.events.event_helpers import publish_reference_unavailable
from diet.infra import paths
from diet.utilities.errors import SafetyReferenceUnavailable

logger = logging.getLogger(__name__)


def _unavailable(path, reason: str) -> SafetyReferenceUnavailable:
    logger.error(f"Allergy reference unavailable ({path}): {reason}")
    publish_reference_unavailable(path, reason)
    return SafetyReferenceUnavailable(f"Allergy reference unavailable: {reason}", source=str(path))


def load_allergy_reference(path=None) -> AllergyReference:
    """Load the allergy / derived-ingredient reference.

    Unlike the other stores there is no empty fallback: a missing, unreadable
    or empty reference raises SafetyReferenceUnavailable.
    """
    path = path or paths.ALLERGIES_FILE
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise _unavailable(path, "file not found")
    except json.JSONDecodeError as e:
        raise _unavailable(path, f"invalid JSON: {e}")
    except OSError as e:
        raise _unavailable(path, str(e))

    if isinstance(data, list):
        data = {"allergies": data}
    try:
        reference = AllergyReference.from_dict(data)
    except (TypeError, ValueError, KeyError) as e:
        raise _unavailable(path, f"malformed reference: {e}")
    if not len(reference):
        raise _unavailable(path, "no allergies defined")
    logger.info(f"Loaded allergy reference v{reference.version} ({len(reference)} allergies) from {path}")
    return reference


__all__ = ["load_allergy_reference"]
