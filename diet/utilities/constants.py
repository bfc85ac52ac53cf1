from typing import Final

DATE_FORMAT: Final[str] = "%Y-%m-%d"

# Meal slots, in composition order
BREAKFAST: Final[str] = "breakfast"
LUNCH: Final[str] = "lunch"
DINNER: Final[str] = "dinner"
SNACK: Final[str] = "snack"
MEAL_SLOTS: Final[tuple] = (BREAKFAST, LUNCH, DINNER, SNACK)

# Composite meal sub-roles
STAPLE: Final[str] = "staple"
SIDE: Final[str] = "side"
SOUP: Final[str] = "soup"
SUB_ROLES: Final[tuple] = (STAPLE, SIDE, SOUP)

# Member roles
ROLE_SELF: Final[str] = "self"
ROLE_DEPENDENT: Final[str] = "dependent"

# Scopes
HOUSEHOLD_SCOPE: Final[str] = "household"
MEMBER_SCOPE_PREFIX: Final[str] = "member:"

# Allergy severity classes and check results
SEVERITY_CRITICAL: Final[str] = "critical"
SEVERITY_HIGH: Final[str] = "high"
SEVERITY_MODERATE: Final[str] = "moderate"
SEVERITY_SAFE: Final[str] = "safe"
SEVERITIES: Final[tuple] = (SEVERITY_CRITICAL, SEVERITY_HIGH, SEVERITY_MODERATE)

# Disease verdicts, best first
VERDICT_POSITIVE: Final[str] = "positive"
VERDICT_NEUTRAL: Final[str] = "neutral"
VERDICT_WARNING: Final[str] = "warning"
VERDICT_ORDER: Final[dict[str, int]] = {VERDICT_POSITIVE: 0, VERDICT_NEUTRAL: 1, VERDICT_WARNING: 2}

# Slot-scope states
STATE_UNASSIGNED: Final[str] = "unassigned"
STATE_UNIFIED_EVALUATED: Final[str] = "unified_candidate_evaluated"
STATE_UNIFIED_ASSIGNED: Final[str] = "unified_assigned"
STATE_INDIVIDUALLY_ASSIGNED: Final[str] = "individually_assigned"
STATE_UNASSIGNABLE: Final[str] = "unassignable"

# Rollup granularities
GRANULARITIES: Final[tuple] = ("day", "week", "month", "year")

# User-facing messages
SAFETY_BANNER: Final[str] = "Ingredient information may vary. Verify ingredients before eating."
UNASSIGNABLE_MESSAGE: Final[str] = "No safe option found. Please consult a professional."
NO_SAFE_CANDIDATE: Final[str] = "no_safe_candidate"
REFERENCE_UNAVAILABLE: Final[str] = "reference_unavailable"
NO_DISTINCT_CANDIDATE: Final[str] = "no_distinct_candidate"
