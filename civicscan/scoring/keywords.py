"""Fixed keyword tables for issue severity and category.

Matching is a case-insensitive substring test against the issue type. The
tables are ordered and the first matching entry wins.
"""

HIGH_SEVERITY_KEYWORDS: tuple[str, ...] = (
    "pothole",
    "broken_pipe",
    "electrical_hazard",
    "structural_damage",
    "safety_hazard",
)
MEDIUM_SEVERITY_KEYWORDS: tuple[str, ...] = (
    "garbage",
    "graffiti",
    "street_light",
    "road_sign",
    "maintenance_needed",
)

HIGH_SEVERITY_MULTIPLIER = 1.3
MEDIUM_SEVERITY_MULTIPLIER = 1.1

CATEGORY_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("pothole", "roads"),
    ("garbage", "sanitation"),
    ("graffiti", "vandalism"),
    ("street_light", "lighting"),
    ("broken_pipe", "utilities"),
    ("electrical_hazard", "utilities"),
    ("structural_damage", "infrastructure"),
    ("safety_hazard", "safety"),
    ("maintenance", "maintenance"),
)
DEFAULT_CATEGORY = "general"

URGENCY_HIGH = "high"
URGENCY_MEDIUM = "medium"
URGENCY_LOW = "low"


def _contains_any(issue_type: str, keywords: tuple[str, ...]) -> bool:
    lowered = issue_type.lower()
    return any(keyword in lowered for keyword in keywords)


def severity_multiplier(issue_type: str) -> float:
    if _contains_any(issue_type, HIGH_SEVERITY_KEYWORDS):
        return HIGH_SEVERITY_MULTIPLIER
    if _contains_any(issue_type, MEDIUM_SEVERITY_KEYWORDS):
        return MEDIUM_SEVERITY_MULTIPLIER
    return 1.0


def category_for(issue_type: str) -> str:
    lowered = issue_type.lower()
    for keyword, category in CATEGORY_KEYWORDS:
        if keyword in lowered:
            return category
    return DEFAULT_CATEGORY


def urgency_for(confidence: float) -> str:
    if confidence >= 0.8:
        return URGENCY_HIGH
    if confidence >= 0.6:
        return URGENCY_MEDIUM
    return URGENCY_LOW
