from __future__ import annotations

# Controlled vocabulary for responder expertise tags
EXPERTISE_AREAS: tuple[str, ...] = (
    "Technology",
    "Health",
    "Education",
    "Business",
    "Lifestyle",
    "Biblical Studies",
    "Old Testament",
    "New Testament",
    "Theology",
    "Pastoral",
    "Counseling",
    "Church Administration",
    "Church History",
    "Church Music",
    "Church Policy",
    "Church Social Issues",
)

ANONYMOUS_ASKER = "Anonymous"

# Starter responders for local environments (scripts/seed_responders.py)
RESPONDER_SEEDS = [
    {
        "full_name": "Pastor John",
        "email": "john@askline.org",
        "expertise": ["Biblical Studies", "Theology"],
    },
    {
        "full_name": "Sister Mary",
        "email": "mary@askline.org",
        "expertise": ["Counseling", "Pastoral"],
    },
    {
        "full_name": "Elder David",
        "email": "david@askline.org",
        "expertise": ["Counseling", "Church Administration"],
    },
    {
        "full_name": "Deacon Sarah",
        "email": "sarah@askline.org",
        "expertise": ["Pastoral", "Church Music"],
    },
]


def normalize_expertise(values: list[str] | tuple[str, ...]) -> list[str]:
    """Validate tags against EXPERTISE_AREAS, dropping duplicates but keeping order.

    Raises ValueError naming the first unknown tag.
    """
    allowed = set(EXPERTISE_AREAS)
    seen: list[str] = []
    for raw in values:
        tag = raw.strip()
        if tag not in allowed:
            raise ValueError(f"Unknown expertise '{raw}'")
        if tag not in seen:
            seen.append(tag)
    return seen
