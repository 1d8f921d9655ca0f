"""
Keyword-based skill extraction for job descriptions.
"""

from typing import Dict, List

SKILL_KEYWORDS: Dict[str, List[str]] = {
    "plumbing": ["plumb", "pipe", "leak", "faucet", "toilet", "drain", "water", "sink"],
    "electrical": [
        "electric",
        "wire",
        "outlet",
        "switch",
        "light",
        "circuit",
        "breaker",
        "power",
    ],
    "hvac": ["heat", "air", "furnace", "ac", "vent", "duct", "thermostat", "cooling"],
    "carpentry": ["wood", "door", "window", "frame", "cabinet", "shelf", "trim", "floor"],
    "painting": ["paint", "color", "wall", "ceiling", "brush", "primer"],
    "appliance repair": [
        "appliance",
        "refrigerator",
        "washer",
        "dryer",
        "dishwasher",
        "oven",
        "stove",
    ],
    "roofing": ["roof", "shingle", "gutter", "leak", "tile"],
    "flooring": ["floor", "carpet", "tile", "hardwood", "vinyl", "laminate"],
}

FALLBACK_SKILL = "general repair"


def extract_skills(description: str) -> List[str]:
    """
    Detect trade skills mentioned in free text.

    Matching is a case-insensitive substring scan, so short keywords such as
    "ac" also hit inside longer words. Skills come back in dictionary order.

    Returns:
        Detected skills, or ["general repair"] when nothing matches
    """
    text = (description or "").lower()
    detected = [
        skill
        for skill, keywords in SKILL_KEYWORDS.items()
        if any(keyword in text for keyword in keywords)
    ]
    return detected or [FALLBACK_SKILL]
