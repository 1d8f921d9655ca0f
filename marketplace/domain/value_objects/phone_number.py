"""
Phone number helpers.
"""

import re
from typing import List, Optional

_SEPARATORS = re.compile(r"[\s\-().]")


def normalize_phone_number(raw: str, default_country_code: str = "+1") -> str:
    """Convert a phone number to E.164, assuming the default country without a '+'."""
    cleaned = _SEPARATORS.sub("", raw or "")
    if not cleaned:
        raise ValueError("Phone number is required")
    if cleaned.startswith("+"):
        return cleaned
    return f"{default_country_code}{cleaned}"


def phone_variants(raw: Optional[str], default_country_code: str = "+1") -> List[str]:
    """
    Spellings under which a phone number may be stored.

    Voice webhooks report E.164 while profiles keep whatever the user typed,
    so lookups try the raw value, E.164 and the national digits.
    """
    if not raw or not raw.strip():
        return []

    variants = [raw.strip()]
    e164 = normalize_phone_number(raw, default_country_code)
    variants.append(e164)
    if e164.startswith(default_country_code):
        national = e164[len(default_country_code):]
        variants.append(national)
        variants.append(f"{default_country_code.lstrip('+')}{national}")

    # keep order, drop duplicates
    return list(dict.fromkeys(variants))
