"""
University name normalization for the registration form.

Matching is deliberately permissive: after the exact pass, a canonical
name matches when either normalized string contains the other, so
"nairobi" resolves to "University of Nairobi".
"""
import re
from typing import Iterable, Optional

CANONICAL_UNIVERSITIES = [
    "University of Nairobi",
    "Moi University",
    "Kenyatta University",
    "Egerton University",
    "Kenya Methodist University",
    "Maseno University",
    "Jomo Kenyatta University of Agriculture and Technology",
    "Mount Kenya University",
    "Uzima University",
    "Masinde Muliro University of Science and Technology",
    "Kisii University",
    "The Aga Khan University",
    "Pwani University",
    "Technical University of Mombasa",
    "Technical University of Kenya",
    "Kenya Medical Training College",
    "Kabarak University",
    "United States International University-Africa",
]

_PUNCTUATION = re.compile(r"[.,/#!$%^&*;:{}=\-_`~()']")
_WHITESPACE = re.compile(r"\s+")


def normalize_string(value: str) -> str:
    lowered = value.lower().strip()
    return _WHITESPACE.sub(" ", _PUNCTUATION.sub("", lowered))


def match_university(value: str, canonical_list: Iterable[str]) -> Optional[str]:
    if not value:
        return None
    candidates = list(canonical_list)
    normalized = normalize_string(value)

    for canonical in candidates:
        if normalize_string(canonical) == normalized:
            return canonical

    for canonical in candidates:
        normalized_canonical = normalize_string(canonical)
        if normalized in normalized_canonical or normalized_canonical in normalized:
            return canonical

    return None


def resolve_university(value: Optional[str], user_entered: bool = False) -> Optional[str]:
    """
    Map a submitted university to its canonical name.

    Unmatched names typed by the user are kept but flagged with an
    ``Other:`` prefix so they stand out in the admin dashboard.
    """
    if not value:
        return value
    match = match_university(value, CANONICAL_UNIVERSITIES)
    if match:
        return match
    if user_entered:
        return f"Other: {value}"
    return value
