"""
Subject spelling variants for the remote bank.

The bank is inconsistent about subject naming ("english", "english-language",
"english_language"), so each request walks these variants in order until one
yields questions.
"""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

_WHITESPACE = re.compile(r"\s+")

SUBJECT_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "english language": ("english", "english-language", "english_language"),
    "mathematics": ("mathematics", "math", "maths"),
    "further mathematics": ("further-mathematics", "furthermathematics", "fm"),
    "literature-in-english": ("literature", "literature-in-english"),
}


def subject_variants(subject: str) -> List[str]:
    """
    Ordered, de-duplicated spelling variants for a subject.

    Example:
        >>> subject_variants("English Language")
        ['english language', 'english-language', 'english_language',
         'englishlanguage', 'english']
    """
    lower = subject.strip().lower()
    candidates = [
        lower,
        _WHITESPACE.sub("-", lower),
        _WHITESPACE.sub("_", lower),
        _WHITESPACE.sub("", lower),
        lower.split(" ")[0],
    ]
    candidates.extend(SUBJECT_SYNONYMS.get(_WHITESPACE.sub(" ", lower), ()))

    # dict preserves first-seen order
    return [v for v in dict.fromkeys(candidates) if v]
