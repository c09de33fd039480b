"""
Text normalization helpers shared by the source adapters and the scoring engine.

Every function here is total: malformed input degrades to an empty/neutral value
instead of raising.
"""
import math
import re
from typing import Any, List

_WHITESPACE_RE = re.compile(r'\s+')


def normalize_text(value: Any) -> str:
    """Lower-case, collapse whitespace runs to one space, trim."""
    if value is None:
        return ''
    return _WHITESPACE_RE.sub(' ', str(value).lower()).strip()


def normalize_list(items: Any) -> List[str]:
    """Normalize each entry, drop empties, de-duplicate keeping first-seen order."""
    if not isinstance(items, (list, tuple)):
        return []
    seen = set()
    out = []
    for item in items:
        value = normalize_text(item)
        if not value or value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out


def to_words(text: Any) -> List[str]:
    return [w for w in normalize_text(text).split(' ') if w]


def clamp_int(value: Any, lo: int, hi: int) -> int:
    """
    Coerce to a number and clamp into [lo, hi].

    Non-numeric and non-finite input resolves to lo. In-range values are floored.
    """
    try:
        n = float(value)
    except (TypeError, ValueError, OverflowError):
        return lo
    if not math.isfinite(n):
        return lo
    if n < lo:
        return lo
    if n > hi:
        return hi
    return int(math.floor(n))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_keyword_overlap(text: Any, keywords: Any) -> int:
    """Count distinct normalized keywords that appear as substrings of text."""
    src = normalize_text(text)
    if not src:
        return 0
    return sum(1 for keyword in normalize_list(keywords) if keyword in src)


def safe_text(value: Any, max_len: int = 5000) -> str:
    """str() coercion + trim + truncate. None becomes ''."""
    if value is None:
        return ''
    return str(value).strip()[:max_len]
