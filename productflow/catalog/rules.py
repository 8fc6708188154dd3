"""Small pure helpers shared by the catalog writes."""

import math
import re
from typing import Iterable, List

from ..config.defaults import DEFAULT_RATING


def normalize_key(key: str) -> str:
    """Lower-case a free-text key and join words with underscores."""
    return re.sub(r"\s+", "_", key.strip().lower())


def dedupe_values(values: Iterable[str]) -> List[str]:
    """Trim values, drop blanks and repeats, keep first-seen order."""
    seen = set()
    result = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


def average_score(scores: Iterable[float]) -> float:
    """Mean of the scores rounded half-up to one decimal (5.0 when empty)."""
    scores = list(scores)
    if not scores:
        return DEFAULT_RATING
    return math.floor(sum(scores) / len(scores) * 10 + 0.5) / 10
