"""
Follow-up interval extraction from free-form Russian care advice.

"Полейте через 5-7 дней." yields 6 days; "каждые 2 недели" yields 14.
"""

import re
from typing import List, NamedTuple, Pattern

from adoptd.modules.care_advice.domain.models.weather import TimeRecommendation
from adoptd.shared.utils.helpers import round_half_up

SENTENCE_SPLIT = re.compile(r"[.!?]")

_DAYS = r"(дней|дня|день)"
_WEEKS = r"(недел[юий])"


class TimePattern(NamedTuple):
    regex: Pattern
    multiplier: int
    is_range: bool


# first match per sentence wins, so ranges precede single numbers
TIME_PATTERNS: List[TimePattern] = [
    TimePattern(re.compile(r"через\s*(\d+)\s*-\s*(\d+)\s*" + _DAYS, re.IGNORECASE), 1, True),
    TimePattern(re.compile(r"каждые\s*(\d+)\s*-\s*(\d+)\s*" + _DAYS, re.IGNORECASE), 1, True),
    TimePattern(re.compile(r"через\s*(\d+)\s*" + _DAYS, re.IGNORECASE), 1, False),
    TimePattern(re.compile(r"каждые\s*(\d+)\s*" + _DAYS, re.IGNORECASE), 1, False),
    TimePattern(re.compile(r"через\s*(\d+)\s*-\s*(\d+)\s*" + _WEEKS, re.IGNORECASE), 7, True),
    TimePattern(re.compile(r"каждые\s*(\d+)\s*-\s*(\d+)\s*" + _WEEKS, re.IGNORECASE), 7, True),
    TimePattern(re.compile(r"через\s*(\d+)\s*" + _WEEKS, re.IGNORECASE), 7, False),
    TimePattern(re.compile(r"каждые\s*(\d+)\s*" + _WEEKS, re.IGNORECASE), 7, False),
]


def _days_for(pattern: TimePattern, match: "re.Match") -> int:
    if pattern.is_range:
        low, high = int(match.group(1)), int(match.group(2))
        return round_half_up((low + high) / 2 * pattern.multiplier)
    return int(match.group(1)) * pattern.multiplier


def extract_time_recommendations(text: str) -> List[TimeRecommendation]:
    """
    Scan each sentence for an interval phrase.

    Returns:
        One recommendation per matching sentence, in text order
    """
    if not text:
        return []

    recommendations = []
    for sentence in SENTENCE_SPLIT.split(text):
        for pattern in TIME_PATTERNS:
            match = pattern.regex.search(sentence)
            if match:
                recommendations.append(
                    TimeRecommendation(text=sentence.strip(), days=_days_for(pattern, match))
                )
                break
    return recommendations
