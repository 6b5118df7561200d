"""Merged-profile confidence scoring."""

from .models import MAX_CONFIDENCE, WeightedSource

EMPTY_CONFIDENCE = 0.3
SINGLE_SOURCE_BASE = 0.5
PER_EXTRA_SOURCE = 0.15
MAX_EXTRA_SOURCES = 3
WORD_BONUS = 0.05
WORD_BONUS_THRESHOLDS = (1000, 2000)
SPAM_PENALTY = 0.5
LOW_DIVERSITY_PENALTY = 0.3


def calculate_merged_confidence(
    sources: list[WeightedSource],
    spam_detected: bool = False,
    low_diversity: bool = False,
) -> float:
    if not sources:
        return EMPTY_CONFIDENCE

    extra = min(len(sources) - 1, MAX_EXTRA_SOURCES)
    confidence = SINGLE_SOURCE_BASE + PER_EXTRA_SOURCE * extra

    total_words = sum(s.word_count for s in sources)
    for threshold in WORD_BONUS_THRESHOLDS:
        if total_words > threshold:
            confidence += WORD_BONUS

    if spam_detected:
        confidence *= 1 - SPAM_PENALTY
    if low_diversity:
        confidence *= 1 - LOW_DIVERSITY_PENALTY

    return round(max(0.0, min(confidence, MAX_CONFIDENCE)), 2)
