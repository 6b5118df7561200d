"""Incremental, confidence-gated profile refinement from conversation text.

Attributes the profile is already sure about move slowly; low-confidence
attributes adopt new evidence readily. Confidence grows with diminishing
returns toward a 0.95 ceiling.
"""

import copy
from dataclasses import dataclass
from typing import Optional, Protocol, Union

import structlog

from observability import metrics
from shared_types import CATEGORICAL_ATTRIBUTES, LIST_ATTRIBUTES, StyleAttribute

from .models import (
    MAX_CONFIDENCE,
    DeltaChange,
    DeltaReport,
    StyleProfile,
    WritingStyle,
    attribute_field,
    utc_now,
)

logger = structlog.get_logger()

# Used whenever the analyzer cannot produce a guess.
DEFAULT_GUESS = WritingStyle(vocabulary=["clear", "direct"], avoidance=["none"])

FULL_EFFECT_WORDS = 500
BASE_CONFIDENCE_INCREASE = 0.05
HIGH_CONFIDENCE = 0.8
MEDIUM_CONFIDENCE = 0.5


class TextAnalyzer(Protocol):
    def analyze(self, text: str) -> WritingStyle: ...


@dataclass
class RefinementResult:
    updated_profile: StyleProfile
    delta_report: DeltaReport

    def to_document(self) -> dict:
        return {
            "updatedProfile": self.updated_profile.to_document(),
            "deltaReport": self.delta_report.model_dump(by_alias=True, mode="json"),
        }


def word_factor(word_count: int) -> float:
    return min(1.0, word_count / FULL_EFFECT_WORDS)


def max_adjustment(confidence: float) -> float:
    if confidence >= HIGH_CONFIDENCE:
        return 0.05
    if confidence >= MEDIUM_CONFIDENCE:
        return 0.10
    return 0.20


def change_threshold(confidence: float) -> float:
    return 0.04 if confidence >= HIGH_CONFIDENCE else 0.03


def refine_categorical(current: str, guess: str, confidence: float, word_count: int) -> str:
    """Adopt ``guess`` only when the scaled adjustment clears the threshold."""
    if guess == current:
        return current
    adjustment = max_adjustment(confidence) * word_factor(word_count)
    return guess if adjustment >= change_threshold(confidence) else current


def refine_terms(
    current: list[str], guess: list[str], confidence: float, word_count: int
) -> list[str]:
    """Blend term lists, favouring existing terms. Length stays that of ``current``."""
    weight = max_adjustment(confidence) * word_factor(word_count)
    scores: dict[str, float] = {}
    for term in current:
        scores[term] = 1.0 - weight
    for term in guess:
        scores[term] = scores.get(term, 0.0) + weight
    ranked = sorted(scores, key=lambda t: scores[t], reverse=True)
    return ranked[: len(current)]


def increase_confidence(confidence: float, word_count: int) -> float:
    increase = BASE_CONFIDENCE_INCREASE * word_factor(word_count)
    return min(MAX_CONFIDENCE, confidence + increase * (1.0 - confidence))


def term_change_percent(old: list[str], new: list[str]) -> int:
    if not new:
        return 0
    changed = sum(
        1 for i, term in enumerate(new) if term not in old or i >= len(old) or old[i] != term
    )
    return round(100 * changed / len(new))


def build_delta_report(
    before: WritingStyle,
    after: WritingStyle,
    words_analyzed: int,
    confidence_change: float,
) -> DeltaReport:
    changes = []
    for attr in CATEGORICAL_ATTRIBUTES:
        old, new = before.get(attr), after.get(attr)
        if old != new:
            changes.append(
                DeltaChange(
                    attribute=str(attr), old_value=str(old), new_value=str(new), change_percent=100
                )
            )
    for attr in LIST_ATTRIBUTES:
        old, new = before.get(attr), after.get(attr)
        if old != new:
            changes.append(
                DeltaChange(
                    attribute=str(attr),
                    old_value=", ".join(old),
                    new_value=", ".join(new),
                    change_percent=term_change_percent(old, new),
                )
            )
    return DeltaReport(
        changes=changes,
        words_analyzed=words_analyzed,
        confidence_change=confidence_change,
        timestamp=utc_now(),
    )


class ProfileRefiner:
    """Refines an existing profile with a batch of new conversation messages."""

    def __init__(self, analyzer: Optional[TextAnalyzer] = None):
        self.analyzer = analyzer

    def _guess(self, text: str) -> WritingStyle:
        if not text.strip() or self.analyzer is None:
            return DEFAULT_GUESS
        try:
            guess = self.analyzer.analyze(text)
        except Exception as e:
            metrics.counter("refine.analysis_failures")
            logger.warning("refine.analysis_failed", error=str(e))
            return DEFAULT_GUESS
        if not isinstance(guess, WritingStyle):
            metrics.counter("refine.analysis_failures")
            logger.warning("refine.analysis_failed", error="analyzer returned no style")
            return DEFAULT_GUESS
        return guess

    def refine(
        self,
        current_profile: Union[StyleProfile, dict],
        new_messages: list[str],
    ) -> RefinementResult:
        """Return an updated copy of ``current_profile`` plus a delta report.

        The caller's profile is never modified. Analysis failures fall back to
        a default guess instead of raising.
        """
        metrics.counter("refine.calls")
        if isinstance(current_profile, StyleProfile):
            profile = current_profile.model_copy(deep=True)
        else:
            profile = StyleProfile.model_validate(copy.deepcopy(current_profile))

        text = "\n\n".join(m for m in new_messages if isinstance(m, str))
        word_count = len(text.split())
        guess = self._guess(text)

        before = profile.writing
        updates = {}
        for attr in CATEGORICAL_ATTRIBUTES:
            conf = profile.attribute_confidence.get(attr, profile.confidence)
            updates[attribute_field(attr)] = refine_categorical(
                before.get(attr), guess.get(attr), conf, word_count
            )
        for attr in LIST_ATTRIBUTES:
            conf = profile.attribute_confidence.get(attr, profile.confidence)
            updates[attribute_field(attr)] = refine_terms(
                before.get(attr), guess.get(attr), conf, word_count
            )
        after = before.replace(**updates)

        attribute_confidence = dict(profile.attribute_confidence)
        for attr in StyleAttribute:
            conf = attribute_confidence.get(attr, profile.confidence)
            attribute_confidence[str(attr)] = increase_confidence(conf, word_count)
        confidence = round(sum(attribute_confidence.values()) / len(attribute_confidence), 2)

        sample_count = dict(profile.sample_count)
        sample_count["conversationWords"] = sample_count.get("conversationWords", 0) + word_count
        learning = profile.learning_metadata.model_copy(
            update={
                "last_refinement": utc_now(),
                "total_refinements": profile.learning_metadata.total_refinements + 1,
                "words_from_conversations": (
                    profile.learning_metadata.words_from_conversations + word_count
                ),
            }
        )

        updated = profile.model_copy(
            update={
                "writing": after,
                "confidence": confidence,
                "attribute_confidence": attribute_confidence,
                "sample_count": sample_count,
                "learning_metadata": learning,
                "last_updated": utc_now(),
            }
        )
        report = build_delta_report(
            before, after, word_count, round(confidence - profile.confidence, 2)
        )
        logger.info(
            "refine.complete",
            profile_id=updated.id,
            words=word_count,
            changes=len(report.changes),
            confidence=confidence,
        )
        return RefinementResult(updated_profile=updated, delta_report=report)
