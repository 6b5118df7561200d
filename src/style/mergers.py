"""Per-attribute merge strategies over weighted sources.

Categorical attributes use weighted voting (tone, sentence length) or a
weighted ordinal average (formality). List attributes use a weighted union
(vocabulary) or a conservative weighted intersection (avoidance).
"""

import math
from dataclasses import dataclass, field
from typing import Union

from shared_types import Formality, SentenceLength, Tone

from .models import SourceContribution, WeightedSource

MAX_VOCABULARY = 4
MAX_AVOIDANCE = 3
AVOIDANCE_APPEARANCE_THRESHOLD = 0.5
AVOIDANCE_WEIGHT_THRESHOLD = 0.6
NO_AVOIDANCE = "none"

FORMALITY_SCORES = {Formality.CASUAL: 0, Formality.BALANCED: 1, Formality.FORMAL: 2}


@dataclass
class MergedAttribute:
    value: Union[str, list[str]]
    attribution: list[SourceContribution] = field(default_factory=list)
    score: float | None = None


def _close(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=0.0, abs_tol=1e-9)


def _percentages(contributions: list[tuple[str, float]]) -> list[SourceContribution]:
    """Round each (source_type, weight) share of the summed weight to a percentage."""
    total = sum(w for _, w in contributions)
    if total <= 0:
        return []
    return [
        SourceContribution(source_type=source_type, percentage=round(100 * w / total))
        for source_type, w in contributions
        if w > 0
    ]


def _weighted_vote(sources: list[WeightedSource], field_name: str, default) -> MergedAttribute:
    tally: dict = {}
    for source in sources:
        value = getattr(source.writing_style, field_name)
        tally[value] = tally.get(value, 0.0) + source.weight

    if not tally:
        return MergedAttribute(value=default)

    best = max(tally.values())
    tied = [value for value, total in tally.items() if _close(total, best)]

    winner = tied[0]
    if len(tied) > 1:
        # Highest single quality weight among tied values; first seen wins a further tie.
        top_quality = -1.0
        for source in sources:
            value = getattr(source.writing_style, field_name)
            if value in tied and source.quality_weight > top_quality:
                top_quality = source.quality_weight
                winner = value

    contributions = [
        (source.type, source.weight)
        for source in sources
        if getattr(source.writing_style, field_name) == winner
    ]
    return MergedAttribute(value=winner, attribution=_percentages(contributions))


def merge_tone(sources: list[WeightedSource]) -> MergedAttribute:
    return _weighted_vote(sources, "tone", Tone.NEUTRAL)


def merge_sentence_length(sources: list[WeightedSource]) -> MergedAttribute:
    return _weighted_vote(sources, "sentence_length", SentenceLength.MEDIUM)


def merge_formality(sources: list[WeightedSource]) -> MergedAttribute:
    if not sources:
        return MergedAttribute(value=Formality.BALANCED)

    score = round(sum(s.weight * FORMALITY_SCORES[s.writing_style.formality] for s in sources), 2)
    if score < 0.5:
        value = Formality.CASUAL
    elif score <= 1.5:
        value = Formality.BALANCED
    else:
        value = Formality.FORMAL

    attribution = [
        SourceContribution(source_type=s.type, percentage=round(100 * s.weight))
        for s in sources
        if s.weight > 0
    ]
    return MergedAttribute(value=value, attribution=attribution, score=score)


def _term_contributions(
    sources: list[WeightedSource], field_name: str, selected: list[str]
) -> list[SourceContribution]:
    chosen = set(selected)
    contributions = []
    for source in sources:
        supplied = chosen.intersection(getattr(source.writing_style, field_name))
        contributions.append((source.type, source.weight * len(supplied)))
    return _percentages(contributions)


def merge_vocabulary(sources: list[WeightedSource]) -> MergedAttribute:
    """Weighted union: keep the 4 terms with the most supporting weight."""
    scores: dict[str, float] = {}
    for source in sources:
        for term in dict.fromkeys(source.writing_style.vocabulary):
            scores[term] = scores.get(term, 0.0) + source.weight

    # sorted() is stable, so equal scores keep first-seen order
    ranked = sorted(scores, key=lambda t: scores[t], reverse=True)
    selected = ranked[:MAX_VOCABULARY]
    return MergedAttribute(
        value=selected,
        attribution=_term_contributions(sources, "vocabulary", selected),
    )


def merge_avoidance(sources: list[WeightedSource]) -> MergedAttribute:
    """Weighted intersection with a weight-mass fallback.

    Terms present in at least half of the sources are taken first. Only when
    no term reaches that bar do terms backed by more than 0.6 of the total
    weight qualify. Falls back to ``["none"]``.
    """
    if not sources:
        return MergedAttribute(value=[NO_AVOIDANCE])

    counts: dict[str, int] = {}
    weights: dict[str, float] = {}
    for source in sources:
        for term in dict.fromkeys(source.writing_style.avoidance):
            if term == NO_AVOIDANCE:
                continue
            counts[term] = counts.get(term, 0) + 1
            weights[term] = weights.get(term, 0.0) + source.weight

    total = len(sources)
    candidates = [t for t in counts if counts[t] / total >= AVOIDANCE_APPEARANCE_THRESHOLD]
    if not candidates:
        candidates = [t for t in counts if weights[t] > AVOIDANCE_WEIGHT_THRESHOLD]
    if not candidates:
        return MergedAttribute(value=[NO_AVOIDANCE])

    candidates.sort(key=lambda t: (counts[t], weights[t]), reverse=True)
    selected = candidates[:MAX_AVOIDANCE]
    return MergedAttribute(
        value=selected,
        attribution=_term_contributions(sources, "avoidance", selected),
    )
