"""Source weighting for multi-source style merging."""

from shared_types import SourceType

from .models import SourceSample, WeightedSource, WritingStyle

# Unedited writing is trusted most, polished or technical writing less.
# A stored profile folded back into a merge sits just below email.
QUALITY_WEIGHTS = {
    SourceType.GMAIL: 1.0,
    SourceType.EXISTING: 0.9,
    SourceType.TEXT: 0.8,
    SourceType.BLOG: 0.6,
    SourceType.GITHUB: 0.7,
}
UNKNOWN_QUALITY_WEIGHT = 0.5

SMALL_SAMPLE_WORDS = 500
LARGE_SAMPLE_WORDS = 1500


def quality_weight(source_type: str) -> float:
    return QUALITY_WEIGHTS.get(source_type, UNKNOWN_QUALITY_WEIGHT)


def quantity_factor(word_count: int) -> float:
    if word_count < SMALL_SAMPLE_WORDS:
        return 0.5
    if word_count <= LARGE_SAMPLE_WORDS:
        return 1.0
    return 1.5


def calculate_source_weight(sample: SourceSample) -> float:
    """Quality weight of the source type times a word-count factor.

    Always a positive float in (0, 1.5].
    """
    return quality_weight(sample.type) * quantity_factor(sample.effective_word_count)


def normalize_weights(weights: list[float]) -> list[float]:
    """Scale weights to sum to 1.0; all-zero input becomes uniform."""
    if not weights:
        return []
    if len(weights) == 1:
        return [1.0]
    total = sum(weights)
    if total == 0:
        return [1.0 / len(weights)] * len(weights)
    return [w / total for w in weights]


def weight_sources(pairs: list[tuple[SourceSample, WritingStyle]]) -> list[WeightedSource]:
    """Attach normalized weights to validated (sample, style) pairs."""
    raw = [calculate_source_weight(sample) for sample, _ in pairs]
    normalized = normalize_weights(raw)
    return [
        WeightedSource(
            type=sample.type,
            writing_style=style,
            word_count=sample.effective_word_count,
            text=sample.text,
            quality_weight=quality_weight(sample.type),
            weight=weight,
        )
        for (sample, style), weight in zip(pairs, normalized)
    ]
