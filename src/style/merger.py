"""Multi-source writing style merge and profile assembly.

``merge_writing_styles`` is the pure merge: validate, weight, merge each
attribute, score confidence. ``build_style_profile`` wraps a merge result into
a persisted ``StyleProfile``, either fresh or folded into an existing one.
"""

import copy
from typing import Any, Iterable, Optional, Union

import structlog

from observability import metrics
from shared_types import SourceType, StyleAttribute

from .confidence import EMPTY_CONFIDENCE, calculate_merged_confidence
from .mergers import (
    merge_avoidance,
    merge_formality,
    merge_sentence_length,
    merge_tone,
    merge_vocabulary,
)
from .models import (
    AttributeAttribution,
    LearningMetadata,
    MergeResult,
    SourceSample,
    StyleProfile,
    WritingStyle,
    utc_now,
)
from .normalize import coerce_sample, validate_sample
from .quality import detect_spam, is_low_diversity
from .weights import weight_sources

logger = structlog.get_logger()

SAMPLE_COUNT_KEYS = {
    SourceType.GMAIL: "emailWords",
    SourceType.TEXT: "textWords",
    SourceType.BLOG: "blogWords",
    SourceType.GITHUB: "githubWords",
}
CONVERSATION_WORDS = "conversationWords"


def default_merge_result() -> MergeResult:
    """Low-confidence fallback used when no sample is usable."""
    return MergeResult(
        writing_style=WritingStyle(vocabulary=[], avoidance=["none"]),
        source_attribution={},
        confidence=EMPTY_CONFIDENCE,
        sources_used=0,
    )


def _valid_pairs(samples: Iterable[Any]) -> list[tuple[SourceSample, WritingStyle]]:
    pairs = []
    for raw in samples:
        sample = coerce_sample(raw)
        style = validate_sample(sample) if sample is not None else None
        if style is None:
            metrics.counter("merge.invalid_samples")
            continue
        pairs.append((sample, style))
    return pairs


def merge_writing_styles(samples: Iterable[Union[SourceSample, dict]]) -> MergeResult:
    """Merge the writing styles of several source samples into one.

    Samples with no writing style are dropped and logged; invalid categorical
    values are normalized to defaults. The input is never modified.
    """
    return _merge_pairs(_valid_pairs(copy.deepcopy(list(samples or []))))


def _merge_pairs(pairs: list[tuple[SourceSample, WritingStyle]]) -> MergeResult:
    metrics.counter("merge.calls")
    if not pairs:
        logger.warning("merge.no_valid_samples")
        return default_merge_result()

    with metrics.timer("merge.duration"):
        sources = weight_sources(pairs)

        tone = merge_tone(sources)
        formality = merge_formality(sources)
        sentence_length = merge_sentence_length(sources)
        vocabulary = merge_vocabulary(sources)
        avoidance = merge_avoidance(sources)

        texts = [s.text for s in sources]
        total_words = sum(s.word_count for s in sources)
        spam = any(detect_spam(text) for text in texts)
        low_diversity = is_low_diversity(texts, total_words)
        confidence = calculate_merged_confidence(
            sources, spam_detected=spam, low_diversity=low_diversity
        )

    merged = {
        StyleAttribute.TONE: tone,
        StyleAttribute.FORMALITY: formality,
        StyleAttribute.SENTENCE_LENGTH: sentence_length,
        StyleAttribute.VOCABULARY: vocabulary,
        StyleAttribute.AVOIDANCE: avoidance,
    }
    attribution = {
        str(attr): AttributeAttribution(
            value=str(result.value) if isinstance(result.value, str) else result.value,
            sources=result.attribution,
        )
        for attr, result in merged.items()
    }

    logger.info(
        "merge.complete",
        sources_used=len(sources),
        confidence=confidence,
        spam=spam,
        low_diversity=low_diversity,
    )
    return MergeResult(
        writing_style=WritingStyle(
            tone=tone.value,
            formality=formality.value,
            sentence_length=sentence_length.value,
            vocabulary=vocabulary.value,
            avoidance=avoidance.value,
        ),
        source_attribution=attribution,
        confidence=confidence,
        sources_used=len(sources),
    )


def _sample_counts(samples: list[SourceSample]) -> dict[str, int]:
    counts = {key: 0 for key in SAMPLE_COUNT_KEYS.values()}
    for sample in samples:
        key = SAMPLE_COUNT_KEYS.get(sample.type)
        if key:
            counts[key] += sample.effective_word_count
    return counts


def _add_counts(old: dict[str, int], new: dict[str, int]) -> dict[str, int]:
    return {key: old.get(key, 0) + new.get(key, 0) for key in {**old, **new}}


def _coding_style(samples: list[SourceSample]) -> Optional[dict]:
    for sample in samples:
        if sample.type == SourceType.GITHUB and sample.coding_style:
            return copy.deepcopy(sample.coding_style)
    return None


def existing_source(profile: StyleProfile) -> Optional[tuple[SourceSample, WritingStyle]]:
    """The stored profile's writing as one more weighted source.

    Its word count is everything the profile has seen so far, conversation
    included. A profile with no recorded words carries no evidence and is
    left out.
    """
    words = sum(profile.sample_count.values())
    if words <= 0:
        return None
    sample = SourceSample(
        type=SourceType.EXISTING,
        writing_style=profile.writing,
        word_count=words,
    )
    return sample, profile.writing


def build_style_profile(
    samples: Iterable[Union[SourceSample, dict]],
    user_id: str = "default",
    current: Optional[Union[StyleProfile, dict]] = None,
) -> StyleProfile:
    """Merge ``samples`` into a new profile, or fold them into ``current``.

    Folding merges the current writing back in as an ``existing`` source,
    adds the new word counts to the stored ones, keeps the profile id, coding
    style and learning metadata, bumps the version, and never lowers a
    per-attribute confidence.
    """
    pairs = _valid_pairs(copy.deepcopy(list(samples or [])))
    valid = [sample for sample, _ in pairs]
    sample_count = _sample_counts(valid)
    coding = _coding_style(valid)
    attributes = [str(a) for a in StyleAttribute]

    if current is None:
        result = _merge_pairs(pairs)
        return StyleProfile(
            user_id=user_id,
            version=1,
            last_updated=utc_now(),
            writing=result.writing_style,
            coding=coding or {},
            confidence=result.confidence,
            attribute_confidence={attr: result.confidence for attr in attributes},
            sample_count={**sample_count, CONVERSATION_WORDS: 0},
            source_attribution=result.source_attribution,
            learning_metadata=LearningMetadata(),
        )

    if isinstance(current, StyleProfile):
        existing = current.model_copy(deep=True)
    else:
        existing = StyleProfile.model_validate(copy.deepcopy(current))

    prior = existing_source(existing)
    if prior is not None:
        pairs.append(prior)
    result = _merge_pairs(pairs)

    attribute_confidence = {
        attr: max(existing.attribute_confidence.get(attr, 0.0), result.confidence)
        for attr in attributes
    }
    overall = round(sum(attribute_confidence.values()) / len(attribute_confidence), 2)

    return existing.model_copy(
        update={
            "version": existing.version + 1,
            "last_updated": utc_now(),
            "writing": result.writing_style,
            "coding": coding if coding is not None else existing.coding,
            "confidence": overall,
            "attribute_confidence": attribute_confidence,
            "sample_count": _add_counts(existing.sample_count, sample_count),
            "source_attribution": result.source_attribution,
        }
    )
