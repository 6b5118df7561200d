"""Validation and normalization of raw writing-style values."""

import math
from typing import Any, Optional

import structlog

from shared_types import Formality, SentenceLength, Tone

from .models import SourceSample, WritingStyle

logger = structlog.get_logger()

MAX_VOCABULARY_TERMS = 4
MAX_AVOIDANCE_TERMS = 3
UNKNOWN_SOURCE_TYPE = "unknown"


def _normalize_choice(value: Any, enum_cls, default, field: str):
    if not isinstance(value, str) or not value.strip():
        logger.warning("style.invalid_value", field=field, value=repr(value), default=str(default))
        return default
    cleaned = value.strip().lower()
    try:
        return enum_cls(cleaned)
    except ValueError:
        logger.warning("style.unrecognized_value", field=field, value=value, default=str(default))
        return default


def normalize_tone(value: Any) -> Tone:
    return _normalize_choice(value, Tone, Tone.NEUTRAL, "tone")


def normalize_formality(value: Any) -> Formality:
    return _normalize_choice(value, Formality, Formality.BALANCED, "formality")


def normalize_sentence_length(value: Any) -> SentenceLength:
    return _normalize_choice(value, SentenceLength, SentenceLength.MEDIUM, "sentenceLength")


def normalize_terms(value: Any, limit: Optional[int] = None) -> list[str]:
    """Clean a term list: strings only, stripped, de-duplicated, order kept."""
    if not isinstance(value, (list, tuple)):
        return []
    terms: list[str] = []
    for term in value:
        if not isinstance(term, str):
            continue
        term = term.strip()
        if term and term not in terms:
            terms.append(term)
    return terms[:limit] if limit is not None else terms


def normalize_writing_style(raw: dict) -> WritingStyle:
    """Build a WritingStyle from a raw dict, mapping bad values to safe defaults."""
    sentence_length = raw.get("sentenceLength", raw.get("sentence_length"))
    avoidance = normalize_terms(raw.get("avoidance"), MAX_AVOIDANCE_TERMS)
    return WritingStyle(
        tone=normalize_tone(raw.get("tone")),
        formality=normalize_formality(raw.get("formality")),
        sentence_length=normalize_sentence_length(sentence_length),
        vocabulary=normalize_terms(raw.get("vocabulary"), MAX_VOCABULARY_TERMS),
        avoidance=avoidance or ["none"],
    )


def clean_word_count(value: Any) -> Optional[int]:
    """Whole, non-negative counts pass; anything else is unknown (None)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        return None
    return int(value) if value >= 0 else None


def clean_source_type(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip().lower()
    return UNKNOWN_SOURCE_TYPE


def _clean_fields(raw: dict) -> dict:
    """Loosen caller input so only a missing writing style can reject it."""
    cleaned = dict(raw)
    cleaned["type"] = clean_source_type(raw.get("type"))
    for key in ("wordCount", "word_count"):
        if key in cleaned:
            count = clean_word_count(cleaned[key])
            if count is None and cleaned[key] is not None:
                logger.warning(
                    "merge.word_count_unknown",
                    source_type=cleaned["type"],
                    value=repr(cleaned[key]),
                )
            cleaned[key] = count
    if not isinstance(cleaned.get("text"), str):
        cleaned.pop("text", None)
    for key in ("codingStyle", "coding_style"):
        if key in cleaned and not isinstance(cleaned[key], dict):
            cleaned[key] = None
    return cleaned


def coerce_sample(raw: Any) -> Optional[SourceSample]:
    """Turn caller input into a SourceSample, or None if it is unusable."""
    if isinstance(raw, SourceSample):
        return raw
    if not isinstance(raw, dict):
        logger.warning("merge.sample_invalid", reason="not an object")
        return None
    try:
        return SourceSample.model_validate(_clean_fields(raw))
    except ValueError as e:
        logger.warning("merge.sample_invalid", source_type=raw.get("type"), reason=str(e))
        return None


def validate_sample(sample: SourceSample) -> Optional[WritingStyle]:
    """Return the sample's normalized style, or None when it has none."""
    if not isinstance(sample.writing_style, dict) or not sample.writing_style:
        logger.warning("merge.sample_invalid", source_type=sample.type, reason="missing writingStyle")
        return None
    return normalize_writing_style(sample.writing_style)
