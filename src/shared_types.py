"""Shared enums and types for DigitalMe."""

from enum import StrEnum


class SourceType(StrEnum):
    GMAIL = "gmail"
    TEXT = "text"
    BLOG = "blog"
    GITHUB = "github"
    EXISTING = "existing"


class Tone(StrEnum):
    CONVERSATIONAL = "conversational"
    PROFESSIONAL = "professional"
    NEUTRAL = "neutral"


class Formality(StrEnum):
    CASUAL = "casual"
    BALANCED = "balanced"
    FORMAL = "formal"


class SentenceLength(StrEnum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class StyleAttribute(StrEnum):
    TONE = "tone"
    FORMALITY = "formality"
    SENTENCE_LENGTH = "sentenceLength"
    VOCABULARY = "vocabulary"
    AVOIDANCE = "avoidance"


CATEGORICAL_ATTRIBUTES = (
    StyleAttribute.TONE,
    StyleAttribute.FORMALITY,
    StyleAttribute.SENTENCE_LENGTH,
)
LIST_ATTRIBUTES = (StyleAttribute.VOCABULARY, StyleAttribute.AVOIDANCE)
