"""Rule-based writing style analysis for pasted text samples (no LLM)."""

import re
from dataclasses import dataclass

from shared_types import Formality, SentenceLength, SourceType, Tone
from style.models import SourceSample, WritingStyle

from .preprocess import count_words

CASUAL_MARKERS = (
    "yeah", "gonna", "wanna", "kinda", "sorta", "hey", "cool", "awesome",
    "kind of", "i would say", "thank god",
)
FORMAL_MARKERS = (
    "therefore", "furthermore", "consequently", "nevertheless", "accordingly", "moreover",
)
CONVERSATIONAL_MARKERS = (
    "i think", "you know", "basically", "actually", "honestly", "i notice", "i make",
)

SHORT_SENTENCE_WORDS = 15
LONG_SENTENCE_WORDS = 25
RUN_ON_SENTENCE_WORDS = 30
DESCRIPTIVE_SENTENCE_WORDS = 20
EXCLAMATION_RATIO = 0.3
MIN_SAMPLE_WORDS = 100

_CONTRACTION = re.compile(r"\b\w+'\w+\b")
_EMOJI = re.compile("[\U0001F300-\U0001F9FF]")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")


@dataclass
class TextMetrics:
    word_count: int
    sentence_count: int
    avg_words_per_sentence: int
    character_count: int


def _has_any(text: str, markers) -> bool:
    return any(marker in text for marker in markers)


def text_metrics(text: str) -> TextMetrics:
    words = count_words(text)
    sentences = len([s for s in _SENTENCE_SPLIT.split(text) if s.strip()]) or 1
    return TextMetrics(
        word_count=words,
        sentence_count=sentences,
        avg_words_per_sentence=round(words / sentences),
        character_count=len(text),
    )


def analyze_text_sample(text: str) -> SourceSample:
    """Derive a ``text`` source sample from raw prose using marker heuristics."""
    lower = text.lower()
    metrics = text_metrics(text)
    avg = metrics.avg_words_per_sentence

    sentence_length = SentenceLength.MEDIUM
    if avg < SHORT_SENTENCE_WORDS:
        sentence_length = SentenceLength.SHORT
    elif avg > LONG_SENTENCE_WORDS:
        sentence_length = SentenceLength.LONG

    casual = _has_any(lower, CASUAL_MARKERS)
    formal = _has_any(lower, FORMAL_MARKERS)
    conversational = _has_any(lower, CONVERSATIONAL_MARKERS)

    tone = Tone.NEUTRAL
    if casual or conversational:
        tone = Tone.CONVERSATIONAL
    if formal:
        tone = Tone.PROFESSIONAL

    run_on = avg > RUN_ON_SENTENCE_WORDS or ("and" in lower and avg > LONG_SENTENCE_WORDS)
    formality = Formality.BALANCED
    if _CONTRACTION.search(text) or casual or run_on:
        formality = Formality.CASUAL
    if formal and not casual:
        formality = Formality.FORMAL

    emojis = bool(_EMOJI.search(text))
    exclamations = text.count("!") > metrics.sentence_count * EXCLAMATION_RATIO

    vocabulary = []
    if avg > DESCRIPTIVE_SENTENCE_WORDS:
        vocabulary.append("descriptive")
    if avg < SHORT_SENTENCE_WORDS:
        vocabulary.append("concise")
    if not emojis and not exclamations:
        vocabulary.append("straightforward")
    if conversational:
        vocabulary.append("relatable")
    if not vocabulary:
        vocabulary = ["clear", "direct"]

    avoidance = []
    if not emojis:
        avoidance.append("emojis")
    if not exclamations:
        avoidance.append("excessive-punctuation")
    if not casual:
        avoidance.append("slang")

    style = WritingStyle(
        tone=tone,
        formality=formality,
        sentence_length=sentence_length,
        vocabulary=vocabulary[:4],
        avoidance=avoidance or ["none"],
    )
    return SourceSample(
        type=SourceType.TEXT,
        writing_style=style,
        word_count=metrics.word_count,
        text=text,
    )


def validate_text_sample(text: str | None, min_words: int = MIN_SAMPLE_WORDS) -> str | None:
    """Return an error message when the sample is too short to analyze."""
    if not text or not text.strip():
        return "Text sample is required"
    words = count_words(text)
    if words < min_words:
        return f"Text sample too short. Need at least {min_words} words, got {words}."
    return None
