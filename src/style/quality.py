"""Per-sample spam and batch-level vocabulary diversity checks.

Both checks look inside a single sample or at the pooled word bag of the
batch. Phrases shared between different sources are never compared, since
consistent wording across sources is style signal rather than noise.
"""

import re
import string
from typing import Iterable, Optional

SENTENCE_SPLIT = re.compile(r"[.!?]+")
MIN_SENTENCE_CHARS = 10
MIN_SPAM_TEXT_CHARS = 100
MIN_SPAM_SENTENCES = 5
SPAM_RATIO = 0.3

MIN_DIVERSITY_WORD_CHARS = 4
LOW_DIVERSITY_RATIO = 0.15
LOW_DIVERSITY_MIN_WORDS = 500

_PUNCTUATION = str.maketrans("", "", string.punctuation)


def _sentences(text: str) -> list[str]:
    parts = (s.strip().lower() for s in SENTENCE_SPLIT.split(text))
    return [s for s in parts if len(s) >= MIN_SENTENCE_CHARS]


def unique_sentence_ratio(text: str) -> float:
    sentences = _sentences(text)
    if not sentences:
        return 1.0
    return len(set(sentences)) / len(sentences)


def detect_spam(text: Optional[str]) -> bool:
    """True when a sample is mostly one sentence repeated.

    Short texts are never flagged; they cannot carry enough sentences for
    the ratio to mean anything.
    """
    if not text or len(text) < MIN_SPAM_TEXT_CHARS:
        return False
    if len(_sentences(text)) < MIN_SPAM_SENTENCES:
        return False
    return unique_sentence_ratio(text) < SPAM_RATIO


def _diversity_words(text: str) -> list[str]:
    words = (w.translate(_PUNCTUATION).lower() for w in text.split())
    return [w for w in words if len(w) >= MIN_DIVERSITY_WORD_CHARS]


def vocabulary_diversity(texts: Iterable[Optional[str]]) -> Optional[float]:
    words: list[str] = []
    for text in texts:
        if text:
            words.extend(_diversity_words(text))
    if not words:
        return None
    return len(set(words)) / len(words)


def is_low_diversity(texts: Iterable[Optional[str]], total_words: int) -> bool:
    if total_words <= LOW_DIVERSITY_MIN_WORDS:
        return False
    diversity = vocabulary_diversity(texts)
    return diversity is not None and diversity < LOW_DIVERSITY_RATIO
