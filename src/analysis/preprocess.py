"""Text preprocessing: word counts, PII anonymization, chunking."""

import re

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_RE = re.compile(r"(\+\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b")
URL_RE = re.compile(
    r"https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b([-a-zA-Z0-9()@:%_+.~#?&/=]*)"
)
GREETING_NAME_RE = re.compile(r"\b(Dear|Hi|Hello|Hey)\s+([A-Z][a-z]+)\b")

SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+|[^.!?]+$")

DEFAULT_CHUNK_WORDS = 2000


def count_words(text: str | None) -> int:
    return len(text.split()) if text else 0


def anonymize_text(text: str | None) -> str:
    """Replace emails, URLs, phone numbers and greeting names with placeholders."""
    if not text:
        return ""
    text = EMAIL_RE.sub("[EMAIL]", text)
    # URLs before phones, so digits inside a URL stay part of it
    text = URL_RE.sub("[URL]", text)
    text = PHONE_RE.sub("[PHONE]", text)
    return GREETING_NAME_RE.sub(r"\1 [NAME]", text)


def chunk_text(text: str | None, max_words: int = DEFAULT_CHUNK_WORDS) -> list[str]:
    """Split text into chunks of at most ``max_words``, breaking between sentences.

    A single sentence longer than ``max_words`` becomes its own chunk.
    """
    if not text or not text.strip():
        return []

    sentences = SENTENCE_RE.findall(text) or [text]
    chunks: list[str] = []
    current: list[str] = []
    current_words = 0

    for sentence in sentences:
        words = count_words(sentence)
        if not words:
            continue
        if current and current_words + words > max_words:
            chunks.append(" ".join(current))
            current, current_words = [], 0
        current.append(sentence.strip())
        current_words += words

    if current:
        chunks.append(" ".join(current))
    return chunks

