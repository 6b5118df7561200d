"""Conversation message collection for batched profile refinement."""

import re

import structlog

logger = structlog.get_logger()

MIN_MESSAGE_WORDS = 10
BATCH_SIZE = 10

_INLINE_CODE = re.compile(r"`[^`]+`")


def passes_quality_filter(message: str) -> bool:
    """Keep messages with at least 10 words, or any message containing code."""
    trimmed = message.strip() if isinstance(message, str) else ""
    if not trimmed:
        return False
    if "```" in trimmed or _INLINE_CODE.search(trimmed):
        return True
    return len(trimmed.split()) >= MIN_MESSAGE_WORDS


class MessageCollector:
    """Accumulates user messages until a batch of ``batch_size`` is ready.

    Nothing is collected while learning is disabled on the profile.
    """

    def __init__(
        self,
        learning_enabled: bool = True,
        batch_size: int = BATCH_SIZE,
        quality_filter: bool = True,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.learning_enabled = learning_enabled
        self.batch_size = batch_size
        self.quality_filter = quality_filter
        self._messages: list[str] = []

    def __len__(self) -> int:
        return len(self._messages)

    def add_message(self, message: str) -> bool:
        """Returns True if the message was accepted into the batch."""
        if not self.learning_enabled:
            return False
        if not isinstance(message, str) or not message.strip():
            return False
        if self.quality_filter and not passes_quality_filter(message):
            return False
        self._messages.append(message)
        return True

    def should_send_batch(self) -> bool:
        return len(self._messages) >= self.batch_size

    def get_batch(self) -> list[str]:
        """Return the pending messages and clear them."""
        batch = list(self._messages)
        self.clear()
        logger.debug("collector.batch_taken", messages=len(batch))
        return batch

    def clear(self):
        self._messages = []


def collect_batches(messages, collector: MessageCollector) -> list[list[str]]:
    """Split ``messages`` into refinement batches; the last one may be short."""
    batches = []
    for message in messages:
        if collector.add_message(message) and collector.should_send_batch():
            batches.append(collector.get_batch())
    if len(collector):
        batches.append(collector.get_batch())
    return batches
