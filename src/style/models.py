"""Style profile data models.

Documents exchanged with the browser client use camelCase keys, so every model
here serializes by alias while still accepting snake_case field names from
Python callers.
"""

import uuid
from datetime import datetime, timezone
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from shared_types import Formality, SentenceLength, StyleAttribute, Tone

from .migration import migrate_profile

DEFAULT_WORD_COUNT = 500
MAX_CONFIDENCE = 0.95

Confidence = Annotated[float, Field(ge=0.0, le=MAX_CONFIDENCE)]


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def cap_confidence(value):
    """Pull stored scores in (0.95, 1.0] down to the cap; other values pass through."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    if MAX_CONFIDENCE < value <= 1.0:
        return MAX_CONFIDENCE
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WritingStyle(CamelModel):
    """Normalized writing-style attributes. Immutable once built."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    tone: Tone = Tone.NEUTRAL
    formality: Formality = Formality.BALANCED
    sentence_length: SentenceLength = SentenceLength.MEDIUM
    vocabulary: list[str] = Field(default_factory=list)
    avoidance: list[str] = Field(default_factory=lambda: ["none"])

    def get(self, attribute: StyleAttribute):
        return getattr(self, _ATTRIBUTE_FIELDS[attribute])

    def replace(self, **changes) -> "WritingStyle":
        return self.model_copy(update=changes)


_ATTRIBUTE_FIELDS = {
    StyleAttribute.TONE: "tone",
    StyleAttribute.FORMALITY: "formality",
    StyleAttribute.SENTENCE_LENGTH: "sentence_length",
    StyleAttribute.VOCABULARY: "vocabulary",
    StyleAttribute.AVOIDANCE: "avoidance",
}


def attribute_field(attribute: StyleAttribute) -> str:
    """Python field name on WritingStyle for a profile attribute key."""
    return _ATTRIBUTE_FIELDS[attribute]


class SourceSample(CamelModel):
    """One unit of collected text plus the style extracted from it.

    ``writing_style`` stays a raw dict: the merge orchestrator validates and
    normalizes it, so malformed values from collectors survive until then.
    """

    type: str
    writing_style: Optional[dict[str, Any]] = None
    word_count: Optional[int] = Field(None, ge=0)
    text: Optional[str] = None
    coding_style: Optional[dict[str, Any]] = None

    @field_validator("writing_style", mode="before")
    @classmethod
    def _style_to_dict(cls, v):
        if isinstance(v, WritingStyle):
            return v.model_dump(by_alias=True, mode="json")
        return v

    @property
    def effective_word_count(self) -> int:
        return DEFAULT_WORD_COUNT if self.word_count is None else self.word_count


class WeightedSource(BaseModel):
    """A validated sample with its quality and normalized weights for one merge."""

    type: str
    writing_style: WritingStyle
    word_count: int
    text: Optional[str] = None
    quality_weight: float
    weight: float


class SourceContribution(CamelModel):
    source_type: str
    percentage: int = Field(ge=0, le=100)


class AttributeAttribution(CamelModel):
    value: Union[str, list[str]]
    sources: list[SourceContribution] = Field(default_factory=list)


class LearningMetadata(CamelModel):
    enabled: bool = True
    last_refinement: Optional[str] = None
    total_refinements: int = 0
    words_from_conversations: int = 0


class StyleProfile(CamelModel):
    """Persisted style profile. Unknown document keys are preserved."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    user_id: str = "default"
    version: int = 1
    last_updated: Optional[str] = None
    writing: WritingStyle = Field(default_factory=WritingStyle)
    coding: dict[str, Any] = Field(default_factory=dict)
    confidence: Confidence = 0.3
    attribute_confidence: dict[str, Confidence] = Field(default_factory=dict)
    sample_count: dict[str, int] = Field(default_factory=dict)
    source_attribution: dict[str, AttributeAttribution] = Field(default_factory=dict)
    learning_metadata: LearningMetadata = Field(default_factory=LearningMetadata)

    @model_validator(mode="before")
    @classmethod
    def _migrate(cls, data):
        if isinstance(data, dict):
            return migrate_profile(data)
        return data

    @field_validator("confidence", mode="before")
    @classmethod
    def _cap_confidence(cls, v):
        return cap_confidence(v)

    @field_validator("attribute_confidence", mode="before")
    @classmethod
    def _cap_attribute_confidence(cls, v):
        if isinstance(v, dict):
            return {attr: cap_confidence(c) for attr, c in v.items()}
        return v

    def to_document(self) -> dict:
        """Whole-document JSON form (camelCase) for storage and API responses."""
        return self.model_dump(by_alias=True, mode="json")


class MergeResult(CamelModel):
    writing_style: WritingStyle
    source_attribution: dict[str, AttributeAttribution] = Field(default_factory=dict)
    confidence: float
    sources_used: int = 0


class DeltaChange(CamelModel):
    attribute: str
    old_value: str
    new_value: str
    change_percent: int = Field(ge=-100, le=100)


class DeltaReport(CamelModel):
    changes: list[DeltaChange] = Field(default_factory=list)
    words_analyzed: int = 0
    confidence_change: float = 0.0
    timestamp: str = Field(default_factory=utc_now)
