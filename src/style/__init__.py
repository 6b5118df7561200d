"""Writing style profiles: multi-source merging and incremental refinement."""

from .merger import build_style_profile, merge_writing_styles
from .migration import migrate_profile
from .models import (
    AttributeAttribution,
    DeltaReport,
    MergeResult,
    SourceContribution,
    SourceSample,
    StyleProfile,
    WritingStyle,
)
from .refiner import ProfileRefiner, RefinementResult
from .storage import ProfileDirectory, ProfileStorage

__all__ = [
    "AttributeAttribution",
    "DeltaReport",
    "MergeResult",
    "SourceContribution",
    "SourceSample",
    "StyleProfile",
    "WritingStyle",
    "ProfileRefiner",
    "RefinementResult",
    "ProfileStorage",
    "ProfileDirectory",
    "build_style_profile",
    "merge_writing_styles",
    "migrate_profile",
]
