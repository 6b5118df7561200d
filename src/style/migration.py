"""Upgrade stored profile documents that predate conversation learning."""

import copy

import structlog

logger = structlog.get_logger()

ATTRIBUTE_KEYS = ("tone", "formality", "sentenceLength", "vocabulary", "avoidance")
FALLBACK_CONFIDENCE = 0.5


def _key(doc: dict, camel: str, snake: str) -> str | None:
    """Return whichever spelling of a field the document uses, if any."""
    if camel in doc:
        return camel
    if snake in doc:
        return snake
    return None


def default_learning_metadata() -> dict:
    return {
        "enabled": True,
        "lastRefinement": None,
        "totalRefinements": 0,
        "wordsFromConversations": 0,
    }


def needs_migration(doc: dict) -> bool:
    confidence = doc.get("attributeConfidence", doc.get("attribute_confidence"))
    metadata = doc.get("learningMetadata", doc.get("learning_metadata"))
    sample_count = doc.get("sampleCount", doc.get("sample_count"))
    return (
        not confidence
        or not metadata
        or not isinstance(sample_count, dict)
        or "conversationWords" not in sample_count
    )


def migrate_profile(doc: dict) -> dict:
    """Return a copy of ``doc`` with attribute confidence, learning metadata
    and conversation word count filled in.

    Existing values are never overwritten. The input document is not modified.
    """
    if not needs_migration(doc):
        return doc

    migrated = copy.deepcopy(doc)
    added = []

    conf_key = _key(migrated, "attributeConfidence", "attribute_confidence")
    if not conf_key or not migrated.get(conf_key):
        base = migrated.get("confidence")
        if not isinstance(base, (int, float)):
            base = FALLBACK_CONFIDENCE
        migrated[conf_key or "attributeConfidence"] = {attr: float(base) for attr in ATTRIBUTE_KEYS}
        added.append("attributeConfidence")

    meta_key = _key(migrated, "learningMetadata", "learning_metadata")
    if not meta_key or not migrated.get(meta_key):
        migrated[meta_key or "learningMetadata"] = default_learning_metadata()
        added.append("learningMetadata")

    sample_key = _key(migrated, "sampleCount", "sample_count") or "sampleCount"
    sample_count = migrated.get(sample_key)
    if not isinstance(sample_count, dict):
        sample_count = {}
        migrated[sample_key] = sample_count
    if "conversationWords" not in sample_count:
        sample_count["conversationWords"] = 0
        added.append("sampleCount.conversationWords")

    logger.info("profile.migrated", profile_id=migrated.get("id"), added=added)
    return migrated
