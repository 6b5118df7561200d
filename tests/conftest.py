"""Shared test fixtures for DigitalMe."""

import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from observability import metrics  # noqa: E402


@pytest.fixture(autouse=True)
def reset_metrics():
    """Each test starts with empty counters."""
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def gmail_sample():
    """Large, casual email sample (quantity factor 1.5)."""
    return {
        "type": "gmail",
        "writingStyle": {
            "tone": "conversational",
            "formality": "casual",
            "sentenceLength": "short",
            "vocabulary": ["concise", "relatable"],
            "avoidance": ["emojis", "slang"],
        },
        "wordCount": 1700,
    }


@pytest.fixture
def blog_sample():
    """Small, polished blog sample (quantity factor 0.5)."""
    return {
        "type": "blog",
        "writingStyle": {
            "tone": "professional",
            "formality": "formal",
            "sentenceLength": "long",
            "vocabulary": ["descriptive", "concise"],
            "avoidance": ["emojis"],
        },
        "wordCount": 300,
    }


@pytest.fixture
def legacy_profile_doc():
    """Profile document written before conversation learning existed."""
    return {
        "id": "legacy-1",
        "userId": "alice",
        "version": 3,
        "lastUpdated": "2024-01-01T00:00:00+00:00",
        "writing": {
            "tone": "professional",
            "formality": "formal",
            "sentenceLength": "medium",
            "vocabulary": ["clear", "descriptive"],
            "avoidance": ["emojis"],
        },
        "confidence": 0.7,
        "sampleCount": {"emailWords": 1200, "blogWords": 400},
    }


@pytest.fixture
def style_json():
    """A well-formed LLM analysis reply."""
    return json.dumps(
        {
            "tone": "conversational",
            "formality": "casual",
            "sentenceLength": "short",
            "vocabulary": ["concise", "relatable"],
            "avoidance": ["emojis"],
        }
    )


@pytest.fixture
def mock_provider(style_json):
    """LLM provider whose generate() returns a valid style JSON reply."""
    provider = MagicMock()
    provider.generate.return_value = style_json
    return provider


@pytest.fixture
def profiles_dir(tmp_path):
    path = tmp_path / "profiles"
    path.mkdir()
    return path
