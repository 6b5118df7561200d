"""Tests for raw sample and style normalization."""

import pytest

from shared_types import Formality, Tone
from style.normalize import (
    clean_source_type,
    clean_word_count,
    coerce_sample,
    normalize_writing_style,
    validate_sample,
)


class TestCleanWordCount:
    @pytest.mark.parametrize("value,expected", [(0, 0), (1200, 1200), (300.0, 300)])
    def test_whole_counts_kept(self, value, expected):
        assert clean_word_count(value) == expected

    @pytest.mark.parametrize("value", [-1, 1200.5, "1200", "unknown", True, None, float("nan"), float("inf")])
    def test_unusable_counts_unknown(self, value):
        assert clean_word_count(value) is None


class TestCleanSourceType:
    def test_lowercased(self):
        assert clean_source_type(" Gmail ") == "gmail"

    @pytest.mark.parametrize("value", [None, 3, "", "   "])
    def test_missing_is_unknown(self, value):
        assert clean_source_type(value) == "unknown"


class TestCoerceSample:
    def test_loose_fields_cleaned(self):
        sample = coerce_sample(
            {
                "writingStyle": {"tone": "neutral"},
                "wordCount": "lots",
                "text": 12,
                "codingStyle": "python",
            }
        )

        assert sample.type == "unknown"
        assert sample.word_count is None
        assert sample.effective_word_count == 500
        assert sample.text is None
        assert sample.coding_style is None

    def test_input_not_modified(self):
        raw = {"type": "Blog", "writingStyle": {"tone": "neutral"}, "wordCount": -5}
        coerce_sample(raw)
        assert raw == {"type": "Blog", "writingStyle": {"tone": "neutral"}, "wordCount": -5}

    def test_not_a_dict(self):
        assert coerce_sample("gmail") is None

    def test_missing_style_rejected(self):
        sample = coerce_sample({"type": "gmail", "wordCount": 100})
        assert validate_sample(sample) is None


class TestNormalizeWritingStyle:
    def test_defaults_for_empty(self):
        style = normalize_writing_style({})

        assert style.tone == Tone.NEUTRAL
        assert style.formality == Formality.BALANCED
        assert style.vocabulary == []
        assert style.avoidance == ["none"]

    def test_term_limits(self):
        style = normalize_writing_style(
            {"vocabulary": ["a", "b", "c", "d", "e"], "avoidance": ["w", "x", "y", "z"]}
        )

        assert style.vocabulary == ["a", "b", "c", "d"]
        assert style.avoidance == ["w", "x", "y"]
