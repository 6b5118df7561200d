"""Tests for source quality and quantity weighting."""

import math

import pytest

from style.models import SourceSample, WritingStyle
from style.weights import (
    calculate_source_weight,
    normalize_weights,
    quality_weight,
    quantity_factor,
    weight_sources,
)


def _sample(source_type="gmail", word_count=None):
    return SourceSample(type=source_type, writing_style={"tone": "neutral"}, word_count=word_count)


class TestQualityWeight:
    @pytest.mark.parametrize(
        "source_type,expected",
        [("gmail", 1.0), ("text", 0.8), ("blog", 0.6), ("github", 0.7), ("slack", 0.5)],
    )
    def test_known_and_unknown_types(self, source_type, expected):
        assert quality_weight(source_type) == expected


class TestQuantityFactor:
    def test_small_sample_halved(self):
        assert quantity_factor(499) == 0.5

    def test_boundaries_are_inclusive(self):
        assert quantity_factor(500) == 1.0
        assert quantity_factor(1500) == 1.0

    def test_large_sample_boosted(self):
        assert quantity_factor(1501) == 1.5


class TestCalculateSourceWeight:
    def test_gmail_large(self):
        assert calculate_source_weight(_sample("gmail", 2000)) == 1.5

    def test_blog_small(self):
        assert calculate_source_weight(_sample("blog", 300)) == pytest.approx(0.3)

    def test_missing_word_count_defaults_to_500(self):
        assert calculate_source_weight(_sample("text", None)) == pytest.approx(0.8)

    def test_zero_word_count_is_still_positive(self):
        assert calculate_source_weight(_sample("unknown", 0)) == 0.25

    def test_weight_bounds(self):
        """Every type/size combination stays within (0, 1.5]."""
        for source_type in ("gmail", "text", "blog", "github", "other"):
            for wc in (0, 1, 499, 500, 1500, 1501, 100_000, None):
                w = calculate_source_weight(_sample(source_type, wc))
                assert 0 < w <= 1.5


class TestNormalizeWeights:
    def test_empty(self):
        assert normalize_weights([]) == []

    def test_single_weight_is_one(self):
        assert normalize_weights([0.3]) == [1.0]

    def test_all_zero_becomes_uniform(self):
        assert normalize_weights([0, 0, 0, 0]) == [0.25] * 4

    def test_sums_to_one(self):
        for weights in ([1.5, 0.3], [0.25, 0.4, 1.5, 0.7], [1.0] * 7):
            normalized = normalize_weights(weights)
            assert len(normalized) == len(weights)
            assert math.isclose(sum(normalized), 1.0, abs_tol=1e-9)

    def test_proportions_kept(self):
        a, b = normalize_weights([1.5, 0.3])
        assert a == pytest.approx(0.8333, abs=1e-4)
        assert b == pytest.approx(0.1667, abs=1e-4)


class TestWeightSources:
    def test_attaches_normalized_and_quality_weights(self):
        style = WritingStyle()
        sources = weight_sources([(_sample("gmail", 2000), style), (_sample("blog", 300), style)])

        assert [s.type for s in sources] == ["gmail", "blog"]
        assert [s.quality_weight for s in sources] == [1.0, 0.6]
        assert sum(s.weight for s in sources) == pytest.approx(1.0)
        assert sources[0].word_count == 2000
