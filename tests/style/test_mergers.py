"""Tests for per-attribute merge strategies."""

import pytest

from shared_types import Formality, SentenceLength, Tone
from style.mergers import (
    merge_avoidance,
    merge_formality,
    merge_sentence_length,
    merge_tone,
    merge_vocabulary,
)
from style.models import WeightedSource, WritingStyle
from style.weights import quality_weight


def _src(source_type, weight, **style):
    return WeightedSource(
        type=source_type,
        writing_style=WritingStyle(**style),
        word_count=500,
        quality_weight=quality_weight(source_type),
        weight=weight,
    )


class TestWeightedVote:
    def test_heavier_value_wins(self):
        sources = [
            _src("gmail", 0.8333, tone=Tone.CONVERSATIONAL),
            _src("blog", 0.1667, tone=Tone.PROFESSIONAL),
        ]
        result = merge_tone(sources)
        assert result.value == Tone.CONVERSATIONAL
        assert [(c.source_type, c.percentage) for c in result.attribution] == [("gmail", 100)]

    @pytest.mark.parametrize("weights", [[0.1, 0.9], [0.5, 0.5], [0.97, 0.02, 0.01]])
    def test_unanimous_value_always_wins(self, weights):
        sources = [_src("text", w, tone=Tone.PROFESSIONAL) for w in weights]
        assert merge_tone(sources).value == Tone.PROFESSIONAL

    def test_tie_goes_to_highest_quality_source(self):
        sources = [
            _src("blog", 0.5, tone=Tone.CONVERSATIONAL),
            _src("gmail", 0.5, tone=Tone.PROFESSIONAL),
        ]
        assert merge_tone(sources).value == Tone.PROFESSIONAL

    def test_tie_with_equal_quality_goes_to_first_seen(self):
        sources = [
            _src("text", 1 / 3, sentence_length=SentenceLength.LONG),
            _src("text", 1 / 3, sentence_length=SentenceLength.SHORT),
            _src("text", 1 / 3, sentence_length=SentenceLength.MEDIUM),
        ]
        assert merge_sentence_length(sources).value == SentenceLength.LONG

    def test_attribution_splits_between_agreeing_sources(self):
        sources = [
            _src("gmail", 0.6, tone=Tone.NEUTRAL),
            _src("text", 0.2, tone=Tone.NEUTRAL),
            _src("blog", 0.2, tone=Tone.PROFESSIONAL),
        ]
        result = merge_tone(sources)
        assert result.value == Tone.NEUTRAL
        assert [(c.source_type, c.percentage) for c in result.attribution] == [
            ("gmail", 75),
            ("text", 25),
        ]

    def test_empty_uses_defaults(self):
        assert merge_tone([]).value == Tone.NEUTRAL
        assert merge_sentence_length([]).value == SentenceLength.MEDIUM


class TestMergeFormality:
    def test_weighted_average_rounds_to_casual(self):
        sources = [
            _src("gmail", 1.5 / 1.8, formality=Formality.CASUAL),
            _src("blog", 0.3 / 1.8, formality=Formality.FORMAL),
        ]
        result = merge_formality(sources)
        assert result.score == 0.33
        assert result.value == Formality.CASUAL
        assert [(c.source_type, c.percentage) for c in result.attribution] == [
            ("gmail", 83),
            ("blog", 17),
        ]

    def test_half_point_is_balanced(self):
        sources = [
            _src("text", 0.75, formality=Formality.CASUAL),
            _src("text", 0.25, formality=Formality.FORMAL),
        ]
        result = merge_formality(sources)
        assert result.score == 0.5
        assert result.value == Formality.BALANCED

    def test_one_and_a_half_is_balanced(self):
        sources = [
            _src("text", 0.5, formality=Formality.BALANCED),
            _src("text", 0.5, formality=Formality.FORMAL),
        ]
        assert merge_formality(sources).value == Formality.BALANCED

    def test_above_one_and_a_half_is_formal(self):
        sources = [
            _src("text", 0.25, formality=Formality.BALANCED),
            _src("text", 0.75, formality=Formality.FORMAL),
        ]
        assert merge_formality(sources).value == Formality.FORMAL

    def test_empty_is_balanced(self):
        assert merge_formality([]).value == Formality.BALANCED


class TestMergeVocabulary:
    def test_capped_at_four(self):
        sources = [
            _src("gmail", 0.5, vocabulary=["a", "b", "c", "d"]),
            _src("blog", 0.5, vocabulary=["e", "f", "g", "h"]),
        ]
        assert len(merge_vocabulary(sources).value) == 4

    def test_shared_terms_rank_first(self):
        sources = [
            _src("gmail", 0.6, vocabulary=["concise", "relatable"]),
            _src("blog", 0.4, vocabulary=["descriptive", "concise"]),
        ]
        result = merge_vocabulary(sources)
        assert result.value == ["concise", "relatable", "descriptive"]

    def test_equal_scores_keep_first_seen_order(self):
        sources = [_src("text", 1.0, vocabulary=["clear", "direct", "warm"])]
        assert merge_vocabulary(sources).value == ["clear", "direct", "warm"]

    def test_attribution_weighted_by_terms_supplied(self):
        sources = [
            _src("gmail", 0.5, vocabulary=["a", "b", "c"]),
            _src("blog", 0.5, vocabulary=["a"]),
        ]
        result = merge_vocabulary(sources)
        assert [(c.source_type, c.percentage) for c in result.attribution] == [
            ("gmail", 75),
            ("blog", 25),
        ]

    def test_empty(self):
        assert merge_vocabulary([]).value == []


class TestMergeAvoidance:
    def test_terms_in_half_the_sources_qualify(self):
        sources = [
            _src("gmail", 0.5, avoidance=["emojis", "slang"]),
            _src("blog", 0.5, avoidance=["emojis"]),
        ]
        assert merge_avoidance(sources).value == ["emojis", "slang"]

    def test_more_common_terms_rank_first(self):
        sources = [
            _src("text", 0.25, avoidance=["slang"]),
            _src("text", 0.25, avoidance=["emojis", "slang"]),
            _src("text", 0.25, avoidance=["emojis"]),
            _src("text", 0.25, avoidance=["emojis"]),
        ]
        assert merge_avoidance(sources).value == ["emojis", "slang"]

    def test_weight_fallback_when_nothing_is_common(self):
        sources = [
            _src("gmail", 0.7, avoidance=["emojis"]),
            _src("blog", 0.15, avoidance=["slang"]),
            _src("text", 0.15, avoidance=["excessive-punctuation"]),
        ]
        assert merge_avoidance(sources).value == ["emojis"]

    def test_no_agreement_falls_back_to_none(self):
        sources = [
            _src("gmail", 0.4, avoidance=["emojis"]),
            _src("blog", 0.3, avoidance=["slang"]),
            _src("text", 0.3, avoidance=["excessive-punctuation"]),
        ]
        assert merge_avoidance(sources).value == ["none"]

    def test_none_is_not_a_term(self):
        sources = [_src("gmail", 0.5, avoidance=["none"]), _src("blog", 0.5, avoidance=["none"])]
        result = merge_avoidance(sources)
        assert result.value == ["none"]
        assert result.attribution == []

    def test_capped_at_three(self):
        terms = ["emojis", "slang", "jargon", "excessive-punctuation"]
        sources = [_src("text", 0.5, avoidance=terms), _src("text", 0.5, avoidance=terms)]
        assert merge_avoidance(sources).value == ["emojis", "slang", "jargon"]

    def test_empty_is_none(self):
        assert merge_avoidance([]).value == ["none"]
