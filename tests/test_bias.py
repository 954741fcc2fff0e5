"""
Tests for keyword-incidence bias scoring
"""
import pytest

from comment_analysis.bias import KeywordBiasScorer, score_bias
from comment_analysis.models import BiasMetrics


def test_each_keyword_counts_once():
    texts = ["government government government", "the government again"]

    metrics = score_bias(texts)

    assert metrics.political == pytest.approx(1 / 6)


def test_incidence_across_families():
    texts = [
        "I love this policy",
        "the government is wrong and I hate it",
    ]

    metrics = score_bias(texts)

    assert metrics.political == pytest.approx(2 / 6)
    assert metrics.emotional == pytest.approx(2 / 6)
    assert metrics.moral == pytest.approx(1 / 6)


def test_matching_is_case_insensitive_substring():
    # "Goodness" contains "good", "BRIGHT" contains "right"
    metrics = score_bias(["Goodness me, what a BRIGHT idea"])

    assert metrics.moral == pytest.approx(2 / 6)


def test_scores_stay_within_unit_interval():
    everything = " ".join([
        "government policy democrat republican liberal conservative",
        "love hate angry happy sad excited",
        "right wrong good bad moral immoral",
    ])

    metrics = score_bias([everything, everything])

    assert metrics == BiasMetrics(1.0, 1.0, 1.0)


def test_empty_input_is_neutral():
    assert score_bias([]) == BiasMetrics.neutral()
    assert score_bias(["", "   "]) == BiasMetrics.neutral()


def test_custom_keyword_lists():
    scorer = KeywordBiasScorer(political=["Tax", "tax", "vote"], emotional=[], moral=["fair"])

    metrics = scorer.score(["Taxes should be fair"])

    # Duplicate keywords are collapsed, empty families score zero
    assert metrics.political == pytest.approx(1 / 2)
    assert metrics.emotional == 0.0
    assert metrics.moral == 1.0
