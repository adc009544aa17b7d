"""Tests for aggregate consistency metrics."""

import pytest

from gemini_consistency.consistency.analyzer import analyze


class TestAnalyze:
    def test_empty_input(self):
        metrics = analyze([])
        assert metrics.exact_agreement_rate == 0.0
        assert metrics.average_similarity == 0.0
        assert metrics.majority_normalized_text == ""
        assert metrics.sample_size == 0

    def test_case_and_whitespace_variants_agree(self):
        metrics = analyze(["Paris", " Paris ", "PARIS"])
        assert metrics.exact_agreement_rate == 1.0
        assert metrics.average_similarity == 1.0
        assert metrics.majority_normalized_text == "paris"
        assert metrics.sample_size == 3

    def test_partial_agreement(self):
        metrics = analyze(["a b", "A  B", "c"])
        assert metrics.exact_agreement_rate == pytest.approx(2 / 3)
        # scores against "a b": 1, 1, 0
        assert metrics.average_similarity == pytest.approx(2 / 3)
        assert metrics.majority_normalized_text == "a b"

    def test_similarity_rewards_near_misses(self):
        metrics = analyze(
            ["The capital is Paris", "the capital is paris", "The capital is Paris, France"]
        )
        assert metrics.exact_agreement_rate == pytest.approx(2 / 3)
        # third answer shares 4 of 5 tokens with the majority
        assert metrics.average_similarity == pytest.approx((1 + 1 + 0.8) / 3)

    def test_single_output(self):
        metrics = analyze(["Only one"])
        assert metrics.exact_agreement_rate == 1.0
        assert metrics.average_similarity == 1.0
