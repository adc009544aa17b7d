"""Tests for majority vote."""

from gemini_consistency.consistency.voting import Majority, majority


class TestMajority:
    def test_empty(self):
        assert majority([]) == Majority(value="", count=0)

    def test_clear_winner(self):
        assert majority(["x", "x", "y"]) == Majority(value="x", count=2)

    def test_tie_goes_to_first_seen(self):
        assert majority(["b", "a", "a", "b"]) == Majority(value="b", count=2)

    def test_all_distinct_picks_first(self):
        result = majority(["one", "two", "three"])
        assert result.value == "one"
        assert result.count == 1

    def test_accepts_generators(self):
        result = majority(s.lower() for s in ["A", "a", "B"])
        assert result == ("a", 2)
