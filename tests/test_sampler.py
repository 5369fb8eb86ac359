"""
Tests for appvms.rollout.sampler module.

Tests deterministic hash-based device selection including:
- Candidate classification from the first SHA-256 byte
- Target count truncation
- Input order preservation and the target-count upper bound
- The fixed-threshold under-delivery above ~50%
"""

from __future__ import annotations

import hashlib

import pytest

from appvms.rollout.sampler import (
    CANDIDATE_THRESHOLD,
    candidate_score,
    is_candidate,
    select_for_percentage,
    target_count,
)

EIGHT = [f"device{i}" for i in range(1, 9)]


class TestCandidateClassification:
    """Tests for candidate_score and is_candidate."""

    def test_score_is_first_sha256_byte(self):
        """Test that the score is exactly the first digest byte."""
        expected = hashlib.sha256(b"device1").digest()[0]
        assert candidate_score("device1") == expected == 24

    @pytest.mark.parametrize(
        "device_id, score",
        [("device1", 24), ("device2", 153), ("device5", 12), ("device8", 242)],
    )
    def test_known_scores(self, device_id, score):
        """Test scores for fixed device IDs."""
        assert candidate_score(device_id) == score

    def test_threshold_is_half_of_byte_range(self):
        """Test the fixed 128 cut-off."""
        assert CANDIDATE_THRESHOLD == 128

    def test_classification(self):
        """Test which of device1..device8 are candidates."""
        assert [d for d in EIGHT if is_candidate(d)] == [
            "device1",
            "device4",
            "device5",
            "device7",
        ]

    def test_classification_is_deterministic(self):
        """Test that repeated calls agree."""
        assert [is_candidate(d) for d in EIGHT] == [is_candidate(d) for d in EIGHT]


class TestTargetCount:
    """Tests for target_count."""

    @pytest.mark.parametrize(
        "n, percentage, expected",
        [(8, 50, 4), (8, 25, 2), (8, 100, 8), (8, 0, 0), (3, 50, 1), (0, 50, 0)],
    )
    def test_truncation(self, n, percentage, expected):
        """Test integer truncation of n * percentage / 100."""
        assert target_count(n, percentage) == expected

    def test_negative_percentage_clamped(self):
        """Test that a negative percentage targets nothing."""
        assert target_count(8, -10) == 0


class TestSelectForPercentage:
    """Tests for select_for_percentage."""

    def test_fifty_percent_of_eight(self):
        """Test that 50% of eight devices picks all four candidates."""
        assert select_for_percentage(EIGHT, 50) == ["device1", "device4", "device5", "device7"]

    def test_twenty_five_percent_stops_at_target(self):
        """Test that selection stops once the target count is reached."""
        assert select_for_percentage(EIGHT, 25) == ["device1", "device4"]

    def test_hundred_percent_under_delivers(self):
        """Test that only candidates are ever chosen, even at 100%."""
        chosen = select_for_percentage(EIGHT, 100)
        assert chosen == ["device1", "device4", "device5", "device7"]
        assert len(chosen) < target_count(len(EIGHT), 100)

    def test_zero_percent_selects_nothing(self):
        """Test that 0% releases to no device."""
        assert select_for_percentage(EIGHT, 0) == []

    def test_empty_device_list(self):
        """Test that an empty request selects nothing."""
        assert select_for_percentage([], 50) == []

    def test_no_candidates(self):
        """Test a fleet where no device hashes below the threshold."""
        assert select_for_percentage(["device2", "device3", "device6", "device8"], 100) == []

    def test_order_follows_input(self):
        """Test that selection follows input order, not hash order."""
        reordered = list(reversed(EIGHT))
        assert select_for_percentage(reordered, 25) == ["device7", "device5"]

    def test_selection_is_subset_of_input(self):
        """Test that selected devices always come from the request."""
        chosen = select_for_percentage(EIGHT, 75)
        assert set(chosen) <= set(EIGHT)
        assert len(chosen) <= target_count(len(EIGHT), 75)

    def test_input_not_mutated(self):
        """Test that the caller's list is left alone."""
        devices = list(EIGHT)
        select_for_percentage(devices, 50)
        assert devices == EIGHT
