"""
Tests for the scoring system.

Covers the ScoreData model and the immutable ScoreTracker transitions.
"""

import pytest
from pydantic import ValidationError

from models import ScoreData
from deepfake_defense.game.scoring import ScoreTracker


# ============================================================================
# ScoreData Model Tests
# ============================================================================


class TestScoreData:
    """Test ScoreData validation and computed fields."""

    def test_defaults_are_zero(self):
        data = ScoreData()
        assert data.score == 0
        assert data.combo == 0
        assert data.max_combo == 0
        assert data.shots_fired == 0

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            ScoreData(score=-1)
        assert 'non-negative' in str(exc_info.value)

    def test_frozen(self):
        data = ScoreData()
        with pytest.raises(ValidationError):
            data.score = 10

    def test_accuracy_without_shots(self):
        assert ScoreData().accuracy == 0.0

    def test_accuracy(self):
        assert ScoreData(correct_hits=3, shots_fired=4).accuracy == 0.75


# ============================================================================
# ScoreTracker Tests
# ============================================================================


class TestScoreTrackerHits:
    """Test correct and wrong hit scoring."""

    def test_first_correct_hit(self):
        tracker = ScoreTracker().record_correct_hit()
        assert tracker.score == 10
        assert tracker.combo == 1

    def test_combo_bonus_uses_previous_combo(self):
        """Test scores of 10, 12, 14 for three hits in a row."""
        tracker = ScoreTracker()
        scores = []
        for _ in range(3):
            tracker = tracker.record_correct_hit()
            scores.append(tracker.score)
        assert scores == [10, 22, 36]
        assert tracker.combo == 3

    def test_wrong_hit_penalty_and_reset(self):
        tracker = ScoreTracker().record_correct_hit().record_correct_hit().record_wrong_hit()
        assert tracker.score == 17
        assert tracker.combo == 0

    def test_score_never_negative(self):
        tracker = ScoreTracker().record_wrong_hit().record_wrong_hit()
        assert tracker.score == 0

    def test_wrong_hit_floors_at_zero(self):
        tracker = ScoreTracker(ScoreData(score=3)).record_wrong_hit()
        assert tracker.score == 0

    def test_max_combo_survives_reset(self):
        tracker = ScoreTracker()
        for _ in range(4):
            tracker = tracker.record_correct_hit()
        tracker = tracker.record_wrong_hit().record_correct_hit()
        stats = tracker.get_stats()
        assert stats.max_combo == 4
        assert stats.combo == 1


class TestScoreTrackerCounters:
    """Test shot and leak bookkeeping."""

    def test_record_shot(self):
        tracker = ScoreTracker().record_shot().record_shot()
        assert tracker.get_stats().shots_fired == 2

    def test_leak_resets_combo_only(self):
        tracker = ScoreTracker().record_correct_hit().record_correct_hit().record_leak()
        stats = tracker.get_stats()
        assert stats.combo == 0
        assert stats.score == 22
        assert stats.leaked_fakes == 1

    def test_hit_counters(self):
        stats = ScoreTracker().record_correct_hit().record_wrong_hit().get_stats()
        assert stats.correct_hits == 1
        assert stats.wrong_hits == 1


class TestScoreTrackerImmutability:
    """Test that operations never mutate the original tracker."""

    def test_original_unchanged(self):
        original = ScoreTracker()
        original.record_correct_hit()
        original.record_shot()
        assert original.score == 0
        assert original.get_stats().shots_fired == 0

    def test_returns_new_instance(self):
        original = ScoreTracker()
        assert original.record_correct_hit() is not original
