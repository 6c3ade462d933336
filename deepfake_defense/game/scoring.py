"""
Score tracking for DeepFake Defense.

ScoreTracker uses an immutable state pattern: every operation returns a new
tracker wrapping a new ScoreData, leaving the original untouched.

Examples:
    >>> tracker = ScoreTracker().record_correct_hit().record_correct_hit()
    >>> tracker.get_stats().score
    22
    >>> tracker.record_wrong_hit().get_stats().combo
    0
"""

from typing import Optional

from models import ScoreData
from deepfake_defense.config import COMBO_BONUS, HIT_POINTS, WRONG_HIT_PENALTY


class ScoreTracker:
    """Tracks scoring with immutable state pattern.

    Rules:
        - correct hit (a fake): score += 10 + combo * 2, then combo += 1
        - wrong hit (a real item): score = max(0, score - 5), combo = 0
        - leaked fake: combo = 0 (lives are tracked by the orchestrator)

    Examples:
        >>> tracker = ScoreTracker()
        >>> tracker.record_correct_hit().get_stats().score
        10
        >>> tracker.get_stats().score  # Original unchanged
        0
    """

    def __init__(self, score: Optional[ScoreData] = None):
        self._score = score if score is not None else ScoreData()

    def _replace(self, **changes) -> 'ScoreTracker':
        return ScoreTracker(self._score.model_copy(update=changes))

    def record_shot(self) -> 'ScoreTracker':
        """Count a fired bullet."""
        return self._replace(shots_fired=self._score.shots_fired + 1)

    def record_correct_hit(self) -> 'ScoreTracker':
        """Record shooting down a fake.

        The combo bonus uses the combo before this hit.

        Examples:
            >>> t = ScoreTracker().record_correct_hit().record_correct_hit()
            >>> t.get_stats().score  # 10 + (10 + 2)
            22
        """
        combo = self._score.combo
        new_combo = combo + 1
        return self._replace(
            score=self._score.score + HIT_POINTS + combo * COMBO_BONUS,
            combo=new_combo,
            max_combo=max(new_combo, self._score.max_combo),
            correct_hits=self._score.correct_hits + 1,
        )

    def record_wrong_hit(self) -> 'ScoreTracker':
        """Record shooting down a real item. Score never goes below zero."""
        return self._replace(
            score=max(0, self._score.score - WRONG_HIT_PENALTY),
            combo=0,
            wrong_hits=self._score.wrong_hits + 1,
        )

    def record_leak(self) -> 'ScoreTracker':
        """Record a fake crossing the defense line."""
        return self._replace(
            combo=0,
            leaked_fakes=self._score.leaked_fakes + 1,
        )

    def get_stats(self) -> ScoreData:
        return self._score

    @property
    def score(self) -> int:
        return self._score.score

    @property
    def combo(self) -> int:
        return self._score.combo

    def __repr__(self) -> str:
        return f"ScoreTracker({self._score!r})"

    def __str__(self) -> str:
        return str(self._score)
