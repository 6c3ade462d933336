"""
Session-level models for DeepFake Defense.

ScoreData holds the immutable scoring state of one play session. FinalStats
is the summary handed to the game-over screen. ExplanationRequest and
ExplanationResult are the value types exchanged with the asynchronous
explanation provider; both carry the session generation so late answers can
be recognized and dropped.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, computed_field, field_validator

from .enums import MediaType


class ScoreData(BaseModel):
    """Immutable score state data.

    Attributes:
        score: Points, never negative
        combo: Consecutive correct hits
        max_combo: Highest combo reached this session
        correct_hits: Fakes shot down
        wrong_hits: Real items shot down
        leaked_fakes: Fakes that crossed the defense line
        shots_fired: Bullets created

    Examples:
        >>> data = ScoreData(correct_hits=3, shots_fired=4)
        >>> data.accuracy
        0.75
    """
    score: int = 0
    combo: int = 0
    max_combo: int = 0
    correct_hits: int = 0
    wrong_hits: int = 0
    leaked_fakes: int = 0
    shots_fired: int = 0

    @field_validator(
        'score', 'combo', 'max_combo', 'correct_hits',
        'wrong_hits', 'leaked_fakes', 'shots_fired',
    )
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f'Score values must be non-negative, got {v}')
        return v

    @computed_field
    @property
    def accuracy(self) -> float:
        """Correct hits per shot fired (0.0 when nothing was fired)."""
        if self.shots_fired == 0:
            return 0.0
        return min(1.0, self.correct_hits / self.shots_fired)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return (f"ScoreData(score={self.score}, combo={self.combo}, "
                f"max={self.max_combo}, acc={self.accuracy:.1%})")


def format_time(milliseconds: float) -> str:
    """Format a duration as MM:SS.

    Examples:
        >>> format_time(125_000)
        '02:05'
    """
    seconds = int(milliseconds // 1000)
    minutes, remaining = divmod(seconds, 60)
    return f"{minutes:02d}:{remaining:02d}"


class FinalStats(BaseModel):
    """Summary shown on the game-over screen and submitted to the leaderboard."""
    score: int
    level: int
    time_ms: int
    accuracy: float
    max_combo: int = 0

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def time(self) -> str:
        return format_time(self.time_ms)


class MediaSnapshot(BaseModel):
    """Frozen copy of the parts of a MediaItem an explanation needs."""
    type: MediaType
    content: str
    is_fake: bool

    model_config = ConfigDict(frozen=True)


class ExplanationRequest(BaseModel):
    """A doubt lookup dispatched to the explanation provider."""
    request_id: int
    generation: int
    media: MediaSnapshot

    model_config = ConfigDict(frozen=True)


class ExplanationResult(BaseModel):
    """Answer to an ExplanationRequest.

    ``fallback`` is True when canned text replaced a model answer.
    """
    request_id: int
    generation: int
    text: str
    confidence: Optional[int] = None
    fallback: bool = False

    model_config = ConfigDict(frozen=True)
