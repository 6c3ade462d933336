"""
Leaderboard models.

Entries are serialized with camelCase keys (``playerName``) to match the
JSON contract of the leaderboard endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_PLAYER_NAME_LENGTH = 20


class LeaderboardEntry(BaseModel):
    """A stored score.

    Attributes:
        id: Store-assigned identifier, unique for the lifetime of the store
        player_name: Sanitized player name (trimmed, at most 20 chars)
        score: Final score
        level: Level reached
        time: Play time in milliseconds
        date: Submission time (UTC)
    """
    id: int
    player_name: str
    score: int = Field(..., ge=0)
    level: int = Field(..., ge=1)
    time: int = 0
    date: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode='json', by_alias=True)


class ScoreSubmission(BaseModel):
    """Validated body of a score submission.

    Strict mode rejects strings and booleans where numbers are expected, so
    ``{"score": "100"}`` is a validation error rather than a coercion.

    Examples:
        >>> s = ScoreSubmission(playerName='  ACE  ', score=1500, level=8)
        >>> s.player_name
        'ACE'
    """
    player_name: str
    score: float
    level: float
    time: Optional[float] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
        allow_inf_nan=False,
    )

    @field_validator('player_name')
    @classmethod
    def validate_player_name(cls, v: str) -> str:
        name = v.strip()
        if not name:
            raise ValueError('Player name must be a non-empty string')
        return name[:MAX_PLAYER_NAME_LENGTH]

    @field_validator('score')
    @classmethod
    def validate_score(cls, v: float) -> float:
        if v < 0:
            raise ValueError('Score must be a non-negative number')
        return v

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: float) -> float:
        if v < 1:
            raise ValueError('Level must be a positive number')
        return v

    @field_validator('time')
    @classmethod
    def validate_time(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError('Time must be a non-negative number')
        return v


class LeaderboardStats(BaseModel):
    """Aggregate statistics over the stored scores."""
    total_scores: int = 0
    average_score: int = 0
    highest_score: int = 0
    lowest_score: int = 0
    total_players: int = 0

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)
