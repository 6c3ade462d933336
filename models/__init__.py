"""
Unified models library for DeepFake Defense.

This package provides the Pydantic data models shared by the game client
and the HTTP service:
- Primitives: Point2D
- Enums: GameState, PauseReason, MediaType, ParticleKind, GameAction, AudioCue
- Media: MediaRecord, CustomMediaCreate, MediaInfo, import/export sets
- Leaderboard: LeaderboardEntry, ScoreSubmission, LeaderboardStats
- Session: ScoreData, FinalStats, explanation request/result types

Usage:
    >>> from models import Point2D, MediaType, ScoreData
    >>> from models.leaderboard import ScoreSubmission
"""

from .primitives import (
    Point2D,
)

from .enums import (
    GameState,
    PauseReason,
    MediaType,
    ParticleKind,
    GameAction,
    AudioCue,
)

from .media import (
    MediaRecord,
    CustomMediaCreate,
    MediaInfo,
    CustomMediaSet,
    MediaImport,
)

from .leaderboard import (
    MAX_PLAYER_NAME_LENGTH,
    LeaderboardEntry,
    ScoreSubmission,
    LeaderboardStats,
)

from .session import (
    ScoreData,
    FinalStats,
    MediaSnapshot,
    ExplanationRequest,
    ExplanationResult,
    format_time,
)

__all__ = [
    'Point2D',
    'GameState',
    'PauseReason',
    'MediaType',
    'ParticleKind',
    'GameAction',
    'AudioCue',
    'MediaRecord',
    'CustomMediaCreate',
    'MediaInfo',
    'CustomMediaSet',
    'MediaImport',
    'MAX_PLAYER_NAME_LENGTH',
    'LeaderboardEntry',
    'ScoreSubmission',
    'LeaderboardStats',
    'ScoreData',
    'FinalStats',
    'MediaSnapshot',
    'ExplanationRequest',
    'ExplanationResult',
    'format_time',
]
