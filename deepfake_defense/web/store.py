"""
Leaderboard storage for the HTTP server.

Scores live in memory, ordered by score (highest first) and then by date
(newest first). At most ``capacity`` entries are kept after each insert.
When a file path is given, the board is loaded from it at startup and
written back after every change.
"""

import json
import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from models import LeaderboardEntry, LeaderboardStats, ScoreSubmission
from deepfake_defense import config

logger = logging.getLogger("deepfake_defense.web.store")


def _utc(year, month, day, hour, minute) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


SEED_ENTRIES = [
    LeaderboardEntry(id=1, player_name='CYBER_WARRIOR', score=1250, level=8, time=180000,
                     date=_utc(2024, 1, 15, 10, 30)),
    LeaderboardEntry(id=2, player_name='FAKE_HUNTER', score=980, level=6, time=150000,
                     date=_utc(2024, 1, 14, 15, 45)),
    LeaderboardEntry(id=3, player_name='AI_DEFENDER', score=750, level=5, time=120000,
                     date=_utc(2024, 1, 13, 9, 20)),
    LeaderboardEntry(id=4, player_name='TRUTH_SEEKER', score=620, level=4, time=90000,
                     date=_utc(2024, 1, 12, 14, 15)),
    LeaderboardEntry(id=5, player_name='MEDIA_GUARDIAN', score=480, level=3, time=75000,
                     date=_utc(2024, 1, 11, 11, 30)),
]


def _rank_key(entry: LeaderboardEntry) -> Tuple[int, float, int]:
    return (-entry.score, -entry.date.timestamp(), -entry.id)


class LeaderboardStore:
    """Ranked score storage.

    Args:
        capacity: Maximum number of retained entries
        path: Optional JSON file to load from and save to
        seed: Start with the demo scores when nothing is loaded

    Examples:
        >>> store = LeaderboardStore()
        >>> entry, position = store.add(ScoreSubmission(playerName='ACE', score=1500, level=8))
        >>> position
        1
    """

    def __init__(
        self,
        capacity: int = config.LEADERBOARD_CAPACITY,
        path: Optional[Path] = None,
        seed: bool = True,
    ):
        self.capacity = capacity
        self.path = Path(path) if path else None
        self._entries: List[LeaderboardEntry] = []
        self._next_id = 1

        if self.path and self.path.exists():
            self._load()
        elif seed:
            self._entries = [entry.model_copy() for entry in SEED_ENTRIES]
            self._next_id = len(SEED_ENTRIES) + 1
        self._entries.sort(key=_rank_key)

    def __len__(self) -> int:
        return len(self._entries)

    # =========================================================================
    # Persistence
    # =========================================================================

    def _load(self) -> None:
        try:
            with open(self.path) as f:
                data = json.load(f)
            self._entries = [LeaderboardEntry.model_validate(e) for e in data.get('entries', [])]
            self._next_id = data.get('nextId', len(self._entries) + 1)
            logger.info(f"Loaded {len(self._entries)} scores from {self.path}")
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load leaderboard from {self.path}: {e}")
            self._entries = []
            self._next_id = 1

    def _save(self) -> None:
        if self.path is None:
            return
        data = {
            'nextId': self._next_id,
            'entries': [entry.to_json() for entry in self._entries],
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.error(f"Could not save leaderboard to {self.path}: {e}")

    # =========================================================================
    # Queries
    # =========================================================================

    def ranked(self, limit: int = 10, offset: int = 0) -> List[LeaderboardEntry]:
        """Entries in rank order, sliced."""
        return list(self._entries[offset:offset + limit])

    def position_of(self, entry_id: int) -> int:
        """1-based rank of an entry, or 0 when it is not on the board."""
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return index + 1
        return 0

    def recent(self, limit: int = 10) -> List[LeaderboardEntry]:
        """Newest submissions first."""
        by_date = sorted(self._entries, key=lambda e: e.date, reverse=True)
        return by_date[:limit]

    def player_best(self, player_name: str) -> Optional[Dict[str, Any]]:
        """Best score for a player (case-insensitive name match)."""
        wanted = player_name.lower()
        scores = [e for e in self._entries if e.player_name.lower() == wanted]
        if not scores:
            return None
        best = max(scores, key=lambda e: e.score)
        return {
            'playerName': best.player_name,
            'bestScore': best.score,
            'level': best.level,
            'time': best.time,
            'date': best.to_json()['date'],
            'position': self.position_of(best.id),
            'totalScores': len(scores),
        }

    def stats(self) -> LeaderboardStats:
        if not self._entries:
            return LeaderboardStats()
        scores = [e.score for e in self._entries]
        return LeaderboardStats(
            total_scores=len(scores),
            # half-up rounding
            average_score=int(math.floor(sum(scores) / len(scores) + 0.5)),
            highest_score=max(scores),
            lowest_score=min(scores),
            total_players=len({e.player_name for e in self._entries}),
        )

    # =========================================================================
    # Mutations
    # =========================================================================

    def add(self, submission: ScoreSubmission) -> Tuple[LeaderboardEntry, int]:
        """Insert a validated score.

        Returns:
            The stored entry and its 1-based rank (0 if it fell off the board)
        """
        entry = LeaderboardEntry(
            id=self._next_id,
            player_name=submission.player_name,
            score=math.floor(submission.score),
            level=math.floor(submission.level),
            time=math.floor(submission.time) if submission.time else 0,
            date=datetime.now(timezone.utc),
        )
        self._next_id += 1
        self._entries.append(entry)
        self._entries.sort(key=_rank_key)
        del self._entries[self.capacity:]
        self._save()
        logger.info(f"Score {entry.score} submitted by {entry.player_name}")
        return entry, self.position_of(entry.id)

    def delete(self, entry_id: int) -> Optional[LeaderboardEntry]:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                del self._entries[index]
                self._save()
                return entry
        return None

    def clear(self) -> int:
        """Remove every entry and restart ids at 1. Returns the removed count."""
        count = len(self._entries)
        self._entries = []
        self._next_id = 1
        self._save()
        logger.info(f"Leaderboard cleared ({count} scores)")
        return count
