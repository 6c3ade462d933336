"""
HTTP client for the leaderboard API.

Used by the game's leaderboard screen and the game-over score submission.
Errors are raised as LeaderboardError carrying a message that can be shown
to the player directly.
"""

from typing import Any, Dict, List, Optional

import httpx

from models import FinalStats, LeaderboardEntry
from deepfake_defense import config
from deepfake_defense.logging import get_logger

log = get_logger('leaderboard_client')


class LeaderboardError(Exception):
    """A leaderboard request failed; ``str(error)`` is user-facing."""


class LeaderboardClient:
    """Async client for ``/api/leaderboard``.

    Args:
        base_url: Server root, e.g. ``http://localhost:3000``
        timeout: Per-request timeout in seconds
        transport: httpx transport override, used by tests
    """

    def __init__(
        self,
        base_url: str = config.API_BASE_URL,
        timeout: float = config.API_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return response.json().get('error') or f"HTTP {response.status_code}"
        except ValueError:
            return f"HTTP {response.status_code}"

    async def fetch(self, limit: int = 10) -> List[LeaderboardEntry]:
        """Top scores, best first."""
        try:
            async with self._client() as client:
                response = await client.get('/api/leaderboard', params={'limit': limit})
        except httpx.HTTPError as e:
            log.warning("Leaderboard fetch failed: %s", e)
            raise LeaderboardError("Unable to load leaderboard") from e
        if response.status_code != 200:
            raise LeaderboardError("Unable to load leaderboard")
        try:
            entries = response.json()['leaderboard']
            return [LeaderboardEntry.model_validate(entry) for entry in entries]
        except (ValueError, KeyError, TypeError) as e:
            log.warning("Unreadable leaderboard response: %s", e)
            raise LeaderboardError("Unable to load leaderboard") from e

    async def submit(self, player_name: str, stats: FinalStats) -> Dict[str, Any]:
        """Submit a final score.

        Returns:
            The server response: ``{message, score, position, totalScores}``

        Raises:
            LeaderboardError: Network failure or rejected submission
        """
        payload = {
            'playerName': player_name,
            'score': stats.score,
            'level': stats.level,
            'time': stats.time_ms,
        }
        try:
            async with self._client() as client:
                response = await client.post('/api/leaderboard', json=payload)
        except httpx.HTTPError as e:
            log.warning("Score submission failed: %s", e)
            raise LeaderboardError("Failed to submit score. Please try again.") from e
        if response.status_code != 201:
            raise LeaderboardError(self._error_message(response))
        try:
            return dict(response.json())
        except (ValueError, TypeError) as e:
            log.warning("Unreadable submission response: %s", e)
            raise LeaderboardError("Failed to submit score. Please try again.") from e
