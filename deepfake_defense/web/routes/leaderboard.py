"""
Leaderboard endpoints, mounted at ``/api/leaderboard``.
"""

import logging

from fastapi import APIRouter, HTTPException, Query, Request

from models import ScoreSubmission
from deepfake_defense.web.store import LeaderboardStore
from deepfake_defense.web.validation import parse_body, read_json

logger = logging.getLogger("deepfake_defense.web.leaderboard")

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])

DEFAULT_LIMIT = 10
MISSING_FIELDS = "Missing required fields: playerName, score, level"
FIELD_MESSAGES = {
    'playerName': 'Player name must be a non-empty string',
    'score': 'Score must be a non-negative number',
    'level': 'Level must be a positive number',
    'time': 'Time must be a non-negative number',
}


def _store(request: Request) -> LeaderboardStore:
    return request.app.state.store


@router.get("")
async def get_leaderboard(
    request: Request,
    limit: int = Query(DEFAULT_LIMIT, ge=0),
    offset: int = Query(0, ge=0),
):
    """Top scores: score descending, then newest first."""
    store = _store(request)
    limit = limit or DEFAULT_LIMIT
    return {
        "leaderboard": [entry.to_json() for entry in store.ranked(limit, offset)],
        "total": len(store),
        "limit": limit,
        "offset": offset,
    }


@router.post("", status_code=201)
async def submit_score(request: Request):
    """Add a score. The store is untouched when validation fails."""
    data = await read_json(request)
    submission = parse_body(
        ScoreSubmission, data,
        required=('playerName', 'score', 'level'),
        missing_message=MISSING_FIELDS,
        field_messages=FIELD_MESSAGES,
    )
    store = _store(request)
    entry, position = store.add(submission)
    return {
        "message": "Score submitted successfully",
        "score": entry.to_json(),
        "position": position,
        "totalScores": len(store),
    }


@router.get("/stats")
async def get_stats(request: Request):
    return _store(request).stats().to_json()


@router.get("/recent")
async def get_recent(request: Request, limit: int = Query(DEFAULT_LIMIT, ge=0)):
    recent = _store(request).recent(limit or DEFAULT_LIMIT)
    return {
        "recentScores": [entry.to_json() for entry in recent],
        "total": len(recent),
    }


@router.get("/player/{player_name}")
async def get_player_best(request: Request, player_name: str):
    best = _store(request).player_best(player_name)
    if best is None:
        raise HTTPException(status_code=404, detail="No scores found for this player")
    return best


@router.delete("/{score_id}")
async def delete_score(request: Request, score_id: str):
    """Admin: remove one score by id."""
    try:
        entry_id = int(score_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="Score not found")
    deleted = _store(request).delete(entry_id)
    if deleted is None:
        raise HTTPException(status_code=404, detail="Score not found")
    logger.info(f"Deleted score {entry_id}")
    return {"message": "Score deleted successfully", "deletedScore": deleted.to_json()}


@router.delete("")
async def clear_leaderboard(request: Request):
    """Admin: remove every score and restart ids at 1."""
    count = _store(request).clear()
    return {"message": "Leaderboard cleared successfully", "deletedCount": count}
