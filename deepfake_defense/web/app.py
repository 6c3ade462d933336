"""
FastAPI application for the DeepFake Defense API.

Serves the leaderboard and media catalog as JSON. Every error response has
the shape ``{"error": "<message>"}``.

Environment Variables:
    SERVER_HOST: Bind address (default: 127.0.0.1)
    SERVER_PORT: Port (default: 3000)
    ENVIRONMENT: 'production' hides internal error messages (default: development)
    LEADERBOARD_FILE: JSON file to persist scores in (default: in-memory only)
    MEDIA_DATA_DIR: Directory with real_media.json / fake_media.json
"""

import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from models import MAX_PLAYER_NAME_LENGTH
from deepfake_defense import config
from deepfake_defense.services.media_provider import MediaLibrary
from deepfake_defense.web.routes import leaderboard, media
from deepfake_defense.web.store import LeaderboardStore
from deepfake_defense.web.validation import INVALID_JSON

logger = logging.getLogger("deepfake_defense.web")

CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(
    store: Optional[LeaderboardStore] = None,
    library: Optional[MediaLibrary] = None,
    environment: Optional[str] = None,
) -> FastAPI:
    """Build the API app.

    Args:
        store: Leaderboard storage (default: seeded, persisted to LEADERBOARD_FILE if set)
        library: Media catalog (default: loaded from MEDIA_DATA_DIR)
        environment: 'development' or 'production' (default: ENVIRONMENT)
    """
    app = FastAPI(title="DeepFake Defense API", version=config.GAME_VERSION)

    if store is None:
        path = Path(config.LEADERBOARD_FILE) if config.LEADERBOARD_FILE else None
        store = LeaderboardStore(path=path)
    app.state.store = store
    app.state.library = library or MediaLibrary.from_directory()
    app.state.environment = environment or config.ENVIRONMENT
    app.state.started = time.monotonic()

    if app.state.environment != 'production':
        app.add_middleware(
            CORSMiddleware,
            allow_origins=CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(leaderboard.router)
    app.include_router(media.router)

    # =========================================================================
    # Error handlers
    # =========================================================================

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return _error(404, "Route not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if any(e.get('type') == 'json_invalid' for e in errors):
            return _error(400, INVALID_JSON)
        fields = ", ".join(str(e['loc'][-1]) for e in errors if e.get('loc'))
        return _error(400, f"Invalid request parameters: {fields}" if fields else "Invalid request parameters")

    @app.exception_handler(Exception)
    async def server_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        if app.state.environment == 'production':
            return _error(500, "Internal server error")
        return _error(500, str(exc) or exc.__class__.__name__)

    # =========================================================================
    # Service endpoints
    # =========================================================================

    @app.get("/api/health")
    async def health():
        """Health check endpoint."""
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": time.monotonic() - app.state.started,
            "environment": app.state.environment,
        }

    @app.get("/api/config")
    async def game_config():
        """Client-facing feature flags and limits."""
        return {
            "gameVersion": config.GAME_VERSION,
            "features": {
                "aiExplanations": True,
                "leaderboard": True,
                "customMedia": True,
            },
            "settings": {
                "maxScoreLength": MAX_PLAYER_NAME_LENGTH,
                "maxLeaderboardEntries": store.capacity,
                "rateLimit": {
                    "requests": 100,
                    "windowMs": 15 * 60 * 1000,
                },
            },
        }

    logger.info(f"API ready ({app.state.environment})")
    return app
