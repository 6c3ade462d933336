"""
HTTP API for the leaderboard and media catalog (FastAPI).
"""

from .app import create_app

__all__ = ['create_app']
