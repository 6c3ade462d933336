"""
DeepFake Defense

Arcade shooter about media literacy: falling media items are either real or
AI-generated fakes. Shoot the fakes, let the real ones pass, and ask the AI
analyst when in doubt.

Run the game with ``python -m deepfake_defense play`` and the leaderboard /
media API with ``python -m deepfake_defense serve``.
"""

__version__ = '1.0.0'

__all__ = ['__version__']
