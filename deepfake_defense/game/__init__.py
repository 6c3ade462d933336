"""
Game simulation: entities, collision, scoring, spawning, menus and the
orchestrator that ties them into a session.
"""

from .orchestrator import DeepFakeDefense
from .scoring import ScoreTracker
from .spawner import DifficultyController, Spawner

__all__ = ['DeepFakeDefense', 'ScoreTracker', 'DifficultyController', 'Spawner']
