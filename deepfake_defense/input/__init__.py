"""
Input translation from pygame events to game actions.
"""

from .adapter import InputAdapter
from .input_event import InputEvent

__all__ = ['InputAdapter', 'InputEvent']
