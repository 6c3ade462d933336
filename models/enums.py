"""
DeepFake Defense enumerations.

These enums define the session states, media types and action vocabulary
shared by the game client, the input adapter and the HTTP service.
"""

from enum import Enum


class GameState(str, Enum):
    """Session states driven by the game loop orchestrator.

    Attributes:
        MENU: Start screen, no simulation
        PLAYING: Active gameplay, the update pipeline runs every frame
        PAUSED: Simulation frozen (pause menu or doubt overlay)
        GAME_OVER: Lives exhausted, final stats shown
    """
    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class PauseReason(str, Enum):
    """Why the simulation is paused.

    Attributes:
        MENU: Player opened the pause menu
        DOUBT: A doubt explanation is pending or on screen
    """
    MENU = "menu"
    DOUBT = "doubt"


class MediaType(str, Enum):
    """Kinds of falling media items."""
    IMAGE = "image"
    QUOTE = "quote"
    VIDEO = "video"


class ParticleKind(str, Enum):
    """Render variant of a particle.

    Attributes:
        DOT: Filled circle (explosion debris)
        TEXT: Floating score text, no area fill
    """
    DOT = "dot"
    TEXT = "text"


class GameAction(str, Enum):
    """Discrete actions produced by the input adapter.

    Movement is continuous and carried separately as a direction, so only
    edge-triggered actions appear here.
    """
    SHOOT = "shoot"
    DOUBT = "doubt"
    PAUSE = "pause"
    RESUME = "resume"
    DISMISS = "dismiss"
    TOGGLE_MUTE = "toggle_mute"


class AudioCue(str, Enum):
    """Fire-and-forget sound cues."""
    SHOOT = "shoot"
    HIT = "hit"
    MISS = "miss"
    GAME_OVER = "game_over"
