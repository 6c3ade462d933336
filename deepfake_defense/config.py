"""
Configuration for DeepFake Defense.

Contains game constants, screen settings, colors, difficulty tuning and the
settings of the external collaborators (AI provider, leaderboard API, audio).

Values can be overridden with environment variables or a ``.env`` file in
the package directory.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from package directory
_env_path = Path(__file__).parent / '.env'
load_dotenv(_env_path)


def _get_bool(key: str, default: bool) -> bool:
    """Get boolean from environment."""
    val = os.getenv(key, str(default)).lower()
    return val in ('true', '1', 'yes')


def _get_int(key: str, default: int) -> int:
    """Get integer from environment."""
    return int(os.getenv(key, str(default)))


def _get_float(key: str, default: float) -> float:
    """Get float from environment."""
    return float(os.getenv(key, str(default)))


# Screen and Display Settings
SCREEN_WIDTH = _get_int('SCREEN_WIDTH', 1280)
SCREEN_HEIGHT = _get_int('SCREEN_HEIGHT', 720)
FPS = _get_int('FPS', 60)

# Session rules
INITIAL_LIVES = _get_int('INITIAL_LIVES', 3)
HIT_POINTS = 10  # Base points for shooting a fake
COMBO_BONUS = 2  # Extra points per combo step
WRONG_HIT_PENALTY = 5  # Points lost for shooting a real item

# Spawning and difficulty (times in milliseconds)
SPAWN_INTERVAL_MS = _get_float('SPAWN_INTERVAL_MS', 2000.0)
MIN_SPAWN_INTERVAL_MS = _get_float('MIN_SPAWN_INTERVAL_MS', 500.0)
SPAWN_INTERVAL_STEP_MS = _get_float('SPAWN_INTERVAL_STEP_MS', 200.0)
LEVEL_DURATION_S = _get_float('LEVEL_DURATION_S', 30.0)
BASE_FALL_SPEED = _get_float('BASE_FALL_SPEED', 1.0)  # pixels per tick
FALL_SPEED_STEP = _get_float('FALL_SPEED_STEP', 0.2)
SPAWN_MARGIN = 100  # Horizontal inset of the spawn band
SPAWN_Y = -100.0  # Items start above the visible area
EXIT_MARGIN = 100  # Items are culled below height + margin
FAKE_PROBABILITY = 0.5

# Entities
MEDIA_RADIUS = 50.0
MEDIA_ROTATION_STEP = 0.02
BULLET_SPEED = _get_float('BULLET_SPEED', 8.0)
BULLET_RADIUS = 3.0
BULLET_CULL_Y = -50.0
TRAIL_LENGTH = 10
PARTICLE_LIFE = 60
PARTICLE_GRAVITY = 0.2
EXPLOSION_PARTICLES = 10
POPUP_RISE_SPEED = 2.0
DEFENSE_LINE_OFFSET = 50  # Distance from bottom of the play field

# Shooter
SHOOTER_WIDTH = 60
SHOOTER_HEIGHT = 40
SHOOTER_SPEED = _get_float('SHOOTER_SPEED', 5.0)
SHOOTER_BOTTOM_OFFSET = 80
DOUBT_REFERENCE_OFFSET = 100  # Doubt picks the item closest to height - offset

# Colors (RGB tuples)
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
RED = (255, 0, 0)
GREEN = (0, 255, 0)
CYAN = (0, 255, 255)
YELLOW = (255, 255, 0)
GRAY = (128, 128, 128)
LIGHT_GRAY = (200, 200, 200)
DARK_GRAY = (40, 40, 40)
FAKE_FILL = (255, 68, 68)
REAL_FILL = (68, 255, 68)

BACKGROUND_COLOR = (10, 10, 10)
GRID_COLOR = (0, 60, 60)
GRID_SIZE = 50


class Colors:
    """Color constants for easy access in code."""
    BLACK = BLACK
    WHITE = WHITE
    RED = RED
    GREEN = GREEN
    CYAN = CYAN
    YELLOW = YELLOW
    GRAY = GRAY
    LIGHT_GRAY = LIGHT_GRAY
    DARK_GRAY = DARK_GRAY
    BACKGROUND = BACKGROUND_COLOR
    GRID = GRID_COLOR
    FAKE_FILL = FAKE_FILL
    REAL_FILL = REAL_FILL
    FAKE_BORDER = RED
    REAL_BORDER = GREEN
    SHOOTER = CYAN
    BULLET = CYAN
    EXPLOSION = CYAN
    DEFENSE_LINE = RED
    UI_TEXT = WHITE
    UI_HIGHLIGHT = YELLOW


class Fonts:
    """Font size constants for easy access in code."""
    SMALL = 24
    MEDIUM = 36
    LARGE = 48
    HUGE = 72
    HUD = 30
    POPUP = 28
    LABEL = 18


# Audio Settings
AUDIO_ENABLED = _get_bool('AUDIO_ENABLED', True)
SOUND_VOLUME = _get_float('SOUND_VOLUME', 0.5)
MUSIC_VOLUME = _get_float('MUSIC_VOLUME', 0.3)
MUTED = _get_bool('MUTED', False)

# AI explanation provider
OPENAI_API_KEY: Optional[str] = os.getenv('OPENAI_API_KEY') or None
OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-3.5-turbo')
OPENAI_BASE_URL = os.getenv('OPENAI_BASE_URL', 'https://api.openai.com/v1')
AI_MAX_TOKENS = _get_int('AI_MAX_TOKENS', 150)
AI_TEMPERATURE = _get_float('AI_TEMPERATURE', 0.7)
AI_TIMEOUT_S = _get_float('AI_TIMEOUT_S', 10.0)

# Leaderboard / HTTP service
API_BASE_URL = os.getenv('API_BASE_URL', 'http://localhost:3000')
API_TIMEOUT_S = _get_float('API_TIMEOUT_S', 5.0)
SERVER_HOST = os.getenv('SERVER_HOST', '127.0.0.1')
SERVER_PORT = _get_int('SERVER_PORT', 3000)
ENVIRONMENT = os.getenv('ENVIRONMENT', 'development')
LEADERBOARD_FILE: Optional[str] = os.getenv('LEADERBOARD_FILE') or None
LEADERBOARD_CAPACITY = 100
GAME_VERSION = '1.0.0'

# Media datasets
MEDIA_DATA_DIR = Path(os.getenv('MEDIA_DATA_DIR', str(Path(__file__).parent / 'data')))


@dataclass
class GameSettings:
    """Simulation tuning bundled for the orchestrator.

    Defaults come from the module constants above; tests build their own
    instances to pin field sizes and timings.
    """
    width: int = SCREEN_WIDTH
    height: int = SCREEN_HEIGHT
    initial_lives: int = INITIAL_LIVES
    spawn_interval_ms: float = SPAWN_INTERVAL_MS
    min_spawn_interval_ms: float = MIN_SPAWN_INTERVAL_MS
    spawn_interval_step_ms: float = SPAWN_INTERVAL_STEP_MS
    level_duration_s: float = LEVEL_DURATION_S
    base_fall_speed: float = BASE_FALL_SPEED
    fall_speed_step: float = FALL_SPEED_STEP
    bullet_speed: float = BULLET_SPEED
    shooter_speed: float = SHOOTER_SPEED
