"""
Spawner and difficulty controller.

Difficulty is a pure function of elapsed play time:

    level          = floor(elapsed_seconds / 30) + 1
    spawn interval = max(500, 2000 - (level - 1) * 200) ms
    fall speed     = 1 + (level - 1) * 0.2     (no ceiling)

The spawner creates one MediaItem whenever the time since the previous
spawn exceeds the current interval.
"""

import math
import random
from typing import Callable, Optional

from deepfake_defense.config import GameSettings, SPAWN_MARGIN, SPAWN_Y
from deepfake_defense.game.entities import MediaItem
from deepfake_defense.logging import get_logger

log = get_logger('spawner')


class DifficultyController:
    """Maps elapsed game time to level, spawn interval and fall speed."""

    def __init__(self, settings: Optional[GameSettings] = None):
        self.settings = settings or GameSettings()
        self.level = 1
        self.spawn_interval_ms = self.settings.spawn_interval_ms
        self.fall_speed = self.settings.base_fall_speed

    def level_for(self, elapsed_ms: float) -> int:
        return int(math.floor(elapsed_ms / 1000.0 / self.settings.level_duration_s)) + 1

    def interval_for(self, level: int) -> float:
        s = self.settings
        return max(s.min_spawn_interval_ms,
                   s.spawn_interval_ms - (level - 1) * s.spawn_interval_step_ms)

    def speed_for(self, level: int) -> float:
        s = self.settings
        return s.base_fall_speed + (level - 1) * s.fall_speed_step

    def update(self, elapsed_ms: float) -> bool:
        """Recompute the level. Returns True when the level went up."""
        level = self.level_for(elapsed_ms)
        if level <= self.level:
            return False
        self.level = level
        self.spawn_interval_ms = self.interval_for(level)
        self.fall_speed = self.speed_for(level)
        log.info("Level %d: interval=%.0fms speed=%.2f",
                 level, self.spawn_interval_ms, self.fall_speed)
        return True

    def reset(self) -> None:
        self.level = 1
        self.spawn_interval_ms = self.settings.spawn_interval_ms
        self.fall_speed = self.settings.base_fall_speed


class Spawner:
    """Creates MediaItems on a timer.

    Args:
        media_factory: Callable returning a new MediaItem with label and
            content chosen by the media provider
        difficulty: Controller supplying the interval and fall speed
        width: Field width; x is drawn uniformly from [100, width - 100]
        rng: Random source, injectable for deterministic tests
    """

    def __init__(
        self,
        media_factory: Callable[[], MediaItem],
        difficulty: DifficultyController,
        width: int,
        rng: Optional[random.Random] = None,
    ):
        self.media_factory = media_factory
        self.difficulty = difficulty
        self.width = width
        self.rng = rng or random.Random()
        self.last_spawn_ms = 0.0

    def try_spawn(self, elapsed_ms: float) -> Optional[MediaItem]:
        """Spawn an item if the interval has passed since the last spawn."""
        if elapsed_ms - self.last_spawn_ms <= self.difficulty.spawn_interval_ms:
            return None
        self.last_spawn_ms = elapsed_ms

        item = self.media_factory()
        low = SPAWN_MARGIN
        high = max(low, self.width - SPAWN_MARGIN)
        item.x = self.rng.uniform(low, high)
        item.y = SPAWN_Y
        item.speed = self.difficulty.fall_speed
        log.trace("Spawned %r", item)
        return item

    def reset(self) -> None:
        self.last_spawn_ms = 0.0
