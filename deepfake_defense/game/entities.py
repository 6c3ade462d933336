"""
Game entities for DeepFake Defense.

MediaItems fall from the top of the field. The Shooter at the bottom fires
Bullets upward. Particles are short-lived effects: explosion dots and
floating score text. The DefenseLine marks where leaked fakes cost a life.

Entities are plain mutable objects owned by the orchestrator. Each has an
``update`` step advancing it by one tick and a ``render`` method that only
draws.
"""

import math
import random
from collections import deque
from typing import Deque, List, Optional, Tuple

import pygame

from models import MediaType, ParticleKind
from deepfake_defense.config import (
    BULLET_CULL_Y,
    BULLET_RADIUS,
    BULLET_SPEED,
    Colors,
    DEFENSE_LINE_OFFSET,
    EXPLOSION_PARTICLES,
    Fonts,
    MEDIA_RADIUS,
    MEDIA_ROTATION_STEP,
    PARTICLE_GRAVITY,
    PARTICLE_LIFE,
    POPUP_RISE_SPEED,
    SHOOTER_BOTTOM_OFFSET,
    SHOOTER_HEIGHT,
    SHOOTER_SPEED,
    SHOOTER_WIDTH,
    TRAIL_LENGTH,
)

_font_cache = {}


def _font(size: int) -> pygame.font.Font:
    """Return a cached default font, initializing the font module on demand."""
    if size not in _font_cache:
        if not pygame.font.get_init():
            pygame.font.init()
        _font_cache[size] = pygame.font.Font(None, size)
    return _font_cache[size]


_TYPE_LABELS = {
    MediaType.IMAGE: "IMG",
    MediaType.QUOTE: "QUOTE",
    MediaType.VIDEO: "VIDEO",
}


class MediaItem:
    """A falling, labeled piece of media.

    ``is_fake`` is fixed at creation. ``y`` only increases while the item
    lives.
    """

    def __init__(
        self,
        x: float,
        y: float,
        media_type: MediaType,
        content: str,
        is_fake: bool,
        speed: float = 1.0,
        author: Optional[str] = None,
        source: Optional[str] = None,
        description: Optional[str] = None,
    ):
        self.x = x
        self.y = y
        self.type = MediaType(media_type)
        self.content = content
        self._is_fake = bool(is_fake)
        self.speed = speed
        self.author = author
        self.source = source
        self.description = description
        self.radius = MEDIA_RADIUS
        self.rotation = 0.0
        self.scale = 1.0
        self.alpha = 1.0

    @property
    def is_fake(self) -> bool:
        return self._is_fake

    def update(self, now_s: float) -> None:
        """Advance one tick.

        Args:
            now_s: Wall-clock seconds; drives the pulse so it is independent
                of frame rate.
        """
        self.y += self.speed
        self.rotation += MEDIA_ROTATION_STEP
        self.scale = 0.8 + math.sin(now_s) * 0.1

    def render(self, screen: pygame.Surface) -> None:
        radius = max(1, int(self.radius * self.scale))
        size = radius * 2
        surface = pygame.Surface((size, size), pygame.SRCALPHA)

        fill = Colors.FAKE_FILL if self._is_fake else Colors.REAL_FILL
        border = Colors.FAKE_BORDER if self._is_fake else Colors.REAL_BORDER
        alpha = int(255 * self.alpha)
        pygame.draw.rect(surface, (*fill, int(alpha * 0.35)), (0, 0, size, size))
        pygame.draw.rect(surface, (*border, alpha), (0, 0, size, size), 2)

        label = _font(Fonts.LABEL).render(_TYPE_LABELS[self.type], True, Colors.WHITE)
        surface.blit(label, label.get_rect(center=(radius, radius - 10)))

        snippet = self.content if len(self.content) <= 14 else self.content[:13] + "…"
        text = _font(Fonts.LABEL - 4).render(snippet, True, Colors.LIGHT_GRAY)
        surface.blit(text, text.get_rect(center=(radius, radius + 10)))

        rotated = pygame.transform.rotate(surface, -math.degrees(self.rotation))
        screen.blit(rotated, rotated.get_rect(center=(int(self.x), int(self.y))))

    def __repr__(self) -> str:
        return (f"MediaItem({self.type.value}, fake={self._is_fake}, "
                f"x={self.x:.0f}, y={self.y:.0f})")


class Bullet:
    """A projectile moving straight up, leaving a short trail."""

    def __init__(self, x: float, y: float, speed: float = BULLET_SPEED):
        self.x = x
        self.y = y
        self.speed = speed
        self.radius = BULLET_RADIUS
        self.trail: Deque[Tuple[float, float]] = deque(maxlen=TRAIL_LENGTH)

    def update(self) -> None:
        # Record before moving so the trail lags the head
        self.trail.append((self.x, self.y))
        self.y -= self.speed

    @property
    def is_off_screen(self) -> bool:
        return self.y < BULLET_CULL_Y

    def render(self, screen: pygame.Surface) -> None:
        count = len(self.trail)
        for i, (tx, ty) in enumerate(self.trail):
            fade = (i + 1) / (count + 1)
            color = tuple(int(c * fade) for c in Colors.BULLET)
            pygame.draw.circle(screen, color, (int(tx), int(ty)), max(1, int(self.radius * fade)))
        pygame.draw.circle(screen, Colors.BULLET, (int(self.x), int(self.y)), int(self.radius))


class Particle:
    """A decaying visual effect.

    One type serves both explosion dots and floating text popups; ``kind``
    selects how it is drawn. Physics is identical for both.
    """

    def __init__(
        self,
        x: float,
        y: float,
        vx: float,
        vy: float,
        color: Tuple[int, int, int],
        size: float = 3.0,
        kind: ParticleKind = ParticleKind.DOT,
        text: Optional[str] = None,
        life: int = PARTICLE_LIFE,
    ):
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.color = color
        self.size = size
        self.kind = kind
        self.text = text
        self.life = life
        self.max_life = life

    def update(self) -> None:
        self.x += self.vx
        self.y += self.vy
        self.vy += PARTICLE_GRAVITY
        self.life -= 1

    @property
    def is_dead(self) -> bool:
        return self.life <= 0

    @property
    def opacity(self) -> float:
        return max(0.0, self.life / self.max_life)

    def render(self, screen: pygame.Surface) -> None:
        alpha = int(255 * self.opacity)
        if self.kind == ParticleKind.TEXT:
            text = _font(Fonts.POPUP).render(self.text or "", True, self.color)
            text.set_alpha(alpha)
            screen.blit(text, text.get_rect(center=(int(self.x), int(self.y))))
            return

        radius = max(1, int(self.size))
        dot = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
        pygame.draw.circle(dot, (*self.color, alpha), (radius, radius), radius)
        screen.blit(dot, (int(self.x) - radius, int(self.y) - radius))


def make_explosion(
    x: float,
    y: float,
    rng: Optional[random.Random] = None,
    count: int = EXPLOSION_PARTICLES,
    color: Tuple[int, int, int] = Colors.EXPLOSION,
) -> List[Particle]:
    """Create a burst of dot particles with random velocity and size."""
    rng = rng or random
    return [
        Particle(
            x, y,
            vx=rng.uniform(-5.0, 5.0),
            vy=rng.uniform(-5.0, 5.0),
            color=color,
            size=rng.uniform(2.0, 7.0),
        )
        for _ in range(count)
    ]


def make_score_popup(x: float, y: float, text: str,
                     color: Tuple[int, int, int] = Colors.WHITE) -> Particle:
    """Create a rising text particle such as "+10" or "-5"."""
    return Particle(
        x, y,
        vx=0.0,
        vy=-POPUP_RISE_SPEED,
        color=color,
        size=0.0,
        kind=ParticleKind.TEXT,
        text=text,
    )


class DefenseLine:
    """Horizontal boundary near the bottom of the field."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

    @property
    def y(self) -> float:
        return self.height - DEFENSE_LINE_OFFSET

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def render(self, screen: pygame.Surface) -> None:
        y = int(self.y)
        glow = pygame.Surface((self.width, 9), pygame.SRCALPHA)
        glow.fill((*Colors.DEFENSE_LINE, 60))
        screen.blit(glow, (0, y - 4))
        pygame.draw.line(screen, Colors.DEFENSE_LINE, (0, y), (self.width, y), 2)


class Shooter:
    """Player-controlled cannon; moves horizontally, clamped to the field."""

    def __init__(self, field_width: int, field_height: int, speed: float = SHOOTER_SPEED):
        self.width = SHOOTER_WIDTH
        self.height = SHOOTER_HEIGHT
        self.speed = speed
        self.field_width = field_width
        self.field_height = field_height
        self.x = field_width / 2
        self.y = field_height - SHOOTER_BOTTOM_OFFSET

    def move(self, direction: int) -> None:
        """Move by one step; direction is -1 (left), 0 or 1 (right)."""
        if direction == 0:
            return
        half = self.width / 2
        self.x = max(half, min(self.field_width - half, self.x + direction * self.speed))

    def resize(self, field_width: int, field_height: int) -> None:
        self.field_width = field_width
        self.field_height = field_height
        self.y = field_height - SHOOTER_BOTTOM_OFFSET
        self.move_to(self.x)

    def move_to(self, x: float) -> None:
        half = self.width / 2
        self.x = max(half, min(self.field_width - half, x))

    def reset(self) -> None:
        self.x = self.field_width / 2

    @property
    def muzzle(self) -> Tuple[float, float]:
        """Point bullets are fired from."""
        return self.x, self.y - self.height / 2

    def render(self, screen: pygame.Surface) -> None:
        half_w = self.width / 2
        half_h = self.height / 2
        points = [
            (self.x, self.y - half_h),
            (self.x - half_w, self.y + half_h),
            (self.x + half_w, self.y + half_h),
        ]
        pygame.draw.polygon(screen, Colors.SHOOTER, points)
        pygame.draw.polygon(screen, Colors.WHITE, points, 1)
