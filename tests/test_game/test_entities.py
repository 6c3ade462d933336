"""
Unit tests for game entities.

Tests MediaItem motion, bullet trails and culling, particle decay, and
shooter movement limits.
"""

import math
import random

import pytest

from models import MediaType, ParticleKind
from deepfake_defense.config import (
    BULLET_CULL_Y,
    MEDIA_ROTATION_STEP,
    PARTICLE_GRAVITY,
    PARTICLE_LIFE,
    SHOOTER_BOTTOM_OFFSET,
    SHOOTER_HEIGHT,
    SHOOTER_WIDTH,
    TRAIL_LENGTH,
)
from deepfake_defense.game.entities import (
    Bullet,
    DefenseLine,
    MediaItem,
    Particle,
    Shooter,
    make_explosion,
    make_score_popup,
)


# ============================================================================
# MediaItem
# ============================================================================


class TestMediaItem:
    """Test MediaItem state and motion."""

    def test_label_is_read_only(self):
        """Test that is_fake cannot be reassigned."""
        item = MediaItem(100, 0, MediaType.QUOTE, 'A quote', True)
        with pytest.raises(AttributeError):
            item.is_fake = False

    def test_type_accepts_string(self):
        """Test that the media type is normalized to the enum."""
        item = MediaItem(100, 0, 'video', 'Clip', False)
        assert item.type == MediaType.VIDEO

    def test_update_moves_down_by_speed(self):
        """Test that each update adds speed to y."""
        item = MediaItem(100, 10, MediaType.IMAGE, 'Photo', False, speed=1.4)
        item.update(0.0)
        item.update(0.0)
        assert item.y == pytest.approx(12.8)

    def test_update_rotates(self):
        """Test that rotation advances by a fixed step."""
        item = MediaItem(100, 10, MediaType.IMAGE, 'Photo', False)
        item.update(0.0)
        assert item.rotation == pytest.approx(MEDIA_ROTATION_STEP)

    def test_pulse_follows_clock(self):
        """Test that scale is 0.8 + sin(t) * 0.1."""
        item = MediaItem(100, 10, MediaType.IMAGE, 'Photo', False)
        item.update(math.pi / 2)
        assert item.scale == pytest.approx(0.9)
        item.update(0.0)
        assert item.scale == pytest.approx(0.8)

    def test_y_never_decreases(self):
        """Test monotonic fall over many updates."""
        item = MediaItem(100, -100, MediaType.IMAGE, 'Photo', True, speed=2.0)
        previous = item.y
        for t in range(100):
            item.update(t * 0.1)
            assert item.y >= previous
            previous = item.y

    def test_render(self, surface):
        """Test rendering doesn't crash."""
        MediaItem(100, 100, MediaType.QUOTE, 'A rather long quote text', True).render(surface)


# ============================================================================
# Bullet
# ============================================================================


class TestBullet:
    """Test bullet movement and trail."""

    def test_update_moves_up(self):
        bullet = Bullet(50, 500, speed=8)
        bullet.update()
        assert bullet.y == 492

    def test_trail_records_previous_position(self):
        """Test the trail lags the head by one update."""
        bullet = Bullet(50, 500, speed=8)
        bullet.update()
        assert list(bullet.trail) == [(50, 500)]

    def test_trail_bounded_fifo(self):
        """Test that the trail keeps only the newest positions."""
        bullet = Bullet(50, 500, speed=1)
        for _ in range(TRAIL_LENGTH + 5):
            bullet.update()
        assert len(bullet.trail) == TRAIL_LENGTH
        # Oldest kept entry is from update number 6
        assert bullet.trail[0] == (50, 495)
        assert bullet.trail[-1] == (50, 500 - (TRAIL_LENGTH + 4))

    def test_off_screen_threshold(self):
        """Test culling happens strictly beyond the cull line."""
        bullet = Bullet(50, BULLET_CULL_Y)
        assert not bullet.is_off_screen
        bullet.y = BULLET_CULL_Y - 0.1
        assert bullet.is_off_screen

    def test_render(self, surface):
        bullet = Bullet(50, 100)
        for _ in range(3):
            bullet.update()
        bullet.render(surface)


# ============================================================================
# Particles
# ============================================================================


class TestParticle:
    """Test particle physics and lifetime."""

    def test_update_applies_velocity_and_gravity(self):
        particle = Particle(0, 0, vx=1.0, vy=-2.0, color=(255, 0, 0))
        particle.update()
        assert particle.x == 1.0
        assert particle.y == -2.0
        assert particle.vy == pytest.approx(-2.0 + PARTICLE_GRAVITY)

    def test_dies_after_life_ticks(self):
        particle = Particle(0, 0, 0, 0, (255, 255, 255))
        for _ in range(PARTICLE_LIFE - 1):
            particle.update()
        assert not particle.is_dead
        particle.update()
        assert particle.is_dead

    def test_opacity_fades(self):
        particle = Particle(0, 0, 0, 0, (255, 255, 255), life=10)
        assert particle.opacity == 1.0
        for _ in range(5):
            particle.update()
        assert particle.opacity == pytest.approx(0.5)

    def test_explosion(self):
        """Test explosion size, velocity and size ranges."""
        particles = make_explosion(10, 20, rng=random.Random(1))
        assert len(particles) == 10
        for p in particles:
            assert (p.x, p.y) == (10, 20)
            assert -5.0 <= p.vx <= 5.0
            assert -5.0 <= p.vy <= 5.0
            assert 2.0 <= p.size <= 7.0
            assert p.kind == ParticleKind.DOT

    def test_score_popup_rises(self):
        popup = make_score_popup(10, 20, "+10")
        assert popup.kind == ParticleKind.TEXT
        assert popup.text == "+10"
        popup.update()
        assert popup.y < 20

    def test_render_both_kinds(self, surface):
        make_score_popup(10, 20, "-5").render(surface)
        make_explosion(10, 20)[0].render(surface)


# ============================================================================
# Shooter and defense line
# ============================================================================


class TestShooter:
    """Test shooter placement and clamped movement."""

    def test_starts_centered_near_bottom(self):
        shooter = Shooter(800, 600)
        assert shooter.x == 400
        assert shooter.y == 600 - SHOOTER_BOTTOM_OFFSET

    def test_muzzle_is_top_center(self):
        shooter = Shooter(800, 600)
        assert shooter.muzzle == (400, 600 - SHOOTER_BOTTOM_OFFSET - SHOOTER_HEIGHT / 2)

    def test_move_by_speed(self):
        shooter = Shooter(800, 600, speed=5)
        shooter.move(1)
        assert shooter.x == 405
        shooter.move(-1)
        shooter.move(-1)
        assert shooter.x == 395

    def test_clamped_to_field(self):
        """Test the shooter cannot leave the field."""
        shooter = Shooter(800, 600, speed=50)
        for _ in range(100):
            shooter.move(-1)
        assert shooter.x == SHOOTER_WIDTH / 2
        for _ in range(100):
            shooter.move(1)
        assert shooter.x == 800 - SHOOTER_WIDTH / 2

    def test_resize_keeps_shooter_inside(self):
        shooter = Shooter(800, 600)
        shooter.move_to(780)
        shooter.resize(400, 300)
        assert shooter.x == 400 - SHOOTER_WIDTH / 2
        assert shooter.y == 300 - SHOOTER_BOTTOM_OFFSET


class TestDefenseLine:
    """Test defense line position."""

    def test_position_tracks_height(self):
        line = DefenseLine(800, 600)
        assert line.y == 550
        line.resize(800, 700)
        assert line.y == 650

    def test_render(self, surface):
        DefenseLine(800, 600).render(surface)
