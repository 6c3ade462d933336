"""
Unit tests for bullet/media collision detection.
"""

import pytest

from deepfake_defense.config import BULLET_RADIUS, MEDIA_RADIUS
from deepfake_defense.game.collision import find_target, is_colliding, resolve_collisions
from deepfake_defense.game.entities import Bullet


class TestIsColliding:
    """Test the circle overlap test."""

    def test_overlap(self, make_item):
        item = make_item(x=100, y=100)
        assert is_colliding(Bullet(100, 120), item)

    def test_touching_is_not_a_hit(self, make_item):
        """Test that distance == r1 + r2 does not collide."""
        item = make_item(x=100, y=100)
        bullet = Bullet(100 + BULLET_RADIUS + MEDIA_RADIUS, 100)
        assert not is_colliding(bullet, item)

    def test_just_inside_is_a_hit(self, make_item):
        item = make_item(x=100, y=100)
        bullet = Bullet(100 + BULLET_RADIUS + MEDIA_RADIUS - 0.01, 100)
        assert is_colliding(bullet, item)


class TestFindTarget:
    """Test target selection among overlapping items."""

    def test_no_overlap(self, make_item):
        assert find_target(Bullet(0, 0), [make_item(x=500, y=500)]) is None

    def test_nearest_center_wins(self, make_item):
        items = [make_item(x=100, y=140), make_item(x=100, y=110)]
        assert find_target(Bullet(100, 100), items) == 1

    def test_tie_goes_to_lowest_index(self, make_item):
        items = [make_item(x=80, y=100), make_item(x=120, y=100)]
        assert find_target(Bullet(100, 100), items) == 0


class TestResolveCollisions:
    """Test in-place removal of collided pairs."""

    def test_hit_removes_both(self, make_item):
        item = make_item(x=100, y=100)
        bullet = Bullet(100, 100)
        bullets, items = [bullet], [item]

        hits = resolve_collisions(bullets, items)

        assert len(hits) == 1
        assert hits[0].item is item
        assert hits[0].bullet is bullet
        assert bullets == []
        assert items == []

    def test_miss_leaves_lists_alone(self, make_item):
        bullets, items = [Bullet(0, 0)], [make_item(x=500, y=500)]
        assert resolve_collisions(bullets, items) == []
        assert len(bullets) == 1
        assert len(items) == 1

    def test_each_item_destroyed_once(self, make_item):
        """Test two bullets on one item: only one bullet is consumed."""
        item = make_item(x=100, y=100)
        bullets = [Bullet(100, 100), Bullet(100, 105)]
        items = [item]

        hits = resolve_collisions(bullets, items)

        assert len(hits) == 1
        assert len(bullets) == 1
        assert items == []

    def test_bullets_walked_in_reverse(self, make_item):
        """Test the highest-index bullet claims a shared target."""
        item = make_item(x=100, y=100)
        first, second = Bullet(100, 100), Bullet(100, 110)
        bullets = [first, second]

        hits = resolve_collisions(bullets, [item])

        assert hits[0].bullet is second
        assert bullets == [first]

    @pytest.mark.parametrize("count", [1, 3, 5])
    def test_independent_pairs(self, make_item, count):
        items = [make_item(x=100 + i * 200, y=100) for i in range(count)]
        bullets = [Bullet(100 + i * 200, 100) for i in range(count)]

        hits = resolve_collisions(bullets, items)

        assert len(hits) == count
        assert bullets == []
        assert items == []
