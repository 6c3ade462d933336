"""
Bullet/media collision detection.

Resolution is pure bookkeeping: it removes collided pairs from the live
lists and reports what happened. Scoring and effects are applied by the
caller so they stay in one place.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

from deepfake_defense.game.entities import Bullet, MediaItem


@dataclass(frozen=True)
class Hit:
    """A bullet destroyed an item."""
    item: MediaItem
    bullet: Bullet


def distance(a, b) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def is_colliding(bullet: Bullet, item: MediaItem) -> bool:
    """True when the circles overlap. Touching exactly is not a hit."""
    return distance(bullet, item) < bullet.radius + item.radius


def find_target(bullet: Bullet, items: List[MediaItem]) -> Optional[int]:
    """Index of the item a bullet hits, or None.

    With several overlaps the item whose center is nearest the bullet wins;
    equal distances go to the lowest index.
    """
    best_index = None
    best_distance = math.inf
    for index, item in enumerate(items):
        if not is_colliding(bullet, item):
            continue
        d = distance(bullet, item)
        if d < best_distance:
            best_index = index
            best_distance = d
    return best_index


def resolve_collisions(bullets: List[Bullet], items: List[MediaItem]) -> List[Hit]:
    """Remove every bullet/item pair that collides and return the hits.

    Bullets are walked in reverse index order. Each bullet destroys at most
    one item and each item is destroyed by at most one bullet.
    Both lists are modified in place.
    """
    hits: List[Hit] = []
    for b in range(len(bullets) - 1, -1, -1):
        target = find_target(bullets[b], items)
        if target is None:
            continue
        bullet = bullets.pop(b)
        item = items.pop(target)
        hits.append(Hit(item=item, bullet=bullet))
    return hits
