"""
Post card placement.

This module assigns every post a render coordinate so that post cards on the
map do not sit on top of each other. The oldest post at a spot keeps its
true location; later posts are nudged to a neighbouring position.

Algorithm Overview:
- Phase 1: Order posts oldest first (stable, ties keep snapshot order)
- Phase 2: Fold over the ordered posts, carrying the placed positions
  - Keep the true location if it clears every placed card
  - Otherwise try 8 compass directions around the true location
  - Otherwise fall back to a fixed point due north

Date: 2026-10-18
"""

import logging
from functools import reduce
from typing import Dict, FrozenSet, List, NamedTuple, Optional, Sequence, Tuple

from .config import EngineConfig
from .geo import bearing_from_degrees, distance_meters, offset
from .models import GeoPoint, Post

logger = logging.getLogger(__name__)

# =========================
# Module Constants
# =========================

# Offset for the compass search, relative to min_card_distance (right next to the card)
SEARCH_OFFSET_FACTOR = 1.1

# Offset for the last-resort position due north, relative to min_card_distance
FALLBACK_OFFSET_FACTOR = 2.2

# Compass search: 8 directions, 45 degrees apart, starting due north
SEARCH_ANGLE_STEP = 45.0
SEARCH_DIRECTIONS = 8


class PlacementResult(NamedTuple):
    """Outcome of a placement run."""

    positions: Dict[str, GeoPoint]
    fallback_ids: FrozenSet[str]


class _Placed(NamedTuple):
    # Accumulator for the fold: placed (post_id, point) pairs in placement order
    points: Tuple[Tuple[str, GeoPoint], ...]
    fallbacks: Tuple[str, ...]


# =========================
# Helpers
# =========================

def placement_order(posts: Sequence[Post]) -> List[Post]:
    """Sort posts oldest first. sorted() is stable, so ties keep snapshot order."""
    return sorted(posts, key=lambda p: p.created_at)


def collides(candidate: GeoPoint, placed: Sequence[GeoPoint], min_distance: float) -> bool:
    """Check if a candidate point is closer than min_distance to any placed point."""
    for existing in placed:
        if distance_meters(candidate, existing) < min_distance:
            return True
    return False


def find_non_overlapping_position(
        center: GeoPoint,
        avoiding: Sequence[GeoPoint],
        min_distance: float,
) -> Tuple[GeoPoint, bool]:
    """Search around a point for a spot clear of every placed card.

    Args:
        center: True location of the post being placed.
        avoiding: Points already taken by earlier posts.
        min_distance: Minimum ground distance between cards in metres.

    Returns:
        Tuple of (position, used_fallback).
    """
    search_distance = min_distance * SEARCH_OFFSET_FACTOR

    for step in range(SEARCH_DIRECTIONS):
        bearing = bearing_from_degrees(step * SEARCH_ANGLE_STEP)
        candidate = offset(center, search_distance, bearing)
        if not collides(candidate, avoiding, min_distance):
            return candidate, False

    # Every direction is taken; accept the northern point unconditionally
    return offset(center, min_distance * FALLBACK_OFFSET_FACTOR, 0.0), True


def _place(min_distance: float):
    def step(placed: _Placed, post: Post) -> _Placed:
        taken = [point for _, point in placed.points]
        position = post.location
        used_fallback = False

        if collides(position, taken, min_distance):
            position, used_fallback = find_non_overlapping_position(post.location, taken, min_distance)

        fallbacks = placed.fallbacks + (post.id,) if used_fallback else placed.fallbacks
        return _Placed(placed.points + ((post.id, position),), fallbacks)

    return step


# =========================
# Public API
# =========================

def place_posts(posts: Sequence[Post], config: Optional[EngineConfig] = None) -> PlacementResult:
    """Assign every post a non-colliding render coordinate.

    Args:
        posts: Full post snapshot, in arrival order.
        config: Engine tunables (min_card_distance is used).

    Returns:
        PlacementResult with the adjusted location of every post and the ids
        that ended up on the northern fallback point.
    """
    config = config or EngineConfig()
    ordered = placement_order(posts)

    placed = reduce(_place(config.min_card_distance), ordered, _Placed((), ()))

    if placed.fallbacks:
        logger.debug(
            "Placement fell back to north offset for %d of %d posts",
            len(placed.fallbacks), len(ordered),
        )

    return PlacementResult(
        positions=dict(placed.points),
        fallback_ids=frozenset(placed.fallbacks),
    )


def resolve_post_positions(posts: Sequence[Post], config: Optional[EngineConfig] = None) -> Dict[str, GeoPoint]:
    """Adjusted location per post id."""
    return place_posts(posts, config).positions
