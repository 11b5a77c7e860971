"""
Overlap-based opacity.

Posts fade out gradually as more posts crowd around them instead of being
cut off at a hard limit. Opacity is independent of the viewport and of the
visibility decision in logic.scoring.

Date: 2026-10-18
"""

from typing import Dict, Optional, Sequence

from .config import EngineConfig
from .geo import distance_meters
from .models import Post

# Up to this many neighbours a post is fully opaque
FULL_OPACITY_MAX_OVERLAP = 4

# From this many neighbours a post is fully transparent
TRANSPARENT_MIN_OVERLAP = 10

FADE_DIVISOR = 6.0


def count_overlapping(post: Post, all_posts: Sequence[Post], radius_m: float) -> int:
    """Count other posts within radius_m of the post (the post itself excluded).

    Assumes the post is part of all_posts.
    """
    within = sum(1 for other in all_posts if distance_meters(post.location, other.location) <= radius_m)
    return within - 1


def opacity_for_overlap_count(overlap_count: int) -> float:
    """Map a neighbour count to an opacity in [0, 1].

    0-4 neighbours: 1.0
    5-9 neighbours: linear fade, 1 - (count - 4) / 6
    10+ neighbours: 0.0
    """
    if overlap_count <= FULL_OPACITY_MAX_OVERLAP:
        return 1.0
    if overlap_count < TRANSPARENT_MIN_OVERLAP:
        fade_progress = (overlap_count - FULL_OPACITY_MAX_OVERLAP) / FADE_DIVISOR
        return max(0.0, 1.0 - fade_progress)
    return 0.0


def compute_opacity(post: Post, all_posts: Sequence[Post], config: Optional[EngineConfig] = None) -> float:
    config = config or EngineConfig()
    return opacity_for_overlap_count(count_overlapping(post, all_posts, config.overlap_radius))


def compute_opacities(posts: Sequence[Post], config: Optional[EngineConfig] = None) -> Dict[str, float]:
    """Opacity for every post in the snapshot. O(n^2) distance checks."""
    config = config or EngineConfig()
    return {p.id: compute_opacity(p, posts, config) for p in posts}
