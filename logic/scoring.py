"""
Scoring module for post visibility.

This module computes a dynamic visibility threshold from the current zoom
level (viewport latitude span) and the number of posts inside the viewport,
and decides per post whether it clears that threshold.

Date: 2026-10-18
"""

import math
from typing import Callable, Dict, Optional, Sequence

from .config import EngineConfig
from .models import Post, Viewport

ScoreFn = Callable[[Post], float]


# =========================
# Threshold Components
# =========================

def count_in_viewport(posts: Sequence[Post], viewport: Viewport) -> int:
    """Count posts whose location falls inside the viewport (inclusive)."""
    return sum(1 for p in posts if viewport.contains(p.location))


def zoom_factor(span_lat: float, config: EngineConfig) -> float:
    """Normalise the latitude span to [0, 1] on a log scale.

    0.0 is fully zoomed in (min_zoom_span), 1.0 fully zoomed out
    (max_zoom_span). The span covers several orders of magnitude, so a linear
    scale would leave the mid-zoom range flat.
    """
    clamped = max(config.min_zoom_span, min(config.max_zoom_span, span_lat))
    log_min = math.log(config.min_zoom_span)
    log_max = math.log(config.max_zoom_span)
    return (math.log(clamped) - log_min) / (log_max - log_min)


def density_factor(density: int, config: EngineConfig) -> float:
    """Normalise the in-viewport post count to [0, 1]."""
    return min(1.0, density / config.max_density_count)


def compute_threshold(span_lat: float, density: int, config: EngineConfig) -> float:
    """Combine zoom and density into the score a post must reach to be shown.

    Args:
        span_lat: Viewport latitude span in degrees.
        density: Number of posts inside the viewport.
        config: Engine tunables.

    Returns:
        Threshold between min_threshold and max_threshold.
    """
    combined = (
        zoom_factor(span_lat, config) * config.zoom_weight
        + density_factor(density, config) * config.density_weight
    )
    return config.min_threshold + (config.max_threshold - config.min_threshold) * combined


# =========================
# Post Score
# =========================

def constant_score(config: EngineConfig) -> ScoreFn:
    """Uniform score for every post.

    Visibility is currently driven purely by zoom and density, so all posts
    share base_post_score. Swap in another ScoreFn to rank posts.
    """
    def score(post: Post) -> float:
        return config.base_post_score

    return score


# =========================
# Density Scorer
# =========================

class DensityScorer:
    """Decides whether a post is rendered at all."""

    def __init__(self, config: Optional[EngineConfig] = None, score_fn: Optional[ScoreFn] = None):
        self.config = config or EngineConfig()
        self.score_fn = score_fn or constant_score(self.config)

    def threshold(self, all_posts: Sequence[Post], viewport: Viewport) -> float:
        density = count_in_viewport(all_posts, viewport)
        return compute_threshold(viewport.span_lat, density, self.config)

    def should_show(self, post: Post, all_posts: Sequence[Post], viewport: Viewport) -> bool:
        """Check whether a single post clears the current threshold."""
        return self.score_fn(post) >= self.threshold(all_posts, viewport)

    def visibility(self, posts: Sequence[Post], viewport: Viewport) -> Dict[str, bool]:
        """Visibility decision for every post in the snapshot.

        Density depends only on the snapshot and viewport, so the threshold
        is computed once rather than per post.
        """
        threshold = self.threshold(posts, viewport)
        return {p.id: self.score_fn(p) >= threshold for p in posts}
