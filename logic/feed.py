"""
Viewport post feed.

Orchestrates visibility scoring, opacity fading and card placement against
the latest post snapshot and viewport. recompute() is a pure function of its
inputs; ViewportPostFeed just remembers the latest inputs and the RenderState
they produced, replacing it wholesale on every change.

Date: 2026-10-18
"""

import logging
from typing import List, Optional, Sequence

from .clustering import clusters_for_viewport, display_mode
from .config import EngineConfig
from .models import GeoPoint, Post, PostCluster, RenderState, Viewport
from .opacity import compute_opacities
from .placement import place_posts
from .scoring import DensityScorer, ScoreFn

logger = logging.getLogger(__name__)

# Central Tokyo, roughly a 2 km radius
DEFAULT_VIEWPORT = Viewport(
    center=GeoPoint(latitude=35.6762, longitude=139.6503),
    span_lat=0.02,
    span_lon=0.02,
)


def recompute(
        posts: Sequence[Post],
        viewport: Viewport,
        config: Optional[EngineConfig] = None,
        score_fn: Optional[ScoreFn] = None,
) -> RenderState:
    """Derive render attributes for every post in the snapshot.

    Opacity and placement are computed for all posts, visible or not, so a
    post that becomes visible already has a stable position.

    Args:
        posts: Full post snapshot, in arrival order.
        viewport: Current map viewport.
        config: Engine tunables.
        score_fn: Per-post importance score; defaults to a constant.

    Returns:
        A fresh RenderState.
    """
    config = config or EngineConfig()
    posts = list(posts)

    visible = DensityScorer(config, score_fn).visibility(posts, viewport)
    opacities = compute_opacities(posts, config)
    placement = place_posts(posts, config)

    state = RenderState(
        visible=visible,
        opacities=opacities,
        adjusted_locations=placement.positions,
        display_mode=display_mode(viewport, config),
    )

    logger.debug(
        "Recomputed render state: %d posts, %d visible, %d fallback placements, mode=%s",
        len(posts), sum(visible.values()), len(placement.fallback_ids), state.display_mode,
    )
    return state


class ViewportPostFeed:
    """Holds the latest post snapshot and viewport and their RenderState."""

    def __init__(
            self,
            config: Optional[EngineConfig] = None,
            score_fn: Optional[ScoreFn] = None,
            viewport: Optional[Viewport] = None,
    ):
        self.config = config or EngineConfig()
        self.score_fn = score_fn
        self.posts: List[Post] = []
        self.viewport = viewport or DEFAULT_VIEWPORT
        self.state = RenderState(display_mode=display_mode(self.viewport, self.config))

    def update(self, posts: Optional[Sequence[Post]] = None, viewport: Optional[Viewport] = None) -> RenderState:
        """Replace the snapshot and/or viewport and recompute."""
        if posts is not None:
            self.posts = list(posts)
        if viewport is not None:
            self.viewport = viewport
        self.state = recompute(self.posts, self.viewport, self.config, self.score_fn)
        return self.state

    def update_posts(self, posts: Sequence[Post]) -> RenderState:
        return self.update(posts=posts)

    def update_viewport(self, viewport: Viewport) -> RenderState:
        return self.update(viewport=viewport)

    def reconfigure(self, config: EngineConfig) -> RenderState:
        self.config = config
        return self.update()

    def find_post(self, post_id: str) -> Optional[Post]:
        return next((p for p in self.posts if p.id == post_id), None)

    def is_visible(self, post_id: str) -> bool:
        return self.state.is_visible(post_id)

    def opacity(self, post_id: str) -> float:
        return self.state.opacity(post_id)

    def adjusted_location(self, post_id: str, true_location: Optional[GeoPoint] = None) -> Optional[GeoPoint]:
        """Adjusted location, falling back to the true location.

        The true location is taken from the argument, or from the current
        snapshot when the caller does not supply one.
        """
        if true_location is None:
            post = self.find_post(post_id)
            true_location = post.location if post else None
        return self.state.adjusted_location(post_id, true_location)

    def clusters(self) -> List[PostCluster]:
        return clusters_for_viewport(self.posts, self.viewport, self.config)
