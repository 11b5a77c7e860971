"""
Display modes and far-zoom clustering.

When the map is zoomed far out, individual cards are unreadable, so posts
are grouped into clusters shown as a single marker with a count.

Date: 2026-10-18
"""

from typing import List, Optional, Sequence

from .config import EngineConfig
from .geo import distance_meters
from .models import GeoPoint, Post, PostCluster, Viewport

NEAR = "near"
MID = "mid"
FAR = "far"


def display_mode(viewport: Viewport, config: Optional[EngineConfig] = None) -> str:
    """Classify the zoom level from the viewport latitude span.

    Returns:
        "near" (all posts, collision avoidance), "mid" or "far" (clusters).
    """
    config = config or EngineConfig()
    span = viewport.span_lat
    if span <= config.near_distance_span:
        return NEAR
    if span <= config.mid_distance_span:
        return MID
    return FAR


def centroid(points: Sequence[GeoPoint]) -> GeoPoint:
    """Arithmetic mean of latitudes and longitudes."""
    n = len(points)
    return GeoPoint(
        latitude=sum(p.latitude for p in points) / n,
        longitude=sum(p.longitude for p in points) / n,
    )


def cluster_posts(posts: Sequence[Post], config: Optional[EngineConfig] = None) -> List[PostCluster]:
    """Greedy single-pass clustering.

    The first remaining post seeds a cluster and absorbs every remaining post
    within cluster_radius_degrees of it; repeat until no posts remain.

    Args:
        posts: Post snapshot, in arrival order.
        config: Engine tunables.

    Returns:
        Clusters in seed order.
    """
    config = config or EngineConfig()
    remaining = list(posts)
    clusters: List[PostCluster] = []

    while remaining:
        seed = remaining.pop(0)
        members = [seed]
        rest = []
        for post in remaining:
            degrees = distance_meters(seed.location, post.location) / config.meters_per_degree
            if degrees <= config.cluster_radius_degrees:
                members.append(post)
            else:
                rest.append(post)
        remaining = rest

        clusters.append(PostCluster(
            id=f"cluster-{seed.id}",
            location=centroid([m.location for m in members]),
            post_ids=[m.id for m in members],
        ))

    return clusters


def clusters_for_viewport(
        posts: Sequence[Post],
        viewport: Viewport,
        config: Optional[EngineConfig] = None,
) -> List[PostCluster]:
    """Clusters to draw for the viewport; empty unless zoomed far out."""
    if display_mode(viewport, config) != FAR:
        return []
    return cluster_posts(posts, config)
