"""
Validation and sanitization utilities.

The engine assumes finite, in-range coordinates and positive spans. This
module checks request data against those assumptions before it reaches the
engine, rejecting bad input with HTTP 400.

Date: 2026-10-18
"""

import math
from typing import List, Sequence

from fastapi import HTTPException

from .models import GeoPoint, Post, Viewport

MAX_POST_ID_LEN = 64
MAX_SNAPSHOT_SIZE = 5000


def is_valid_latitude(value: float) -> bool:
    return math.isfinite(value) and -90.0 <= value <= 90.0


def is_valid_longitude(value: float) -> bool:
    return math.isfinite(value) and -180.0 <= value <= 180.0


def validate_geo_point(point: GeoPoint, label: str = "location") -> GeoPoint:
    """Validate a coordinate pair.

    Args:
        point: Point to check.
        label: Name used in the error message.

    Returns:
        The point unchanged.

    Raises:
        HTTPException: If latitude or longitude is out of range or not finite.
    """
    if not is_valid_latitude(point.latitude):
        raise HTTPException(400, f"Invalid {label} latitude")
    if not is_valid_longitude(point.longitude):
        raise HTTPException(400, f"Invalid {label} longitude")
    return point


def validate_viewport(viewport: Viewport) -> Viewport:
    """Validate a viewport.

    Raises:
        HTTPException: If the centre is invalid or a span is not positive.
    """
    validate_geo_point(viewport.center, "viewport center")
    for name, span in (("span_lat", viewport.span_lat), ("span_lon", viewport.span_lon)):
        if not math.isfinite(span) or span <= 0:
            raise HTTPException(400, f"Viewport {name} must be positive")
    return viewport


def sanitise_post_id(value: str) -> str:
    value = value.strip()
    if not value:
        raise HTTPException(400, "Missing post id")
    if len(value) > MAX_POST_ID_LEN:
        raise HTTPException(400, "Post id too long")
    return value


def validate_snapshot(posts: Sequence[Post]) -> List[Post]:
    """Validate a full post snapshot.

    Args:
        posts: Posts in arrival order.

    Returns:
        The posts as a list, order preserved, with ids stripped of whitespace.

    Raises:
        HTTPException: On oversized snapshots, bad ids, bad coordinates,
            or duplicate ids.
    """
    if len(posts) > MAX_SNAPSHOT_SIZE:
        raise HTTPException(400, "Too many posts in snapshot")

    seen = set()
    cleaned = []
    for post in posts:
        post_id = sanitise_post_id(post.id)
        if post_id in seen:
            raise HTTPException(400, f"Duplicate post id: {post_id}")
        seen.add(post_id)
        validate_geo_point(post.location, f"post '{post_id}'")
        if post_id != post.id:
            post = post.model_copy(update={"id": post_id})
        cleaned.append(post)

    return cleaned
