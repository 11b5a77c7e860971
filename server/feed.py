"""
Post feed API routes.

The post source pushes full snapshots and the client pushes viewport
changes; each push recomputes the render state and notifies SSE
subscribers. The rendering layer reads the derived state per post id.

Date: 2026-10-18
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from logic.config import get_engine_config
from logic.expiry import prune_expired
from logic.feed import ViewportPostFeed
from logic.models import Post, Viewport
from logic.render import render_preview_png
from logic.validation import sanitise_post_id, validate_snapshot, validate_viewport
from server.broadcast import notify_render_state_updated

logger = logging.getLogger(__name__)

router = APIRouter()


class SnapshotRequest(BaseModel):
    """Request model for replacing the post snapshot."""

    posts: List[Post]


_feed: Optional[ViewportPostFeed] = None


def get_feed() -> ViewportPostFeed:
    """Get the process-wide feed, creating it from the stored config."""
    global _feed
    if _feed is None:
        _feed = ViewportPostFeed(config=get_engine_config())
    return _feed


def reset_feed():
    """Drop the process-wide feed so the next request starts fresh."""
    global _feed
    _feed = None


def state_summary(feed: ViewportPostFeed) -> dict:
    state = feed.state
    return {
        "posts": len(feed.posts),
        "visible": sum(state.visible.values()),
        "display_mode": state.display_mode,
    }


@router.post("/api/feed/posts")
async def replace_posts(data: SnapshotRequest):
    """Replace the current post snapshot.

    Expired posts are dropped before the recompute.

    Args:
        data: Full snapshot of posts in arrival order.

    Returns:
        Summary of the recomputed state.

    Raises:
        HTTPException: If the snapshot fails validation.
    """
    posts = validate_snapshot(data.posts)
    feed = get_feed()

    live = prune_expired(posts, lifetime_hours=feed.config.post_lifetime_hours)
    if len(live) != len(posts):
        logger.info("Dropped %d expired posts from snapshot", len(posts) - len(live))

    feed.update_posts(live)
    summary = state_summary(feed)
    await notify_render_state_updated(summary)

    return {"status": "ok", **summary}


@router.post("/api/feed/viewport")
async def replace_viewport(viewport: Viewport):
    """Replace the current map viewport.

    Raises:
        HTTPException: If the viewport is invalid.
    """
    feed = get_feed()
    feed.update_viewport(validate_viewport(viewport))
    summary = state_summary(feed)
    await notify_render_state_updated(summary)

    return {"status": "ok", **summary}


@router.get("/api/feed/state")
def get_state():
    """Get the current render state, keyed by post id."""
    feed = get_feed()
    result = feed.state.to_dict()
    result["viewport"] = feed.viewport.model_dump()
    return result


@router.get("/api/feed/posts/{post_id}")
def get_post_state(post_id: str):
    """Get render attributes for a single post.

    Unknown ids get the defaults: hidden, fully opaque.

    Raises:
        HTTPException: If the id is unknown and no location is known for it.
    """
    post_id = sanitise_post_id(post_id)
    feed = get_feed()
    location = feed.adjusted_location(post_id)
    if location is None:
        raise HTTPException(404, f"Post '{post_id}' not found")

    return {
        "id": post_id,
        "visible": feed.is_visible(post_id),
        "opacity": feed.opacity(post_id),
        "adjusted_location": location.model_dump(),
    }


@router.get("/api/feed/clusters")
def get_clusters():
    """Get post clusters for the current viewport (empty unless zoomed far out)."""
    feed = get_feed()
    return {
        "display_mode": feed.state.display_mode,
        "clusters": [
            {
                "id": c.id,
                "location": c.location.model_dump(),
                "post_ids": c.post_ids,
                "post_count": c.post_count,
            }
            for c in feed.clusters()
        ],
    }


@router.get("/api/feed/preview.png")
def get_preview(size: int = 512):
    """Render a PNG preview of the current state."""
    if not 64 <= size <= 2048:
        raise HTTPException(400, "Invalid preview size")
    feed = get_feed()
    png = render_preview_png(feed.posts, feed.state, feed.viewport, size=size)
    return Response(content=png, media_type="image/png")
