"""
Basic API routes.

Stateless endpoints: compute a render state for a snapshot and viewport
supplied in the request, without touching the shared feed.

Date: 2026-10-18
"""

from typing import List

from fastapi import APIRouter
from pydantic import BaseModel

from logic.config import get_engine_config
from logic.feed import recompute
from logic.models import Post, Viewport
from logic.validation import validate_snapshot, validate_viewport

router = APIRouter()


class RenderRequest(BaseModel):
    """Request model for a one-off render state computation."""

    posts: List[Post]
    viewport: Viewport


@router.post("/api/render")
def render_state(data: RenderRequest):
    """Compute visibility, opacity and adjusted location for every post.

    Args:
        data: Post snapshot and viewport.

    Returns:
        Render state keyed by post id.

    Raises:
        HTTPException: If the posts or viewport fail validation.
    """
    posts = validate_snapshot(data.posts)
    viewport = validate_viewport(data.viewport)
    state = recompute(posts, viewport, get_engine_config())
    return state.to_dict()
