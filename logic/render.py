"""
Server-side preview rendering.

This module draws a PNG of a RenderState so the effect of visibility,
opacity and card placement can be inspected without the client app.

Date: 2026-10-18
"""

import io
from typing import Sequence, Tuple

from PIL import Image, ImageDraw

from .models import GeoPoint, Post, RenderState, Viewport

DEFAULT_SIZE = 512
CARD_SIZE = 14
BACKGROUND = "#0f172a"
CARD_COLOR = "#38bdf8"
HIDDEN_COLOR = "#475569"
LINK_COLOR = "#f59e0b"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color string to RGB tuple.

    Args:
        hex_color: Hex color string (e.g., "#16a34a").

    Returns:
        RGB tuple (r, g, b).
    """
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def hex_to_rgba(hex_color: str, alpha: int = 255) -> Tuple[int, int, int, int]:
    """Convert hex color string to RGBA tuple."""
    return hex_to_rgb(hex_color) + (alpha,)


def project(point: GeoPoint, viewport: Viewport, size: int) -> Tuple[float, float]:
    """Project a coordinate onto the canvas (equirectangular, north up).

    Args:
        point: Coordinate to project.
        viewport: Visible region mapped onto the whole canvas.
        size: Canvas width and height in pixels.

    Returns:
        Pixel (x, y). Points outside the viewport land outside the canvas.
    """
    min_lat, max_lat, min_lon, max_lon = viewport.bounds()
    x = (point.longitude - min_lon) / (max_lon - min_lon) * size
    y = (max_lat - point.latitude) / (max_lat - min_lat) * size
    return x, y


def render_preview_png(
        posts: Sequence[Post],
        state: RenderState,
        viewport: Viewport,
        size: int = DEFAULT_SIZE,
) -> bytes:
    """Render posts at their adjusted locations.

    Visible posts are drawn as cards with alpha taken from their opacity;
    hidden posts as small grey dots. A line joins a card to its true location
    when placement moved it.

    Returns:
        PNG image bytes.
    """
    img = Image.new("RGBA", (size, size), hex_to_rgba(BACKGROUND))
    overlay = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    half = CARD_SIZE / 2

    for post in posts:
        adjusted = state.adjusted_location(post.id, post.location)
        ax, ay = project(adjusted, viewport, size)

        if not state.is_visible(post.id):
            draw.ellipse([(ax - 2, ay - 2), (ax + 2, ay + 2)], fill=hex_to_rgba(HIDDEN_COLOR))
            continue

        if adjusted != post.location:
            tx, ty = project(post.location, viewport, size)
            draw.line([(tx, ty), (ax, ay)], fill=hex_to_rgba(LINK_COLOR, 160), width=1)

        alpha = int(round(state.opacity(post.id) * 255))
        draw.rectangle(
            [(ax - half, ay - half), (ax + half, ay + half)],
            fill=hex_to_rgba(CARD_COLOR, alpha),
            outline=(255, 255, 255, alpha),
        )

    img = Image.alpha_composite(img, overlay)

    # Convert to PNG bytes
    img_bytes = io.BytesIO()
    img.save(img_bytes, format='PNG')
    img_bytes.seek(0)

    return img_bytes.getvalue()
