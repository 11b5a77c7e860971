"""
Data models for the map post engine.

GeoPoint, Viewport and Post are immutable inputs. RenderState is the derived
output of a recompute and is rebuilt from scratch every time; it is never
patched in place.

Date: 2026-10-18
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GeoPoint(BaseModel):
    """A latitude/longitude pair in decimal degrees.

    Ranges are not enforced here; callers validate at the boundary
    (see logic.validation).
    """

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float

    def as_tuple(self) -> Tuple[float, float]:
        return self.latitude, self.longitude


class Viewport(BaseModel):
    """Visible map rectangle: a centre plus a span in degrees on each axis."""

    model_config = ConfigDict(frozen=True)

    center: GeoPoint
    span_lat: float
    span_lon: float

    def bounds(self) -> Tuple[float, float, float, float]:
        """Get the bounding box of the viewport.

        Returns:
            (min_lat, max_lat, min_lon, max_lon)
        """
        half_lat = self.span_lat / 2
        half_lon = self.span_lon / 2
        return (
            self.center.latitude - half_lat,
            self.center.latitude + half_lat,
            self.center.longitude - half_lon,
            self.center.longitude + half_lon,
        )

    def contains(self, point: GeoPoint) -> bool:
        """Check whether a point falls inside the viewport (inclusive bounds)."""
        min_lat, max_lat, min_lon, max_lon = self.bounds()
        return min_lat <= point.latitude <= max_lat and min_lon <= point.longitude <= max_lon


class Post(BaseModel):
    """A geotagged post as supplied by the post source.

    Only id, location and created_at are read by the engine. Anything else
    the post source sends along is ignored.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    location: GeoPoint
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def utc_created_at(cls, value: datetime) -> datetime:
        # Naive timestamps from the post source are UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class PostCluster(BaseModel):
    """A group of nearby posts shown as one marker when zoomed far out."""

    model_config = ConfigDict(frozen=True)

    id: str
    location: GeoPoint
    post_ids: List[str]

    @property
    def post_count(self) -> int:
        return len(self.post_ids)


class RenderState(BaseModel):
    """Derived per-post render attributes from a single recompute.

    Every post in the snapshot has exactly one entry in each map.
    """

    model_config = ConfigDict(frozen=True)

    visible: Dict[str, bool] = Field(default_factory=dict)
    opacities: Dict[str, float] = Field(default_factory=dict)
    adjusted_locations: Dict[str, GeoPoint] = Field(default_factory=dict)
    display_mode: str = "near"

    def is_visible(self, post_id: str) -> bool:
        return self.visible.get(post_id, False)

    def opacity(self, post_id: str) -> float:
        return self.opacities.get(post_id, 1.0)

    def adjusted_location(self, post_id: str, true_location: Optional[GeoPoint] = None) -> Optional[GeoPoint]:
        """Get the render coordinate for a post.

        Args:
            post_id: Post identifier.
            true_location: The post's real coordinate, returned when the id
                was not part of the last recompute.

        Returns:
            Adjusted location, or true_location if the id is unknown.
        """
        return self.adjusted_locations.get(post_id, true_location)

    def post_ids(self) -> List[str]:
        return list(self.adjusted_locations.keys())

    def to_dict(self) -> Dict:
        """Serialise per post id for the rendering layer."""
        return {
            "display_mode": self.display_mode,
            "posts": {
                post_id: {
                    "visible": self.is_visible(post_id),
                    "opacity": self.opacity(post_id),
                    "adjusted_location": location.model_dump(),
                }
                for post_id, location in self.adjusted_locations.items()
            },
        }
