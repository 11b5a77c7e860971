"""
Post lifetime helpers.

Posts disappear from the map a fixed time after creation.

Date: 2026-10-18
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from .models import Post

DEFAULT_LIFETIME_HOURS = 24.0


def _aware(moment: datetime) -> datetime:
    # Naive timestamps from the post source are UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def expires_at(post: Post, lifetime_hours: float = DEFAULT_LIFETIME_HOURS) -> datetime:
    return _aware(post.created_at) + timedelta(hours=lifetime_hours)


def is_expired(post: Post, now: Optional[datetime] = None, lifetime_hours: float = DEFAULT_LIFETIME_HOURS) -> bool:
    now = _aware(now or datetime.now(timezone.utc))
    return now > expires_at(post, lifetime_hours)


def time_remaining(post: Post, now: Optional[datetime] = None, lifetime_hours: float = DEFAULT_LIFETIME_HOURS) -> float:
    """Seconds until the post expires, never negative."""
    now = _aware(now or datetime.now(timezone.utc))
    return max(0.0, (expires_at(post, lifetime_hours) - now).total_seconds())


def prune_expired(
        posts: Sequence[Post],
        now: Optional[datetime] = None,
        lifetime_hours: float = DEFAULT_LIFETIME_HOURS,
) -> List[Post]:
    """Drop expired posts, keeping the order of the rest."""
    now = _aware(now or datetime.now(timezone.utc))
    return [p for p in posts if not is_expired(p, now, lifetime_hours)]
