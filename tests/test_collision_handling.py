"""
Tests for post card collision handling.

Run with: python -m pytest tests/test_collision_handling.py -v
"""

import math
import random
from datetime import datetime, timezone

import pytest

from logic.config import EngineConfig
from logic.geo import distance_meters, offset
from logic.models import GeoPoint
from logic.placement import (
    FALLBACK_OFFSET_FACTOR,
    SEARCH_OFFSET_FACTOR,
    collides,
    find_non_overlapping_position,
    place_posts,
    placement_order,
    resolve_post_positions,
)
from factories import make_post

MIN_DISTANCE = EngineConfig().min_card_distance
ORIGIN = GeoPoint(latitude=0.0, longitude=0.0)


class TestCollides:
    def test_empty(self):
        assert collides(ORIGIN, [], MIN_DISTANCE) is False

    def test_threshold_is_strict(self):
        near = GeoPoint(latitude=0.0001, longitude=0.0)  # ~11m
        far = GeoPoint(latitude=0.001, longitude=0.0)  # ~111m
        assert collides(ORIGIN, [near], MIN_DISTANCE) is True
        assert collides(ORIGIN, [far], MIN_DISTANCE) is False
        assert collides(ORIGIN, [near], 0.0) is False


class TestFindNonOverlappingPosition:
    def test_first_direction_is_north(self):
        position, used_fallback = find_non_overlapping_position(ORIGIN, [ORIGIN], MIN_DISTANCE)
        assert used_fallback is False
        assert position.latitude > 0
        assert position.longitude == pytest.approx(0.0, abs=1e-12)
        assert distance_meters(ORIGIN, position) == pytest.approx(MIN_DISTANCE * SEARCH_OFFSET_FACTOR)

    def test_fallback_when_surrounded(self):
        # A ring of taken points at the search distance blocks every direction
        blocked = [ORIGIN] + [
            offset(ORIGIN, MIN_DISTANCE * SEARCH_OFFSET_FACTOR, math.radians(angle))
            for angle in range(0, 360, 15)
        ]

        position, used_fallback = find_non_overlapping_position(ORIGIN, blocked, MIN_DISTANCE)
        assert used_fallback is True
        assert distance_meters(ORIGIN, position) == pytest.approx(MIN_DISTANCE * FALLBACK_OFFSET_FACTOR)
        assert position.latitude > 0


class TestPlacementOrder:
    def test_oldest_first(self):
        posts = [make_post("c", created=30), make_post("a", created=10), make_post("b", created=20)]
        assert [p.id for p in placement_order(posts)] == ["a", "b", "c"]

    def test_ties_keep_snapshot_order(self):
        posts = [make_post("x", created=5), make_post("y", created=5), make_post("z", created=1)]
        assert [p.id for p in placement_order(posts)] == ["z", "x", "y"]

    def test_naive_and_aware_timestamps_mix(self):
        # Naive timestamps count as UTC
        posts = [
            make_post("late", created=datetime(2026, 10, 18, 11, 0)),
            make_post("early", created=datetime(2026, 10, 18, 10, 0, tzinfo=timezone.utc)),
            make_post("middle", created=datetime(2026, 10, 18, 10, 30)),
        ]
        assert [p.id for p in placement_order(posts)] == ["early", "middle", "late"]
        assert resolve_post_positions(posts)["early"] == posts[1].location


class TestPlacePosts:
    def test_empty_snapshot(self):
        result = place_posts([])
        assert result.positions == {}
        assert result.fallback_ids == frozenset()

    def test_isolated_post_keeps_true_location(self):
        post = make_post("solo", 48.8566, 2.3522)
        assert resolve_post_positions([post])["solo"] == post.location

    def test_spread_out_posts_are_not_moved(self):
        posts = [make_post(f"p{i}", 35.0 + i * 0.001, 139.0, created=i) for i in range(10)]
        positions = resolve_post_positions(posts)
        for p in posts:
            assert positions[p.id] == p.location

    def test_oldest_post_is_pinned(self):
        newer = make_post("newer", created=200)
        older = make_post("older", created=100)
        positions = resolve_post_positions([newer, older])
        assert positions["older"] == older.location
        assert positions["newer"] != newer.location

    def test_tie_break_follows_snapshot_order(self):
        a = make_post("a", created=7)
        b = make_post("b", created=7)
        assert resolve_post_positions([a, b])["a"] == a.location
        assert resolve_post_positions([b, a])["b"] == b.location

    def test_search_starts_from_true_location(self):
        # The second post sits 10m north of the first; it is nudged relative
        # to its own location, not the first post's
        first = make_post("first", created=1)
        second = make_post("second", lat=0.00009, created=2)
        positions = resolve_post_positions([first, second])
        moved = positions["second"]
        assert distance_meters(second.location, moved) == pytest.approx(MIN_DISTANCE * SEARCH_OFFSET_FACTOR)
        assert distance_meters(first.location, moved) >= MIN_DISTANCE

    def test_min_card_distance_is_configurable(self):
        a = make_post("a", created=1)
        b = make_post("b", lat=0.0003, created=2)  # ~33m apart
        assert resolve_post_positions([a, b])["b"] == b.location

        wide = EngineConfig(min_card_distance=50.0)
        assert resolve_post_positions([a, b], wide)["b"] != b.location

    def test_every_post_gets_one_entry(self):
        posts = [make_post(f"p{i}", created=i) for i in range(15)]
        positions = resolve_post_positions(posts)
        assert set(positions) == {p.id for p in posts}

    def test_deterministic(self):
        rng = random.Random(1234)
        posts = [
            make_post(f"p{i}", rng.uniform(-0.0005, 0.0005), rng.uniform(-0.0005, 0.0005), created=rng.randint(0, 5))
            for i in range(60)
        ]
        first = resolve_post_positions(posts)
        second = resolve_post_positions(list(posts))
        assert first == second
        for post_id in first:
            assert first[post_id].as_tuple() == second[post_id].as_tuple()

    def test_no_collisions_except_fallbacks(self):
        rng = random.Random(99)
        posts = [
            make_post(f"p{i}", rng.uniform(-0.001, 0.001), rng.uniform(-0.001, 0.001), created=i)
            for i in range(80)
        ]
        result = place_posts(posts)
        ordered = placement_order(posts)

        for later_index, later in enumerate(ordered):
            if later.id in result.fallback_ids:
                point = result.positions[later.id]
                assert distance_meters(later.location, point) == pytest.approx(MIN_DISTANCE * FALLBACK_OFFSET_FACTOR)
                continue
            for earlier in ordered[:later_index]:
                d = distance_meters(result.positions[earlier.id], result.positions[later.id])
                assert d >= MIN_DISTANCE


def test_twelve_posts_on_one_spot():
    """Worst-case clustering: twelve posts at (0, 0), created at t=1..12.

    At a 22m search radius neighbouring compass points are only ~16.8m
    apart, so once north is taken the diagonals are blocked; the four
    cardinal directions fill up and every later post lands on the
    fallback point 44m due north.
    """
    posts = [make_post(f"post{i}", 0.0, 0.0, created=i) for i in range(1, 13)]
    result = place_posts(posts)
    positions = result.positions

    assert positions["post1"] == ORIGIN
    assert "post1" not in result.fallback_ids

    compass = [positions[f"post{i}"] for i in range(2, 6)]
    for point in compass:
        assert distance_meters(ORIGIN, point) == pytest.approx(MIN_DISTANCE * SEARCH_OFFSET_FACTOR)
    assert len({p.as_tuple() for p in compass}) == 4

    north, east, south, west = compass
    assert north.latitude > 0 and north.longitude == pytest.approx(0.0, abs=1e-12)
    assert east.longitude > 0 and east.latitude == pytest.approx(0.0, abs=1e-12)
    assert south.latitude < 0 and south.longitude == pytest.approx(0.0, abs=1e-12)
    assert west.longitude < 0 and west.latitude == pytest.approx(0.0, abs=1e-12)

    fallback = positions["post6"]
    assert distance_meters(ORIGIN, fallback) == pytest.approx(MIN_DISTANCE * FALLBACK_OFFSET_FACTOR)
    assert fallback.latitude > 0 and fallback.longitude == pytest.approx(0.0, abs=1e-12)
    for i in range(6, 13):
        assert positions[f"post{i}"] == fallback
    assert result.fallback_ids == frozenset(f"post{i}" for i in range(6, 13))

    # Same input, same output
    assert place_posts(posts).positions == positions
