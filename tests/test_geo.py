"""
Tests for spherical coordinate arithmetic.

Run with: python -m pytest tests/test_geo.py
"""

import math
import random

import pytest

from logic.geo import EARTH_RADIUS_M, distance_meters, offset
from logic.models import GeoPoint

TOKYO = GeoPoint(latitude=35.6762, longitude=139.6503)
PARIS = GeoPoint(latitude=48.8566, longitude=2.3522)


def test_distance_identical_points_is_zero():
    assert distance_meters(TOKYO, TOKYO) == 0.0
    assert distance_meters(GeoPoint(latitude=0, longitude=0), GeoPoint(latitude=0, longitude=0)) == 0.0


def test_distance_symmetric():
    rng = random.Random(7)
    for _ in range(200):
        a = GeoPoint(latitude=rng.uniform(-90, 90), longitude=rng.uniform(-180, 180))
        b = GeoPoint(latitude=rng.uniform(-90, 90), longitude=rng.uniform(-180, 180))
        assert distance_meters(a, b) == distance_meters(b, a)
        assert distance_meters(a, b) >= 0


def test_distance_known_values():
    # One degree of latitude on this sphere
    one_degree = 2 * math.pi * EARTH_RADIUS_M / 360
    assert distance_meters(GeoPoint(latitude=0, longitude=0), GeoPoint(latitude=1, longitude=0)) == pytest.approx(one_degree)

    # Tokyo to Paris is roughly 9,700 km
    assert distance_meters(TOKYO, PARIS) == pytest.approx(9_720_000, rel=0.01)


def test_distance_antipodal_does_not_raise():
    d = distance_meters(GeoPoint(latitude=0, longitude=0), GeoPoint(latitude=0, longitude=180))
    assert d == pytest.approx(math.pi * EARTH_RADIUS_M)


def test_distance_non_finite_propagates():
    assert math.isnan(distance_meters(GeoPoint(latitude=math.nan, longitude=0), TOKYO))
    assert math.isnan(distance_meters(TOKYO, GeoPoint(latitude=0, longitude=math.inf)))


class TestOffset:
    def test_round_trip_distance(self):
        rng = random.Random(42)
        for _ in range(300):
            origin = GeoPoint(latitude=rng.uniform(-80, 80), longitude=rng.uniform(-179, 179))
            d = rng.uniform(1, 10000)
            theta = rng.uniform(0, 2 * math.pi)
            assert distance_meters(origin, offset(origin, d, theta)) == pytest.approx(d, rel=1e-6, abs=1e-6)

    def test_bearing_directions(self):
        origin = GeoPoint(latitude=10.0, longitude=20.0)

        north = offset(origin, 1000, 0.0)
        assert north.latitude > origin.latitude
        assert north.longitude == pytest.approx(origin.longitude)

        east = offset(origin, 1000, math.pi / 2)
        assert east.longitude > origin.longitude

        south = offset(origin, 1000, math.pi)
        assert south.latitude < origin.latitude

        west = offset(origin, 1000, 3 * math.pi / 2)
        assert west.longitude < origin.longitude

    def test_bearing_taken_modulo_two_pi(self):
        origin = GeoPoint(latitude=-33.86, longitude=151.21)
        a = offset(origin, 500, math.pi / 4)
        b = offset(origin, 500, math.pi / 4 + 2 * math.pi)
        assert a.latitude == pytest.approx(b.latitude)
        assert a.longitude == pytest.approx(b.longitude)

    def test_zero_distance_returns_origin(self):
        moved = offset(TOKYO, 0.0, 1.0)
        assert moved.latitude == pytest.approx(TOKYO.latitude)
        assert moved.longitude == pytest.approx(TOKYO.longitude)

    def test_non_finite_propagates(self):
        moved = offset(TOKYO, math.inf, 0.0)
        assert math.isnan(moved.latitude)
        assert math.isnan(moved.longitude)
