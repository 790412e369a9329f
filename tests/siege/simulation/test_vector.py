"""Unit tests for Vector3 and the ring placement helper."""

from __future__ import annotations

import math

import pytest

from siege.simulation.vector import ORIGIN, Vector3, distance, ring_point

pytestmark = pytest.mark.unit


class TestVector3:
    def test_distance(self):
        assert distance(ORIGIN, Vector3(3.0, 4.0, 0.0)) == pytest.approx(5.0)
        assert Vector3(1, 2, 3).distance_to(Vector3(1, 2, 3)) == 0.0

    def test_frozen(self):
        v = Vector3(1.0, 2.0, 3.0)
        with pytest.raises(AttributeError):
            v.x = 5.0  # type: ignore[misc]

    def test_offset_returns_new_value(self):
        v = Vector3(1.0, 0.0, 0.0)
        w = v.offset(dy=4.0)
        assert w == Vector3(1.0, 4.0, 0.0)
        assert v == Vector3(1.0, 0.0, 0.0)

    def test_lerp_endpoints(self):
        a = Vector3(0.0, 0.0, 0.0)
        b = Vector3(10.0, 4.0, -2.0)
        assert a.lerp(b, 0.0) == a
        assert a.lerp(b, 1.0) == b
        assert a.lerp(b, 0.5) == Vector3(5.0, 2.0, -1.0)

    def test_dict_round_trip(self):
        v = Vector3(1.5, -2.0, 3.25)
        assert Vector3.from_dict(v.to_dict()) == v
        assert Vector3.from_dict({}) == ORIGIN


class TestRingPoint:
    def test_radius_is_kept_on_ground_plane(self):
        center = Vector3(5.0, 1.0, -3.0)
        for i in range(8):
            p = ring_point(center, i / 8 * 2 * math.pi, 30.0)
            assert p.y == center.y
            assert distance(center, p) == pytest.approx(30.0)

    def test_angle_zero_points_along_x(self):
        p = ring_point(ORIGIN, 0.0, 2.0)
        assert p.x == pytest.approx(2.0)
        assert p.z == pytest.approx(0.0)
