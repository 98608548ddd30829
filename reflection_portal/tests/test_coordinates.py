"""Tests for scale <-> canvas coordinate mapping."""

import pytest

from reflection_portal.matrix.coordinates import CoordinateMapper
from reflection_portal.matrix.scale import ScaleConfig


@pytest.fixture
def mapper():
    return CoordinateMapper(ScaleConfig())


def test_bounds_land_on_padding(mapper):
    assert mapper.x(-5) == 100
    assert mapper.x(5) == 900
    assert mapper.y(-5) == 900
    assert mapper.y(5) == 100


def test_midpoint_is_canvas_center(mapper):
    assert mapper.mid_x == 500
    assert mapper.mid_y == 500


def test_x_increasing_y_decreasing(mapper):
    values = [-5, -2.5, 0, 1, 4.9]
    xs = [mapper.x(v) for v in values]
    ys = [mapper.y(v) for v in values]
    assert xs == sorted(xs)
    assert ys == sorted(ys, reverse=True)


def test_round_trip(mapper):
    for v in (-5, -1.5, 0, 3.25, 5):
        assert mapper.value_at_x(mapper.x(v)) == pytest.approx(v)
        assert mapper.value_at_y(mapper.y(v)) == pytest.approx(v)


def test_out_of_range_maps_outside_plot(mapper):
    assert mapper.x(7) > 900
    assert mapper.y(-7) > 900


def test_custom_scale():
    m = CoordinateMapper(ScaleConfig(1, 5, 1))
    assert m.x(3) == 500
    assert m.y(1) == 900
