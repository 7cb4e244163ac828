"""Unit tests for the stroke primitives."""

import numpy as np

from patternforge.core.buffer import PixelBuffer
from patternforge.core.drawing import (
    add_at,
    brush,
    disc_offsets,
    half_up,
    line_points,
    plot,
    polygon_points,
    ring_points,
    round_half_up,
    segment,
)


class TestRounding:
    """Tests for half-up rounding."""

    def test_half_up_scalar(self):
        """Test that halves round toward positive infinity."""
        assert half_up(2.5) == 3
        assert half_up(-2.5) == -2
        assert half_up(2.49) == 2

    def test_round_half_up_array(self):
        result = round_half_up([0.5, 1.5, -0.5, -1.6])
        assert result.tolist() == [1, 2, 0, -2]
        assert result.dtype == np.intp


class TestLines:
    """Tests for Bresenham lines and outlines."""

    def test_includes_both_endpoints(self):
        """Test that a horizontal line covers every pixel between endpoints."""
        xs, ys = line_points(2, 3, 6, 3)
        assert xs.tolist() == [2, 3, 4, 5, 6]
        assert ys.tolist() == [3, 3, 3, 3, 3]

    def test_diagonal(self):
        xs, ys = line_points(0, 0, 3, 3)
        assert list(zip(xs.tolist(), ys.tolist())) == [(0, 0), (1, 1), (2, 2), (3, 3)]

    def test_reversed_direction(self):
        """Test that lines run from the first endpoint to the second."""
        xs, ys = line_points(4, 0, 0, 2)
        assert (xs[0], ys[0]) == (4, 0)
        assert (xs[-1], ys[-1]) == (0, 2)

    def test_single_point(self):
        xs, ys = line_points(5, 5, 5, 5)
        assert xs.tolist() == [5]
        assert ys.tolist() == [5]

    def test_segment_rounds_endpoints(self):
        """Test that float endpoints are rounded half up first."""
        xs, ys = segment(0.5, 0.4, 2.4, 0.4)
        assert xs.tolist() == [1, 2]
        assert ys.tolist() == [0, 0]

    def test_polygon_is_closed(self):
        """Test that the last vertex joins back to the first."""
        xs, ys = polygon_points([0, 4, 4], [0, 0, 4])
        points = set(zip(xs.tolist(), ys.tolist()))
        assert {(0, 0), (4, 0), (4, 4), (2, 2)} <= points

    def test_ring_points_radius(self):
        xs, ys = ring_points(10, 10, 5, 5, 0.1)
        assert (xs[0], ys[0]) == (15, 10)
        distance = np.sqrt((xs - 10) ** 2 + (ys - 10) ** 2)
        assert np.all(np.abs(distance - 5) <= 1)


class TestBrush:
    """Tests for disc offsets and brush expansion."""

    def test_disc_radius_one(self):
        """Test that a radius-1 disc is a plus shape."""
        dx, dy = disc_offsets(1)
        assert sorted(zip(dx.tolist(), dy.tolist())) == [
            (-1, 0),
            (0, -1),
            (0, 0),
            (0, 1),
            (1, 0),
        ]

    def test_disc_radius_zero(self):
        dx, dy = disc_offsets(0)
        assert dx.tolist() == [0]
        assert dy.tolist() == [0]

    def test_brush_single_point(self):
        """Test that one point expands to a full disc around it."""
        xs, ys = brush([3], [4], 1)
        assert sorted(zip(xs.tolist(), ys.tolist())) == [(2, 4), (3, 3), (3, 4), (3, 5), (4, 4)]

    def test_brush_merges_duplicate_points(self):
        """Test that repeated path points are stamped once."""
        xs, ys = brush([3, 3], [4, 4], 0)
        assert xs.tolist() == [3]
        assert ys.tolist() == [4]


class TestPlotting:
    """Tests for clipped writes."""

    def test_plot_drops_outside_points(self, small_buffer):
        """Test that off-buffer points are ignored."""
        plot(small_buffer, [-5, 2, 100], [0, 2, 0], 200)
        assert small_buffer.get(2, 2) == (200, 200, 200, 0)
        assert small_buffer.pixels[..., :3].sum() == 200 * 3

    def test_plot_rgb_triple(self, small_buffer):
        plot(small_buffer, [1, 2], [1, 1], (10, 20, 30))
        assert small_buffer.get(1, 1)[:3] == (10, 20, 30)
        assert small_buffer.get(2, 1)[:3] == (10, 20, 30)

    def test_plot_per_point_rows(self, small_buffer):
        """Test that per-point colors stay aligned after clipping."""
        colors = np.array([[1, 1, 1], [2, 2, 2], [3, 3, 3]])
        plot(small_buffer, [-1, 5, 6], [0, 0, 0], colors)
        assert small_buffer.get(5, 0)[:3] == (2, 2, 2)
        assert small_buffer.get(6, 0)[:3] == (3, 3, 3)

    def test_add_at_clamps(self, small_buffer):
        """Test that additive writes saturate at 255."""
        small_buffer.set(3, 3, 250, 100, 0)
        add_at(small_buffer, [3, 60], [3, 3], (10.0, 10.0, -5.0))
        assert small_buffer.get(3, 3)[:3] == (255, 110, 0)
