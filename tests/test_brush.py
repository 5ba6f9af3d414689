"""Tests for brush dabs and pointer strokes."""

import math

import pytest
from circuit_field.core.brush import StrokeTracker, Viewport, apply_brush, falloff
from circuit_field.core.directions import FlowChannel
from circuit_field.core.flow_field import BrushMode, FlowField


class TestFalloff:
    """Test the smoothstep weighting."""

    def test_centre(self):
        assert falloff(0, 3) == 1.0

    def test_edge_and_beyond(self):
        assert falloff(3, 3) == 0.0
        assert falloff(4.5, 3) == 0.0

    def test_midpoint(self):
        assert falloff(1, 2) == pytest.approx(0.5)

    def test_monotonic(self):
        values = [falloff(d / 10, 2) for d in range(21)]
        assert all(a >= b for a, b in zip(values, values[1:]))

    def test_zero_radius(self):
        assert falloff(0, 0) == 0.0


class TestApplyBrush:
    """Test painting a single dab."""

    def test_radius_one_touches_centre_only(self):
        field = FlowField(10, 10)
        touched = apply_brush(field, 5.5, 5.5, FlowChannel.VERTICAL, radius=1, opacity=1.0)
        assert touched == 1
        assert field.get(5, 5, FlowChannel.VERTICAL) == 255
        assert field.get(6, 5, FlowChannel.VERTICAL) == 0

    def test_radius_two_profile(self):
        field = FlowField(10, 10)
        touched = apply_brush(field, 5.5, 5.5, FlowChannel.HORIZONTAL, radius=2, opacity=1.0)
        assert touched == 9
        assert field.get(5, 5, FlowChannel.HORIZONTAL) == 255
        assert field.get(6, 5, FlowChannel.HORIZONTAL) == 127
        assert field.get(5, 4, FlowChannel.HORIZONTAL) == 127
        assert field.get(6, 6, FlowChannel.HORIZONTAL) == 52
        assert field.get(7, 5, FlowChannel.HORIZONTAL) == 0

    def test_opacity_scales(self):
        field = FlowField(10, 10)
        apply_brush(field, 5.5, 5.5, FlowChannel.VERTICAL, radius=1, opacity=0.5)
        assert field.get(5, 5, FlowChannel.VERTICAL) == math.floor(0.5 * 255)

    def test_zero_opacity_paints_nothing(self):
        field = FlowField(10, 10)
        assert apply_brush(field, 5.5, 5.5, FlowChannel.VERTICAL, radius=3, opacity=0.0) == 0
        assert field.is_empty()

    def test_clipped_at_edge(self):
        field = FlowField(10, 10)
        touched = apply_brush(field, 0.5, 0.5, FlowChannel.VERTICAL, radius=2, opacity=1.0)
        assert touched == 4

    def test_repeated_dabs_saturate(self):
        field = FlowField(10, 10)
        for _ in range(5):
            apply_brush(field, 5.5, 5.5, FlowChannel.VERTICAL, radius=2, opacity=0.5)
        assert field.get(5, 5, FlowChannel.VERTICAL) == 255

    def test_eraser(self):
        field = FlowField(10, 10)
        field.add(5, 5, FlowChannel.VERTICAL, 100)
        field.add(6, 5, FlowChannel.VERTICAL, 100)
        apply_brush(field, 5.5, 5.5, FlowChannel.VERTICAL, radius=2, opacity=1.0, mode=BrushMode.ERASER)
        assert field.get(5, 5, FlowChannel.VERTICAL) == 0
        assert field.get(6, 5, FlowChannel.VERTICAL) == 0

    def test_other_channels_untouched(self):
        field = FlowField(10, 10)
        apply_brush(field, 5.5, 5.5, FlowChannel.DIAGONAL_NE_SW, radius=3, opacity=1.0)
        assert field.values[:, :, :3].sum() == 0


class TestViewport:
    """Test pixel to grid mapping."""

    def test_exact_fit(self):
        viewport = Viewport(width=90, height=90, cell_size=10, grid_width=10, grid_height=10)
        assert viewport.cell_extent() == pytest.approx((10.0, 10.0))
        assert viewport.pixel_to_grid(55, 25) == pytest.approx((5.5, 2.5))

    def test_stretched_grid(self):
        viewport = Viewport(width=95, height=90, cell_size=10, grid_width=11, grid_height=10)
        cw, _ = viewport.cell_extent()
        assert cw == pytest.approx(10 * 10.5 / 11)

    def test_contains(self):
        viewport = Viewport(width=90, height=90, cell_size=10, grid_width=10, grid_height=10)
        assert viewport.contains(1, 1)
        assert not viewport.contains(0, 10)
        assert not viewport.contains(90, 10)


class TestStrokeTracker:
    """Test stroke to dab conversion."""

    @pytest.fixture
    def tracker(self):
        field = FlowField(10, 10)
        viewport = Viewport(width=90, height=90, cell_size=10, grid_width=10, grid_height=10)
        return StrokeTracker(field, viewport)

    def brush(self, **extra):
        return dict(radius=1, opacity=1.0, mode=BrushMode.BRUSH, **extra)

    def test_begin_paints_horizontal(self, tracker):
        assert tracker.begin(55, 55, **self.brush())
        assert tracker.painting
        assert tracker.flow.get(5, 5, FlowChannel.HORIZONTAL) == 255

    def test_begin_outside_viewport(self, tracker):
        assert not tracker.begin(0, 40, **self.brush())
        assert not tracker.painting
        assert tracker.flow.is_empty()

    def test_begin_disabled(self, tracker):
        assert not tracker.begin(40, 40, enabled=False, **self.brush())
        assert tracker.flow.is_empty()

    def test_move_without_stroke(self, tracker):
        assert not tracker.move(40, 40, smoothing=0.3, **self.brush())
        assert tracker.flow.is_empty()

    def test_motion_sets_channel(self, tracker):
        tracker.begin(55, 55, **self.brush())
        assert tracker.move(75, 55, smoothing=0.3, **self.brush())
        assert tracker.angle == pytest.approx(0.0)
        assert tracker.flow.get(7, 5, FlowChannel.HORIZONTAL) == 255

    def test_angle_eases(self, tracker):
        tracker.begin(55, 55, **self.brush())
        tracker.move(75, 55, smoothing=0.3, **self.brush())
        tracker.move(75, 75, smoothing=0.3, **self.brush())

        assert tracker.angle == pytest.approx(0.3 * math.pi / 2)
        assert tracker.flow.get(7, 7, FlowChannel.DIAGONAL_NW_SE) == 255
        assert tracker.flow.get(7, 7, FlowChannel.VERTICAL) == 0

    def test_full_smoothing_follows_motion(self, tracker):
        tracker.begin(55, 55, **self.brush())
        tracker.move(75, 55, smoothing=1.0, **self.brush())
        tracker.move(75, 75, smoothing=1.0, **self.brush())
        assert tracker.flow.get(7, 7, FlowChannel.VERTICAL) == 255

    def test_shortest_arc(self, tracker):
        tracker.begin(55, 55, **self.brush())
        tracker.move(75, 54, smoothing=0.5, **self.brush())  # just above east
        tracker.move(75, 56, smoothing=0.5, **self.brush())  # heading south
        assert tracker.angle < math.pi / 2

    def test_tiny_motion_ignored(self, tracker):
        tracker.begin(55, 55, **self.brush())
        assert not tracker.move(55.05, 55.05, smoothing=0.3, **self.brush())
        assert tracker.angle is None

    def test_end(self, tracker):
        tracker.begin(55, 55, **self.brush())
        assert tracker.end()
        assert not tracker.painting
        assert not tracker.end()
