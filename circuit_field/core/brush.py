"""
Brush painting into the flow field.

A dab paints one flow channel into every cell within ``radius`` of a
fractional grid position, scaled by a smoothstep falloff from the
centre. ``StrokeTracker`` turns a sequence of pointer positions (in
pixels) into dabs, deriving the channel from the eased direction of
pointer motion.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import structlog

from .directions import FlowChannel, channel_of, direction_from_angle
from .flow_field import MAX_STRENGTH, BrushMode, FlowField

logger = structlog.get_logger()

TWO_PI = 2 * math.pi

# Pointer moves smaller than this on both axes do not update the angle
MIN_POINTER_MOVE = 0.1


def falloff(dist: float, radius: float) -> float:
    """Smoothstep weight: 1 at the centre, 0 at and beyond ``radius``."""
    if radius <= 0 or dist >= radius:
        return 0.0
    t = 1 - dist / radius
    return t * t * (3 - 2 * t)


def apply_brush(
    flow: FlowField,
    center_x: float,
    center_y: float,
    channel: int,
    radius: int,
    opacity: float,
    mode: BrushMode = BrushMode.BRUSH,
) -> int:
    """
    Paint one dab centred on fractional grid coordinates.

    Args:
        flow: Field to modify
        center_x: Grid x of the dab centre (may be fractional)
        center_y: Grid y of the dab centre
        channel: Flow channel to paint
        radius: Brush radius in cells
        opacity: 0..1, scaled to at most 255 per dab
        mode: Add (brush) or subtract (eraser)

    Returns:
        Number of cells that received a non-zero amount
    """
    radius = int(radius)
    radius_sq = radius * radius
    touched = 0

    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            dist_sq = dx * dx + dy * dy
            if dist_sq > radius_sq:
                continue

            gx = math.floor(center_x + dx)
            gy = math.floor(center_y + dy)
            if not (0 <= gx < flow.width and 0 <= gy < flow.height):
                continue

            amount = math.floor(opacity * falloff(math.sqrt(dist_sq), radius) * MAX_STRENGTH)
            if amount > 0:
                flow.paint(gx, gy, channel, amount, mode)
                touched += 1

    logger.debug(
        "Brush dab",
        center=(center_x, center_y),
        channel=int(channel),
        mode=BrushMode(mode).value,
        cells=touched,
    )
    return touched


@dataclass
class Viewport:
    """Pixel size of the drawing surface and how it maps onto the grid."""

    width: float
    height: float
    cell_size: float
    grid_width: int
    grid_height: int

    def cell_extent(self) -> Tuple[float, float]:
        """On-screen size of one cell; the grid is stretched to fill the viewport."""
        sx = (1 + self.width / self.cell_size) / self.grid_width
        sy = (1 + self.height / self.cell_size) / self.grid_height
        return self.cell_size * sx, self.cell_size * sy

    def pixel_to_grid(self, px: float, py: float) -> Tuple[float, float]:
        cw, ch = self.cell_extent()
        return px / cw, py / ch

    def contains(self, px: float, py: float) -> bool:
        return 0 < px < self.width and 0 < py < self.height


class StrokeTracker:
    """
    Converts pointer strokes into brush dabs.

    The first dab of a stroke paints the horizontal channel. Later dabs
    use the channel of the smoothed motion angle, eased towards each new
    heading along the shortest arc by ``angle_smoothing``.
    """

    def __init__(self, flow: FlowField, viewport: Viewport):
        self.flow = flow
        self.viewport = viewport
        self.painting = False
        self.angle: Optional[float] = None
        self.last_x: Optional[float] = None
        self.last_y: Optional[float] = None

    def _dab(self, px: float, py: float, channel: int, radius: int, opacity: float, mode: BrushMode) -> int:
        gx, gy = self.viewport.pixel_to_grid(px, py)
        return apply_brush(self.flow, gx, gy, channel, radius, opacity, mode)

    def begin(self, px: float, py: float, radius: int, opacity: float, mode: BrushMode, enabled: bool = True) -> bool:
        """Start a stroke; returns True if a dab was painted."""
        if not enabled or not self.viewport.contains(px, py):
            return False

        self.painting = True
        self.angle = None
        self.last_x, self.last_y = px, py
        self._dab(px, py, FlowChannel.HORIZONTAL, radius, opacity, mode)
        return True

    def move(
        self,
        px: float,
        py: float,
        radius: int,
        opacity: float,
        mode: BrushMode,
        smoothing: float,
        enabled: bool = True,
    ) -> bool:
        """Continue a stroke; returns True if a dab was painted."""
        if not self.painting or not enabled or self.last_x is None:
            self.last_x, self.last_y = px, py
            return False

        dx = px - self.last_x
        dy = py - self.last_y
        painted = False

        if abs(dx) > MIN_POINTER_MOVE or abs(dy) > MIN_POINTER_MOVE:
            heading = math.atan2(dy, dx) % TWO_PI
            if self.angle is None:
                self.angle = heading
            else:
                diff = heading - self.angle
                if diff > math.pi:
                    diff -= TWO_PI
                if diff < -math.pi:
                    diff += TWO_PI
                self.angle = (self.angle + diff * smoothing) % TWO_PI

            channel = channel_of(direction_from_angle(self.angle))
            self._dab(px, py, channel, radius, opacity, mode)
            painted = True

        self.last_x, self.last_y = px, py
        return painted

    def end(self) -> bool:
        """Finish the stroke; returns whether one was in progress."""
        was_painting = self.painting
        self.painting = False
        self.angle = None
        self.last_x = None
        self.last_y = None
        return was_painting
