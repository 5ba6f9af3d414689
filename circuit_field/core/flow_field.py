"""
Flow field: painted directional strengths that bias wire growth.

Each grid cell carries four independent 8-bit saturating counters, one
per undirected flow channel (see ``directions.FlowChannel``). Values are
stored in a ``uint8`` array of shape ``(width, height, 4)``; callers go
through the accessors below, which clamp to [0, 255] and treat any
out-of-bounds coordinate as an empty cell.
"""

from enum import Enum
from typing import Tuple

import numpy as np
import structlog

from .directions import N_CHANNELS

logger = structlog.get_logger()

MAX_STRENGTH = 255


class BrushMode(str, Enum):
    """Whether a brush dab adds to or removes from the field."""

    BRUSH = "brush"
    ERASER = "eraser"


class FlowField:
    """Per-cell 4-channel flow strengths for a ``width x height`` grid."""

    def __init__(self, width: int = 0, height: int = 0):
        self.width = width
        self.height = height
        self.values = np.zeros((width, height, N_CHANNELS), dtype=np.uint8)

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    @staticmethod
    def _check_channel(channel: int) -> int:
        if not 0 <= channel < N_CHANNELS:
            raise ValueError(f"Flow channel out of range: {channel}")
        return int(channel)

    def get(self, x: int, y: int, channel: int) -> int:
        """Strength of ``channel`` at (x, y); 0 outside the grid."""
        channel = self._check_channel(channel)
        if not self._in_bounds(x, y):
            return 0
        return int(self.values[x, y, channel])

    def _store(self, x: int, y: int, channel: int, value: int) -> None:
        self.values[x, y, channel] = min(MAX_STRENGTH, max(0, value))

    def add(self, x: int, y: int, channel: int, amount: int) -> None:
        """Raise a channel by ``amount``, saturating at 255."""
        channel = self._check_channel(channel)
        if not self._in_bounds(x, y):
            return
        self._store(x, y, channel, int(self.values[x, y, channel]) + int(amount))

    def subtract(self, x: int, y: int, channel: int, amount: int) -> None:
        """Lower a channel by ``amount``, saturating at 0."""
        channel = self._check_channel(channel)
        if not self._in_bounds(x, y):
            return
        self._store(x, y, channel, int(self.values[x, y, channel]) - int(amount))

    def paint(self, x: int, y: int, channel: int, amount: int, mode: BrushMode = BrushMode.BRUSH) -> None:
        """Apply one brush contribution using ``mode``."""
        if BrushMode(mode) is BrushMode.BRUSH:
            self.add(x, y, channel, amount)
        else:
            self.subtract(x, y, channel, amount)

    def resize(self, width: int, height: int) -> None:
        """
        Reallocate for new dimensions.

        Values inside the overlap of the old and new grids are kept,
        everything else starts at 0.
        """
        if (width, height) == (self.width, self.height):
            return

        resized = np.zeros((width, height, N_CHANNELS), dtype=np.uint8)
        keep_w = min(width, self.width)
        keep_h = min(height, self.height)
        resized[:keep_w, :keep_h] = self.values[:keep_w, :keep_h]

        logger.debug(
            "Flow field resized",
            old_size=(self.width, self.height),
            new_size=(width, height),
        )
        self.width = width
        self.height = height
        self.values = resized

    def reset(self) -> None:
        """Zero every channel of every cell."""
        self.values.fill(0)
        logger.debug("Flow field reset", size=(self.width, self.height))

    # Read-only views for renderers and the API

    def strengths(self, x: int, y: int) -> Tuple[int, int, int, int]:
        if not self._in_bounds(x, y):
            return (0, 0, 0, 0)
        return tuple(int(v) for v in self.values[x, y])

    def packed(self, x: int, y: int) -> int:
        """All four channels of a cell as one 32-bit word, channel ``c`` at bit ``8*c``."""
        return sum(s << (8 * c) for c, s in enumerate(self.strengths(x, y)))

    def is_empty(self) -> bool:
        return not self.values.any()

    def nonzero_cells(self):
        """Yield ``(x, y, strengths)`` for every cell with any flow."""
        xs, ys = np.nonzero(self.values.any(axis=2))
        for x, y in zip(xs.tolist(), ys.tolist()):
            yield x, y, self.strengths(x, y)
