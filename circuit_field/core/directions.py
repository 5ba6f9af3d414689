"""
Compass directions and their mapping onto flow channels.

Directions are indexed clockwise starting at north-west, in screen
coordinates (y grows downwards):

    0 NW (-1,-1)   1 N (0,-1)   2 NE (1,-1)   3 E (1,0)
    4 SE (1, 1)    5 S (0, 1)   6 SW (-1,1)   7 W (-1,0)

Opposite directions share one undirected flow channel.
"""

import math
from enum import IntEnum
from typing import Tuple


class FlowChannel(IntEnum):
    """The four undirected flow accumulators stored per cell."""

    VERTICAL = 0
    HORIZONTAL = 1
    DIAGONAL_NW_SE = 2
    DIAGONAL_NE_SW = 3


DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
)

N_DIRECTIONS = len(DIRECTIONS)
N_CHANNELS = len(FlowChannel)

DIAGONAL_DIRECTIONS = frozenset((0, 2, 4, 6))

_CHANNEL_BY_DIRECTION = (
    FlowChannel.DIAGONAL_NW_SE,  # NW
    FlowChannel.VERTICAL,  # N
    FlowChannel.DIAGONAL_NE_SW,  # NE
    FlowChannel.HORIZONTAL,  # E
    FlowChannel.DIAGONAL_NW_SE,  # SE
    FlowChannel.VERTICAL,  # S
    FlowChannel.DIAGONAL_NE_SW,  # SW
    FlowChannel.HORIZONTAL,  # W
)


def channel_of(direction: int) -> FlowChannel:
    """Flow channel shared by ``direction`` and its opposite."""
    if not 0 <= direction < N_DIRECTIONS:
        raise ValueError(f"Direction index out of range: {direction}")
    return _CHANNEL_BY_DIRECTION[direction]


def offset_of(direction: int) -> Tuple[int, int]:
    """(dx, dy) step for a direction index (taken modulo 8)."""
    return DIRECTIONS[direction % N_DIRECTIONS]


def is_diagonal(direction: int) -> bool:
    return direction % N_DIRECTIONS in DIAGONAL_DIRECTIONS


def direction_from_angle(angle: float) -> int:
    """
    Direction index closest to a screen-space angle.

    ``angle`` is in radians as returned by ``atan2(dy, dx)``: 0 points
    east and pi/2 points south. East is index 3, hence the shift.
    Halfway angles round up, towards the next clockwise direction.
    """
    sector = math.floor(angle / (2 * math.pi / N_DIRECTIONS) + 0.5)
    return (sector + 3) % N_DIRECTIONS
