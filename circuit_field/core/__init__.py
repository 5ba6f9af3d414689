"""
Core field generation functionality.

``field_generator`` is imported directly (it depends on ``config``).
"""

from .alea_prng import AleaPRNG
from .directions import DIRECTIONS, FlowChannel, channel_of, direction_from_angle
from .flow_field import BrushMode, FlowField
from .grid_occupancy import Cell, GridOccupancy, grid_dimensions
from .wire_generator import Wire, WireGenerator, WireOptions
from .brush import StrokeTracker, Viewport, apply_brush, falloff

__all__ = ['AleaPRNG', 'DIRECTIONS', 'FlowChannel', 'channel_of', 'direction_from_angle',
           'BrushMode', 'FlowField', 'Cell', 'GridOccupancy', 'grid_dimensions',
           'Wire', 'WireGenerator', 'WireOptions',
           'StrokeTracker', 'Viewport', 'apply_brush', 'falloff']
