"""
Raster output for generated fields.
"""

from .renderer import render_field

__all__ = ['render_field']
