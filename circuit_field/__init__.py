"""Procedural circuit-trace fields grown over a paintable flow field."""

__version__ = "0.1.0"
