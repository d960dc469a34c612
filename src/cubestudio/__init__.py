"""Cube Studio: frame editor for 3x3x3 LED cubes."""

__version__ = "0.1.0"
