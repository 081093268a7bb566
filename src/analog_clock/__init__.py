"""Analog Clock - a self-updating analog clock face built from vector primitives."""

__version__ = "0.1.0"
