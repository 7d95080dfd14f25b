"""Tier clustering and draft strategy simulation for 9-category fantasy basketball."""

__version__ = "0.1.0"
