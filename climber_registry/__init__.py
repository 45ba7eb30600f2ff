"""Interactive record manager for a roster of climbers."""

__version__ = "0.1.0"
