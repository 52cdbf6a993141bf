"""Interactive toy-quantum simulation rendered on a 2D Qt canvas."""

__version__ = "0.1.0"
