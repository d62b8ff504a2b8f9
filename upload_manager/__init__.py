"""Object storage upload manager."""

__version__ = "1.0.0"
