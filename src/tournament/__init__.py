"""Cricket tournament data service."""

__version__ = "0.1.0"
