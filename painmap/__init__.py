"""Pain map summary generation."""

__version__ = "0.1.0"
