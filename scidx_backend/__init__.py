"""Script index builder backend."""

__version__ = "0.3.0"
