"""Search for static documentation sites."""

__version__ = "0.1.0"
