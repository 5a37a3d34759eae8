"""Version information for bidi-inspector."""

__version__ = "0.3.0"
