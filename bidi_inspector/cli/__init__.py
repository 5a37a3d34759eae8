"""Command line interface for bidi-inspector."""
