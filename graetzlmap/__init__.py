"""Grätzlmap: Vienna neighborhood map backend."""

__version__ = "1.0.0"
