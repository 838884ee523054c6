"""Kobo to Calibre highlight sync."""

__version__ = "1.0.0"
