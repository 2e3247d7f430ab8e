"""Rhythm chain calculation engine."""

__version__ = "0.1.0"
