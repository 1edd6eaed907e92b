"""Spaced-repetition vocabulary scheduler."""

__version__ = "0.1.0"
