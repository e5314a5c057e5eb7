"""Alias party-game turn timer."""

__version__ = "1.0.0"
