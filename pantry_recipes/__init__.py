"""Pantry-based recipe suggestions from interchangeable recipe providers."""

__version__ = "0.1.0"
