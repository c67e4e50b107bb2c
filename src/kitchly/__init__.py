"""Kitchly: conversational kitchen companion core."""

__version__ = "0.1.0"
