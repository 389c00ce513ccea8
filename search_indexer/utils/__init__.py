"""Utility functions package."""

from .ids import from_base62, to_base62

__all__ = [
    "from_base62",
    "to_base62",
]
