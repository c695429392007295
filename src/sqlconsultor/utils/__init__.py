"""Utility helpers for sqlconsultor."""

from sqlconsultor.utils.decorators import traced

__all__ = [
    "traced",
]
