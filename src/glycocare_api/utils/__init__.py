"""Utility functions."""

from .dates import utc_now
from .numbers import is_number, round_half_up

__all__ = ["utc_now", "is_number", "round_half_up"]
