"""Repository classes for database access."""

from .meals import MealRepository
from .profiles import ProfileRepository
from .vitals import VitalsRepository

__all__ = ["MealRepository", "ProfileRepository", "VitalsRepository"]
