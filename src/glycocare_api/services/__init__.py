"""Service layer - business logic and external service clients."""

from .analysis import ClassificationFailure, MealAnalysisService
from .identity import IdentityProvider, get_identity_provider

__all__ = [
    "ClassificationFailure",
    "MealAnalysisService",
    "IdentityProvider",
    "get_identity_provider",
]
