"""
Meal analysis pipeline - classifier, portion, delta and advisory stages.
"""

from .advisory import (
    ADVICE_TEMPLATES,
    build_advice,
    classify_risk,
    generate_food_swaps,
    generate_tips,
)
from .classifier import ClassificationFailure, DishClassifier
from .delta import GlucoseDeltaPredictor, carb_fraction, carb_heuristic_delta
from .portion import PortionEstimator, fallback_portion
from .service import MealAnalysisService, ProfileStore, RecordWriter

__all__ = [
    "ADVICE_TEMPLATES",
    "build_advice",
    "classify_risk",
    "generate_food_swaps",
    "generate_tips",
    "ClassificationFailure",
    "DishClassifier",
    "GlucoseDeltaPredictor",
    "carb_fraction",
    "carb_heuristic_delta",
    "PortionEstimator",
    "fallback_portion",
    "MealAnalysisService",
    "ProfileStore",
    "RecordWriter",
]
