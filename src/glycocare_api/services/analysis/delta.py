"""
Delta stage: predicted blood-glucose change for a meal.

The regression model is tried first. When it cannot be reached the
carbohydrate heuristic takes over; when it answers 2xx with a body we
cannot read, the stage keeps its default delta instead.
"""

import logging
import math

from glycocare_api.models import EstimateSource, GlucoseDeltaEstimate, UserProfile
from glycocare_api.services.inference import (
    InferenceClient,
    InferenceError,
    UnrecognizedShape,
    decode_numeric,
)
from glycocare_api.utils import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_DELTA = 15.0
DELTA_FIELD = "glucose_delta"
DELTA_DECIMALS = 1

# Checked in order, first match wins
HIGH_CARB_KEYWORDS = ("biryani", "rice", "pasta", "bread", "noodles", "potato", "pizza")
MEDIUM_CARB_KEYWORDS = ("chicken", "fish", "curry", "dal", "beans")

HIGH_CARB_FRACTION = 0.5
MEDIUM_CARB_FRACTION = 0.3
DEFAULT_CARB_FRACTION = 0.2

GLUCOSE_PER_CARB_GRAM = 0.15
DIABETIC_MULTIPLIER = 1.5


def carb_fraction(dish: str) -> float:
    """Share of the portion assumed to be carbohydrate, from the dish name."""
    dish_lower = dish.lower()
    if any(keyword in dish_lower for keyword in HIGH_CARB_KEYWORDS):
        return HIGH_CARB_FRACTION
    if any(keyword in dish_lower for keyword in MEDIUM_CARB_KEYWORDS):
        return MEDIUM_CARB_FRACTION
    return DEFAULT_CARB_FRACTION


def carb_heuristic_delta(dish: str, portion_g: float, has_diabetes: bool) -> float:
    """
    Rule-based glucose delta (unrounded).

    Example: 300 g of "Chicken Biryani" -> 150 g carbs -> 22.5 mg/dL,
    or 33.75 mg/dL with a diabetes diagnosis.
    """
    carb_grams = portion_g * carb_fraction(dish)
    multiplier = DIABETIC_MULTIPLIER if has_diabetes else 1.0
    return carb_grams * GLUCOSE_PER_CARB_GRAM * multiplier


class GlucoseDeltaPredictor:
    """Soft dependency on the glucose regression model."""

    def __init__(self, client: InferenceClient, model_id: str):
        self.client = client
        self.model_id = model_id

    async def predict_delta(
        self,
        dish: str,
        portion_g: int,
        current_glucose: float,
        profile: UserProfile,
    ) -> GlucoseDeltaEstimate:
        """
        Predict the glucose delta. Never raises.

        Args:
            dish: Dish label
            portion_g: Portion in grams
            current_glucose: Current glucose in mg/dL
            profile: User profile (neutral defaults when the user has none)

        Returns:
            GlucoseDeltaEstimate rounded to one decimal
        """
        inputs = {
            "dish_name": dish,
            "portion_g": portion_g,
            "current_glucose": current_glucose,
            "age": profile.age,
            "weight": profile.weight,
            "has_diabetes": profile.has_diabetes,
        }

        try:
            payload = await self.client.infer(self.model_id, inputs)
        except InferenceError as e:
            if e.is_transport_error:
                delta = carb_heuristic_delta(dish, portion_g, profile.has_diabetes)
                logger.warning(
                    f"Glucose regression failed ({e.message}), "
                    f"carbohydrate heuristic gives {delta:.2f}"
                )
                return self._estimate(delta, EstimateSource.FALLBACK)
            logger.warning(f"Glucose regression body unreadable, keeping {DEFAULT_DELTA}")
            return self._estimate(DEFAULT_DELTA, EstimateSource.DEFAULT)

        decoded = decode_numeric(payload, DELTA_FIELD)
        # Finite but too large to round counts as unreadable
        if not isinstance(decoded, UnrecognizedShape) and not math.isfinite(
            decoded.value * 10**DELTA_DECIMALS
        ):
            decoded = UnrecognizedShape(payload)
        if isinstance(decoded, UnrecognizedShape):
            logger.warning(
                f"Unrecognized regression response {str(decoded.raw)[:200]}, "
                f"keeping {DEFAULT_DELTA}"
            )
            return self._estimate(DEFAULT_DELTA, EstimateSource.DEFAULT)

        logger.info(f"Glucose regression predicted delta {decoded.value}")
        return self._estimate(decoded.value, EstimateSource.MODEL)

    @staticmethod
    def _estimate(delta: float, source: EstimateSource) -> GlucoseDeltaEstimate:
        return GlucoseDeltaEstimate(delta=round_half_up(delta, DELTA_DECIMALS), source=source)
