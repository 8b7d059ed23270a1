"""Portion stage: grams of food on the plate."""

import logging
import random

from glycocare_api.models import EstimateSource, PortionEstimate
from glycocare_api.services.inference import (
    FieldNumber,
    InferenceClient,
    InferenceError,
    UnrecognizedShape,
    decode_numeric,
)
from glycocare_api.utils import round_half_up

logger = logging.getLogger(__name__)

FALLBACK_MIN_GRAMS = 200.0
FALLBACK_SPAN_GRAMS = 100.0
PORTION_FIELD = "portion_g"


def fallback_portion(rng: random.Random) -> float:
    """Draw a plausible portion uniformly from [200, 300) grams."""
    return FALLBACK_MIN_GRAMS + rng.random() * FALLBACK_SPAN_GRAMS


class PortionEstimator:
    """Soft dependency: every failure mode ends in the random fallback."""

    def __init__(
        self,
        client: InferenceClient,
        model_id: str,
        rng: random.Random | None = None,
    ):
        self.client = client
        self.model_id = model_id
        self.rng = rng or random.Random()

    async def estimate_portion(self, image: str, dish_label: str) -> PortionEstimate:
        """
        Estimate the portion weight. Never raises.

        Args:
            image: Base64 image or data URL
            dish_label: Dish name from the classifier stage

        Returns:
            PortionEstimate rounded to the nearest gram
        """
        grams = await self._query_model(image, dish_label)
        source = EstimateSource.MODEL

        if grams is None:
            grams = fallback_portion(self.rng)
            source = EstimateSource.FALLBACK
            logger.warning(f"Using fallback portion of {grams:.1f} g for {dish_label!r}")

        return PortionEstimate(grams=int(round_half_up(grams)), source=source)

    async def _query_model(self, image: str, dish_label: str) -> float | None:
        """Return the model's gram estimate, or None when it is unusable."""
        try:
            payload = await self.client.infer(
                self.model_id,
                {"image": image, "dish_name": dish_label},
            )
        except InferenceError as e:
            logger.warning(f"Portion estimation failed: {e.message}")
            return None

        decoded = decode_numeric(payload, PORTION_FIELD)
        if isinstance(decoded, UnrecognizedShape):
            logger.warning(f"Unrecognized portion response: {str(decoded.raw)[:200]}")
            return None

        # Anything that rounds below one gram counts as no estimate
        if round_half_up(decoded.value) < 1:
            logger.warning(f"Non-positive portion from model: {decoded.value}")
            return None

        shape = "object" if isinstance(decoded, FieldNumber) else "number"
        logger.info(f"Portion model returned {decoded.value} g ({shape})")
        return decoded.value
