"""Classifier stage: dish label and confidence from a meal photo."""

import logging
from typing import Any

from glycocare_api.models import ClassificationResult
from glycocare_api.services.inference import InferenceClient, InferenceError
from glycocare_api.utils import is_number

logger = logging.getLogger(__name__)

UNKNOWN_DISH = "unknown"


class ClassificationFailure(Exception):
    """The classifier could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class DishClassifier:
    """Top-1 food classification. Hard dependency: failures are not recovered."""

    def __init__(self, client: InferenceClient, model_id: str):
        self.client = client
        self.model_id = model_id

    async def classify(self, image: str) -> ClassificationResult:
        """
        Classify the dish in an image.

        Args:
            image: Base64 image or data URL, passed through to the model

        Returns:
            ClassificationResult; dish "unknown" with confidence 0 when the
            model returns no labels

        Raises:
            ClassificationFailure: On transport error, timeout, non-2xx
                status or a non-JSON body
        """
        try:
            payload = await self.client.infer(self.model_id, image)
        except InferenceError as e:
            logger.error(f"Classification failed: {e.message}")
            raise ClassificationFailure(e.message, status_code=e.status_code) from e

        result = self._parse_response(payload)
        logger.info(
            f"Classified dish as {result.dish_label!r} "
            f"(confidence {result.confidence:.2f})"
        )
        return result

    def _parse_response(self, payload: Any) -> ClassificationResult:
        """Take the first `{label, score}` entry of the response list."""
        if not isinstance(payload, list) or not payload:
            logger.warning("Classifier returned no labels, using unknown dish")
            return ClassificationResult(dish_label=UNKNOWN_DISH, confidence=0.0)

        top = payload[0]
        if not isinstance(top, dict):
            logger.warning(f"Unexpected classifier entry: {top!r}")
            return ClassificationResult(dish_label=UNKNOWN_DISH, confidence=0.0)

        label = top.get("label")
        score = top.get("score")
        confidence = min(max(float(score), 0.0), 1.0) if is_number(score) else 0.0

        return ClassificationResult(
            dish_label=str(label) if label else UNKNOWN_DISH,
            confidence=confidence,
        )
