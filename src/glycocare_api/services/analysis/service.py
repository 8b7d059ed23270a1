"""Meal analysis service - runs the four pipeline stages in order."""

import logging
import random
from typing import Protocol

from fastapi import BackgroundTasks

from glycocare_api.models import (
    AnalysisResult,
    MealRecord,
    UserProfile,
    VitalsRecord,
    VitalsSnapshot,
)

from .advisory import (
    TemplateSelector,
    build_advice,
    classify_risk,
    generate_food_swaps,
    generate_tips,
)
from .classifier import DishClassifier
from .delta import GlucoseDeltaPredictor
from .portion import PortionEstimator

logger = logging.getLogger(__name__)


class ProfileStore(Protocol):
    """Read access to per-user physiological attributes."""

    async def get_profile(self, user_id: str) -> UserProfile | None: ...


class RecordWriter(Protocol):
    """Append-only time-series collection."""

    async def append(self, record: MealRecord | VitalsRecord) -> str: ...


class MealAnalysisService:
    """
    Meal glycemic-impact pipeline.

    Stages run strictly in sequence: classifier (hard dependency), portion
    and delta (soft dependencies with fallbacks), then the deterministic
    advisory stage. Records are written once at the end, after the response
    when the route hands over its BackgroundTasks; write failures are
    logged and never change the result.

    Usage:
        service = MealAnalysisService(classifier, portions, deltas, profiles, meals, vitals)
        result = await service.analyze(user_id, image_base64, vitals)
    """

    def __init__(
        self,
        classifier: DishClassifier,
        portion_estimator: PortionEstimator,
        delta_predictor: GlucoseDeltaPredictor,
        profiles: ProfileStore,
        meals: RecordWriter,
        vitals: RecordWriter,
        selector: TemplateSelector = random.choice,
        persist: bool = True,
    ):
        self.classifier = classifier
        self.portion_estimator = portion_estimator
        self.delta_predictor = delta_predictor
        self.profiles = profiles
        self.meals = meals
        self.vitals = vitals
        self.selector = selector
        self.persist = persist

    async def analyze(
        self,
        user_id: str,
        image: str,
        vitals: VitalsSnapshot,
        background_tasks: BackgroundTasks | None = None,
    ) -> AnalysisResult:
        """
        Analyze a meal photo against the caller's current vitals.

        Args:
            user_id: Authenticated caller
            image: Base64 image or data URL
            vitals: Current vital signs
            background_tasks: When given, records are written after the
                response is sent instead of before returning

        Returns:
            AnalysisResult

        Raises:
            ClassificationFailure: If the classifier is unavailable
        """
        profile = await self._load_profile(user_id)

        classification = await self.classifier.classify(image)
        dish = classification.dish_label

        portion = await self.portion_estimator.estimate_portion(image, dish)

        estimate = await self.delta_predictor.predict_delta(
            dish, portion.grams, vitals.glucose, profile
        )
        delta = estimate.delta

        tier = classify_risk(vitals.glucose, delta)
        advice = build_advice(tier, dish, delta, profile, self.selector)

        logger.info(
            f"Meal analysis for user {user_id}: dish={dish!r}, "
            f"portion={portion.grams} g ({portion.source.value}), "
            f"delta={delta} ({estimate.source.value}), tier={tier.value}"
        )

        result = AnalysisResult(
            dish=dish,
            portion_g=portion.grams,
            predicted_glucose_delta=delta,
            confidence=classification.confidence_percent,
            advice=advice,
            status=tier,
            tips=generate_tips(tier),
            food_swaps=generate_food_swaps(dish),
        )

        if self.persist:
            meal = MealRecord(
                user_id=user_id,
                dish_name=dish,
                portion_g=portion.grams,
                glucose_delta=delta,
                confidence=classification.confidence,
                advice=advice,
                status=tier,
            )
            reading = VitalsRecord.from_snapshot(user_id, vitals)
            if background_tasks is not None:
                background_tasks.add_task(self.save_records, meal, reading)
            else:
                await self.save_records(meal, reading)

        return result

    async def _load_profile(self, user_id: str) -> UserProfile:
        """Profile for the user, or neutral defaults when missing or unreadable."""
        try:
            profile = await self.profiles.get_profile(user_id)
        except Exception:
            logger.exception(f"Failed to load profile for user {user_id}, using defaults")
            return UserProfile()
        if profile is None:
            logger.debug(f"No profile for user {user_id}, using defaults")
            return UserProfile()
        return profile

    async def save_records(self, meal: MealRecord, reading: VitalsRecord) -> None:
        """Append the meal and vitals records. Failures are logged, never raised."""
        await self._save(self.meals, meal, "meal")
        await self._save(self.vitals, reading, "vitals")

    async def _save(
        self,
        writer: RecordWriter,
        record: MealRecord | VitalsRecord,
        kind: str,
    ) -> None:
        try:
            await writer.append(record)
        except Exception:
            logger.exception(f"Failed to save {kind} record")
