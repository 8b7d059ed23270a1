"""Tests for MealAnalysisService - the full four-stage pipeline."""

import json
import logging
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi import BackgroundTasks

from glycocare_api.models import EstimateSource, MealRecord, RiskTier, UserProfile, VitalsRecord
from glycocare_api.services.analysis import ClassificationFailure
from helpers import TINY_PNG_BASE64, build_service, model_router, respond


class TestMealAnalysisService:
    """End-to-end pipeline behavior with mocked models and stores."""

    @pytest.mark.asyncio
    async def test_all_models_available(self, sample_vitals):
        """Test the happy path uses every model's answer."""
        handler = model_router(
            classifier=respond([{"label": "pizza", "score": 0.912}]),
            portion=respond({"portion_g": 254.4}),
            regression=respond(18.0),
        )
        service = build_service(handler)

        result = await service.analyze("user-1", TINY_PNG_BASE64, sample_vitals)

        assert result.dish == "pizza"
        assert result.portion_g == 254
        assert result.predicted_glucose_delta == 18.0
        assert result.confidence == 91
        # 110 + 18 = 128, delta < 20
        assert result.status == RiskTier.NORMAL
        assert result.advice == (
            "Good choice! This meal should have a manageable impact on your "
            "glucose (+18 mg/dL)."
        )
        assert result.tips[0] == "Maintain this portion size"
        assert result.food_swaps == [
            "Add more leafy greens",
            "Use healthier cooking oils",
            "Reduce salt and sugar content",
        ]

    @pytest.mark.asyncio
    async def test_fallbacks_when_soft_models_down(self, sample_vitals):
        """Test portion and delta fall back while the classifier works."""
        handler = model_router(
            classifier=respond([{"label": "Chicken Biryani", "score": 0.8}]),
        )
        service = build_service(handler)

        result = await service.analyze("user-1", TINY_PNG_BASE64, sample_vitals)

        assert 200 <= result.portion_g <= 300
        expected_delta = round(result.portion_g * 0.5 * 0.15, 1)
        assert result.predicted_glucose_delta == pytest.approx(expected_delta, abs=0.051)
        assert result.food_swaps[0] == "Replace white rice with brown rice or quinoa"

    @pytest.mark.asyncio
    async def test_classifier_failure_aborts_without_records(self, sample_vitals):
        """Test a classifier 502 raises and no meal record is written."""
        meals = AsyncMock()
        vitals = AsyncMock()
        portion_calls = []

        def portion(request: httpx.Request) -> httpx.Response:
            portion_calls.append(request)
            return httpx.Response(200, json=200)

        handler = model_router(
            classifier=lambda request: httpx.Response(502, text="bad gateway"),
            portion=portion,
        )
        service = build_service(handler, meals=meals, vitals=vitals)

        with pytest.raises(ClassificationFailure):
            await service.analyze("user-1", TINY_PNG_BASE64, sample_vitals)

        meals.append.assert_not_awaited()
        vitals.append.assert_not_awaited()
        assert portion_calls == []

    @pytest.mark.asyncio
    async def test_empty_classification_still_runs_later_stages(self, sample_vitals):
        """Test an empty label list continues with dish "unknown"."""
        seen_dishes = []

        def portion(request: httpx.Request) -> httpx.Response:
            seen_dishes.append(json.loads(request.content)["inputs"]["dish_name"])
            return httpx.Response(200, json=230)

        handler = model_router(
            classifier=respond([]),
            portion=portion,
            regression=respond({"glucose_delta": 9.0}),
        )
        service = build_service(handler)

        result = await service.analyze("user-1", TINY_PNG_BASE64, sample_vitals)

        assert result.dish == "unknown"
        assert result.confidence == 0
        assert result.portion_g == 230
        assert result.predicted_glucose_delta == 9.0
        assert seen_dishes == ["unknown"]

    @pytest.mark.asyncio
    async def test_profile_drives_regression_and_advice(self, sample_vitals, diabetic_profile):
        """Test profile flags reach the heuristic and the advice notes."""
        handler = model_router(
            classifier=respond([{"label": "Chicken Biryani", "score": 0.7}]),
            portion=respond(300),
        )
        service = build_service(handler, profile=diabetic_profile)

        result = await service.analyze("user-1", TINY_PNG_BASE64, sample_vitals)

        assert result.predicted_glucose_delta == 33.8
        # 110 + 33.8 = 143.8
        assert result.status == RiskTier.BORDERLINE
        assert "blood pressure concerns" in result.advice
        assert "heart health" in result.advice

    @pytest.mark.asyncio
    async def test_tier_recomputed_from_final_delta(self, sample_vitals):
        """Test a model field named status is ignored for the tier."""
        handler = model_router(
            classifier=respond([{"label": "pasta", "score": 0.6}]),
            portion=respond(250),
            regression=respond({"glucose_delta": 45.0, "status": "normal"}),
        )
        service = build_service(handler)

        result = await service.analyze("user-1", TINY_PNG_BASE64, sample_vitals)

        assert result.status == RiskTier.HIGH

    @pytest.mark.asyncio
    async def test_records_written_after_success(self, sample_vitals):
        """Test one meal and one vitals record are appended."""
        meals = AsyncMock()
        vitals = AsyncMock()
        handler = model_router(
            classifier=respond([{"label": "dal", "score": 0.55}]),
            portion=respond(220),
            regression=respond(12.0),
        )
        service = build_service(handler, meals=meals, vitals=vitals)

        result = await service.analyze("user-9", TINY_PNG_BASE64, sample_vitals)

        meals.append.assert_awaited_once()
        meal = meals.append.await_args.args[0]
        assert isinstance(meal, MealRecord)
        assert meal.user_id == "user-9"
        assert meal.dish_name == "dal"
        assert meal.confidence == pytest.approx(0.55)
        assert meal.advice == result.advice
        assert meal.status == result.status

        vitals.append.assert_awaited_once()
        reading = vitals.append.await_args.args[0]
        assert isinstance(reading, VitalsRecord)
        assert reading.glucose_level == 110.0
        assert reading.bp_systolic == 120
        assert reading.heart_rate == 72

    @pytest.mark.asyncio
    async def test_persistence_failure_does_not_fail_request(self, sample_vitals):
        """Test a failing store is logged and the result still returned."""
        meals = AsyncMock()
        meals.append.side_effect = RuntimeError("mongo down")
        vitals = AsyncMock()
        handler = model_router(
            classifier=respond([{"label": "dal", "score": 0.55}]),
            portion=respond(220),
            regression=respond(12.0),
        )
        service = build_service(handler, meals=meals, vitals=vitals)

        result = await service.analyze("user-1", TINY_PNG_BASE64, sample_vitals)

        assert result.dish == "dal"
        vitals.append.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_persistence_can_be_disabled(self, sample_vitals):
        """Test persist=False skips both writes."""
        meals = AsyncMock()
        vitals = AsyncMock()
        handler = model_router(classifier=respond([{"label": "dal", "score": 0.5}]))
        service = build_service(handler, meals=meals, vitals=vitals)
        service.persist = False

        await service.analyze("user-1", TINY_PNG_BASE64, sample_vitals)

        meals.append.assert_not_awaited()
        vitals.append.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_background_tasks_defer_records(self, sample_vitals):
        """Test records are written only when the scheduled tasks run."""
        meals = AsyncMock()
        vitals = AsyncMock()
        handler = model_router(
            classifier=respond([{"label": "dal", "score": 0.55}]),
            portion=respond(220),
            regression=respond(12.0),
        )
        service = build_service(handler, meals=meals, vitals=vitals)
        background_tasks = BackgroundTasks()

        result = await service.analyze("user-1", TINY_PNG_BASE64, sample_vitals, background_tasks)

        assert result.dish == "dal"
        meals.append.assert_not_awaited()
        assert len(background_tasks.tasks) == 1

        await background_tasks()

        meals.append.assert_awaited_once()
        vitals.append.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_profile_store_failure_uses_defaults(self, sample_vitals):
        """Test an unreadable profile store falls back to the neutral profile."""
        seen = {}

        def regression(request: httpx.Request) -> httpx.Response:
            seen.update(json.loads(request.content)["inputs"])
            return httpx.Response(200, json=12.0)

        handler = model_router(
            classifier=respond([{"label": "dal", "score": 0.55}]),
            portion=respond(220),
            regression=regression,
        )
        service = build_service(handler)
        service.profiles.get_profile.side_effect = RuntimeError("mongo down")

        result = await service.analyze("user-1", TINY_PNG_BASE64, sample_vitals)

        assert result.predicted_glucose_delta == 12.0
        assert seen["age"] == 30
        assert seen["has_diabetes"] is False

    @pytest.mark.asyncio
    async def test_oversized_regression_value_keeps_default(self, sample_vitals):
        """Test a finite value too large to round is treated as unreadable."""
        handler = model_router(
            classifier=respond([{"label": "dal", "score": 0.55}]),
            portion=respond(220),
            regression=respond(1e308),
        )
        service = build_service(handler)

        result = await service.analyze("user-1", TINY_PNG_BASE64, sample_vitals)

        assert result.predicted_glucose_delta == 15.0
        estimate = await service.delta_predictor.predict_delta("dal", 220, 110.0, UserProfile())
        assert estimate.source == EstimateSource.DEFAULT

    @pytest.mark.asyncio
    async def test_completion_log_names_user_dish_and_sources(self, sample_vitals, caplog):
        """Test the summary line carries its values in the message text."""
        handler = model_router(classifier=respond([{"label": "dal", "score": 0.55}]))
        service = build_service(handler)

        with caplog.at_level(logging.INFO, logger="glycocare_api.services.analysis.service"):
            await service.analyze("user-7", TINY_PNG_BASE64, sample_vitals)

        summary = next(r.getMessage() for r in caplog.records if "user-7" in r.getMessage())
        assert "dish='dal'" in summary
        assert "(fallback)" in summary
