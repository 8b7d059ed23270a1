"""Shared test helpers: mock inference transport and service wiring."""

import random
from collections.abc import Callable
from unittest.mock import AsyncMock

import httpx

from glycocare_api.models import UserProfile
from glycocare_api.services.analysis import (
    DishClassifier,
    GlucoseDeltaPredictor,
    MealAnalysisService,
    PortionEstimator,
)
from glycocare_api.services.inference import InferenceClient

INFERENCE_URL = "http://inference.test/models"
CLASSIFIER_MODEL = "org/food-classifier"
PORTION_MODEL = "org/portion-estimator"
REGRESSION_MODEL = "org/glucose-regression"

# Sample test image (1x1 red pixel PNG)
TINY_PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8DwHwAFBQIAX8jx0gAAAABJRU5ErkJggg=="
)

Handler = Callable[[httpx.Request], httpx.Response]


def make_inference_client(handler: Handler) -> InferenceClient:
    """InferenceClient whose HTTP calls are answered by `handler`."""
    return InferenceClient(
        base_url=INFERENCE_URL,
        token="test-token",
        timeout=1.0,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def model_router(
    classifier: Handler | None = None,
    portion: Handler | None = None,
    regression: Handler | None = None,
) -> Handler:
    """
    Route requests to per-model handlers.

    Models without a handler answer 503, which exercises the fallbacks.
    """
    routes = {
        CLASSIFIER_MODEL: classifier,
        PORTION_MODEL: portion,
        REGRESSION_MODEL: regression,
    }

    def handler(request: httpx.Request) -> httpx.Response:
        model_id = request.url.path.removeprefix("/models/")
        route = routes.get(model_id)
        if route is None:
            return httpx.Response(503, text="model loading")
        return route(request)

    return handler


def respond(body, status_code: int = 200) -> Handler:
    """Handler that always answers with `body` as JSON."""
    return lambda request: httpx.Response(status_code, json=body)


def first_template(templates):
    """Deterministic template selector."""
    return templates[0]


def build_service(
    handler: Handler,
    profile: UserProfile | None = None,
    meals: AsyncMock | None = None,
    vitals: AsyncMock | None = None,
    seed: int = 7,
) -> MealAnalysisService:
    """MealAnalysisService over a mock transport and mocked stores."""
    client = make_inference_client(handler)
    profiles = AsyncMock()
    profiles.get_profile.return_value = profile

    return MealAnalysisService(
        classifier=DishClassifier(client, CLASSIFIER_MODEL),
        portion_estimator=PortionEstimator(client, PORTION_MODEL, rng=random.Random(seed)),
        delta_predictor=GlucoseDeltaPredictor(client, REGRESSION_MODEL),
        profiles=profiles,
        meals=meals if meals is not None else AsyncMock(),
        vitals=vitals if vitals is not None else AsyncMock(),
        selector=first_template,
    )
