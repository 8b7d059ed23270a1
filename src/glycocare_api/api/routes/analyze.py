"""Meal analysis API routes.

Accepts a meal photo plus current vitals and returns the predicted glucose
impact, risk tier, advice, tips and food swaps.
"""

import base64
import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, File, Form, Header, UploadFile
from pydantic import ValidationError

from glycocare_api.api.dependencies import AnalysisServiceDep, IdentityProviderDep
from glycocare_api.core.exceptions import ClassificationFailedError, MalformedRequestError
from glycocare_api.models import (
    AnalysisResult,
    AnalyzeRequest,
    ErrorResponse,
    VitalsSnapshot,
)
from glycocare_api.services.analysis import ClassificationFailure, MealAnalysisService
from glycocare_api.services.identity import IdentityProvider

router = APIRouter()
logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE = 10 * 1024 * 1024  # 10 MB

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing image payload"},
    401: {"model": ErrorResponse, "description": "Missing or invalid token"},
    422: {"model": ErrorResponse, "description": "Invalid vitals"},
    502: {"model": ErrorResponse, "description": "Food classification failed"},
    500: {"model": ErrorResponse, "description": "Internal error"},
}


def _bearer_token(authorization: str | None) -> str:
    """Token from a `Bearer <token>` header; the scheme is case-insensitive."""
    if not authorization:
        return ""
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


async def _run_analysis(
    service: MealAnalysisService,
    identity: IdentityProvider,
    authorization: str | None,
    image: str,
    vitals: VitalsSnapshot,
    background_tasks: BackgroundTasks,
) -> AnalysisResult:
    """Authenticate, then run the pipeline, mapping classifier failures to 502."""
    user_id = await identity.resolve_caller(_bearer_token(authorization))

    logger.info(f"Meal analysis request from user {user_id}")

    try:
        return await service.analyze(user_id, image, vitals, background_tasks)
    except ClassificationFailure as e:
        raise ClassificationFailedError(
            details={"reason": e.message, "upstream_status": e.status_code},
        ) from e


@router.post(
    "",
    response_model=AnalysisResult,
    responses=ERROR_RESPONSES,
    summary="Analyze a meal photo",
)
async def analyze_meal(
    request: AnalyzeRequest,
    background_tasks: BackgroundTasks,
    service: AnalysisServiceDep,
    identity: IdentityProviderDep,
    authorization: Annotated[str | None, Header()] = None,
) -> AnalysisResult:
    """
    Analyze a base64-encoded meal photo.

    The image is checked before the caller is authenticated, and both
    happen before any inference call.
    """
    if not request.image_base64:
        raise MalformedRequestError("Missing imageBase64 in request body")

    return await _run_analysis(
        service,
        identity,
        authorization,
        request.image_base64,
        request.vitals,
        background_tasks,
    )


@router.post(
    "/upload",
    response_model=AnalysisResult,
    responses=ERROR_RESPONSES,
    summary="Analyze an uploaded meal photo",
)
async def analyze_uploaded_meal(
    background_tasks: BackgroundTasks,
    service: AnalysisServiceDep,
    identity: IdentityProviderDep,
    image: Annotated[UploadFile, File(description="Meal photo")],
    glucose: Annotated[str, Form()],
    systolic: Annotated[str, Form()],
    diastolic: Annotated[str, Form()],
    heart_rate: Annotated[str, Form()],
    authorization: Annotated[str | None, Header()] = None,
) -> AnalysisResult:
    """Multipart variant; the file is sent to the models as a data URL."""
    content = await image.read()
    if not content:
        raise MalformedRequestError("Uploaded image is empty")
    if len(content) > MAX_IMAGE_SIZE:
        raise MalformedRequestError(
            f"Image exceeds maximum size of {MAX_IMAGE_SIZE // (1024 * 1024)} MB",
            details={"size": len(content), "max_size": MAX_IMAGE_SIZE},
        )

    try:
        vitals = VitalsSnapshot(
            glucose=glucose,
            systolic=systolic,
            diastolic=diastolic,
            heart_rate=heart_rate,
        )
    except ValidationError as e:
        raise MalformedRequestError(
            "Invalid vitals",
            details={"errors": e.errors(include_url=False, include_context=False)},
            status_code=422,
        ) from e

    content_type = image.content_type or "image/jpeg"
    encoded = base64.b64encode(content).decode("utf-8")
    data_url = f"data:{content_type};base64,{encoded}"

    return await _run_analysis(
        service, identity, authorization, data_url, vitals, background_tasks
    )
