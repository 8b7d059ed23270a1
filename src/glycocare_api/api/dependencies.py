"""FastAPI dependency injection factories."""

from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from glycocare_api.core.config import Settings, get_settings
from glycocare_api.db.mongo import MongoDB
from glycocare_api.db.unit_of_work import UnitOfWork
from glycocare_api.services.analysis import (
    DishClassifier,
    GlucoseDeltaPredictor,
    MealAnalysisService,
    PortionEstimator,
)
from glycocare_api.services.identity import IdentityProvider, get_identity_provider
from glycocare_api.services.inference import InferenceClient, get_inference_client

# Type aliases for cleaner route signatures
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_database() -> AsyncIOMotorDatabase:
    """
    Get the MongoDB database instance.

    Returns:
        Motor database instance
    """
    settings = get_settings()
    return MongoDB.get_database(settings.db_name)


def get_uow(db: AsyncIOMotorDatabase = Depends(get_database)) -> UnitOfWork:
    """
    Get Unit of Work instance.

    Args:
        db: Injected database instance

    Returns:
        UnitOfWork instance
    """
    return UnitOfWork(db)


def get_analysis_service(
    settings: SettingsDep,
    client: InferenceClient = Depends(get_inference_client),
    uow: UnitOfWork = Depends(get_uow),
) -> MealAnalysisService:
    """
    Get MealAnalysisService wired to the inference client and repositories.

    Args:
        settings: Application settings (model ids, persistence toggle)
        client: Shared inference client
        uow: Injected Unit of Work

    Returns:
        MealAnalysisService instance
    """
    return MealAnalysisService(
        classifier=DishClassifier(client, settings.classifier_model),
        portion_estimator=PortionEstimator(client, settings.portion_model),
        delta_predictor=GlucoseDeltaPredictor(client, settings.regression_model),
        profiles=uow.profiles,
        meals=uow.meals,
        vitals=uow.vitals,
        persist=settings.persist_results,
    )


# Type aliases for service dependencies
AnalysisServiceDep = Annotated[MealAnalysisService, Depends(get_analysis_service)]
IdentityProviderDep = Annotated[IdentityProvider, Depends(get_identity_provider)]
