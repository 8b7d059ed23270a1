"""Pydantic models for API requests, stage results and stored records."""

from .analysis import (
    AnalysisResult,
    AnalyzeRequest,
    ClassificationResult,
    ErrorResponse,
    EstimateSource,
    GlucoseDeltaEstimate,
    MealRecord,
    PortionEstimate,
    RiskTier,
    UserProfile,
    VitalsRecord,
    VitalsSnapshot,
)

__all__ = [
    "AnalysisResult",
    "AnalyzeRequest",
    "ClassificationResult",
    "ErrorResponse",
    "EstimateSource",
    "GlucoseDeltaEstimate",
    "MealRecord",
    "PortionEstimate",
    "RiskTier",
    "UserProfile",
    "VitalsRecord",
    "VitalsSnapshot",
]
