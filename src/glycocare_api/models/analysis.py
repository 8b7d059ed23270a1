"""Pydantic models for the meal analysis pipeline.

Covers the request/response contract of the /analyze endpoint, the
intermediate stage results, and the records written to the time-series store.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from glycocare_api.utils import round_half_up, utc_now

# =============================================================================
# Enums
# =============================================================================


class RiskTier(str, Enum):
    """Glycemic impact classification of a meal."""

    NORMAL = "normal"
    BORDERLINE = "borderline"
    HIGH = "high"


class EstimateSource(str, Enum):
    """Which code path produced a stage value."""

    MODEL = "model"
    FALLBACK = "fallback"  # Randomized or heuristic local estimate
    DEFAULT = "default"  # Stage default kept after an unrecognized response


# =============================================================================
# Inputs
# =============================================================================


class VitalsSnapshot(BaseModel):
    """Vital signs supplied with an analysis request."""

    model_config = ConfigDict(populate_by_name=True)

    glucose: float = Field(
        ..., allow_inf_nan=False, description="Current blood glucose in mg/dL"
    )
    systolic: int = Field(..., description="Systolic blood pressure in mmHg")
    diastolic: int = Field(..., description="Diastolic blood pressure in mmHg")
    heart_rate: int = Field(..., alias="heartRate", description="Heart rate in bpm")
    timestamp: datetime = Field(default_factory=utc_now)

    @field_validator("glucose", mode="before")
    @classmethod
    def _parse_glucose(cls, value):
        if isinstance(value, str):
            return float(value.strip())
        return value

    @field_validator("systolic", "diastolic", "heart_rate", mode="before")
    @classmethod
    def _parse_int(cls, value):
        # Numeric strings like "80.7" are truncated, not rejected
        if isinstance(value, str):
            return int(float(value.strip()))
        if isinstance(value, float):
            return int(value)
        return value


class UserProfile(BaseModel):
    """Physiological attributes used to personalize predictions."""

    age: int = 30
    weight: float = 70.0
    diabetes_type: str | None = None
    has_blood_pressure_condition: bool = False
    has_heart_condition: bool = False

    @property
    def has_diabetes(self) -> bool:
        """True when a diabetes diagnosis is recorded."""
        return bool(self.diabetes_type)


class AnalyzeRequest(BaseModel):
    """JSON body of POST /analyze."""

    model_config = ConfigDict(populate_by_name=True)

    image_base64: str | None = Field(
        None, alias="imageBase64", description="Base64 image or data URL"
    )
    vitals: VitalsSnapshot


# =============================================================================
# Stage results
# =============================================================================


class ClassificationResult(BaseModel):
    """Top-1 dish label from the image classifier."""

    dish_label: str = "unknown"
    confidence: float = Field(0.0, ge=0.0, le=1.0)

    @property
    def confidence_percent(self) -> int:
        """Confidence scaled to 0-100."""
        return int(round_half_up(self.confidence * 100))


class PortionEstimate(BaseModel):
    """Estimated portion weight."""

    grams: int = Field(..., gt=0)
    source: EstimateSource = EstimateSource.MODEL


class GlucoseDeltaEstimate(BaseModel):
    """Predicted glucose change attributable to the meal."""

    delta: float
    source: EstimateSource = EstimateSource.MODEL


# =============================================================================
# Outputs
# =============================================================================


class AnalysisResult(BaseModel):
    """Final result returned to the caller."""

    dish: str
    portion_g: int
    predicted_glucose_delta: float
    confidence: int = Field(..., ge=0, le=100)
    advice: str
    status: RiskTier
    tips: list[str] = Field(default_factory=list)
    food_swaps: list[str] = Field(default_factory=list)


class MealRecord(BaseModel):
    """Meal entry written to the time-series store."""

    user_id: str
    dish_name: str
    portion_g: int
    glucose_delta: float
    confidence: float
    advice: str
    status: RiskTier
    timestamp: datetime = Field(default_factory=utc_now)


class VitalsRecord(BaseModel):
    """Vitals entry written to the time-series store."""

    user_id: str
    glucose_level: float
    bp_systolic: int
    bp_diastolic: int
    heart_rate: int
    timestamp: datetime

    @classmethod
    def from_snapshot(cls, user_id: str, vitals: VitalsSnapshot) -> "VitalsRecord":
        return cls(
            user_id=user_id,
            glucose_level=vitals.glucose,
            bp_systolic=vitals.systolic,
            bp_diastolic=vitals.diastolic,
            heart_rate=vitals.heart_rate,
            timestamp=vitals.timestamp,
        )


class ErrorResponse(BaseModel):
    """Error body for every non-2xx response."""

    error: str = Field(..., description="Machine-readable error kind")
    message: str = Field(..., description="Human-readable message")
    details: dict | None = None
