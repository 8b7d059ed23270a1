"""
Base types for the hosted inference endpoints.

Defines the error raised by the HTTP client and the decoding of the
numeric responses returned by the portion and regression models.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from glycocare_api.utils import is_number


class InferenceErrorCode(str, Enum):
    """Why an inference call produced no usable body."""

    CONNECTION_ERROR = "CONNECTION_ERROR"
    TIMEOUT = "TIMEOUT"
    PROVIDER_ERROR = "PROVIDER_ERROR"  # Non-2xx status
    INVALID_RESPONSE = "INVALID_RESPONSE"  # 2xx but body is not JSON


class InferenceError(Exception):
    """Error during an inference call."""

    def __init__(
        self,
        message: str,
        error_code: InferenceErrorCode = InferenceErrorCode.PROVIDER_ERROR,
        model_id: str = "unknown",
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.model_id = model_id
        self.status_code = status_code
        self.details = details or {}

    @property
    def is_transport_error(self) -> bool:
        """True when the endpoint was unreachable or answered non-2xx."""
        return self.error_code != InferenceErrorCode.INVALID_RESPONSE


# =============================================================================
# Numeric response shapes
# =============================================================================


@dataclass(frozen=True)
class BareNumber:
    """Response body is a plain number."""

    value: float


@dataclass(frozen=True)
class FieldNumber:
    """Response body is an object with a numeric field."""

    value: float
    field: str


@dataclass(frozen=True)
class UnrecognizedShape:
    """Response body matches neither numeric shape."""

    raw: Any


NumericPayload = BareNumber | FieldNumber | UnrecognizedShape


def decode_numeric(payload: Any, field: str) -> NumericPayload:
    """
    Decode a model response that is either a number or `{field: number}`.

    The two shapes are mutually exclusive: a bare number never has fields,
    and an object is only accepted when `field` holds a number.

    Args:
        payload: Parsed JSON body
        field: Name of the numeric field in the object form

    Returns:
        One of BareNumber, FieldNumber, UnrecognizedShape
    """
    if is_number(payload):
        return BareNumber(float(payload))
    if isinstance(payload, dict) and is_number(payload.get(field)):
        return FieldNumber(float(payload[field]), field)
    return UnrecognizedShape(payload)
