"""
Inference client - HTTP access to the hosted classifier and regression models.
"""

from .base import (
    BareNumber,
    FieldNumber,
    InferenceError,
    InferenceErrorCode,
    NumericPayload,
    UnrecognizedShape,
    decode_numeric,
)
from .client import InferenceClient
from .factory import get_inference_client

__all__ = [
    "BareNumber",
    "FieldNumber",
    "InferenceError",
    "InferenceErrorCode",
    "NumericPayload",
    "UnrecognizedShape",
    "decode_numeric",
    "InferenceClient",
    "get_inference_client",
]
