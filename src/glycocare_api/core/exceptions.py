"""Custom exception classes for the API."""

from typing import Any


class APIError(Exception):
    """Base exception for API errors."""

    error_code: str = "api_error"

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: Any = None,
        error_code: str | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details
        if error_code is not None:
            self.error_code = error_code
        super().__init__(message)


class UnauthorizedError(APIError):
    """Caller could not be authenticated."""

    error_code = "unauthorized"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message, status_code=401)


class MalformedRequestError(APIError):
    """Request payload is missing or invalid."""

    error_code = "malformed_request"

    def __init__(self, message: str, details: Any = None, status_code: int = 400):
        super().__init__(message=message, status_code=status_code, details=details)


class ClassificationFailedError(APIError):
    """The food classifier could not be reached or answered with an error."""

    error_code = "classification_failed"

    def __init__(self, message: str = "Food classification failed", details: Any = None):
        super().__init__(message=message, status_code=502, details=details)


class ConfigurationError(APIError):
    """A required setting is missing."""

    error_code = "configuration_error"

    def __init__(self, message: str):
        super().__init__(message=message, status_code=500)
