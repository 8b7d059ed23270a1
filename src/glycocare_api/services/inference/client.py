"""HTTP client for the hosted inference API."""

import logging
from typing import Any

import httpx

from .base import InferenceError, InferenceErrorCode

logger = logging.getLogger(__name__)


class InferenceClient:
    """Client for Hugging Face style `POST /{model_id}` inference calls."""

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the inference client.

        Args:
            base_url: Base URL of the inference API
            token: Bearer token sent with every call
            timeout: Per-call timeout in seconds
            client: Pre-built HTTP client (tests inject a mock transport here)
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def infer(self, model_id: str, inputs: Any) -> Any:
        """
        Run a single inference call.

        No retries: one failed attempt is reported to the caller, which
        decides between aborting and falling back.

        Args:
            model_id: Model path under the base URL
            inputs: JSON-serializable `inputs` payload

        Returns:
            Parsed JSON body

        Raises:
            InferenceError: On timeout, connection failure, non-2xx status
                or a body that is not JSON
        """
        client = await self._get_client()

        try:
            response = await client.post(
                f"{self.base_url}/{model_id}",
                json={"inputs": inputs},
                headers={"Authorization": f"Bearer {self.token}"},
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise InferenceError(
                message=f"Inference call to {model_id} timed out",
                error_code=InferenceErrorCode.TIMEOUT,
                model_id=model_id,
            ) from e
        except httpx.RequestError as e:
            raise InferenceError(
                message=f"Failed to connect to inference API: {e}",
                error_code=InferenceErrorCode.CONNECTION_ERROR,
                model_id=model_id,
            ) from e

        if not response.is_success:
            raise InferenceError(
                message=f"Inference API error: {response.status_code}",
                error_code=InferenceErrorCode.PROVIDER_ERROR,
                model_id=model_id,
                status_code=response.status_code,
                details={"body": response.text[:500]},
            )

        try:
            return response.json()
        except ValueError as e:
            raise InferenceError(
                message=f"Inference API returned a non-JSON body for {model_id}",
                error_code=InferenceErrorCode.INVALID_RESPONSE,
                model_id=model_id,
                status_code=response.status_code,
            ) from e
