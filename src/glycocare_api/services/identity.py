"""Identity provider client - resolves a bearer token to a user id."""

import logging
from functools import lru_cache

import httpx

from glycocare_api.core.config import get_settings
from glycocare_api.core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


class IdentityProvider:
    """Client for the Supabase auth `GET /auth/v1/user` endpoint."""

    def __init__(
        self,
        auth_url: str,
        api_key: str,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the identity provider client.

        Args:
            auth_url: Base URL of the auth service
            api_key: Service API key sent as the `apikey` header
            timeout: Request timeout in seconds
            client: Pre-built HTTP client (tests inject a mock transport here)
        """
        self.auth_url = auth_url.rstrip("/")
        self.api_key = api_key
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

    async def resolve_caller(self, token: str) -> str:
        """
        Resolve an access token to the caller's user id.

        Args:
            token: Bearer token from the request

        Returns:
            User id

        Raises:
            UnauthorizedError: If the token is missing, rejected, or the
                auth service cannot be reached
        """
        if not token:
            raise UnauthorizedError("Missing authorization header")

        client = await self._get_client()
        try:
            response = await client.get(
                f"{self.auth_url}/auth/v1/user",
                headers={"Authorization": f"Bearer {token}", "apikey": self.api_key},
            )
        except httpx.HTTPError as e:
            logger.error(f"Identity provider unreachable: {e}")
            raise UnauthorizedError() from e

        if not response.is_success:
            logger.info(f"Token rejected by identity provider ({response.status_code})")
            raise UnauthorizedError()

        try:
            user_id = response.json().get("id")
        except (ValueError, AttributeError) as e:
            logger.warning("Identity provider returned an unreadable body")
            raise UnauthorizedError() from e

        if not user_id:
            raise UnauthorizedError()
        return str(user_id)


@lru_cache
def get_identity_provider() -> IdentityProvider:
    """
    Get a cached identity provider instance.

    Returns:
        IdentityProvider configured from settings
    """
    settings = get_settings()
    return IdentityProvider(
        auth_url=settings.auth_url,
        api_key=settings.auth_api_key,
        timeout=settings.auth_timeout,
    )
