"""
Factory for the shared inference client.

Reads configuration from settings and returns a cached client so the
connection pool is reused across requests.
"""

import logging
from functools import lru_cache

from glycocare_api.core.config import get_settings
from glycocare_api.core.exceptions import ConfigurationError

from .client import InferenceClient

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_inference_client() -> InferenceClient:
    """
    Get the configured inference client.

    Returns:
        Cached InferenceClient instance

    Raises:
        ConfigurationError: If no inference token is configured
    """
    settings = get_settings()

    if not settings.is_inference_configured:
        raise ConfigurationError("Inference API token not configured")

    logger.info(
        f"Configuring inference client: {settings.inference_base_url}, "
        f"timeout={settings.inference_timeout}s"
    )

    return InferenceClient(
        base_url=settings.inference_base_url,
        token=settings.huggingface_token,
        timeout=settings.inference_timeout,
    )


async def close_inference_client() -> None:
    """Close the cached client, if one was created, and clear the cache."""
    if get_inference_client.cache_info().currsize:
        await get_inference_client().close()
    get_inference_client.cache_clear()
