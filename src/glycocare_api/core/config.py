"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    db_name: str = "glycocare_db"
    mongo_timeout_ms: int = 5000  # Server selection timeout

    # Hosted inference (Hugging Face style API)
    inference_base_url: str = "https://api-inference.huggingface.co/models"
    huggingface_token: str = ""
    classifier_model: str = "Maheentouqeer1/food-classifier-efficientnet"
    portion_model: str = "Maheentouqeer1/glycocare-portion-estimator"
    regression_model: str = "Maheentouqeer1/glycocare-glucose-regression"
    inference_timeout: float = 5.0  # Seconds per call; a timeout counts as a transport error

    # Identity provider (Supabase auth)
    auth_url: str = "http://localhost:54321"
    auth_api_key: str = ""
    auth_timeout: float = 5.0

    # Persistence
    persist_results: bool = True

    # App
    debug: bool = False
    log_level: str = "INFO"
    app_name: str = "GlycoCare API"
    api_version: str = "1.0.0"

    @property
    def is_inference_configured(self) -> bool:
        """Check if the inference token is set."""
        return bool(self.huggingface_token)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
