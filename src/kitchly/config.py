"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

INSTACART_PROD_BASE_URL = "https://connect.instacart.com/idp/v1"
INSTACART_DEV_BASE_URL = "https://connect.dev.instacart.tools/idp/v1"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Redis (kitchen state cache)
    redis_url: str = "redis://localhost:6379/0"
    kitchen_state_ttl_seconds: int = 86400 * 7
    serialize_conversations: bool = True

    # Instacart Developer Platform
    instacart_api_key: str = ""
    instacart_use_dev: bool = False  # dev endpoint needs separate credentials
    instacart_timeout: float = 30.0
    order_link_attempts: int = 2  # total attempts for the order-link step

    # LLM inference
    openai_api_key: str = ""
    openai_base_url: str | None = None
    inference_model_large: str = "gpt-4.1"
    inference_model_small: str = "gpt-4.1-mini"

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def instacart_base_url(self) -> str:
        """Get the Instacart API base URL for the configured environment."""
        return INSTACART_DEV_BASE_URL if self.instacart_use_dev else INSTACART_PROD_BASE_URL

    @property
    def ordering_enabled(self) -> bool:
        """Check if grocery ordering has a credential configured."""
        return bool(self.instacart_api_key.strip())

    @property
    def inference_enabled(self) -> bool:
        """Check if an LLM credential is configured."""
        return bool(self.openai_api_key.strip())

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
