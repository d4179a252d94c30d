"""Configuration management for CMS semantic search."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _sanitize_secret(value: str) -> str:
    """Remove BOM characters and whitespace from secrets.

    Secrets pasted into hosting dashboards or .env files may carry BOM
    characters that break HTTP headers.
    """
    if not value:
        return value
    return value.lstrip("\ufeff").strip()


CONTENTSTACK_DELIVERY_HOSTS = {
    "US": "cdn.contentstack.io",
    "EU": "eu-cdn.contentstack.com",
    "AZURE_NA": "azure-na-cdn.contentstack.com",
    "AZURE_EU": "azure-eu-cdn.contentstack.com",
    "GCP_NA": "gcp-na-cdn.contentstack.com",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Google AI API (embeddings and image understanding)
    google_api_key: str = ""
    embedding_model: str = "gemini-embedding-001"
    embedding_dimension: int = 768
    embedding_requests_per_minute: int | None = 100

    # Image analysis
    vision_model: str = "gemini-2.0-flash"
    image_analysis_enabled: bool = True
    image_analysis_max_attempts: int = 3
    image_analysis_retry_delay_seconds: float = 1.5
    image_analysis_rate_limit_backoff_seconds: float = 2.0
    image_analysis_requests_per_minute: int | None = 30

    # Qdrant settings
    qdrant_url: str = ""
    qdrant_api_key: str = ""
    qdrant_collection: str = "cms_content"

    # Contentstack delivery API
    contentstack_api_key: str = ""
    contentstack_delivery_token: str = ""
    contentstack_environment: str = ""
    contentstack_region: str = "US"
    asset_host_markers: list[str] = ["contentstack.io", "contentstack.com"]

    # Webhook Basic-Auth
    webhook_username: str = "contentstack_webhook"
    webhook_password: str = ""

    @field_validator(
        "google_api_key",
        "qdrant_api_key",
        "qdrant_url",
        "contentstack_api_key",
        "contentstack_delivery_token",
        "webhook_password",
        mode="after",
    )
    @classmethod
    def sanitize_secrets(cls, value: str) -> str:
        """Remove BOM and whitespace from secret values."""
        return _sanitize_secret(value)

    # Search and indexing
    search_top_k: int = 20
    query_timeout_seconds: float = 45.0
    provider_timeout_seconds: float = 30.0
    sync_page_size: int = 100
    sync_item_delay_seconds: float = 0.5
    sync_content_types: list[str] = ["article", "video", "product", "media"]
    default_locale: str = "en-us"

    # HTTP
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    debug: bool = False

    @property
    def contentstack_host(self) -> str:
        """Delivery API host for the configured region."""
        return CONTENTSTACK_DELIVERY_HOSTS.get(
            self.contentstack_region.upper(), CONTENTSTACK_DELIVERY_HOSTS["US"]
        )

    @property
    def image_analysis_configured(self) -> bool:
        """Whether the image-analysis feature should be enabled."""
        return self.image_analysis_enabled and bool(self.google_api_key)


# Global settings instance
settings = Settings()
