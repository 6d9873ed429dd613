from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

# Load .env file from the working directory
load_dotenv()


class Settings(BaseSettings):
    """Base settings for the media catalog tool."""

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    APP_NAME: str = "mediasync"
    APP_VERSION: str = "1.0.0"

    # Immich server
    IMMICH_BASE_URL: str = Field(default="", description="Immich API base URL (https://host/api)")
    IMMICH_API_KEY: str = Field(default="", description="Immich API key sent as x-api-key")
    IMMICH_DEVICE_ID: str = "mediasync"
    UPLOAD_TIMEOUT_SECONDS: float = 300.0

    # Catalog
    CATALOG_DB_PATH: str = "media_catalog.db"

    # Sync / reconcile behaviour
    SYNC_MAX_RETRY_COUNT: int = Field(default=5, ge=0)
    HASH_CHUNK_SIZE: int = Field(default=1024 * 1024, ge=1)
    RECONCILE_MISSING_LOG_LIMIT: int = Field(default=20, ge=0)
    PROGRESS_LOG_EVERY: int = Field(default=100, ge=1)

    # Logging
    LOG_LEVEL: str = "INFO"
    LOGS_DIR: str = "logs"


settings = Settings()
