"""
Configuration settings for the application.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # HTTP server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "5000"))

    # MongoDB settings
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    MONGO_DB_NAME: str = os.getenv("MONGO_DB_NAME", "autoparts")
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = int(
        os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000")
    )

    # Uploaded images
    UPLOADS_DIR: str = os.getenv("UPLOADS_DIR", "uploads")
    UPLOADS_URL_PREFIX: str = "/uploads"
    MAX_PRODUCT_IMAGES: int = int(os.getenv("MAX_PRODUCT_IMAGES", "5"))

    # Real-time events (optional Redis fan-out across worker processes)
    REDIS_URL: str | None = os.getenv("REDIS_URL") or None
    EVENTS_CHANNEL: str = os.getenv("EVENTS_CHANNEL", "catalog:events")
    EVENT_SEND_TIMEOUT_SECONDS: float = float(
        os.getenv("EVENT_SEND_TIMEOUT_SECONDS", "2.0")
    )
    EVENT_RELAY_RETRY_SECONDS: float = float(
        os.getenv("EVENT_RELAY_RETRY_SECONDS", "1.0")
    )

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.
        """
        return self.ENVIRONMENT.lower() == "production"

    @property
    def redis_enabled(self) -> bool:
        """Return True when events should be relayed through Redis."""
        return bool(self.REDIS_URL)

    def __init__(self):
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        logging.basicConfig(level=self.log_level)
        self.logger = logging.getLogger(__name__)

        self.logger.debug(
            f"Config initialized with env={self.ENVIRONMENT}, debug={self.debug}, "
            f"log_level={self.log_level}"
        )


# Create a global settings instance for import
settings = Settings()
