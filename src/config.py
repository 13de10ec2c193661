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

    # Redis snapshot stores
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    PRODUCTS_KEY: str = os.getenv("PRODUCTS_KEY", "catalog:products")
    CATEGORIES_KEY: str = os.getenv("CATEGORIES_KEY", "catalog:categories")
    REVIEWS_KEY: str = os.getenv("REVIEWS_KEY", "reviews:events")
    VOUCHERS_KEY: str = os.getenv("VOUCHERS_KEY", "vouchers:all")
    RATINGS_KEY: str = os.getenv("RATINGS_KEY", "reviews:ratings")

    # Review change stream
    REVIEW_CHANGES_STREAM_KEY: str = os.getenv(
        "REVIEW_CHANGES_STREAM_KEY", "reviews:changes"
    )
    REVIEW_CHANGES_CONSUMER_GROUP: str = os.getenv(
        "REVIEW_CHANGES_CONSUMER_GROUP",
        "review-refreshers",
    )
    BATCH_MAX_MESSAGES: int = int(os.getenv("BATCH_MAX_MESSAGES", "32"))
    BATCH_MAX_WAIT_MS: int = int(os.getenv("BATCH_MAX_WAIT_MS", "200"))

    # Discovery
    PAGE_SIZE: int = int(os.getenv("PAGE_SIZE", "8"))
    SUGGESTION_LIMIT: int = int(os.getenv("SUGGESTION_LIMIT", "6"))
    RELATED_LIMIT: int = int(os.getenv("RELATED_LIMIT", "4"))
    NEW_ARRIVALS_LIMIT: int = int(os.getenv("NEW_ARRIVALS_LIMIT", "8"))
    TOP_REVIEWS_LIMIT: int = int(os.getenv("TOP_REVIEWS_LIMIT", "20"))

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.
        """
        return self.ENVIRONMENT.lower() == "production"

    def __init__(self):
        self.env = os.getenv("ENV", "dev")
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        logging.basicConfig(level=self.log_level)
        self.logger = logging.getLogger(__name__)

        self.logger.debug(
            f"Config initialized with env={self.env}, debug={self.debug}, "
            f"log_level={self.log_level}, page_size={self.PAGE_SIZE}"
        )


# Create a global settings instance for import
settings = Settings()
