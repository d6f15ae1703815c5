"""
Configuration settings for the catalog core.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Catalog settings loaded from environment variables."""

    # Redis persistence settings
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    PRODUCT_KEY_PREFIX: str = os.getenv("PRODUCT_KEY_PREFIX", "products:doc:")
    SLUG_INDEX_KEY: str = os.getenv("SLUG_INDEX_KEY", "products:slugs")
    COMBINATION_INDEX_KEY: str = os.getenv(
        "COMBINATION_INDEX_KEY",
        "products:combination_sql_ids",
    )
    UPDATE_MAX_RETRIES: int = int(os.getenv("UPDATE_MAX_RETRIES", "5"))

    # Counter settings
    COUNTER_KEY_PREFIX: str = os.getenv("COUNTER_KEY_PREFIX", "counters:")
    PRODUCT_ID_COUNTER: str = os.getenv("PRODUCT_ID_COUNTER", "products.id")
    PRODUCT_SQL_ID_COUNTER: str = os.getenv(
        "PRODUCT_SQL_ID_COUNTER",
        "products.my_sociolla_sql_id",
    )

    # Slug settings
    SLUG_SEPARATOR: str = os.getenv("SLUG_SEPARATOR", "-")
    SLUG_MAX_ATTEMPTS: int = int(os.getenv("SLUG_MAX_ATTEMPTS", "50"))

    def __init__(self):
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        logging.basicConfig(level=self.log_level)


# Create a global settings instance for import
settings = Settings()
