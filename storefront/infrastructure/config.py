"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://storefront:storefront_dev_password@db:5432/storefront"

    # Authentication
    storefront_api_key: str = "dev-api-key-change-in-production"

    # Category tree
    category_tree_default_limit: int = 200
    category_tree_max_limit: int = 500

    # Category API client (used by the tree coordinator and seeding tools)
    category_api_url: str = "http://localhost:8000"
    category_api_timeout: float = 10.0

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
