# storefront/config.py
from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENV: str = "development"
    DATA_DIR: Path = Path("data")  # one CSV file per collection path lives here
    PRODUCTS_PATH: str = "products"

    HOME_CATEGORY_LIMIT: int = 5  # newest N products shown per category on the home page
    LISTING_PAGE_SIZE: int = 24
    BANNER_INTERVAL_SECONDS: int = 3

    PLACEHOLDER_TEXT: str = "Image Not Found"
    STORE_LOCK_TIMEOUT: float = 10.0
    LOG_LEVEL: str = "INFO"

    # comma separated, e.g. CORS_ORIGINS=http://localhost:3000,https://shop.example.com
    CORS_ORIGINS: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


settings = get_settings()
