"""Client configuration settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Realty Listings"
    VERSION: str = "0.1.0"

    # Backend REST API
    API_BASE_URL: str = "http://localhost:5000/api"
    REQUEST_TIMEOUT: float = 10.0

    # Listing pages
    PAGE_SIZE: int = 12
    INFINITE_PAGE_SIZE: int = 20

    # Featured listings retry policy
    FEATURED_MAX_RETRIES: int = 3
    FEATURED_BACKOFF: float = 1.0  # seconds, doubled on every retry

    FALLBACK_PHOTO_URL: str = "https://images.pexels.com/photos/1643384/pexels-photo-1643384.jpeg"

    # Favorites persistence
    FAVORITES_KEY: str = "realEstateFavorites"
    FAVORITES_FILE: str = ".favorites.json"

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "standard"


settings = Settings()
