from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key; the storefront never holds the service role key)

    Optional:
      - PRODUCT_IMAGES_BUCKET (public bucket that holds listing photos)
      - LOG_LEVEL
    """

    PROJECT_NAME: str = "Mini Marketplace"
    API_V1_STR: str = "/api/v1"

    # Supabase config
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # Storage
    PRODUCT_IMAGES_BUCKET: str = "product-images"
    MAX_PRODUCT_IMAGES: int = 5
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024  # 5MB per image

    # How many undelivered notifications we keep around
    NOTIFICATION_BACKLOG: int = 50

    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
