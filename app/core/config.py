# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string, or sqlite:// for local runs)
      - JWT_SECRET (signing secret shared with the auth provider)

    Optional:
      - CART_ADD_MAX_RETRIES (merge retries after a duplicate-row conflict)
      - DB_POOL_TIMEOUT (seconds to wait for a pooled connection)
    """

    PROJECT_NAME: str = "Cart Service"
    API_V1_STR: str = "/api/v1"

    # DB config
    DATABASE_URL: str
    DB_REQUIRE_SSL: bool = True
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT: float = 10.0

    # JWT verification (backend-side)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    # Cart behaviour
    CART_ADD_MAX_RETRIES: int = 3

    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
