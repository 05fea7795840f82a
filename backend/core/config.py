from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Service settings, read from the environment or a local ``.env``."""

    APP_NAME: str = "User Registration API"
    APP_VERSION: str = "0.1.0"

    # HTTP server
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 8000
    APP_DEBUG: bool = True  # enables uvicorn reload
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
