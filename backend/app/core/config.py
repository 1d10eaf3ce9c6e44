from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Film Collaborations"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = False

    SQLALCHEMY_DATABASE_URI: str = "sqlite:///./collaborations.db"

    LOG_DIR: str = "app/logs"

    # Bounded retries for idempotent reads only; writes are never retried.
    READ_RETRY_ATTEMPTS: int = 3
    READ_RETRY_BACKOFF_SECONDS: float = 0.1


settings = Settings()  # type: ignore
