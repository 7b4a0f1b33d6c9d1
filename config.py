from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


STAGE_LOG_LEVELS = {
    "dev": "DEBUG",
    "staging": "INFO",
    "prod": "ERROR",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Deployment
    STAGE: str = "dev"  # dev | staging | prod
    LOG_LEVEL: Optional[str] = None

    # Storage
    STORE_BACKEND: str = "dynamodb"  # dynamodb | mongo | memory
    TABLE_NAME: str = "eventica-registrations"

    # DynamoDB
    AWS_REGION: Optional[str] = None
    DYNAMODB_ENDPOINT_URL: Optional[str] = None

    # MongoDB
    DATABASE_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "eventica"

    # API
    API_GATEWAY_BASE_PATH: str = "/"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    @property
    def log_level(self) -> str:
        """LOG_LEVEL if set, otherwise the stage default (unknown stages log at INFO)."""
        if self.LOG_LEVEL:
            return self.LOG_LEVEL.upper()
        return STAGE_LOG_LEVELS.get(self.STAGE.lower(), "INFO")


@lru_cache
def get_settings() -> Settings:
    return Settings()
