import os
from typing import Annotated, List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Event Registration API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # "production" hides error messages and stack traces from responses
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./events.db"
    DB_ECHO_LOG: bool = False

    # Redis configuration
    REDIS_URL: str = "redis://localhost:6379/0"
    REGISTRATION_LOCK_ENABLED: bool = True
    REGISTRATION_LOCK_TIMEOUT: int = 10
    REGISTRATION_LOCK_BLOCKING_TIMEOUT: float = 5

    # Comma-separated in the environment
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    def assemble_cors_origins(cls, v: Union[str, List[str], None]) -> List[str]:
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, list):
            return v
        elif v is None:
            return []
        raise ValueError(f"Invalid format for BACKEND_CORS_ORIGINS: {v}")

    @field_validator("LOG_LEVEL")
    def check_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"Unsupported LOG_LEVEL: '{v}'")
        return level

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


settings = Settings()
