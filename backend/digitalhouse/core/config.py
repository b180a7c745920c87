from typing import Annotated, List, Literal, Union
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _split_list(v: Union[str, List[str]]) -> List[str]:
    if isinstance(v, str):
        v = v.strip("[").strip("]").strip('"').strip("'")
        if not v:
            return []
        return [i.strip().strip('"').strip("'") for i in v.split(",")]
    elif isinstance(v, list):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    PROJECT_NAME: str = "Digital House"
    ENVIRONMENT: str = "development"
    API_V1_STR: str = "/api/v1"

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    CORS_ORIGINS: Annotated[List[str], NoDecode] = ["http://localhost:5000", "http://127.0.0.1:5000"]

    @field_validator("CORS_ORIGINS", "ENABLED_FEATURES", mode="before")
    @classmethod
    def assemble_list(cls, v: Union[str, List[str]]) -> List[str]:
        return _split_list(v)

    # Database - postgresql+asyncpg://... in deployment, sqlite+aiosqlite:///... locally
    DATABASE_URL: str

    # Server-side feature flags, replaces the client's version toggle
    ENABLED_FEATURES: Annotated[List[str], NoDecode] = ["help_desk", "emergency"]

    # Help desk
    HELP_REQUESTS_PAGE_SIZE: int = 50
    HELP_REQUESTS_MAX_PAGE_SIZE: int = 100

    # Logging
    LOG_LEVEL: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file="backend_config.env",
        env_file_encoding="utf-8"
    )

    def feature_enabled(self, name: str) -> bool:
        return name in self.ENABLED_FEATURES


settings = Settings()
