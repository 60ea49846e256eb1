from pydantic_settings import BaseSettings
from typing import List, Optional, Union
from pydantic import field_validator
from sqlalchemy.engine import URL
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API Settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Job Board API"
    PORT: int = 5000

    # Database Settings
    PG_USER: str = "postgres"
    PG_PASSWORD: str = ""
    PG_HOST: str = "localhost"
    PG_PORT: int = 5432
    PG_NAME: str = "db"

    # Full URL override (e.g. sqlite:///./jobs.db for local development)
    DATABASE_URL: Optional[str] = None

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        url = URL.create(
            "postgresql",
            username=self.PG_USER,
            password=self.PG_PASSWORD or None,
            host=self.PG_HOST,
            port=self.PG_PORT,
            database=self.PG_NAME,
        )
        return url.render_as_string(hide_password=False)

    def missing_database_settings(self) -> List[str]:
        """Names of required connection settings that are empty."""
        if self.DATABASE_URL:
            return []
        required = {
            "PG_USER": self.PG_USER,
            "PG_NAME": self.PG_NAME,
            "PG_PASSWORD": self.PG_PASSWORD,
        }
        return [name for name, value in required.items() if not value]

    # Upload Settings
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10 MiB

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    # CORS Settings - can be set as JSON string in .env
    FRONTEND_ORIGIN: Union[List[str], str] = ["http://localhost:5173"]

    @field_validator("FRONTEND_ORIGIN", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[List[str], str]) -> List[str]:
        """Parse CORS origins from JSON string or list"""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
            except json.JSONDecodeError:
                # If not valid JSON, split by comma
                return [origin.strip() for origin in v.split(",") if origin.strip()]
            return parsed if isinstance(parsed, list) else [str(parsed)]
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
