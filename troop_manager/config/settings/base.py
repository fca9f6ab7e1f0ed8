# troop_manager/config/settings/base.py
import pathlib
from datetime import timedelta
from typing import List, Optional

from decouple import config
from pydantic_settings import BaseSettings

from troop_manager.utilities.helpers.date_utils import parse_duration

ROOT_DIR: pathlib.Path = pathlib.Path(__file__).parent.parent.parent.parent.resolve()

class BackendBaseSettings(BaseSettings):
    """
    Base settings shared by every environment.
    Environment-specific classes override only what differs.
    """

    # Application Metadata
    TITLE: str = "Scout Troop Management API"
    VERSION: str = "1.0.0"
    DESCRIPTION: Optional[str] = "Troops, members, scouts, rank advancements and merit badges"
    DEBUG: bool = config("DEBUG", default=False, cast=bool)

    # Server Configuration
    SERVER_HOST: str = config("API_HOST", default="0.0.0.0", cast=str)
    SERVER_PORT: int = config("API_PORT", default=3001, cast=int)
    API_PREFIX: str = config("API_PREFIX", default="/api/v1")
    DOCS_URL: str = "/docs"
    OPENAPI_URL: str = "/openapi.json"
    REDOC_URL: str = "/redoc"

    # MongoDB Configuration
    MONGODB_URI: str = config("MONGODB_URI", default="mongodb://localhost:27017")
    DATABASE_NAME: str = config("DATABASE_NAME", default="scout-troops")
    MONGODB_TIMEOUT_MS: int = config("MONGODB_TIMEOUT_MS", default=5000, cast=int)

    # JWT Configuration
    JWT_SECRET: str = config("JWT_SECRET")
    JWT_REFRESH_SECRET: str = config("JWT_REFRESH_SECRET")
    JWT_ALGORITHM: str = config("JWT_ALGORITHM", default="HS256")
    JWT_EXPIRES_IN: str = config("JWT_EXPIRES_IN", default="7d")
    JWT_REFRESH_EXPIRES_IN: str = config("JWT_REFRESH_EXPIRES_IN", default="30d")

    # Password hashing
    BCRYPT_ROUNDS: int = config("BCRYPT_ROUNDS", default=12, cast=int)

    # CORS Configuration
    CORS_ORIGINS: str = config("CORS_ORIGINS", default="http://localhost:3000")
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list = ["*"]
    CORS_ALLOW_HEADERS: list = ["*"]

    # Logging Configuration
    LOG_LEVEL: str = config("LOG_LEVEL", default="INFO")
    LOG_TO_FILE: bool = config("LOG_TO_FILE", default=True, cast=bool)
    LOG_DIR: str = config("LOG_DIR", default="logs")

    class Config:
        case_sensitive: bool = True
        env_file: str = f"{str(ROOT_DIR)}/.env"
        env_file_encoding: str = "utf-8"
        extra: str = "ignore"
        frozen: bool = True

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def access_token_ttl(self) -> timedelta:
        return parse_duration(self.JWT_EXPIRES_IN)

    @property
    def refresh_token_ttl(self) -> timedelta:
        return parse_duration(self.JWT_REFRESH_EXPIRES_IN)

    @property
    def set_backend_app_attributes(self) -> dict[str, str | None]:
        """
        FastAPI application attributes
        """
        return {
            "title": self.TITLE,
            "version": self.VERSION,
            "description": self.DESCRIPTION,
            "docs_url": self.DOCS_URL,
            "openapi_url": self.OPENAPI_URL,
            "redoc_url": self.REDOC_URL,
        }
