# troop_manager/config/settings/development.py
from typing import ClassVar

from troop_manager.config.settings.base import BackendBaseSettings
from troop_manager.config.settings.environment import Environment

class BackendDevSettings(BackendBaseSettings):
    """Development-specific settings"""
    DESCRIPTION: str | None = "Development Environment - Scout Troop Management API"
    DEBUG: bool = True
    # Fixed per class; get_settings() already resolved the ENVIRONMENT variable
    ENVIRONMENT: ClassVar[Environment] = Environment.DEVELOPMENT

    LOG_LEVEL: str = "DEBUG"

    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"
