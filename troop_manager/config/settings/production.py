# troop_manager/config/settings/production.py
from typing import ClassVar

from troop_manager.config.settings.base import BackendBaseSettings
from troop_manager.config.settings.environment import Environment

class BackendProdSettings(BackendBaseSettings):
    """Production-specific settings"""
    DESCRIPTION: str | None = "Production Environment - Scout Troop Management API"
    DEBUG: bool = False
    # Fixed per class; get_settings() already resolved the ENVIRONMENT variable
    ENVIRONMENT: ClassVar[Environment] = Environment.PRODUCTION

    LOG_LEVEL: str = "WARNING"

    # CORS_ORIGINS is loaded from .env in production
