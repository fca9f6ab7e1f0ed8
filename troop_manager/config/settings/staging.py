# troop_manager/config/settings/staging.py
from typing import ClassVar

from troop_manager.config.settings.base import BackendBaseSettings
from troop_manager.config.settings.environment import Environment

class BackendStageSettings(BackendBaseSettings):
    """Staging-specific settings"""
    DESCRIPTION: str | None = "Staging Environment - Scout Troop Management API"
    DEBUG: bool = True
    # Fixed per class; get_settings() already resolved the ENVIRONMENT variable
    ENVIRONMENT: ClassVar[Environment] = Environment.STAGING
