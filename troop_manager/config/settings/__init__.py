# troop_manager/config/settings/__init__.py
"""
Settings manager - picks the environment-specific settings class once at import
"""
from decouple import config

from troop_manager.config.settings.base import BackendBaseSettings
from troop_manager.config.settings.development import BackendDevSettings
from troop_manager.config.settings.staging import BackendStageSettings
from troop_manager.config.settings.production import BackendProdSettings
from troop_manager.utilities.helpers.date_utils import parse_duration

# Determine environment from .env file
ENV = config("ENVIRONMENT", default="DEV")

def get_settings(env: str = ENV) -> BackendBaseSettings:
    """
    Factory function to return appropriate settings based on environment
    """
    env_map = {
        "DEV": BackendDevSettings,
        "DEVELOPMENT": BackendDevSettings,
        "STAGE": BackendStageSettings,
        "STAGING": BackendStageSettings,
        "PROD": BackendProdSettings,
        "PRODUCTION": BackendProdSettings,
    }

    settings_class = env_map.get(env.upper(), BackendDevSettings)
    return settings_class()


# Global settings instance, immutable after this point
settings = get_settings()


def validate_settings(current: BackendBaseSettings = settings) -> bool:
    """Validate critical settings on startup"""
    errors = []

    if not current.JWT_SECRET:
        errors.append("JWT_SECRET must be set")

    if not current.JWT_REFRESH_SECRET:
        errors.append("JWT_REFRESH_SECRET must be set")

    if current.JWT_SECRET and current.JWT_SECRET == current.JWT_REFRESH_SECRET:
        errors.append("JWT_SECRET and JWT_REFRESH_SECRET must differ")

    if not current.MONGODB_URI:
        errors.append("MONGODB_URI must be set")

    if not current.DATABASE_NAME:
        errors.append("DATABASE_NAME must be set")

    if not 4 <= current.BCRYPT_ROUNDS <= 31:
        errors.append("BCRYPT_ROUNDS must be between 4 and 31")

    for name in ("JWT_EXPIRES_IN", "JWT_REFRESH_EXPIRES_IN"):
        try:
            parse_duration(getattr(current, name))
        except ValueError as e:
            errors.append(f"{name}: {e}")

    if errors:
        raise ValueError(f"Configuration errors: {', '.join(errors)}")

    return True
