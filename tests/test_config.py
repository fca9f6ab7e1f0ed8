# tests/test_config.py
from datetime import timedelta

import pytest

from conftest import API
from troop_manager.config.settings import get_settings, settings, validate_settings
from troop_manager.config.settings.development import BackendDevSettings
from troop_manager.config.settings.environment import Environment
from troop_manager.config.settings.production import BackendProdSettings
from troop_manager.config.settings.staging import BackendStageSettings
from troop_manager.core.security import TokenService
from troop_manager.utilities.helpers.date_utils import parse_duration


@pytest.mark.parametrize("value, expected", [
    ("7d", timedelta(days=7)),
    ("12h", timedelta(hours=12)),
    ("30m", timedelta(minutes=30)),
    ("45s", timedelta(seconds=45)),
    ("90", timedelta(seconds=90)),
    ("0", timedelta(0)),
    (3600, timedelta(hours=1)),
])
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["", "7 days", "1w", "d7"])
def test_parse_duration_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_duration(value)


def test_current_settings_are_valid():
    assert validate_settings(settings) is True


def test_secrets_must_differ():
    broken = settings.model_copy(update={"JWT_REFRESH_SECRET": settings.JWT_SECRET})

    with pytest.raises(ValueError, match="must differ"):
        validate_settings(broken)


def test_bad_rounds_and_durations_are_reported_together():
    broken = settings.model_copy(update={"BCRYPT_ROUNDS": 2, "JWT_EXPIRES_IN": "forever"})

    with pytest.raises(ValueError) as exc_info:
        validate_settings(broken)
    assert "BCRYPT_ROUNDS" in str(exc_info.value)
    assert "JWT_EXPIRES_IN" in str(exc_info.value)


def test_environment_selection():
    assert isinstance(get_settings("prod"), BackendProdSettings)
    assert isinstance(get_settings("unknown"), BackendDevSettings)


@pytest.mark.parametrize("raw, expected_class, expected_environment", [
    ("PRODUCTION", BackendProdSettings, Environment.PRODUCTION),
    ("staging", BackendStageSettings, Environment.STAGING),
    ("unknown", BackendDevSettings, Environment.DEVELOPMENT),
])
def test_long_and_unknown_environment_names_load(monkeypatch, raw, expected_class, expected_environment):
    monkeypatch.setenv("ENVIRONMENT", raw)

    resolved = get_settings(raw)

    assert isinstance(resolved, expected_class)
    assert resolved.ENVIRONMENT == expected_environment


def test_token_lifetimes_come_from_settings():
    service = TokenService.from_settings(settings)

    assert service.access_ttl == timedelta(days=7)
    assert service.refresh_ttl == timedelta(days=30)
    assert service.access_secret != service.refresh_secret


def test_service_banner_and_health(client):
    root = client.get("/")
    health = client.get("/health")

    assert root.status_code == 200
    assert root.json()["endpoints"]["auth"] == f"{API}/auth"
    assert health.status_code == 200
    assert health.json()["status"] == "OK"


def test_openapi_documents_the_error_envelope(client):
    schema = client.get("/openapi.json").json()

    login = schema["paths"][f"{API}/auth/login"]["post"]
    assert {"400", "401", "403", "404", "409"} <= set(login["responses"])
    assert "ErrorResponse" in schema["components"]["schemas"]
