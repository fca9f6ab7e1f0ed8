"""Pytest configuration and shared fixtures."""
import os

# Settings are read once at import time
os.environ["ENVIRONMENT"] = "DEV"
os.environ["JWT_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_TO_FILE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import mongomock
import pytest
from fastapi.testclient import TestClient

from troop_manager.api.dependencies import get_db
from troop_manager.config.database import ensure_indexes
from troop_manager.config.settings import settings
from troop_manager.main import app
from troop_manager.services.scout_service import seed_merit_badges

API = settings.API_PREFIX
PASSWORD = "Password123!"

TROOP_PAYLOAD = {
    "name": "Troop 42",
    "description": "Lakeside troop",
    "address": {"street": "1 Main St", "city": "Springfield", "state": "IL", "zipCode": "62701"},
    "charterOrganization": "Springfield Lions Club",
    "meetingSchedule": "Tuesdays 7pm",
    "meetingLocation": "Community Hall",
    "contactEmail": "troop42@example.com",
    "contactPhone": "555-0100",
}

SCOUT_PAYLOAD = {
    "firstName": "Sam",
    "lastName": "Gamgee",
    "dateOfBirth": "2012-04-06",
    "gender": "MALE",
    "address": {"street": "3 Bagshot Row", "city": "Springfield", "state": "IL", "zipCode": "62701"},
    "school": {"name": "Springfield Middle", "grade": "6"},
    "emergencyContacts": [{"name": "Rose", "relationship": "Mother", "phone": "555-0111"}],
    "photoConsent": True,
}


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db():
    mongo_client = mongomock.MongoClient()
    database = mongo_client["scout-troops-test"]
    ensure_indexes(database)
    seed_merit_badges(database)
    yield database
    mongo_client.close()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Factory registering a user through the API; returns id, tokens and headers"""

    def _register(email: str, password: str = PASSWORD, first_name: str = "Test", last_name: str = "User"):
        response = client.post(f"{API}/auth/register", json={
            "email": email,
            "firstName": first_name,
            "lastName": last_name,
            "password": password,
        })
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return {
            "id": data["user"]["id"],
            "user": data["user"],
            "access_token": data["tokens"]["accessToken"],
            "refresh_token": data["tokens"]["refreshToken"],
            "headers": auth_headers(data["tokens"]["accessToken"]),
        }

    return _register


@pytest.fixture
def leader(register):
    return register("leader@example.com", first_name="Lead", last_name="Er")


@pytest.fixture
def troop(client, leader):
    """A troop created by the leader fixture, who becomes its SCOUTMASTER"""
    response = client.post(f"{API}/troops", json=TROOP_PAYLOAD, headers=leader["headers"])
    assert response.status_code == 201, response.text
    return response.json()["data"]
