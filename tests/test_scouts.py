# tests/test_scouts.py
import uuid

import pytest

from conftest import API, SCOUT_PAYLOAD


@pytest.fixture
def scout(client, leader, troop):
    response = client.post(f"{API}/scouts", json=dict(SCOUT_PAYLOAD, troopId=troop["id"]), headers=leader["headers"])
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def camping_badge(client, leader):
    catalog = client.get(f"{API}/scouts/merit-badges/catalog", headers=leader["headers"]).json()["data"]
    return next(badge for badge in catalog if badge["name"] == "Camping")


def test_scouts_require_authentication(client):
    assert client.get(f"{API}/scouts/my").status_code == 401


def test_create_scout_defaults(scout, leader, troop):
    assert scout["first_name"] == "Sam"
    assert scout["troop_id"] == troop["id"]
    assert scout["parent_id"] == leader["id"]
    assert scout["current_rank"] == "SCOUT"
    assert scout["date_of_birth"].startswith("2012-04-06")
    assert scout["school"] == {"name": "Springfield Middle", "grade": "6"}


def test_create_scout_in_unknown_troop(client, leader):
    response = client.post(
        f"{API}/scouts",
        json=dict(SCOUT_PAYLOAD, troopId=str(uuid.uuid4())),
        headers=leader["headers"],
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Troop not found"


def test_list_scouts_needs_a_filter(client, leader):
    response = client.get(f"{API}/scouts", headers=leader["headers"])

    assert response.status_code == 400
    assert response.json()["error"] == "Either troopId or parentId query parameter is required"


def test_list_scouts_by_troop_and_mine(client, leader, troop, scout):
    client.post(
        f"{API}/scouts",
        json=dict(SCOUT_PAYLOAD, firstName="Merry", lastName="Brandybuck", troopId=troop["id"]),
        headers=leader["headers"],
    )

    by_troop = client.get(f"{API}/scouts", params={"troopId": troop["id"]}, headers=leader["headers"]).json()["data"]
    mine = client.get(f"{API}/scouts/my", headers=leader["headers"]).json()["data"]

    assert [s["last_name"] for s in by_troop] == ["Brandybuck", "Gamgee"]
    assert len(mine) == 2


def test_update_and_delete_scout(client, leader, scout):
    updated = client.put(
        f"{API}/scouts/{scout['id']}",
        json={"photoConsent": False, "address": {"street": "Bag End"}},
        headers=leader["headers"],
    )

    assert updated.status_code == 200
    assert updated.json()["data"]["photo_consent"] is False
    assert updated.json()["data"]["address"]["street"] == "Bag End"
    assert updated.json()["data"]["address"]["city"] == "Springfield"

    deleted = client.delete(f"{API}/scouts/{scout['id']}", headers=leader["headers"])
    assert deleted.status_code == 200
    assert client.get(f"{API}/scouts/{scout['id']}", headers=leader["headers"]).status_code == 404


def test_rank_advancement_updates_current_rank(client, leader, scout):
    response = client.post(
        f"{API}/scouts/{scout['id']}/ranks",
        json={"rank": "TENDERFOOT", "boardDate": "2024-05-01", "boardMembers": ["Mr. Baggins"]},
        headers=leader["headers"],
    )

    assert response.status_code == 201
    advancement = response.json()["data"]
    assert advancement["rank"] == "TENDERFOOT"
    assert advancement["board_members"] == ["Mr. Baggins"]
    assert advancement["awarded_date"]

    history = client.get(f"{API}/scouts/{scout['id']}/ranks", headers=leader["headers"]).json()["data"]
    assert history["current_rank"] == "TENDERFOOT"
    assert [entry["rank"] for entry in history["rank_advancements"]] == ["TENDERFOOT"]


def test_rank_must_be_known(client, leader, scout):
    response = client.post(f"{API}/scouts/{scout['id']}/ranks", json={"rank": "WIZARD"}, headers=leader["headers"])

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "rank"


def test_merit_badge_catalog(client, leader):
    catalog = client.get(f"{API}/scouts/merit-badges/catalog", headers=leader["headers"]).json()["data"]
    life_skills = client.get(
        f"{API}/scouts/merit-badges/catalog",
        params={"category": "Life Skills"},
        headers=leader["headers"],
    ).json()["data"]

    names = [badge["name"] for badge in catalog]
    assert len(names) == 10
    assert names == sorted(names)
    assert {badge["category"] for badge in life_skills} == {"Life Skills"}
    assert len(life_skills) == 4


def test_merit_badge_progress(client, leader, scout, camping_badge):
    url = f"{API}/scouts/{scout['id']}/merit-badges"

    started = client.post(url, json={"badgeId": camping_badge["id"], "counselor": "Mr. Gandalf"}, headers=leader["headers"])
    assert started.status_code == 201
    assert started.json()["data"]["start_date"]
    assert started.json()["data"]["completed_date"] is None

    again = client.post(url, json={"badgeId": camping_badge["id"]}, headers=leader["headers"])
    assert again.status_code == 409

    completed = client.put(f"{url}/{camping_badge['id']}/complete", headers=leader["headers"])
    assert completed.status_code == 200
    assert completed.json()["data"]["completed_date"]

    progress = client.get(url, headers=leader["headers"]).json()["data"]["scout_merit_badges"]
    assert len(progress) == 1
    assert progress[0]["counselor"] == "Mr. Gandalf"
    assert progress[0]["merit_badges"]["name"] == "Camping"


def test_start_unknown_merit_badge(client, leader, scout):
    response = client.post(
        f"{API}/scouts/{scout['id']}/merit-badges",
        json={"badgeId": str(uuid.uuid4())},
        headers=leader["headers"],
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Merit badge not found"


def test_complete_badge_that_was_never_started(client, leader, scout, camping_badge):
    response = client.put(
        f"{API}/scouts/{scout['id']}/merit-badges/{camping_badge['id']}/complete",
        headers=leader["headers"],
    )

    assert response.status_code == 404
