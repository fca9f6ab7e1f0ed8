# tests/test_troops.py
import uuid

from conftest import API, TROOP_PAYLOAD, SCOUT_PAYLOAD


def test_create_troop(client, leader):
    response = client.post(f"{API}/troops", json=TROOP_PAYLOAD, headers=leader["headers"])

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Troop created successfully"
    troop = body["data"]
    assert troop["name"] == "Troop 42"
    assert troop["charter_organization"] == "Springfield Lions Club"
    assert troop["contact_email"] == "troop42@example.com"
    assert troop["address"]["zipCode"] == "62701"
    assert troop["status"] == "ACTIVE"
    assert troop["troop_size_limit"] == 100
    assert troop["created_by_id"] == leader["id"]


def test_create_troop_requires_authentication(client):
    response = client.post(f"{API}/troops", json=TROOP_PAYLOAD)
    assert response.status_code == 401


def test_create_troop_validation(client, leader):
    payload = dict(TROOP_PAYLOAD, contactEmail="nope", troopSizeLimit=0)
    del payload["name"]

    response = client.post(f"{API}/troops", json=payload, headers=leader["headers"])

    assert response.status_code == 400
    fields = {detail["field"] for detail in response.json()["details"]}
    assert {"name", "contactEmail", "troopSizeLimit"} <= fields


def test_creator_sees_troop_in_my_troops(client, leader, troop):
    response = client.get(f"{API}/troops/my/troops", headers=leader["headers"])

    assert response.status_code == 200
    my_troops = response.json()["data"]
    assert [t["id"] for t in my_troops] == [troop["id"]]
    assert my_troops[0]["roles"] == ["SCOUTMASTER"]


def test_public_troop_listing(client, leader, troop):
    client.post(f"{API}/troops", json=dict(TROOP_PAYLOAD, name="Troop 7"), headers=leader["headers"])

    response = client.get(f"{API}/troops")

    assert response.status_code == 200
    assert [t["name"] for t in response.json()["data"]] == ["Troop 42", "Troop 7"]


def test_get_troop_by_id(client, troop):
    response = client.get(f"{API}/troops/{troop['id']}")

    assert response.status_code == 200
    assert response.json()["data"]["id"] == troop["id"]


def test_get_unknown_troop(client):
    response = client.get(f"{API}/troops/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Troop not found"}


def test_troop_id_must_be_a_uuid(client):
    response = client.get(f"{API}/troops/not-a-uuid")

    assert response.status_code == 400
    assert response.json()["error"] == "Validation error"


def test_leader_can_update_troop_and_address_is_merged(client, leader, troop):
    response = client.put(
        f"{API}/troops/{troop['id']}",
        json={"meetingSchedule": "Thursdays 6pm", "address": {"city": "Shelbyville"}},
        headers=leader["headers"],
    )

    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["meeting_schedule"] == "Thursdays 6pm"
    assert updated["address"] == {
        "street": "1 Main St", "city": "Shelbyville", "state": "IL", "zipCode": "62701",
    }


def test_outsider_cannot_update_troop(client, register, troop):
    outsider = register("outsider@example.com")

    response = client.put(f"{API}/troops/{troop['id']}", json={"name": "Hijacked"}, headers=outsider["headers"])

    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Insufficient permissions"}


def test_leader_of_another_troop_cannot_update(client, register, troop):
    other_leader = register("other-leader@example.com")
    client.post(f"{API}/troops", json=dict(TROOP_PAYLOAD, name="Other"), headers=other_leader["headers"])

    response = client.put(f"{API}/troops/{troop['id']}", json={"name": "Hijacked"}, headers=other_leader["headers"])

    assert response.status_code == 403


def test_add_member_and_list_members(client, register, leader, troop):
    parent = register("parent@example.com", first_name="Pa", last_name="Rent")

    response = client.post(
        f"{API}/troops/{troop['id']}/members",
        json={"userId": parent["id"], "role": "PARENT"},
        headers=leader["headers"],
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Member added to troop successfully"

    details = client.get(f"{API}/troops/{troop['id']}/members", headers=parent["headers"]).json()["data"]
    roles = {(member["id"], member["role"]) for member in details["members"]}
    assert roles == {(leader["id"], "SCOUTMASTER"), (parent["id"], "PARENT")}
    assert all("password" not in member for member in details["members"])
    assert details["scouts"] == []


def test_add_member_twice_is_a_conflict(client, register, leader, troop):
    parent = register("parent@example.com")
    url = f"{API}/troops/{troop['id']}/members"
    body = {"userId": parent["id"], "role": "PARENT"}

    client.post(url, json=body, headers=leader["headers"])
    response = client.post(url, json=body, headers=leader["headers"])

    assert response.status_code == 409
    assert response.json()["success"] is False


def test_add_unknown_user_as_member(client, leader, troop):
    response = client.post(
        f"{API}/troops/{troop['id']}/members",
        json={"userId": str(uuid.uuid4()), "role": "PARENT"},
        headers=leader["headers"],
    )

    assert response.status_code == 404
    assert response.json()["error"] == "User not found"


def test_parent_cannot_add_members(client, register, leader, troop):
    parent = register("parent@example.com")
    friend = register("friend@example.com")
    client.post(
        f"{API}/troops/{troop['id']}/members",
        json={"userId": parent["id"], "role": "PARENT"},
        headers=leader["headers"],
    )

    response = client.post(
        f"{API}/troops/{troop['id']}/members",
        json={"userId": friend["id"], "role": "PARENT"},
        headers=parent["headers"],
    )

    assert response.status_code == 403


def test_remove_member_by_role(client, register, leader, troop):
    helper = register("helper@example.com")
    url = f"{API}/troops/{troop['id']}/members"
    client.post(url, json={"userId": helper["id"], "role": "PARENT"}, headers=leader["headers"])
    client.post(url, json={"userId": helper["id"], "role": "COMMITTEE_MEMBER"}, headers=leader["headers"])

    response = client.delete(f"{url}/{helper['id']}", params={"role": "PARENT"}, headers=leader["headers"])
    assert response.status_code == 200

    my_troops = client.get(f"{API}/troops/my/troops", headers=helper["headers"]).json()["data"]
    assert my_troops[0]["roles"] == ["COMMITTEE_MEMBER"]

    client.delete(f"{url}/{helper['id']}", headers=leader["headers"])
    assert client.get(f"{API}/troops/my/troops", headers=helper["headers"]).json()["data"] == []


def test_troop_stats(client, register, leader, troop):
    parent = register("parent@example.com")
    client.post(
        f"{API}/troops/{troop['id']}/members",
        json={"userId": parent["id"], "role": "PARENT"},
        headers=leader["headers"],
    )
    client.post(f"{API}/scouts", json=dict(SCOUT_PAYLOAD, troopId=troop["id"]), headers=parent["headers"])
    client.post(
        f"{API}/scouts",
        json=dict(SCOUT_PAYLOAD, firstName="Frodo", troopId=troop["id"], currentRank="STAR"),
        headers=parent["headers"],
    )

    response = client.get(f"{API}/troops/{troop['id']}/stats", headers=leader["headers"])

    assert response.status_code == 200
    assert response.json()["data"] == {
        "totalScouts": 2,
        "totalAdults": 2,
        "scoutsByRank": {"SCOUT": 1, "STAR": 1},
        "usersByRole": {"SCOUTMASTER": 1, "PARENT": 1},
    }


def test_archive_and_reactivate(client, leader, troop):
    archived = client.put(f"{API}/troops/{troop['id']}/archive", headers=leader["headers"])
    assert archived.status_code == 200
    assert archived.json()["data"]["status"] == "ARCHIVED"
    assert client.get(f"{API}/troops").json()["data"] == []

    reactivated = client.put(f"{API}/troops/{troop['id']}/reactivate", headers=leader["headers"])
    assert reactivated.json()["data"]["status"] == "ACTIVE"
    assert len(client.get(f"{API}/troops").json()["data"]) == 1
