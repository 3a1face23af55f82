from income_tracker.db import crud, models

from tests.conftest import income_payload


def test_create_defaults_to_main(client, member_headers):
    r = client.post("/api/v1/entities", json={"name": "البنك الأهلي", "province": "الدمام"}, headers=member_headers)
    assert r.status_code == 201
    body = r.json()
    assert body["type"] == "MAIN"
    assert body["mainEntity"] is None
    assert body["subEntities"] == []
    assert body["_count"] == {"incomes": 0}


def test_create_requires_authentication(client, db):
    r = client.post("/api/v1/entities", json={"name": "X", "province": "Y"})
    assert r.status_code == 401
    assert db.query(models.Entity).count() == 0


def test_sub_entity_needs_an_existing_parent(client, db, member_headers):
    r = client.post(
        "/api/v1/entities",
        json={"name": "Branch", "province": "جدة", "mainEntityId": "missing", "type": "SUB"},
        headers=member_headers,
    )
    assert r.status_code == 404
    assert r.json() == {"error": "Main entity not found"}
    assert db.query(models.Entity).count() == 0


def test_validation_errors_are_itemized(client, member_headers):
    r = client.post("/api/v1/entities", json={"name": "", "type": "BRANCH"}, headers=member_headers)
    assert r.status_code == 400
    fields = {d["field"] for d in r.json()["details"]}
    assert {"name", "province", "type"} <= fields


def test_listing_is_denormalized_and_filterable(client, db, entity, member, member_headers):
    r = client.post(
        "/api/v1/entities",
        json={"name": "Branch", "province": "جدة", "mainEntityId": entity.id, "type": "SUB"},
        headers=member_headers,
    )
    assert r.status_code == 201
    branch = r.json()
    assert branch["mainEntity"] == {"id": entity.id, "name": entity.name}

    client.post("/api/v1/incomes", json=income_payload(entity.id, member.id), headers=member_headers)

    listed = client.get("/api/v1/entities", headers=member_headers).json()
    # ordered by name
    assert [e["name"] for e in listed] == sorted(e["name"] for e in listed)
    parent = next(e for e in listed if e["id"] == entity.id)
    assert parent["subEntities"] == [{"id": branch["id"], "name": "Branch"}]
    assert parent["_count"] == {"incomes": 1}

    only_subs = client.get("/api/v1/entities", params={"type": "SUB"}, headers=member_headers).json()
    assert [e["id"] for e in only_subs] == [branch["id"]]

    riyadh = client.get("/api/v1/entities", params={"province": "الرياض"}, headers=member_headers).json()
    assert [e["id"] for e in riyadh] == [entity.id]


def test_listing_rejects_unknown_type_filter(client, member_headers):
    r = client.get("/api/v1/entities", params={"type": "BRANCH"}, headers=member_headers)
    assert r.status_code == 400


def test_crud_create_entity_defaults(db):
    e = crud.create_entity(db, name="A", province="B")
    assert e.type is models.EntityType.MAIN
    assert e.main_entity_id is None
