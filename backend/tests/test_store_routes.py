"""
Store route tests.

Verifies store CRUD, phone conflicts, guarded deletion and owner linking.
"""

from credis.models import StoreOwner
from credis.security import hash_password

from conftest import auth_headers, login


STORE_PAYLOAD = {
    "name": "Yangchen Shop",
    "phone_number": "17800000",
    "address": "Changzamtog, Thimphu",
}


def test_requires_auth(app, db_session):
    resp = app.test_client().get("/api/stores")
    assert resp.status_code == 401


def test_create_and_get(client, auth):
    resp = client.post("/api/stores", json=STORE_PAYLOAD, headers=auth)
    assert resp.status_code == 201
    store_id = resp.json["data"]["id"]

    resp = client.get(f"/api/stores/{store_id}", headers=auth)
    assert resp.status_code == 200
    assert resp.json["data"]["phone_number"] == "17800000"


def test_list_newest_first(client, auth, store):
    client.post("/api/stores", json=STORE_PAYLOAD, headers=auth)

    resp = client.get("/api/stores", headers=auth)
    names = [s["name"] for s in resp.json["data"]]
    assert names[0] == "Yangchen Shop"
    assert store.name in names


def test_duplicate_phone_conflict(client, auth, store):
    resp = client.post("/api/stores", json={**STORE_PAYLOAD, "phone_number": store.phone_number}, headers=auth)
    assert resp.status_code == 409


def test_validation(client, auth):
    resp = client.post("/api/stores", json={**STORE_PAYLOAD, "phone_number": "123"}, headers=auth)
    assert resp.status_code == 400

    resp = client.post("/api/stores", json={**STORE_PAYLOAD, "address": "abc"}, headers=auth)
    assert resp.status_code == 400

    resp = client.post("/api/stores", json={**STORE_PAYLOAD, "code": "X"}, headers=auth)
    assert resp.status_code == 400
    assert resp.json["error"] == "Field not allowed: code"


def test_update(client, auth, store, other_store):
    resp = client.put(f"/api/stores/{store.id}", json={"name": "Renamed Store"}, headers=auth)
    assert resp.status_code == 200
    assert resp.json["data"]["name"] == "Renamed Store"
    assert resp.json["data"]["address"] == store.address

    resp = client.put(f"/api/stores/{store.id}", json={"phone_number": other_store.phone_number}, headers=auth)
    assert resp.status_code == 409


def test_delete_refused_while_customers_exist(client, auth, customer):
    resp = client.delete(f"/api/stores/{customer.store_id}", headers=auth)
    assert resp.status_code == 409


def test_delete_empty_store(client, auth, other_store):
    resp = client.delete(f"/api/stores/{other_store.id}", headers=auth)
    assert resp.status_code == 200

    resp = client.get(f"/api/stores/{other_store.id}", headers=auth)
    assert resp.status_code == 404


def test_with_customers_and_owners(client, auth, store, customer, owner):
    resp = client.get(f"/api/stores/{store.id}/customers", headers=auth)
    assert [c["id"] for c in resp.json["data"]["customers"]] == [customer.id]

    resp = client.get(f"/api/stores/{store.id}/owners", headers=auth)
    assert [o["id"] for o in resp.json["data"]["store_owners"]] == [owner.id]


def test_owner_without_store_is_linked(app, db_session):
    owner = StoreOwner(name="New Owner", phone_number="17800001", password_hash=hash_password("pin1234", rounds=4))
    db_session.add(owner)
    db_session.commit()

    client = app.test_client()
    token = login(client, "17800001", "pin1234").json["accessToken"]

    resp = client.post("/api/stores", json=STORE_PAYLOAD, headers=auth_headers(token))
    assert resp.status_code == 201

    db_session.expire_all()
    assert db_session.get(StoreOwner, owner.id).store_id == resp.json["data"]["id"]
