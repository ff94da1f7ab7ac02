"""
Customer route tests.

Verifies customer create/update validation, per-store phone uniqueness and
the overdue report.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from credis.models import CustomerBalance
from credis.time_utils import utcnow


def _customer_payload(store_id, **overrides):
    payload = {
        "store_id": store_id,
        "name": "Dorji Wangchuk",
        "phone_number": "17700000",
        "credit_limit": "1000",
    }
    payload.update(overrides)
    return payload


def test_create_customer(client, auth, store):
    resp = client.post("/api/customers", json=_customer_payload(store.id), headers=auth)

    assert resp.status_code == 201
    assert resp.json["data"]["credit_limit"] == "1000.00"
    assert resp.json["data"]["is_active"] is True


def test_camel_case_aliases(client, auth, store):
    resp = client.post("/api/customers", json={
        "storeId": store.id,
        "name": "Dorji",
        "phoneNumber": "17700001",
        "creditLimit": 250,
    }, headers=auth)

    assert resp.status_code == 201
    assert resp.json["data"]["phone_number"] == "17700001"


def test_same_phone_allowed_in_other_store(client, auth, store, other_store):
    assert client.post("/api/customers", json=_customer_payload(store.id), headers=auth).status_code == 201
    assert client.post("/api/customers", json=_customer_payload(other_store.id), headers=auth).status_code == 201

    resp = client.post("/api/customers", json=_customer_payload(store.id), headers=auth)
    assert resp.status_code == 409


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "D"},
        {"phone_number": "1770000"},
        {"phone_number": "177000000"},
        {"credit_limit": "-1"},
        {"credit_limit": "NaN"},
        {"email": "not-an-email"},
    ],
)
def test_create_validation(client, auth, store, overrides):
    resp = client.post("/api/customers", json=_customer_payload(store.id, **overrides), headers=auth)
    assert resp.status_code == 400


def test_unknown_store(client, auth):
    resp = client.post("/api/customers", json=_customer_payload(9999), headers=auth)
    assert resp.status_code == 404


def test_get_and_list(client, auth, customer, other_store):
    resp = client.get(f"/api/customers/{customer.id}", headers=auth)
    assert resp.json["data"]["name"] == customer.name

    resp = client.get(f"/api/customers?store_id={customer.store_id}", headers=auth)
    assert [c["id"] for c in resp.json["data"]] == [customer.id]

    resp = client.get(f"/api/customers?store_id={other_store.id}", headers=auth)
    assert resp.json["data"] == []

    assert client.get("/api/customers/9999", headers=auth).status_code == 404


def test_partial_update(client, auth, customer):
    resp = client.patch(f"/api/customers/{customer.id}", json={"credit_limit": "75.5"}, headers=auth)

    assert resp.status_code == 200
    assert resp.json["data"]["credit_limit"] == "75.50"
    assert resp.json["data"]["name"] == customer.name


def test_clearing_credit_limit(client, auth, limited_customer):
    resp = client.patch(f"/api/customers/{limited_customer.id}", json={"credit_limit": None}, headers=auth)
    assert resp.json["data"]["credit_limit"] is None


def test_store_cannot_change(client, auth, customer, other_store):
    resp = client.patch(f"/api/customers/{customer.id}", json={"store_id": other_store.id}, headers=auth)
    assert resp.status_code == 400


def test_update_phone_conflict(client, auth, customer, limited_customer):
    resp = client.patch(
        f"/api/customers/{customer.id}",
        json={"phone_number": limited_customer.phone_number},
        headers=auth,
    )
    assert resp.status_code == 409


# =============================================================================
# OVERDUE REPORT
# =============================================================================


class TestOverdue:
    def _balance(self, db_session, customer, outstanding, last_payment):
        db_session.add(CustomerBalance(
            customer_id=customer.id,
            store_id=customer.store_id,
            total_credit_given=Decimal(outstanding),
            total_payments_received=Decimal("0"),
            outstanding_balance=Decimal(outstanding),
            last_payment_date=last_payment,
        ))
        db_session.commit()

    def test_overdue_rules(self, client, auth, db_session, customer, limited_customer, store):
        self._balance(db_session, customer, "120", None)
        self._balance(db_session, limited_customer, "80", utcnow() - timedelta(days=5))

        resp = client.get(f"/api/customers/overdue?store_id={store.id}", headers=auth)
        assert resp.status_code == 200
        assert [row["customer_id"] for row in resp.json["data"]] == [customer.id]
        assert resp.json["data"][0]["customer"]["name"] == customer.name

        resp = client.get(f"/api/customers/overdue?store_id={store.id}&days=1", headers=auth)
        assert [row["customer_id"] for row in resp.json["data"]] == [customer.id, limited_customer.id]

    def test_settled_customer_not_overdue(self, client, auth, db_session, customer, store):
        self._balance(db_session, customer, "0", None)

        resp = client.get(f"/api/customers/overdue?store_id={store.id}", headers=auth)
        assert resp.json["data"] == []

    def test_validation(self, client, auth, store):
        assert client.get("/api/customers/overdue", headers=auth).status_code == 400
        assert client.get(f"/api/customers/overdue?store_id={store.id}&days=-1", headers=auth).status_code == 400
        assert client.get("/api/customers/overdue?store_id=9999", headers=auth).status_code == 404
