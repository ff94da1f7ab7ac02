"""
Credit route tests.

Verifies:
- Create/update/delete status codes and envelopes
- Payload validation (type, amount bounds, journal number)
- Summary, ranking and listing endpoints
- Error envelope for unknown ids and unhandled errors
"""

import pytest

from conftest import auth_headers, login


def _credit(customer, **overrides):
    payload = {
        "customer_id": customer.id,
        "store_id": customer.store_id,
        "amount": "100.00",
        "transaction_type": "credit_given",
        "items_description": "rice 10kg",
    }
    payload.update(overrides)
    return payload


def _payment(customer, **overrides):
    return _credit(customer, transaction_type="payment_received", journal_number="J-1", **overrides)


# =============================================================================
# CREATE
# =============================================================================


class TestCreateRoute:
    def test_create(self, client, auth, customer, owner):
        resp = client.post("/api/credits", json=_credit(customer), headers=auth)

        assert resp.status_code == 201
        data = resp.json["data"]
        assert data["amount"] == "100.00"
        assert data["transaction_type"] == "credit_given"
        assert data["created_by_owner_id"] == owner.id
        assert data["transaction_date"].endswith("Z")

    def test_numeric_amount_accepted(self, client, auth, customer):
        resp = client.post("/api/credits", json=_credit(customer, amount=12.5), headers=auth)
        assert resp.json["data"]["amount"] == "12.50"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"transaction_type": "refund"},
            {"amount": "0"},
            {"amount": "-5"},
            {"amount": "1000000000.00"},
            {"amount": "abc"},
            {"amount": True},
            {"amount": "10.005"},
            {"customer_id": "--1"},
            {"store_id": "²"},
            {"items_description": "x" * 1001},
            {"journal_number": "J" * 101},
        ],
    )
    def test_invalid_payloads(self, client, auth, customer, overrides):
        resp = client.post("/api/credits", json=_credit(customer, **overrides), headers=auth)
        assert resp.status_code == 400
        assert resp.json["success"] is False

    def test_missing_fields(self, client, auth, customer):
        resp = client.post("/api/credits", json={"customer_id": customer.id}, headers=auth)
        assert resp.status_code == 400
        assert resp.json["error"].startswith("Missing required fields")

    def test_payment_requires_journal(self, client, auth, customer):
        resp = client.post(
            "/api/credits",
            json=_credit(customer, transaction_type="payment_received"),
            headers=auth,
        )
        assert resp.status_code == 400
        assert "Journal number" in resp.json["error"]

    def test_unknown_customer_is_404(self, client, auth, customer):
        resp = client.post("/api/credits", json=_credit(customer, customer_id=9999), headers=auth)
        assert resp.status_code == 404
        assert resp.json == {"success": False, "error": "Customer not found"}

    def test_credit_limit(self, client, auth, limited_customer):
        assert client.post("/api/credits", json=_credit(limited_customer, amount="480"), headers=auth).status_code == 201

        resp = client.post("/api/credits", json=_credit(limited_customer, amount="25"), headers=auth)
        assert resp.status_code == 400
        assert resp.json["error"] == "Credit limit exceeded. Current balance: 480.00, Credit limit: 500.00"

        resp = client.post("/api/credits", json=_credit(limited_customer, amount="20"), headers=auth)
        assert resp.status_code == 201

    def test_requires_auth(self, app, customer):
        resp = app.test_client().post("/api/credits", json=_credit(customer))
        assert resp.status_code == 401


# =============================================================================
# UPDATE / DELETE
# =============================================================================


class TestUpdateDeleteRoutes:
    def test_patch(self, client, auth, customer):
        credit_id = client.post("/api/credits", json=_credit(customer), headers=auth).json["data"]["id"]

        resp = client.patch(f"/api/credits/{credit_id}", json={"amount": "80"}, headers=auth)
        assert resp.status_code == 200
        assert resp.json["data"]["amount"] == "80.00"
        assert resp.json["data"]["items_description"] == "rice 10kg"

    def test_patch_rejects_immutable_fields(self, client, auth, customer):
        credit_id = client.post("/api/credits", json=_credit(customer), headers=auth).json["data"]["id"]

        resp = client.patch(f"/api/credits/{credit_id}", json={"customer_id": customer.id}, headers=auth)
        assert resp.status_code == 400

    def test_patch_unknown(self, client, auth):
        resp = client.patch("/api/credits/9999", json={"amount": "5"}, headers=auth)
        assert resp.status_code == 404

    def test_delete_updates_summary(self, client, auth, customer):
        first = client.post("/api/credits", json=_credit(customer), headers=auth).json["data"]["id"]
        client.post("/api/credits", json=_payment(customer, amount="30"), headers=auth)

        assert client.delete(f"/api/credits/{first}", headers=auth).status_code == 200
        assert client.get(f"/api/credits/{first}", headers=auth).status_code == 404

        summary = client.get(f"/api/credits/customer/{customer.id}/summary", headers=auth).json["data"]
        assert summary["outstanding_balance"] == "-30.00"
        assert summary["transaction_count"] == 1


# =============================================================================
# READS
# =============================================================================


class TestReadRoutes:
    def test_get_includes_customer_and_store(self, client, auth, customer):
        credit_id = client.post("/api/credits", json=_credit(customer), headers=auth).json["data"]["id"]

        data = client.get(f"/api/credits/{credit_id}", headers=auth).json["data"]
        assert data["customer"]["name"] == customer.name
        assert data["store"]["id"] == customer.store_id

    def test_customer_summary(self, client, auth, customer):
        client.post("/api/credits", json=_credit(customer, amount="100"), headers=auth)
        client.post("/api/credits", json=_payment(customer, amount="40"), headers=auth)

        resp = client.get(f"/api/credits/customer/{customer.id}/summary", headers=auth)
        data = resp.json["data"]
        assert data["total_credit_given"] == "100.00"
        assert data["total_payments_received"] == "40.00"
        assert data["outstanding_balance"] == "60.00"
        assert data["transaction_count"] == 2

    def test_store_summary_and_listing(self, client, auth, customer, limited_customer):
        client.post("/api/credits", json=_credit(customer, amount="100"), headers=auth)
        client.post("/api/credits", json=_credit(limited_customer, amount="50"), headers=auth)

        summary = client.get(f"/api/credits/store/{customer.store_id}/summary", headers=auth).json["data"]
        assert summary["total_customers"] == 2
        assert summary["total_outstanding_balance"] == "150.00"
        assert summary["total_transactions"] == 2

        rows = client.get(f"/api/credits/store/{customer.store_id}", headers=auth).json["data"]
        assert len(rows) == 2

        rows = client.get(f"/api/credits/customer/{customer.id}", headers=auth).json["data"]
        assert [r["customer_id"] for r in rows] == [customer.id]

        assert client.get("/api/credits", headers=auth).status_code == 200

    def test_outstanding_ranking(self, client, auth, customer, limited_customer):
        client.post("/api/credits", json=_credit(customer, amount="300"), headers=auth)
        client.post("/api/credits", json=_credit(limited_customer, amount="150"), headers=auth)

        resp = client.get(f"/api/credits/store/{customer.store_id}/outstanding?limit=1", headers=auth)
        assert resp.status_code == 200
        assert [r["customerId"] for r in resp.json["data"]] == [customer.id]
        assert resp.json["data"][0]["outstandingBalance"] == "300.00"

    def test_recent_uses_brief_projection(self, client, auth, customer):
        client.post("/api/credits", json=_credit(customer), headers=auth)

        resp = client.get(f"/api/credits/recent?limit=5&store_id={customer.store_id}", headers=auth)
        row = resp.json["data"][0]
        assert set(row["customer"]) == {"id", "name", "phone_number"}
        assert set(row["store"]) == {"id", "name"}

        assert client.get("/api/credits/recent?limit=0", headers=auth).status_code == 400
        assert client.get("/api/credits/recent?limit=101", headers=auth).status_code == 400
        assert client.get("/api/credits/recent?limit=ten", headers=auth).status_code == 400
        assert client.get("/api/credits/recent?limit=--5", headers=auth).status_code == 400

    def test_filter(self, client, auth, customer):
        client.post("/api/credits", json=_credit(customer, amount="10"), headers=auth)
        client.post("/api/credits", json=_credit(customer, amount="500"), headers=auth)

        resp = client.get(f"/api/credits/filter?customer_id={customer.id}&min_amount=100", headers=auth)
        assert [r["amount"] for r in resp.json["data"]] == ["500.00"]

        resp = client.get("/api/credits/filter?min_amount=10&max_amount=5", headers=auth)
        assert resp.status_code == 400

        resp = client.get("/api/credits/filter?transaction_type=refund", headers=auth)
        assert resp.status_code == 400

    def test_date_range(self, client, auth, customer):
        client.post(
            "/api/credits",
            json=_credit(customer, transaction_date="2026-03-01T10:00:00Z"),
            headers=auth,
        )

        resp = client.get(
            "/api/credits/date-range?start_date=2026-03-01&end_date=2026-03-02",
            headers=auth,
        )
        assert len(resp.json["data"]) == 1

        resp = client.get("/api/credits/date-range?start_date=2026-01-01&end_date=2027-06-01", headers=auth)
        assert resp.status_code == 400
        assert resp.json["error"] == "Date range cannot exceed 365 days"

        assert client.get("/api/credits/date-range", headers=auth).status_code == 400

    def test_unknown_store_summary(self, client, auth):
        resp = client.get("/api/credits/store/9999/summary", headers=auth)
        assert resp.status_code == 404
        assert resp.json["error"] == "Store not found"


# =============================================================================
# ERROR ENVELOPES
# =============================================================================


def test_unknown_route_is_json(client, db_session):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json["success"] is False


def test_unhandled_error_is_generic(app, client, auth, monkeypatch):
    from credis.container import get_services

    with app.app_context():
        credits = get_services().credits

    def boom(*args, **kwargs):
        raise RuntimeError("database password is hunter2")

    monkeypatch.setattr(credits, "get_all_credits", boom)

    resp = client.get("/api/credits", headers=auth)
    assert resp.status_code == 500
    assert resp.json == {"success": False, "error": "Internal server error"}


def test_health(client, db_session):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json["status"] == "healthy"

    assert client.get("/").json["success"] is True


def test_invalid_json_body(client, auth):
    resp = client.post("/api/credits", data="not json", headers={**auth, "Content-Type": "application/json"})
    assert resp.status_code == 400


def test_bearer_helper_roundtrip(app, owner):
    token = login(app.test_client()).json["accessToken"]
    resp = app.test_client().get("/api/credits", headers=auth_headers(token))
    assert resp.status_code == 200
