"""HTTP tests through FastAPI's TestClient."""

import pytest
from uuid import uuid4


def register(client, email="alice@example.com", password="correct-horse", name="Alice"):
    return client.post(
        "/auth/register",
        json={"name": name, "email": email, "password": password},
    )


def auth_headers(client, email="alice@example.com") -> dict:
    response = register(client, email=email)
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "OK"


class TestAuthEndpoints:
    """Tests for /auth routes."""

    def test_register(self, client):
        response = register(client)
        body = response.json()

        assert response.status_code == 201
        assert body["user"]["email"] == "alice@example.com"
        assert "password_hash" not in body["user"]
        assert "password" not in body["user"]
        assert body["token_type"] == "bearer"
        assert body["token"]

    def test_register_duplicate(self, client):
        register(client)
        response = register(client, name="Someone Else")

        assert response.status_code == 409
        assert response.json() == {"message": "User already exists"}

    def test_register_invalid_body(self, client):
        response = client.post(
            "/auth/register",
            json={"name": "Alice", "email": "not-an-email", "password": "correct-horse"},
        )
        body = response.json()

        assert response.status_code == 400
        assert "errors" in body
        assert any(error["field"] == "email" for error in body["errors"])

    def test_login(self, client):
        register(client)
        response = client.post(
            "/auth/login",
            json={"email": "alice@example.com", "password": "correct-horse"},
        )
        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Alice"

    def test_login_failures_are_indistinguishable(self, client):
        register(client)
        wrong_password = client.post(
            "/auth/login",
            json={"email": "alice@example.com", "password": "wrong-password"},
        )
        unknown_email = client.post(
            "/auth/login",
            json={"email": "nobody@example.com", "password": "correct-horse"},
        )

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()

    def test_me(self, client):
        headers = auth_headers(client)
        response = client.get("/auth/me", headers=headers)

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "alice@example.com"

    def test_me_without_token(self, client):
        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"


class TestTransactionEndpoints:
    """Tests for /transactions routes."""

    def test_requires_token(self, client):
        assert client.get("/transactions").status_code == 401
        response = client.post(
            "/transactions",
            json={"kind": "expense", "amount": "10.00", "category": "Food"},
        )
        assert response.status_code == 401
        assert response.json() == {"message": "Not authorized"}

    def test_garbage_token(self, client):
        response = client.get("/transactions", headers={"Authorization": "Bearer not.a.token"})
        assert response.status_code == 401

    def test_create_and_get(self, client):
        headers = auth_headers(client)
        response = client.post(
            "/transactions",
            json={"kind": "expense", "amount": "200.5", "category": "Food", "occurred_at": "2024-01-10"},
            headers=headers,
        )
        created = response.json()

        assert response.status_code == 201
        assert created["amount"] == "200.50"
        assert created["occurred_at"].startswith("2024-01-10T00:00:00")

        fetched = client.get(f"/transactions/{created['id']}", headers=headers)
        assert fetched.status_code == 200
        assert fetched.json()["id"] == created["id"]

    def test_create_invalid_amount(self, client):
        headers = auth_headers(client)
        response = client.post(
            "/transactions",
            json={"kind": "expense", "amount": "-5", "category": "Food"},
            headers=headers,
        )
        assert response.status_code == 400
        assert any(error["field"] == "amount" for error in response.json()["errors"])

    def test_create_rejects_owner_id(self, client):
        headers = auth_headers(client)
        response = client.post(
            "/transactions",
            json={"kind": "expense", "amount": "5", "category": "Food", "owner_id": str(uuid4())},
            headers=headers,
        )
        assert response.status_code == 400

    def test_list_with_filters(self, client):
        headers = auth_headers(client)
        for kind, category in [("income", "Salary"), ("expense", "Food"), ("expense", "Rent")]:
            client.post(
                "/transactions",
                json={"kind": kind, "amount": "10", "category": category, "occurred_at": "2024-01-10"},
                headers=headers,
            )

        response = client.get("/transactions", params={"kind": "expense"}, headers=headers)
        assert response.status_code == 200
        assert len(response.json()) == 2

    def test_list_bad_range(self, client):
        headers = auth_headers(client)
        response = client.get(
            "/transactions",
            params={"start": "2024-02-01", "end": "2024-01-01"},
            headers=headers,
        )
        assert response.status_code == 400

    def test_update_and_delete(self, client):
        headers = auth_headers(client)
        created = client.post(
            "/transactions",
            json={"kind": "expense", "amount": "10", "category": "Food"},
            headers=headers,
        ).json()

        updated = client.put(f"/transactions/{created['id']}", json={"amount": "12.25"}, headers=headers)
        assert updated.status_code == 200
        assert updated.json()["amount"] == "12.25"
        assert updated.json()["category"] == "Food"

        deleted = client.delete(f"/transactions/{created['id']}", headers=headers)
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Transaction deleted"}

        again = client.get(f"/transactions/{created['id']}", headers=headers)
        assert again.status_code == 404

    def test_empty_update_rejected(self, client):
        headers = auth_headers(client)
        created = client.post(
            "/transactions",
            json={"kind": "expense", "amount": "10", "category": "Food"},
            headers=headers,
        ).json()

        response = client.put(f"/transactions/{created['id']}", json={}, headers=headers)
        assert response.status_code == 400

    def test_other_owner_gets_not_found(self, client):
        alice = auth_headers(client, "alice@example.com")
        bob = auth_headers(client, "bob@example.com")
        created = client.post(
            "/transactions",
            json={"kind": "expense", "amount": "10", "category": "Food"},
            headers=alice,
        ).json()
        path = f"/transactions/{created['id']}"

        assert client.get(path, headers=bob).status_code == 404
        assert client.put(path, json={"amount": "1"}, headers=bob).status_code == 404
        assert client.delete(path, headers=bob).status_code == 404
        assert client.get(f"/transactions/{uuid4()}", headers=bob).json() == client.get(path, headers=bob).json()

        assert client.get(path, headers=alice).json()["amount"] == "10.00"

    def test_malformed_id(self, client):
        headers = auth_headers(client)
        response = client.get("/transactions/not-a-uuid", headers=headers)
        assert response.status_code == 404


class TestSummaryEndpoints:
    """Tests for /transactions/summary routes."""

    @pytest.fixture
    def headers(self, client):
        headers = auth_headers(client)
        for payload in [
            {"kind": "income", "amount": "1000", "category": "Salary", "occurred_at": "2024-01-05"},
            {"kind": "expense", "amount": "200.50", "category": "Food", "occurred_at": "2024-01-10"},
            {"kind": "expense", "amount": "70", "category": "Rent", "occurred_at": "2024-02-01"},
        ]:
            assert client.post("/transactions", json=payload, headers=headers).status_code == 201
        return headers

    def test_monthly(self, client, headers):
        response = client.get(
            "/transactions/summary/monthly",
            params={"year": "2024", "month": "1"},
            headers=headers,
        )
        body = response.json()

        assert response.status_code == 200
        assert body["period_key"] == "2024-01"
        assert body["total_income"] == "1000.00"
        assert body["total_expenses"] == "200.50"
        assert body["balance"] == "799.50"
        assert body["by_category"] == [
            {"category": "Salary", "total": "1000.00"},
            {"category": "Food", "total": "200.50"},
        ]

    def test_yearly(self, client, headers):
        response = client.get("/transactions/summary/yearly", params={"year": "2024"}, headers=headers)
        body = response.json()

        assert response.status_code == 200
        assert body["period_key"] == "2024"
        assert body["total_expenses"] == "270.50"
        assert body["entry_count"] == 3

    def test_empty_year(self, client, headers):
        response = client.get("/transactions/summary/yearly", params={"year": "2019"}, headers=headers)
        body = response.json()
        assert body["balance"] == "0.00"
        assert body["by_category"] == []

    @pytest.mark.parametrize(
        "params",
        [{"year": "2024", "month": "13"}, {"year": "2024", "month": "0"}, {"month": "1"}, {}],
    )
    def test_monthly_invalid_period(self, client, headers, params):
        response = client.get("/transactions/summary/monthly", params=params, headers=headers)
        assert response.status_code == 400
        assert response.json()["errors"]

    @pytest.mark.parametrize("month", ["²", "٣"])
    def test_monthly_non_ascii_digits(self, client, headers, month):
        response = client.get(
            "/transactions/summary/monthly",
            params={"year": "2024", "month": month},
            headers=headers,
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "month"

    def test_yearly_missing_year(self, client, headers):
        response = client.get("/transactions/summary/yearly", headers=headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "year"

    def test_summary_requires_token(self, client):
        response = client.get("/transactions/summary/yearly", params={"year": "2024"})
        assert response.status_code == 401
