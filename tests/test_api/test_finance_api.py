"""
Tests for wallet, category, transaction and dashboard API endpoints
"""
from decimal import Decimal

import pytest


@pytest.fixture
def two_wallets(api_store):
    source = api_store.create_wallet("Cash", Decimal("1000"))
    destination = api_store.create_wallet("Bank", Decimal("500"))
    return source, destination


def test_create_and_list_wallets(auth_client):
    response = auth_client.post("/api/v1/wallets/", json={"name": "Cash", "balance": "1000,50"})
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Cash"
    assert Decimal(data["balance"]) == Decimal("1000.50")

    wallets = auth_client.get("/api/v1/wallets/", params={"order": "name"}).json()
    assert [w["name"] for w in wallets] == ["Cash"]


def test_create_wallet_validation(auth_client):
    response = auth_client.post("/api/v1/wallets/", json={"name": "Cash", "balance": "1.234"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid initial balance: at most 2 decimal places"
    response = auth_client.post("/api/v1/wallets/", json={"name": "  "})
    assert response.status_code == 400
    assert response.json()["detail"] == "Wallet name is required"


def test_get_rename_delete_wallet(auth_client, two_wallets):
    source, _ = two_wallets

    detail = auth_client.get(f"/api/v1/wallets/{source.id}").json()
    assert detail["name"] == "Cash"
    assert detail["transactions"] == []

    renamed = auth_client.patch(f"/api/v1/wallets/{source.id}", json={"name": "Wallet"})
    assert renamed.json()["name"] == "Wallet"

    assert auth_client.delete(f"/api/v1/wallets/{source.id}").status_code == 204
    assert auth_client.get(f"/api/v1/wallets/{source.id}").status_code == 404


def test_delete_wallet_with_transactions_returns_400(auth_client, two_wallets):
    source, _ = two_wallets
    auth_client.post("/api/v1/transactions/", json={"amount": "10", "type": "expense", "wallet_id": source.id})

    response = auth_client.delete(f"/api/v1/wallets/{source.id}")
    assert response.status_code == 400
    assert "Cannot delete wallet with transactions" in response.json()["detail"]


def test_categories_filter(auth_client):
    auth_client.post("/api/v1/categories/", json={"name": "Salary", "type": "income"})
    auth_client.post("/api/v1/categories/", json={"name": "Food", "type": "expense"})

    assert [c["name"] for c in auth_client.get("/api/v1/categories/").json()] == ["Food", "Salary"]
    assert [c["name"] for c in auth_client.get("/api/v1/categories/", params={"type": "income"}).json()] == ["Salary"]
    assert auth_client.get("/api/v1/categories/", params={"type": "other"}).status_code == 400


def test_add_list_and_delete_transaction(auth_client, two_wallets, api_store):
    source, _ = two_wallets

    response = auth_client.post(
        "/api/v1/transactions/",
        json={"amount": "250", "type": "expense", "wallet_id": source.id, "description": "Groceries"},
    )
    assert response.status_code == 201
    tx = response.json()
    assert tx["description"] == "Groceries"
    assert tx["snapshot_recorded"] is True
    assert api_store.get_wallet(source.id).balance == Decimal("750")

    listed = auth_client.get("/api/v1/transactions/", params={"wallet_id": source.id}).json()
    assert [t["id"] for t in listed] == [tx["id"]]

    detail = auth_client.get(f"/api/v1/wallets/{source.id}").json()
    assert [t["id"] for t in detail["transactions"]] == [tx["id"]]

    assert auth_client.delete(f"/api/v1/transactions/{tx['id']}").status_code == 204
    assert api_store.get_wallet(source.id).balance == Decimal("1000")
    assert auth_client.delete(f"/api/v1/transactions/{tx['id']}").status_code == 404


def test_add_transaction_rejects_zero(auth_client, two_wallets):
    source, _ = two_wallets
    response = auth_client.post("/api/v1/transactions/", json={"amount": "0", "type": "income", "wallet_id": source.id})
    assert response.status_code == 400


@pytest.mark.parametrize("amount, detail", [
    ("abc", "Invalid amount: not a plain decimal number"),
    ("10.555", "Invalid amount: at most 2 decimal places"),
])
def test_add_transaction_rejects_malformed_amount(auth_client, two_wallets, api_store, amount, detail):
    source, _ = two_wallets
    response = auth_client.post("/api/v1/transactions/", json={"amount": amount, "type": "income", "wallet_id": source.id})
    assert response.status_code == 400
    assert response.json()["detail"] == detail
    assert api_store.list_transactions() == []


def test_transfer(auth_client, two_wallets, api_store):
    source, destination = two_wallets

    response = auth_client.post(
        "/api/v1/transactions/transfer",
        json={"from_wallet_id": source.id, "to_wallet_id": destination.id, "amount": "300"},
    )
    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["from_balance"]) == Decimal("700")
    assert Decimal(data["to_balance"]) == Decimal("800")
    assert data["message"] == "Successfully transferred Rp 300 from Cash to Bank"

    assert api_store.get_wallet(source.id).balance == Decimal("700")
    assert api_store.get_wallet(destination.id).balance == Decimal("800")
    assert len(api_store.list_transactions()) == 2


@pytest.mark.parametrize("payload, message", [
    ({"amount": "5000"}, "Insufficient balance in source wallet"),
    ({"amount": "abc"}, "Please enter a valid amount"),
    ({"amount": "10", "same": True}, "Cannot transfer to the same wallet"),
])
def test_transfer_rejections(auth_client, two_wallets, api_store, payload, message):
    source, destination = two_wallets
    to_wallet = source.id if payload.get("same") else destination.id

    response = auth_client.post(
        "/api/v1/transactions/transfer",
        json={"from_wallet_id": source.id, "to_wallet_id": to_wallet, "amount": payload["amount"]},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == message
    assert api_store.list_transactions() == []


def test_dashboard_endpoints(auth_client, two_wallets):
    summary = auth_client.get("/api/v1/dashboard/summary").json()
    assert Decimal(summary["total_balance"]) == Decimal("1500")
    assert [w["name"] for w in summary["top_wallets"]] == ["Cash", "Bank"]
    assert len(summary["daily_flow"]) == 7

    history = auth_client.get("/api/v1/dashboard/history", params={"cadence": "month"}).json()
    assert len(history) == 12
    assert Decimal(history[-1]["balance"]) == Decimal("1500")

    assert auth_client.get("/api/v1/dashboard/history", params={"cadence": "week"}).status_code == 400
