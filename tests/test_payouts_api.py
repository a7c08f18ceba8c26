"""HTTP tests for /api/v1/payouts and /api/v1/statuses."""

from decimal import Decimal

import pytest

from tests.conftest import admin_headers, vendor_headers


@pytest.fixture
async def vendor_id(client):
    res = await client.post(
        "/api/v1/vendors", json={"companyName": "Northwind Defence Supply"}, headers=vendor_headers()
    )
    assert res.status_code == 201, res.text
    return res.json()["data"]["id"]


async def _request(client, vendor_id, amount="250.00", owner="user-v1"):
    return await client.post(
        "/api/v1/payouts",
        json={"vendorId": vendor_id, "amount": amount, "currency": "usd"},
        headers=vendor_headers(owner),
    )


async def _review(client, payout_id, headers=None, **body):
    return await client.post(
        f"/api/v1/payouts/{payout_id}/review", json=body, headers=headers or admin_headers()
    )


async def test_vendor_requests_payout(client, vendor_id):
    res = await _request(client, vendor_id)

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["status"] == "pending"
    assert data["currency"] == "USD"
    assert Decimal(data["amount"]) == Decimal("250.00")


async def test_admin_cannot_request_payout(client, vendor_id):
    res = await client.post(
        "/api/v1/payouts", json={"vendorId": vendor_id, "amount": "10.00"}, headers=admin_headers()
    )
    assert res.status_code == 403


async def test_vendor_cannot_request_for_other_account(client, vendor_id):
    res = await _request(client, vendor_id, owner="user-v2")
    assert res.status_code == 403


@pytest.mark.parametrize("amount", ["0", "-5.00"])
async def test_non_positive_amount_rejected(client, vendor_id, amount):
    res = await _request(client, vendor_id, amount=amount)
    assert res.status_code == 422


async def test_approve_then_pay(client, vendor_id):
    payout = (await _request(client, vendor_id)).json()["data"]

    res = await _review(client, payout["id"], kind="approve", adminNote="Within monthly limit")
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "approved"

    res = await _review(client, payout["id"], kind="pay")
    assert res.status_code == 422
    error = res.json()["error"]
    assert error["code"] == "MISSING_REQUIRED_FIELD"
    assert error["field"] == "transactionReference"

    res = await _review(client, payout["id"], kind="pay", transactionReference="TRX-001")
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["status"] == "paid"
    assert data["transactionReference"] == "TRX-001"
    assert data["adminNote"] == "Within monthly limit"
    assert data["paidAt"] is not None

    res = await _review(client, payout["id"], kind="pay", transactionReference="TRX-002")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "INVALID_TRANSITION"


async def test_vendor_cannot_review_payout(client, vendor_id):
    payout = (await _request(client, vendor_id)).json()["data"]

    res = await _review(client, payout["id"], headers=vendor_headers(), kind="approve")

    assert res.status_code == 403
    assert res.json()["error"]["code"] == "PERMISSION_DENIED"


async def test_unknown_payout(client):
    res = await _review(client, "missing", kind="approve")
    assert res.status_code == 404


async def test_list_filtered_by_status(client, vendor_id):
    first = (await _request(client, vendor_id, amount="100.00")).json()["data"]
    await _request(client, vendor_id, amount="200.00")
    await _review(client, first["id"], kind="reject", adminNote="Balance on hold")

    res = await client.get("/api/v1/payouts", params={"status": "pending"}, headers=admin_headers())

    assert res.status_code == 200
    body = res.json()
    assert body["meta"]["total"] == 1
    assert Decimal(body["data"][0]["amount"]) == Decimal("200.00")


async def test_owner_can_view_own_payout(client, vendor_id):
    payout = (await _request(client, vendor_id)).json()["data"]

    own = await client.get(f"/api/v1/payouts/{payout['id']}", headers=vendor_headers())
    other = await client.get(f"/api/v1/payouts/{payout['id']}", headers=vendor_headers("user-v2"))

    assert own.status_code == 200
    assert other.status_code == 403


async def test_status_registries_endpoint(client):
    res = await client.get("/api/v1/statuses", headers=vendor_headers())

    assert res.status_code == 200
    registries = {r["name"]: r for r in res.json()["data"]}
    assert set(registries) == {"onboarding", "account", "payout"}
    pay = next(a for a in registries["payout"]["actions"] if a["kind"] == "pay")
    assert pay["required"] == ["transactionReference"]
    assert pay["from"] == ["approved", "pending"]
