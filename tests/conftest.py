"""Shared fixtures: callers, in-memory stores, and an app wired to a temp SQLite DB."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.exceptions import PersistenceError
from app.db.base import build_engine, build_session_factory, get_db, init_models
from app.schemas.payout import PayoutRequestOut
from app.schemas.vendor import VendorAccountOut
from app.workflow.caller import CallerContext, Role
from app.workflow.statuses import CONTROLLED_APPROVE_CAPABILITY

NOW = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Callers
# ---------------------------------------------------------------------------

@pytest.fixture
def admin() -> CallerContext:
    return CallerContext(caller_id="admin-1", role=Role.ADMIN, capabilities=frozenset({"vendor.approve"}))


@pytest.fixture
def controlled_admin() -> CallerContext:
    return CallerContext(
        caller_id="admin-2",
        role=Role.ADMIN,
        capabilities=frozenset({"vendor.approve", CONTROLLED_APPROVE_CAPABILITY}),
    )


@pytest.fixture
def vendor_caller() -> CallerContext:
    return CallerContext(caller_id="user-v1", role=Role.VENDOR)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def make_account(**overrides) -> VendorAccountOut:
    values = {
        "id": "acc-1",
        "client_id": "default",
        "owner_id": "user-v1",
        "company_name": "Northwind Defence Supply",
        "onboarding_status": "pending_verification",
        "account_status": "active",
    }
    values.update(overrides)
    return VendorAccountOut.model_validate(values)


def make_payout(**overrides) -> PayoutRequestOut:
    values = {
        "id": "pay-1",
        "client_id": "default",
        "vendor_id": "acc-1",
        "amount": "1250.00",
        "status": "pending",
    }
    values.update(overrides)
    return PayoutRequestOut.model_validate(values)


# ---------------------------------------------------------------------------
# In-memory collaborators for ReviewWorkflow
# ---------------------------------------------------------------------------

class InMemoryAccountStore:
    def __init__(self, *accounts: VendorAccountOut, yield_on_io: bool = False):
        self.accounts = {a.id: a for a in accounts}
        self.saves = 0
        self.fail_with: Exception | None = None
        self._yield = yield_on_io

    async def get_account(self, account_id: str) -> VendorAccountOut | None:
        if self._yield:
            await asyncio.sleep(0)
        return self.accounts.get(account_id)

    async def save_account(self, account: VendorAccountOut) -> VendorAccountOut:
        if self._yield:
            await asyncio.sleep(0)
        if self.fail_with is not None:
            raise PersistenceError(self.fail_with)
        self.saves += 1
        self.accounts[account.id] = account
        return account


class InMemoryPayoutStore:
    def __init__(self, *payouts: PayoutRequestOut):
        self.payouts = {p.id: p for p in payouts}

    async def get_payout(self, payout_id: str) -> PayoutRequestOut | None:
        return self.payouts.get(payout_id)

    async def save_payout(self, payout: PayoutRequestOut) -> PayoutRequestOut:
        self.payouts[payout.id] = payout
        return payout


class ListAuditRecorder:
    def __init__(self):
        self.entries: list[dict] = []

    async def record(self, **entry) -> None:
        self.entries.append(entry)


# ---------------------------------------------------------------------------
# HTTP app over a temporary SQLite database
# ---------------------------------------------------------------------------

@pytest.fixture
async def session_factory(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_models(engine)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest.fixture
async def client(session_factory) -> AsyncIterator[AsyncClient]:
    from app.main import create_app

    app = create_app()

    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def admin_headers(*capabilities: str, caller_id: str = "admin-1") -> dict[str, str]:
    return {
        "X-Caller-Id": caller_id,
        "X-Caller-Role": "admin",
        "X-Caller-Capabilities": ",".join(capabilities),
    }


def vendor_headers(caller_id: str = "user-v1") -> dict[str, str]:
    return {"X-Caller-Id": caller_id, "X-Caller-Role": "vendor"}
