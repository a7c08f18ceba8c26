"""Persistence boundary for the review workflow.

The workflow coordinator only talks to the three protocols below. The
SQLAlchemy implementations map records to ORM rows through the
repositories and turn storage errors into :class:`PersistenceError`.

Writes are unconditional UPDATEs with no version column: when two reviewers
act on the same record concurrently, the last write to reach the database
wins.
"""

from __future__ import annotations

import enum
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, PersistenceError
from app.repositories.audit import AuditTrailRepository
from app.repositories.payout import PayoutRequestRepository
from app.repositories.vendor import VendorAccountRepository
from app.schemas.payout import PayoutRequestOut
from app.schemas.vendor import VendorAccountOut
from app.workflow.caller import CallerContext

# Columns the workflow is allowed to change; everything else is left alone on save.
ACCOUNT_WORKFLOW_COLUMNS = (
    "account_status",
    "suspended_at",
    "suspended_by",
    "suspended_reason",
    "onboarding_status",
    "current_step",
    "flagged_fields",
    "submitted_at",
    "reviewed_at",
    "reviewed_by",
    "review_note",
    "rejection_reason",
)

PAYOUT_WORKFLOW_COLUMNS = (
    "status",
    "admin_note",
    "transaction_reference",
    "receipt_url",
    "reviewed_at",
    "reviewed_by",
    "paid_at",
)


class VendorAccountStore(Protocol):
    async def get_account(self, account_id: str) -> VendorAccountOut | None: ...

    async def save_account(self, account: VendorAccountOut) -> VendorAccountOut: ...


class PayoutStore(Protocol):
    async def get_payout(self, payout_id: str) -> PayoutRequestOut | None: ...

    async def save_payout(self, payout: PayoutRequestOut) -> PayoutRequestOut: ...


class AuditRecorder(Protocol):
    async def record(
        self,
        *,
        caller: CallerContext,
        action: str,
        entity_type: str,
        entity_id: str,
        old_value: dict[str, Any] | None,
        new_value: dict[str, Any] | None,
        description: str | None = None,
    ) -> None: ...


def _columns(record: Any, names: tuple[str, ...]) -> dict[str, Any]:
    values = record.model_dump(include=set(names))
    return {k: (v.value if isinstance(v, enum.Enum) else v) for k, v in values.items()}


# ---------------------------------------------------------------------------
# SQLAlchemy implementations
# ---------------------------------------------------------------------------

class SqlVendorAccountStore:
    def __init__(self, session: AsyncSession, client_id: str):
        self._repo = VendorAccountRepository(session, client_id)

    async def get_account(self, account_id: str) -> VendorAccountOut | None:
        try:
            row = await self._repo.get_by_id(account_id)
        except SQLAlchemyError as exc:
            raise PersistenceError(exc) from exc
        return VendorAccountOut.model_validate(row) if row else None

    async def save_account(self, account: VendorAccountOut) -> VendorAccountOut:
        try:
            row = await self._repo.update(
                account.id, **_columns(account, ACCOUNT_WORKFLOW_COLUMNS)
            )
        except SQLAlchemyError as exc:
            raise PersistenceError(exc) from exc
        if row is None:
            raise NotFoundError("Vendor", account.id)
        return VendorAccountOut.model_validate(row)


class SqlPayoutStore:
    def __init__(self, session: AsyncSession, client_id: str):
        self._repo = PayoutRequestRepository(session, client_id)

    async def get_payout(self, payout_id: str) -> PayoutRequestOut | None:
        try:
            row = await self._repo.get_by_id(payout_id)
        except SQLAlchemyError as exc:
            raise PersistenceError(exc) from exc
        return PayoutRequestOut.model_validate(row) if row else None

    async def save_payout(self, payout: PayoutRequestOut) -> PayoutRequestOut:
        try:
            row = await self._repo.update(
                payout.id, **_columns(payout, PAYOUT_WORKFLOW_COLUMNS)
            )
        except SQLAlchemyError as exc:
            raise PersistenceError(exc) from exc
        if row is None:
            raise NotFoundError("Payout", payout.id)
        return PayoutRequestOut.model_validate(row)


class SqlAuditRecorder:
    def __init__(self, session: AsyncSession, client_id: str):
        self._repo = AuditTrailRepository(session, client_id)

    async def record(
        self,
        *,
        caller: CallerContext,
        action: str,
        entity_type: str,
        entity_id: str,
        old_value: dict[str, Any] | None,
        new_value: dict[str, Any] | None,
        description: str | None = None,
    ) -> None:
        try:
            await self._repo.create(
                actor_id=caller.caller_id,
                actor_role=caller.role.value,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                old_value=old_value,
                new_value=new_value,
                description=description,
            )
        except SQLAlchemyError as exc:
            raise PersistenceError(exc) from exc
