"""Review workflow coordinator.

Glue between "a caller picked an action and typed a note" and the pure
transition engine:

  1. load the record from its store           (NotFoundError)
  2. check the caller may touch that record   (PermissionDeniedError)
  3. run app.workflow.engine.apply_transition (InvalidTransition / PermissionDenied /
                                               MissingRequiredField)
  4. save the new record and append an audit entry (PersistenceError)

Errors are raised unchanged to the caller; nothing is retried. There is no
locking: concurrent reviews of one record race and the last save wins.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    InvalidTransitionError,
    MissingRequiredFieldError,
    NotFoundError,
    PermissionDeniedError,
)
from app.schemas.payout import PayoutRequestOut
from app.schemas.vendor import VendorAccountOut
from app.schemas.workflow import (
    AccountStatusAction,
    AllowedActionOut,
    AllowedActionsOut,
    PayoutAction,
    ReviewAction,
)
from app.services.stores import (
    AuditRecorder,
    PayoutStore,
    SqlAuditRecorder,
    SqlPayoutStore,
    SqlVendorAccountStore,
    VendorAccountStore,
)
from app.workflow.caller import CallerContext
from app.workflow.engine import apply_transition, is_permitted
from app.workflow.registry import StatusRegistry
from app.workflow.statuses import ACCOUNT, ONBOARDING, PAYOUT

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

_REFUSALS = (InvalidTransitionError, PermissionDeniedError, MissingRequiredFieldError)


class ReviewWorkflow:
    def __init__(
        self,
        accounts: VendorAccountStore,
        payouts: PayoutStore,
        audit: AuditRecorder | None = None,
    ):
        self._accounts = accounts
        self._payouts = payouts
        self._audit = audit

    @classmethod
    def for_session(cls, session: AsyncSession, client_id: str) -> ReviewWorkflow:
        """Workflow backed by the SQLAlchemy stores on one session."""
        return cls(
            accounts=SqlVendorAccountStore(session, client_id),
            payouts=SqlPayoutStore(session, client_id),
            audit=SqlAuditRecorder(session, client_id),
        )

    # ------------------------------------------------------------------
    # Vendor accounts
    # ------------------------------------------------------------------

    async def submit_review(
        self,
        account_id: str,
        action: ReviewAction,
        caller: CallerContext,
        *,
        now: datetime | None = None,
    ) -> VendorAccountOut:
        """Apply an onboarding action (approve / reject / submit / ...) to an account."""
        account = await self._load_account(account_id, caller)
        updated = self._apply(ONBOARDING, "vendor", account_id, account, action, caller, now)
        saved = await self._accounts.save_account(updated)
        await self._record(ONBOARDING, "vendor", account, saved, action, caller)
        return saved

    async def change_account_status(
        self,
        account_id: str,
        action: AccountStatusAction,
        caller: CallerContext,
        *,
        now: datetime | None = None,
    ) -> VendorAccountOut:
        """Suspend or re-activate an account. Onboarding status is untouched."""
        account = await self._load_account(account_id, caller)
        updated = self._apply(ACCOUNT, "vendor", account_id, account, action, caller, now)
        saved = await self._accounts.save_account(updated)
        await self._record(ACCOUNT, "vendor", account, saved, action, caller)
        return saved

    async def allowed_actions(self, account_id: str, caller: CallerContext) -> AllowedActionsOut:
        """Actions this caller could apply to the account right now."""
        account = await self._load_account(account_id, caller)
        return AllowedActionsOut(
            onboarding=_available(ONBOARDING, account.onboarding_status, caller),
            account=_available(ACCOUNT, account.account_status, caller),
        )

    # ------------------------------------------------------------------
    # Payouts
    # ------------------------------------------------------------------

    async def review_payout(
        self,
        payout_id: str,
        action: PayoutAction,
        caller: CallerContext,
        *,
        now: datetime | None = None,
    ) -> PayoutRequestOut:
        """Approve, pay or reject a payout request."""
        payout = await self._payouts.get_payout(payout_id)
        if payout is None:
            raise NotFoundError("Payout", payout_id)
        updated = self._apply(PAYOUT, "payout", payout_id, payout, action, caller, now)
        saved = await self._payouts.save_payout(updated)
        await self._record(PAYOUT, "payout", payout, saved, action, caller)
        return saved

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _load_account(self, account_id: str, caller: CallerContext) -> VendorAccountOut:
        account = await self._accounts.get_account(account_id)
        if account is None:
            raise NotFoundError("Vendor", account_id)
        if not caller.is_admin and account.owner_id != caller.caller_id:
            raise PermissionDeniedError("Vendors may only act on their own account")
        return account

    @staticmethod
    def _apply(
        registry: StatusRegistry,
        entity_type: str,
        entity_id: str,
        record: RecordT,
        action: BaseModel,
        caller: CallerContext,
        now: datetime | None,
    ) -> RecordT:
        try:
            return apply_transition(registry, record, action, caller, now=now)
        except _REFUSALS as exc:
            logger.info(
                "Refused %s '%s' on %s %s by %s: %s",
                registry.name, _kind(action), entity_type, entity_id, caller.caller_id, exc.code,
            )
            raise

    async def _record(
        self,
        registry: StatusRegistry,
        entity_type: str,
        before: BaseModel,
        after: BaseModel,
        action: BaseModel,
        caller: CallerContext,
    ) -> None:
        old_status = _status(registry, before)
        new_status = _status(registry, after)
        kind = _kind(action)
        logger.info(
            "%s %s: %s '%s' by %s (%s -> %s)",
            entity_type, after.id, registry.name, kind, caller.caller_id, old_status, new_status,
        )
        if self._audit is None:
            return
        await self._audit.record(
            caller=caller,
            action=f"{registry.name}.{kind}",
            entity_type=entity_type,
            entity_id=after.id,
            old_value={registry.status_field: old_status},
            new_value={
                registry.status_field: new_status,
                **action.model_dump(exclude={"kind"}, exclude_none=True, mode="json"),
            },
            description=f"{kind}: {old_status} -> {new_status}",
        )


def _available(registry: StatusRegistry, status: Any, caller: CallerContext) -> list[AllowedActionOut]:
    kinds = registry.allowed_transitions(status, role=caller.role)
    actions = []
    for rule in registry.rules:
        if rule.kind in kinds and is_permitted(rule, caller):
            actions.append(
                AllowedActionOut(
                    kind=rule.kind,
                    label=rule.label,
                    target=rule.target.value,
                    required=[to_camel(f) for f in rule.required],
                )
            )
    return actions


def _kind(action: BaseModel) -> str:
    kind = getattr(action, "kind", None)
    return getattr(kind, "value", kind)


def _status(registry: StatusRegistry, record: BaseModel) -> str:
    status = getattr(record, registry.status_field)
    return getattr(status, "value", status)
