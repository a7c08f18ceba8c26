"""Vendor account router — registration, lookups and status actions.

Every status change is delegated to ReviewWorkflow; this module only parses
requests and shapes responses.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_caller, require_admin
from app.core.config import settings
from app.core.pagination import PaginationParams
from app.core.response import DataResponse, ListResponse, paginated
from app.db.base import get_db
from app.schemas.vendor import VendorAccountOut, VendorCreate
from app.schemas.workflow import (
    AccountStatusAction,
    AllowedActionsOut,
    AuditEntryOut,
    ReviewAction,
)
from app.services.review import ReviewWorkflow
from app.services.vendor import VendorService
from app.workflow.caller import CallerContext
from app.workflow.statuses import AccountStatus, VendorOnboardingStatus

router = APIRouter(prefix="/vendors", tags=["Vendors"])


# ------------------------------------------------------------------
# Helpers — instantiate services with session + default client
# ------------------------------------------------------------------

def _svc(session: AsyncSession) -> VendorService:
    return VendorService(session, settings.default_client_id)


def _workflow(session: AsyncSession) -> ReviewWorkflow:
    return ReviewWorkflow.for_session(session, settings.default_client_id)


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("", response_model=ListResponse[VendorAccountOut])
async def list_vendors(
    onboarding_status: Optional[VendorOnboardingStatus] = Query(default=None, alias="onboardingStatus"),
    account_status: Optional[AccountStatus] = Query(default=None, alias="accountStatus"),
    pagination: PaginationParams = Depends(),
    caller: CallerContext = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
):
    """List vendors (paginated). `?onboardingStatus=pending_verification` gives the review queue."""
    items, total = await _svc(session).list_vendors(
        pagination, onboarding_status=onboarding_status, account_status=account_status
    )
    return paginated([VendorAccountOut.model_validate(v) for v in items], total, pagination)


@router.post("", response_model=DataResponse[VendorAccountOut], status_code=status.HTTP_201_CREATED)
async def register_vendor(
    body: VendorCreate,
    caller: CallerContext = Depends(get_caller),
    session: AsyncSession = Depends(get_db),
):
    """Register a vendor account (onboarding `not_started`, account `active`)."""
    vendor = await _svc(session).register_vendor(body, caller)
    return {"data": VendorAccountOut.model_validate(vendor)}


@router.get("/{vendor_id}", response_model=DataResponse[VendorAccountOut])
async def get_vendor(
    vendor_id: str,
    caller: CallerContext = Depends(get_caller),
    session: AsyncSession = Depends(get_db),
):
    vendor = await _svc(session).get_vendor(vendor_id, caller)
    return {"data": VendorAccountOut.model_validate(vendor)}


@router.get("/{vendor_id}/actions", response_model=DataResponse[AllowedActionsOut])
async def list_allowed_actions(
    vendor_id: str,
    caller: CallerContext = Depends(get_caller),
    session: AsyncSession = Depends(get_db),
):
    """Actions the caller may apply now (drives the review / status dropdowns)."""
    actions = await _workflow(session).allowed_actions(vendor_id, caller)
    return {"data": actions}


@router.get("/{vendor_id}/history", response_model=DataResponse[list[AuditEntryOut]])
async def get_vendor_history(
    vendor_id: str,
    caller: CallerContext = Depends(get_caller),
    session: AsyncSession = Depends(get_db),
):
    entries = await _svc(session).history(vendor_id, caller)
    return {"data": [AuditEntryOut.model_validate(e) for e in entries]}


@router.post("/{vendor_id}/review", response_model=DataResponse[VendorAccountOut])
async def review_vendor(
    vendor_id: str,
    body: ReviewAction,
    caller: CallerContext = Depends(get_caller),
    session: AsyncSession = Depends(get_db),
):
    """Apply an onboarding action: approve_general, approve_controlled, reject, ..."""
    vendor = await _workflow(session).submit_review(vendor_id, body, caller)
    return {"data": vendor}


@router.post("/{vendor_id}/account-status", response_model=DataResponse[VendorAccountOut])
async def change_account_status(
    vendor_id: str,
    body: AccountStatusAction,
    caller: CallerContext = Depends(get_caller),
    session: AsyncSession = Depends(get_db),
):
    """Suspend (reason required) or re-activate a vendor account."""
    vendor = await _workflow(session).change_account_status(vendor_id, body, caller)
    return {"data": vendor}
