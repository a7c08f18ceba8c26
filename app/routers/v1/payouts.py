"""Payout request router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_caller, require_admin
from app.core.config import settings
from app.core.pagination import PaginationParams
from app.core.response import DataResponse, ListResponse, paginated
from app.db.base import get_db
from app.schemas.payout import PayoutCreate, PayoutRequestOut
from app.schemas.workflow import PayoutAction
from app.services.payout import PayoutService
from app.services.review import ReviewWorkflow
from app.workflow.caller import CallerContext
from app.workflow.statuses import PayoutStatus

router = APIRouter(prefix="/payouts", tags=["Payouts"])


def _svc(session: AsyncSession) -> PayoutService:
    return PayoutService(session, settings.default_client_id)


def _workflow(session: AsyncSession) -> ReviewWorkflow:
    return ReviewWorkflow.for_session(session, settings.default_client_id)


@router.post("", response_model=DataResponse[PayoutRequestOut], status_code=status.HTTP_201_CREATED)
async def request_payout(
    body: PayoutCreate,
    caller: CallerContext = Depends(get_caller),
    session: AsyncSession = Depends(get_db),
):
    """Vendor requests a payout; the request starts `pending`."""
    payout = await _svc(session).request_payout(body, caller)
    return {"data": PayoutRequestOut.model_validate(payout)}


@router.get("", response_model=ListResponse[PayoutRequestOut])
async def list_payouts(
    filter_status: Optional[PayoutStatus] = Query(default=None, alias="status"),
    vendor_id: Optional[str] = Query(default=None, alias="vendorId"),
    pagination: PaginationParams = Depends(),
    caller: CallerContext = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
):
    items, total = await _svc(session).list_payouts(pagination, status=filter_status, vendor_id=vendor_id)
    return paginated([PayoutRequestOut.model_validate(p) for p in items], total, pagination)


@router.get("/{payout_id}", response_model=DataResponse[PayoutRequestOut])
async def get_payout(
    payout_id: str,
    caller: CallerContext = Depends(get_caller),
    session: AsyncSession = Depends(get_db),
):
    payout = await _svc(session).get_payout(payout_id, caller)
    return {"data": PayoutRequestOut.model_validate(payout)}


@router.post("/{payout_id}/review", response_model=DataResponse[PayoutRequestOut])
async def review_payout(
    payout_id: str,
    body: PayoutAction,
    caller: CallerContext = Depends(get_caller),
    session: AsyncSession = Depends(get_db),
):
    """Approve, mark as paid (transactionReference required) or reject a payout."""
    payout = await _workflow(session).review_payout(payout_id, body, caller)
    return {"data": payout}
