"""Payout request service — vendor requests, admin listing and lookups.

Reviews (approve / pay / reject) go through app.services.review.ReviewWorkflow.
"""


import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, PermissionDeniedError
from app.core.pagination import PaginationParams
from app.domain.payout import PayoutRequest
from app.repositories.payout import PayoutRequestRepository
from app.repositories.vendor import VendorAccountRepository
from app.schemas.payout import PayoutCreate
from app.workflow.caller import CallerContext
from app.workflow.statuses import PayoutStatus

logger = logging.getLogger(__name__)

class PayoutService:
    def __init__(self, session: AsyncSession, client_id: str):
        self._repo = PayoutRequestRepository(session, client_id)
        self._vendors = VendorAccountRepository(session, client_id)

    async def request_payout(self, data: PayoutCreate, caller: CallerContext) -> PayoutRequest:
        """A vendor asks to withdraw ``amount`` from its balance; starts ``pending``."""
        if caller.is_admin:
            raise PermissionDeniedError("Payouts are requested by vendors")
        vendor = await self._vendors.get_by_id(data.vendor_id)
        if not vendor:
            raise NotFoundError("Vendor", data.vendor_id)
        if vendor.owner_id != caller.caller_id:
            raise PermissionDeniedError("Vendors may only request payouts for their own account")

        payout = await self._repo.create(
            vendor_id=vendor.id,
            amount=data.amount,
            currency=data.currency.upper(),
            status=PayoutStatus.PENDING.value,
        )
        logger.info("Payout %s requested by vendor %s: %s %s", payout.id, vendor.id, payout.amount, payout.currency)
        return payout

    async def list_payouts(
        self,
        pagination: PaginationParams,
        status: PayoutStatus | None = None,
        vendor_id: str | None = None,
    ):
        filters = {"status": status.value if status else None, "vendor_id": vendor_id}
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters=filters,
        )

    async def get_payout(self, payout_id: str, caller: CallerContext) -> PayoutRequest:
        payout = await self._repo.get_by_id(payout_id)
        if not payout:
            raise NotFoundError("Payout", payout_id)
        if not caller.is_admin:
            vendor = await self._vendors.get_by_id(payout.vendor_id)
            if vendor is None or vendor.owner_id != caller.caller_id:
                raise PermissionDeniedError("Vendors may only view their own payouts")
        return payout
