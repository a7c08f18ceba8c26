"""Vendor account service — registration, listing and lookups.

Status changes never go through here; see app.services.review.ReviewWorkflow.
"""


import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from app.core.pagination import PaginationParams
from app.domain.vendor import VendorAccount
from app.repositories.audit import AuditTrailRepository
from app.repositories.vendor import VendorAccountRepository
from app.schemas.vendor import VendorCreate
from app.workflow.caller import CallerContext
from app.workflow.statuses import AccountStatus, VendorOnboardingStatus

logger = logging.getLogger(__name__)

class VendorService:
    def __init__(self, session: AsyncSession, client_id: str):
        self._repo = VendorAccountRepository(session, client_id)
        self._audit = AuditTrailRepository(session, client_id)

    async def list_vendors(
        self,
        pagination: PaginationParams,
        onboarding_status: VendorOnboardingStatus | None = None,
        account_status: AccountStatus | None = None,
    ):
        filters = {
            "onboarding_status": onboarding_status.value if onboarding_status else None,
            "account_status": account_status.value if account_status else None,
        }
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters=filters,
        )

    async def get_vendor(self, vendor_id: str, caller: CallerContext) -> VendorAccount:
        vendor = await self._repo.get_by_id(vendor_id)
        if not vendor:
            raise NotFoundError("Vendor", vendor_id)
        if not caller.is_admin and vendor.owner_id != caller.caller_id:
            raise PermissionDeniedError("Vendors may only view their own account")
        return vendor

    async def register_vendor(self, data: VendorCreate, caller: CallerContext) -> VendorAccount:
        """Create a vendor account in ``not_started`` / ``active``."""
        owner_id = data.owner_id if caller.is_admin else caller.caller_id
        if not owner_id:
            raise ValidationError("ownerId is required when an admin registers a vendor", field="ownerId")
        if await self._repo.get_by_owner(owner_id):
            raise ConflictError(f"A vendor account already exists for user '{owner_id}'")

        vendor = await self._repo.create(
            **data.model_dump(exclude={"owner_id"}, exclude_none=True),
            owner_id=owner_id,
            onboarding_status=VendorOnboardingStatus.NOT_STARTED.value,
            account_status=AccountStatus.ACTIVE.value,
        )
        logger.info("Registered vendor %s for owner %s", vendor.id, owner_id)
        return vendor

    async def history(self, vendor_id: str, caller: CallerContext):
        """Status-change audit entries for one vendor, oldest first."""
        await self.get_vendor(vendor_id, caller)
        return await self._audit.list_for_entity("vendor", vendor_id)
