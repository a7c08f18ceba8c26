"""Vendor account Pydantic schemas (request DTOs and the account record)."""



from pydantic import Field

from app.schemas.common import CamelModel, UtcDatetime
from app.workflow.statuses import AccountStatus, VendorOnboardingStatus

class VendorCreate(CamelModel):
    company_name: str = Field(min_length=1, max_length=255)
    owner_id: str | None = Field(
        default=None,
        description="Vendor user id. Required for admins; vendors always register themselves.",
    )
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    country: str | None = None
    controlled_items: bool = False

class VendorAccountOut(CamelModel):
    """Vendor account record.

    Also the value the transition engine operates on: the engine returns a
    modified copy and the store persists it.
    """

    id: str
    client_id: str
    owner_id: str
    company_name: str
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    country: str | None = None
    controlled_items: bool = False

    account_status: AccountStatus = AccountStatus.ACTIVE
    suspended_at: UtcDatetime | None = None
    suspended_by: str | None = None
    suspended_reason: str | None = None

    onboarding_status: VendorOnboardingStatus = VendorOnboardingStatus.NOT_STARTED
    current_step: int = 0
    flagged_fields: list[str] | None = None
    submitted_at: UtcDatetime | None = None
    reviewed_at: UtcDatetime | None = None
    reviewed_by: str | None = None
    review_note: str | None = None
    rejection_reason: str | None = None

    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None
