"""Payout request Pydantic schemas."""


from decimal import Decimal

from pydantic import Field

from app.schemas.common import CamelModel, UtcDatetime
from app.workflow.statuses import PayoutStatus

class PayoutCreate(CamelModel):
    vendor_id: str
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    currency: str = Field(default="USD", min_length=3, max_length=3)

class PayoutRequestOut(CamelModel):
    id: str
    client_id: str
    vendor_id: str
    amount: Decimal
    currency: str = "USD"
    status: PayoutStatus = PayoutStatus.PENDING
    admin_note: str | None = None
    transaction_reference: str | None = None
    receipt_url: str | None = None
    reviewed_at: UtcDatetime | None = None
    reviewed_by: str | None = None
    paid_at: UtcDatetime | None = None
    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None
