"""Workflow action requests and registry / audit response models."""


from typing import Any

from pydantic import Field

from app.schemas.common import CamelModel, UtcDatetime
from app.workflow.statuses import AccountActionKind, PayoutActionKind, ReviewActionKind

class ReviewAction(CamelModel):
    """Onboarding action picked from the review dropdown (or the vendor portal)."""

    kind: ReviewActionKind
    note: str | None = None
    reason: str | None = None
    fields_to_clear: list[str] | None = Field(
        default=None, description="Profile fields the vendor must correct.",
    )
    target_step: int | None = Field(
        default=None, ge=0, description="Onboarding step the vendor is sent back to.",
    )

class AccountStatusAction(CamelModel):
    kind: AccountActionKind
    reason: str | None = None

class PayoutAction(CamelModel):
    kind: PayoutActionKind
    admin_note: str | None = None
    transaction_reference: str | None = None
    receipt_url: str | None = None

class AllowedActionOut(CamelModel):
    kind: str
    label: str
    target: str
    required: list[str] = Field(default_factory=list)

class AllowedActionsOut(CamelModel):
    onboarding: list[AllowedActionOut] = Field(default_factory=list)
    account: list[AllowedActionOut] = Field(default_factory=list)

class AuditEntryOut(CamelModel):
    id: str
    actor_id: str
    actor_role: str
    action: str
    entity_type: str
    entity_id: str
    old_value: Any = None
    new_value: Any = None
    description: str | None = None
    created_at: UtcDatetime
