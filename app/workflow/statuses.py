"""Status enums and the registry instances built from them.

Onboarding (vendor progress through registration / approval):

    not_started → in_progress → pending_verification ─┬→ approved_general
                                                        ├→ approved_controlled  (capability)
                                                        └→ rejected             (reason)
    approved_* | rejected → update_needed → pending_verification

Account status (independent axis):   active ⇄ suspended   (suspend needs a reason)

Payouts:   pending → approved | paid | rejected,   approved → paid   (paid needs a reference)
"""

from __future__ import annotations

import enum

from app.workflow.caller import Role
from app.workflow.registry import ActionRule, StatusBadge, StatusRegistry

CONTROLLED_APPROVE_CAPABILITY = "vendor.controlled.approve"

_ADMIN = frozenset({Role.ADMIN})
_VENDOR = frozenset({Role.VENDOR})


# ---------------------------------------------------------------------------
# Onboarding
# ---------------------------------------------------------------------------

class VendorOnboardingStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    PENDING_VERIFICATION = "pending_verification"
    APPROVED_GENERAL = "approved_general"
    APPROVED_CONTROLLED = "approved_controlled"
    REJECTED = "rejected"
    UPDATE_NEEDED = "update_needed"


class ReviewActionKind(str, enum.Enum):
    START = "start"
    SUBMIT = "submit"
    APPROVE_GENERAL = "approve_general"
    APPROVE_CONTROLLED = "approve_controlled"
    REJECT = "reject"
    REQUEST_UPDATE = "request_update"
    REOPEN = "reopen"


_S = VendorOnboardingStatus
_DECIDED = frozenset({_S.APPROVED_GENERAL, _S.APPROVED_CONTROLLED, _S.REJECTED})
_REVIEW_STAMP = {"stamp_at": "reviewed_at", "stamp_by": "reviewed_by"}

ONBOARDING = StatusRegistry(
    name="onboarding",
    statuses=VendorOnboardingStatus,
    status_field="onboarding_status",
    badges={
        _S.NOT_STARTED: StatusBadge(label="Not Started", color="gray"),
        _S.IN_PROGRESS: StatusBadge(label="In Progress", color="blue"),
        _S.PENDING_VERIFICATION: StatusBadge(label="Pending", color="amber"),
        _S.APPROVED_GENERAL: StatusBadge(label="Approved", color="green"),
        _S.APPROVED_CONTROLLED: StatusBadge(label="Controlled", color="green"),
        _S.REJECTED: StatusBadge(label="Rejected", color="red"),
        _S.UPDATE_NEEDED: StatusBadge(label="Update Needed", color="orange"),
    },
    rules=[
        ActionRule(
            kind=ReviewActionKind.START.value,
            label="Start Onboarding",
            sources=frozenset({_S.NOT_STARTED}),
            target=_S.IN_PROGRESS,
            roles=_VENDOR,
        ),
        ActionRule(
            kind=ReviewActionKind.SUBMIT.value,
            label="Submit for Verification",
            sources=frozenset({_S.IN_PROGRESS, _S.UPDATE_NEEDED}),
            target=_S.PENDING_VERIFICATION,
            roles=_VENDOR,
            clears=("flagged_fields",),
            stamp_at="submitted_at",
        ),
        ActionRule(
            kind=ReviewActionKind.APPROVE_GENERAL.value,
            label="Approved General",
            sources=frozenset({_S.PENDING_VERIFICATION}),
            target=_S.APPROVED_GENERAL,
            roles=_ADMIN,
            writes={"review_note": "note"},
            clears=("rejection_reason", "flagged_fields"),
            **_REVIEW_STAMP,
        ),
        ActionRule(
            kind=ReviewActionKind.APPROVE_CONTROLLED.value,
            label="Approved Controlled",
            sources=frozenset({_S.PENDING_VERIFICATION}),
            target=_S.APPROVED_CONTROLLED,
            roles=_ADMIN,
            capability=CONTROLLED_APPROVE_CAPABILITY,
            writes={"review_note": "note"},
            clears=("rejection_reason", "flagged_fields"),
            **_REVIEW_STAMP,
        ),
        ActionRule(
            kind=ReviewActionKind.REJECT.value,
            label="Rejected",
            sources=frozenset({_S.PENDING_VERIFICATION}),
            target=_S.REJECTED,
            roles=_ADMIN,
            required=("reason",),
            writes={
                "rejection_reason": "reason",
                "review_note": "note",
                "flagged_fields": "fields_to_clear",
            },
            carries={"current_step": "target_step"},
            **_REVIEW_STAMP,
        ),
        ActionRule(
            kind=ReviewActionKind.REQUEST_UPDATE.value,
            label="Request Update",
            sources=_DECIDED,
            target=_S.UPDATE_NEEDED,
            roles=_ADMIN,
            writes={"review_note": "note", "flagged_fields": "fields_to_clear"},
            carries={"current_step": "target_step"},
            **_REVIEW_STAMP,
        ),
        ActionRule(
            kind=ReviewActionKind.REOPEN.value,
            label="Edit and Resubmit",
            sources=frozenset({_S.REJECTED}),
            target=_S.UPDATE_NEEDED,
            roles=_VENDOR,
        ),
    ],
)


# ---------------------------------------------------------------------------
# Account status
# ---------------------------------------------------------------------------

class AccountStatus(str, enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


class AccountActionKind(str, enum.Enum):
    SUSPEND = "suspend"
    ACTIVATE = "activate"


ACCOUNT = StatusRegistry(
    name="account",
    statuses=AccountStatus,
    status_field="account_status",
    badges={
        AccountStatus.ACTIVE: StatusBadge(label="Active", color="green"),
        AccountStatus.SUSPENDED: StatusBadge(label="Suspended", color="red"),
    },
    rules=[
        ActionRule(
            kind=AccountActionKind.SUSPEND.value,
            label="Suspend Account",
            sources=frozenset({AccountStatus.ACTIVE}),
            target=AccountStatus.SUSPENDED,
            roles=_ADMIN,
            required=("reason",),
            writes={"suspended_reason": "reason"},
            stamp_at="suspended_at",
            stamp_by="suspended_by",
        ),
        ActionRule(
            kind=AccountActionKind.ACTIVATE.value,
            label="Activate Account",
            sources=frozenset({AccountStatus.SUSPENDED}),
            target=AccountStatus.ACTIVE,
            roles=_ADMIN,
            clears=("suspended_at", "suspended_by", "suspended_reason"),
        ),
    ],
)


# ---------------------------------------------------------------------------
# Payouts
# ---------------------------------------------------------------------------

class PayoutStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"
    REJECTED = "rejected"


class PayoutActionKind(str, enum.Enum):
    APPROVE = "approve"
    PAY = "pay"
    REJECT = "reject"


PAYOUT = StatusRegistry(
    name="payout",
    statuses=PayoutStatus,
    status_field="status",
    badges={
        PayoutStatus.PENDING: StatusBadge(label="Pending", color="amber"),
        PayoutStatus.APPROVED: StatusBadge(label="Approved", color="blue"),
        PayoutStatus.PAID: StatusBadge(label="Paid", color="green"),
        PayoutStatus.REJECTED: StatusBadge(label="Rejected", color="red"),
    },
    rules=[
        ActionRule(
            kind=PayoutActionKind.APPROVE.value,
            label="Approve",
            sources=frozenset({PayoutStatus.PENDING}),
            target=PayoutStatus.APPROVED,
            roles=_ADMIN,
            carries={"admin_note": "admin_note"},
            **_REVIEW_STAMP,
        ),
        ActionRule(
            kind=PayoutActionKind.PAY.value,
            label="Mark as Paid",
            sources=frozenset({PayoutStatus.PENDING, PayoutStatus.APPROVED}),
            target=PayoutStatus.PAID,
            roles=_ADMIN,
            required=("transaction_reference",),
            writes={"transaction_reference": "transaction_reference"},
            carries={"admin_note": "admin_note", "receipt_url": "receipt_url"},
            stamp_at="paid_at",
            stamp_by="reviewed_by",
        ),
        ActionRule(
            kind=PayoutActionKind.REJECT.value,
            label="Reject",
            sources=frozenset({PayoutStatus.PENDING}),
            target=PayoutStatus.REJECTED,
            roles=_ADMIN,
            carries={"admin_note": "admin_note"},
            **_REVIEW_STAMP,
        ),
    ],
)

REGISTRIES = (ONBOARDING, ACCOUNT, PAYOUT)
