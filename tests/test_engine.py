import pytest

from app.core.exceptions import (
    InvalidTransitionError,
    MissingRequiredFieldError,
    PermissionDeniedError,
)
from app.schemas.common import CamelModel
from app.schemas.workflow import AccountStatusAction, PayoutAction, ReviewAction
from app.workflow.caller import CallerContext, Role
from app.workflow.engine import apply_transition
from app.workflow.statuses import (
    ACCOUNT,
    CONTROLLED_APPROVE_CAPABILITY,
    ONBOARDING,
    PAYOUT,
    AccountStatus,
    PayoutStatus,
    ReviewActionKind,
    VendorOnboardingStatus,
)
from tests.conftest import NOW, make_account, make_payout


def _all_powerful(role: Role) -> CallerContext:
    return CallerContext(
        caller_id="someone", role=role, capabilities=frozenset({CONTROLLED_APPROVE_CAPABILITY})
    )


def _disallowed_pairs():
    for status in VendorOnboardingStatus:
        allowed = ONBOARDING.allowed_transitions(status)
        for kind in ReviewActionKind:
            if kind.value not in allowed:
                yield status, kind


# ---------------------------------------------------------------------------
# Onboarding
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("status, kind", list(_disallowed_pairs()))
def test_disallowed_transitions_are_refused(status, kind):
    account = make_account(onboarding_status=status)
    rule = ONBOARDING.rule(kind)
    caller = _all_powerful(next(iter(rule.roles)))

    with pytest.raises(InvalidTransitionError):
        apply_transition(ONBOARDING, account, ReviewAction(kind=kind, reason="x"), caller)
    assert account.onboarding_status == status


@pytest.mark.parametrize("status", list(VendorOnboardingStatus))
def test_approve_controlled_requires_capability_in_every_status(status, admin):
    account = make_account(onboarding_status=status)

    with pytest.raises(PermissionDeniedError) as exc_info:
        apply_transition(
            ONBOARDING, account, ReviewAction(kind="approve_controlled"), admin
        )
    assert exc_info.value.capability == CONTROLLED_APPROVE_CAPABILITY


def test_approve_controlled_with_capability(controlled_admin):
    account = make_account(rejection_reason="old reason", flagged_fields=["taxVatNumber"])

    updated = apply_transition(
        ONBOARDING,
        account,
        ReviewAction(kind="approve_controlled", note="  ITAR licence verified "),
        controlled_admin,
        now=NOW,
    )

    assert updated.onboarding_status is VendorOnboardingStatus.APPROVED_CONTROLLED
    assert updated.reviewed_by == "admin-2"
    assert updated.reviewed_at == NOW
    assert updated.review_note == "ITAR licence verified"
    assert updated.rejection_reason is None
    assert updated.flagged_fields is None
    # input record untouched
    assert account.onboarding_status is VendorOnboardingStatus.PENDING_VERIFICATION


def test_approve_general_note_is_optional(admin):
    updated = apply_transition(ONBOARDING, make_account(), ReviewAction(kind="approve_general"), admin)
    assert updated.onboarding_status is VendorOnboardingStatus.APPROVED_GENERAL
    assert updated.review_note is None


@pytest.mark.parametrize("reason", [None, "", "   ", "\n\t"])
def test_reject_requires_reason(reason, admin):
    with pytest.raises(MissingRequiredFieldError) as exc_info:
        apply_transition(ONBOARDING, make_account(), ReviewAction(kind="reject", reason=reason), admin)
    assert exc_info.value.field == "reason"


def test_reject_records_reason_flags_and_step(admin):
    updated = apply_transition(
        ONBOARDING,
        make_account(current_step=6),
        ReviewAction(
            kind="reject",
            reason="Missing VAT certificate",
            note="Upload a certificate issued this year",
            fields_to_clear=["vatCertificateUrl", " "],
            target_step=2,
        ),
        admin,
        now=NOW,
    )

    assert updated.onboarding_status is VendorOnboardingStatus.REJECTED
    assert updated.rejection_reason == "Missing VAT certificate"
    assert updated.review_note == "Upload a certificate issued this year"
    assert updated.flagged_fields == ["vatCertificateUrl"]
    assert updated.current_step == 2
    assert updated.reviewed_by == "admin-1"


def test_reject_without_target_step_keeps_current_step(admin):
    updated = apply_transition(
        ONBOARDING, make_account(current_step=6), ReviewAction(kind="reject", reason="Expired licence"), admin
    )
    assert updated.current_step == 6


def test_invalid_transition_wins_over_missing_reason(admin):
    with pytest.raises(InvalidTransitionError):
        apply_transition(
            ONBOARDING, make_account(onboarding_status="approved_general"), ReviewAction(kind="reject"), admin
        )


def test_reapplying_a_successful_action_is_refused(admin):
    approved = apply_transition(ONBOARDING, make_account(), ReviewAction(kind="approve_general"), admin)
    with pytest.raises(InvalidTransitionError) as exc_info:
        apply_transition(ONBOARDING, approved, ReviewAction(kind="approve_general"), admin)
    assert exc_info.value.current_status == "approved_general"


def test_vendor_cannot_issue_admin_actions(vendor_caller):
    with pytest.raises(PermissionDeniedError):
        apply_transition(ONBOARDING, make_account(), ReviewAction(kind="approve_general"), vendor_caller)


def test_admin_cannot_submit_on_behalf_of_vendor(admin):
    with pytest.raises(PermissionDeniedError):
        apply_transition(
            ONBOARDING, make_account(onboarding_status="in_progress"), ReviewAction(kind="submit"), admin
        )


def test_vendor_resubmission_loop(vendor_caller):
    rejected = make_account(onboarding_status="rejected", flagged_fields=["dunsNumber"])

    reopened = apply_transition(ONBOARDING, rejected, ReviewAction(kind="reopen"), vendor_caller)
    assert reopened.onboarding_status is VendorOnboardingStatus.UPDATE_NEEDED
    assert reopened.flagged_fields == ["dunsNumber"]

    resubmitted = apply_transition(
        ONBOARDING, reopened, ReviewAction(kind="submit"), vendor_caller, now=NOW
    )
    assert resubmitted.onboarding_status is VendorOnboardingStatus.PENDING_VERIFICATION
    assert resubmitted.submitted_at == NOW
    assert resubmitted.flagged_fields is None


def test_unknown_kind_is_invalid_transition(admin):
    class Bogus(CamelModel):
        kind: str

    with pytest.raises(InvalidTransitionError):
        apply_transition(ONBOARDING, make_account(), Bogus(kind="escalate"), admin)


# ---------------------------------------------------------------------------
# Account status
# ---------------------------------------------------------------------------

def test_suspend_requires_reason(admin):
    with pytest.raises(MissingRequiredFieldError) as exc_info:
        apply_transition(ACCOUNT, make_account(), AccountStatusAction(kind="suspend", reason=" "), admin)
    assert exc_info.value.field == "reason"


def test_suspend_and_activate(admin):
    suspended = apply_transition(
        ACCOUNT, make_account(), AccountStatusAction(kind="suspend", reason="Sanctions screening hit"), admin, now=NOW
    )
    assert suspended.account_status is AccountStatus.SUSPENDED
    assert suspended.suspended_reason == "Sanctions screening hit"
    assert suspended.suspended_by == "admin-1"
    assert suspended.suspended_at == NOW
    # onboarding axis is independent
    assert suspended.onboarding_status is VendorOnboardingStatus.PENDING_VERIFICATION

    active = apply_transition(ACCOUNT, suspended, AccountStatusAction(kind="activate"), admin)
    assert active.account_status is AccountStatus.ACTIVE
    assert active.suspended_reason is None
    assert active.suspended_at is None
    assert active.suspended_by is None


def test_activate_active_account_is_invalid(admin):
    with pytest.raises(InvalidTransitionError):
        apply_transition(ACCOUNT, make_account(), AccountStatusAction(kind="activate"), admin)


# ---------------------------------------------------------------------------
# Payouts
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("reference", [None, "", "  "])
@pytest.mark.parametrize("status", ["pending", "approved"])
def test_pay_requires_transaction_reference(status, reference, admin):
    with pytest.raises(MissingRequiredFieldError) as exc_info:
        apply_transition(
            PAYOUT,
            make_payout(status=status),
            PayoutAction(kind="pay", transaction_reference=reference),
            admin,
        )
    assert exc_info.value.field == "transactionReference"


def test_pay_approved_payout(admin):
    approved = make_payout(status="approved", admin_note="Approved by finance")

    paid = apply_transition(
        PAYOUT,
        approved,
        PayoutAction(kind="pay", transaction_reference="TRX-001", receipt_url="https://files.example/r/1.pdf"),
        admin,
        now=NOW,
    )

    assert paid.status is PayoutStatus.PAID
    assert paid.transaction_reference == "TRX-001"
    assert paid.receipt_url == "https://files.example/r/1.pdf"
    assert paid.paid_at == NOW
    assert paid.reviewed_by == "admin-1"
    # note from the approval step survives when none is given
    assert paid.admin_note == "Approved by finance"


@pytest.mark.parametrize(
    "status, kind",
    [("approved", "approve"), ("approved", "reject"), ("paid", "pay"), ("paid", "reject"), ("rejected", "approve")],
)
def test_payout_disallowed_transitions(status, kind, admin):
    with pytest.raises(InvalidTransitionError):
        apply_transition(
            PAYOUT, make_payout(status=status), PayoutAction(kind=kind, transaction_reference="TRX-9"), admin
        )


def test_vendor_cannot_review_payouts(vendor_caller):
    with pytest.raises(PermissionDeniedError):
        apply_transition(PAYOUT, make_payout(), PayoutAction(kind="approve"), vendor_caller)
