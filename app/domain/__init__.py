"""Domain package — all ORM models are imported here so metadata.create_all sees them.

Folder intent:
  vendor.py  — Vendor accounts (onboarding + account status axes)
  payout.py  — Vendor payout requests
  audit.py   — Immutable status-change audit trail (never updated or deleted)
  mixins.py  — Shared TimestampMixin, TenantMixin
"""

from app.domain.audit import AuditTrail
from app.domain.payout import PayoutRequest
from app.domain.vendor import VendorAccount

__all__ = [
    "AuditTrail",
    "PayoutRequest",
    "VendorAccount",
]
