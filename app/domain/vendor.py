"""SQLAlchemy ORM model for vendor accounts.

A vendor account carries two independent status axes:
  - account_status     — "active" | "suspended"
  - onboarding_status  — see app.workflow.statuses.VendorOnboardingStatus
Both are only ever changed through app.services.review.ReviewWorkflow.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.domain.mixins import TenantMixin, TimestampMixin


class VendorAccount(Base, TenantMixin, TimestampMixin):
    __tablename__ = "vendor_accounts"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    # Vendor user that owns this account (identity-provider user id)
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    company_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    contact_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String(255), index=True, nullable=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    controlled_items: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Account axis
    account_status: Mapped[str] = mapped_column(
        String(20), default="active", nullable=False, index=True
    )
    suspended_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    suspended_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    suspended_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Onboarding axis
    onboarding_status: Mapped[str] = mapped_column(
        String(50), default="not_started", nullable=False, index=True
    )
    current_step: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    flagged_fields: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)

    # Last review decision
    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewed_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    review_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
