"""SQLAlchemy ORM model for Vendors, including the onboarding lifecycle.

Lifecycle::

    draft ──submit──▶ submitted ──approve──▶ approved ──activate──▶ active
                          │
                          └──reject──▶ rejected

Each transition method checks its guard and raises an
INVALID_STATE_TRANSITION AppException instead of silently doing nothing. The
methods only change the in-memory instance; persisting the change is the
repository's job.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.exceptions import invalid_transition, validation_error
from app.db.base import Base
from app.domain.mixins import TimestampMixin, utcnow


class VendorStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVE = "active"


class AccountType(str, enum.Enum):
    CHECKING = "checking"
    SAVINGS = "savings"


# Fields that must be filled in before a vendor can be submitted for review
REQUIRED_FOR_SUBMISSION = ("company_name", "address", "city", "state", "zip_code", "tax_id")

BANKING_FIELDS = ("bank_name", "routing_number", "account_number_encrypted", "account_type")

# Fields a caller may change through update(); lifecycle fields are excluded
UPDATABLE_FIELDS = frozenset({
    "company_name",
    "description",
    "address",
    "city",
    "state",
    "zip_code",
    "phone",
    "website",
    "tax_id",
    *BANKING_FIELDS,
})

# Never leaves the service boundary
PRIVATE_FIELDS = frozenset({"account_number_encrypted"})

EDITABLE_STATUSES = frozenset({VendorStatus.DRAFT.value, VendorStatus.REJECTED.value})


class Vendor(Base, TimestampMixin):
    __tablename__ = "vendors"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    company_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    vendor_user_id: Mapped[Optional[str]] = mapped_column(String(36), index=True, nullable=True)

    # Profile
    company_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    zip_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    tax_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Banking
    bank_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    routing_number: Mapped[Optional[str]] = mapped_column(String(9), nullable=True)
    account_number_encrypted: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # "checking" | "savings"
    account_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Lifecycle
    status: Mapped[str] = mapped_column(
        String(20), default=VendorStatus.DRAFT.value, nullable=False, index=True
    )
    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    approver_user_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    @classmethod
    def new(cls, company_id: str, company_name: str, **fields: Any) -> "Vendor":
        """Build a fresh draft vendor with its identity and timestamps fixed."""
        now = utcnow()
        return cls(
            id=str(uuid.uuid4()),
            company_id=company_id,
            company_name=company_name,
            status=VendorStatus.DRAFT.value,
            created_at=now,
            updated_at=now,
            **fields,
        )

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def missing_required_fields(self) -> list[str]:
        return [f for f in REQUIRED_FOR_SUBMISSION if not (getattr(self, f) or "").strip()]

    def has_required_fields(self) -> bool:
        return not self.missing_required_fields()

    def has_banking_info(self) -> bool:
        return all(getattr(self, f) for f in BANKING_FIELDS)

    @property
    def bank_complete(self) -> bool:
        return self.has_banking_info()

    def can_submit(self) -> bool:
        return self.status == VendorStatus.DRAFT.value and self.has_required_fields()

    def can_approve(self) -> bool:
        return self.status == VendorStatus.SUBMITTED.value

    def can_reject(self) -> bool:
        return self.status == VendorStatus.SUBMITTED.value

    def can_activate(self) -> bool:
        return self.status == VendorStatus.APPROVED.value

    def is_active(self) -> bool:
        return self.status == VendorStatus.ACTIVE.value

    def is_editable(self) -> bool:
        return self.status in EDITABLE_STATUSES

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def submit(self) -> None:
        if self.status != VendorStatus.DRAFT.value:
            raise invalid_transition("submit", self.status)
        missing = self.missing_required_fields()
        if missing:
            raise invalid_transition(
                "submit", self.status, f"missing required fields {', '.join(missing)}"
            )
        now = utcnow()
        self.status = VendorStatus.SUBMITTED.value
        self.submitted_at = now
        self.updated_at = now

    def approve(self, approver_user_id: str) -> None:
        if not self.can_approve():
            raise invalid_transition("approve", self.status)
        now = utcnow()
        self.status = VendorStatus.APPROVED.value
        self.approved_at = now
        self.approver_user_id = approver_user_id
        self.updated_at = now

    def reject(self) -> None:
        if not self.can_reject():
            raise invalid_transition("reject", self.status)
        self.status = VendorStatus.REJECTED.value
        self.updated_at = utcnow()

    def activate(self) -> None:
        if not self.can_activate():
            raise invalid_transition("activate", self.status)
        self.status = VendorStatus.ACTIVE.value
        self.updated_at = utcnow()

    def update(self, changes: dict[str, Any]) -> list[str]:
        """Apply a partial field update; return the names of the fields touched."""
        if not self.is_editable():
            raise invalid_transition("update", self.status)
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise validation_error(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        for name, value in changes.items():
            setattr(self, name, value)
        self.updated_at = utcnow()
        return list(changes)

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def to_public(self) -> dict[str, Any]:
        """Column values minus the encrypted account number."""
        data = {
            c.key: getattr(self, c.key)
            for c in self.__table__.columns
            if c.key not in PRIVATE_FIELDS
        }
        data["bank_complete"] = self.bank_complete
        return data
