"""SQLAlchemy ORM model for the vendor audit log."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, JSON, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.domain.mixins import utcnow


class AuditAction(str, enum.Enum):
    VENDOR_CREATED = "VENDOR_CREATED"
    VENDOR_UPDATED = "VENDOR_UPDATED"
    VENDOR_SUBMITTED = "VENDOR_SUBMITTED"
    VENDOR_APPROVED = "VENDOR_APPROVED"
    VENDOR_REJECTED = "VENDOR_REJECTED"
    VENDOR_ACTIVATED = "VENDOR_ACTIVATED"
    VENDOR_DELETED = "VENDOR_DELETED"


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    # free-form tag; the vendor workflow writes AuditAction values
    action: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # Who / about what. Plain references (no FK) so entries outlive deleted vendors.
    user_id: Mapped[Optional[str]] = mapped_column(String(36), index=True, nullable=True)
    vendor_id: Mapped[Optional[str]] = mapped_column(String(36), index=True, nullable=True)

    details: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)

    # When (write-once, no updated_at)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )
