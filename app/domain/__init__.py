"""Domain package — all ORM models are imported here so Alembic autogenerate detects them.

Folder intent:
  vendor.py  — Vendor record and its onboarding lifecycle (draft → submitted → approved/rejected → active)
  audit.py   — Append-only vendor audit log (never updated or deleted)
  mixins.py  — Shared TimestampMixin
"""

from app.domain.audit import AuditAction, AuditLog
from app.domain.vendor import AccountType, Vendor, VendorStatus

__all__ = [
    "AccountType",
    "AuditAction",
    "AuditLog",
    "Vendor",
    "VendorStatus",
]
