"""Vendor workflow service — onboarding lifecycle plus audit logging.

Every operation runs load -> guard -> mutate -> persist -> audit. Guards live
on the :class:`Vendor` entity; this layer adds the rules the entity does not
know about (who may edit, what may be deleted) and writes one audit entry per
successful side effect, inside the same transaction as the change itself.

No SQLAlchemy queries and no FastAPI here: storage goes through the injected
repositories.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.crypto import AccountNumberCipher
from app.core.exceptions import (
    invalid_operation,
    invalid_transition,
    not_found,
    validation_error,
)
from app.domain.audit import AuditAction, AuditLog
from app.domain.vendor import Vendor, VendorStatus
from app.repositories.audit import AuditLogRepository
from app.repositories.vendor import VendorFilters, VendorRepository
from app.schemas.vendor import VendorCreate, VendorUpdate

logger = logging.getLogger(__name__)

DEFAULT_REJECT_REASON = "No reason provided"

# Statuses the service refuses to edit, on top of the entity's own rule
_FROZEN_STATUSES = frozenset({VendorStatus.SUBMITTED.value, VendorStatus.APPROVED.value})


class VendorService:
    def __init__(
        self,
        vendors: VendorRepository,
        audit_logs: AuditLogRepository,
        cipher: AccountNumberCipher,
    ):
        self._vendors = vendors
        self._audit_logs = audit_logs
        self._cipher = cipher

    @classmethod
    def for_session(cls, session: AsyncSession, cipher: AccountNumberCipher) -> "VendorService":
        return cls(VendorRepository(session), AuditLogRepository(session), cipher)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require(self, vendor_id: str) -> Vendor:
        vendor = await self._vendors.find_by_id(vendor_id)
        if not vendor:
            raise not_found("Vendor", vendor_id)
        return vendor

    async def _persist(self, vendor: Vendor, expected_status: str, transition: str) -> None:
        if not await self._vendors.save_if_status(vendor, expected_status):
            # someone else moved the vendor between our read and our write
            raise invalid_transition(transition, expected_status, "vendor was modified concurrently")

    async def _audit(
        self,
        action: AuditAction,
        user_id: str | None,
        vendor_id: str,
        details: dict[str, Any],
    ) -> None:
        await self._audit_logs.create(
            action=action.value, user_id=user_id, vendor_id=vendor_id, details=details
        )

    def _encrypt(self, account_number: str | None) -> str | None:
        return self._cipher.encrypt(account_number) if account_number else None

    async def _transition(
        self,
        vendor_id: str,
        transition: str,
        apply: Callable[[Vendor], None],
        action: AuditAction,
        user_id: str,
        details: dict[str, Any] | None = None,
    ) -> Vendor:
        vendor = await self._require(vendor_id)
        prior_status = vendor.status
        apply(vendor)  # entity guard; raises INVALID_STATE_TRANSITION
        await self._persist(vendor, prior_status, transition)
        await self._audit(
            action, user_id, vendor.id, {"company_name": vendor.company_name, **(details or {})}
        )
        logger.info(
            "Vendor %s %s -> %s by %s", vendor.id, prior_status, vendor.status, user_id
        )
        return vendor

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_vendor(self, data: VendorCreate, user_id: str) -> Vendor:
        if not (data.company_id or "").strip() or not (data.company_name or "").strip():
            raise validation_error("Company ID and name are required")

        fields = data.model_dump(exclude={"company_id", "company_name", "account_number"})
        vendor = Vendor.new(
            company_id=data.company_id,
            company_name=data.company_name,
            account_number_encrypted=self._encrypt(data.account_number),
            **fields,
        )
        vendor = await self._vendors.add(vendor)

        await self._audit(
            AuditAction.VENDOR_CREATED, user_id, vendor.id, {"company_name": vendor.company_name}
        )
        logger.info("Vendor %s created for company %s by %s", vendor.id, vendor.company_id, user_id)
        return vendor

    async def update_vendor(self, vendor_id: str, data: VendorUpdate, user_id: str) -> Vendor:
        vendor = await self._require(vendor_id)
        if vendor.status in _FROZEN_STATUSES:
            raise invalid_transition("update", vendor.status)

        changes = data.model_dump(exclude_unset=True)
        if "account_number" in changes:
            changes["account_number_encrypted"] = self._encrypt(changes.pop("account_number"))

        prior_status = vendor.status
        updated_fields = vendor.update(changes)
        await self._persist(vendor, prior_status, "update")

        # field names only; values may be sensitive
        await self._audit(AuditAction.VENDOR_UPDATED, user_id, vendor.id, {"updates": updated_fields})
        logger.info("Vendor %s updated by %s (%s)", vendor.id, user_id, ", ".join(updated_fields))
        return vendor

    async def submit_vendor(self, vendor_id: str, user_id: str) -> Vendor:
        return await self._transition(
            vendor_id, "submit", Vendor.submit, AuditAction.VENDOR_SUBMITTED, user_id
        )

    async def approve_vendor(self, vendor_id: str, approver_id: str) -> Vendor:
        return await self._transition(
            vendor_id,
            "approve",
            lambda v: v.approve(approver_id),
            AuditAction.VENDOR_APPROVED,
            approver_id,
        )

    async def reject_vendor(
        self, vendor_id: str, approver_id: str, reason: str | None = None
    ) -> Vendor:
        return await self._transition(
            vendor_id,
            "reject",
            Vendor.reject,
            AuditAction.VENDOR_REJECTED,
            approver_id,
            {"reason": reason or DEFAULT_REJECT_REASON},
        )

    async def activate_vendor(self, vendor_id: str, user_id: str) -> Vendor:
        return await self._transition(
            vendor_id, "activate", Vendor.activate, AuditAction.VENDOR_ACTIVATED, user_id
        )

    async def delete_vendor(self, vendor_id: str, user_id: str) -> bool:
        vendor = await self._require(vendor_id)
        if vendor.status != VendorStatus.DRAFT.value:
            raise invalid_operation("Can only delete draft vendors")

        company_name = vendor.company_name
        deleted = await self._vendors.delete_draft(vendor_id)
        if not deleted:
            raise invalid_operation("Can only delete draft vendors")

        await self._audit(
            AuditAction.VENDOR_DELETED, user_id, vendor_id, {"company_name": company_name}
        )
        logger.info("Vendor %s deleted by %s", vendor_id, user_id)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_vendor(self, vendor_id: str) -> Vendor | None:
        return await self._vendors.find_by_id(vendor_id)

    async def list_vendors(self, filters: VendorFilters) -> tuple[list[Vendor], int]:
        """One page of vendors plus the total matching count (two separate queries)."""
        vendors = await self._vendors.find_all(filters)
        total = await self._vendors.count(filters)
        return vendors, total

    async def get_pending_approvals(self) -> list[Vendor]:
        vendors, _ = await self.list_vendors(VendorFilters(status=VendorStatus.SUBMITTED.value))
        return vendors

    async def get_vendors_by_company(self, company_id: str) -> list[Vendor]:
        return await self._vendors.find_by_company_id(company_id)

    async def get_audit_history(self, vendor_id: str) -> list[AuditLog]:
        await self._require(vendor_id)
        return await self._audit_logs.find_by_vendor_id(vendor_id)
