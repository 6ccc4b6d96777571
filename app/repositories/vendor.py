"""Vendor repository — queries and state-guarded writes for the vendors table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import ColumnElement, or_

from app.domain.vendor import Vendor, VendorStatus
from app.repositories.base import BaseRepository


@dataclass
class VendorFilters:
    company_id: Optional[str] = None
    status: Optional[str] = None
    vendor_user_id: Optional[str] = None
    search: Optional[str] = None
    limit: Optional[int] = None
    offset: int = 0


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class VendorRepository(BaseRepository[Vendor]):
    model = Vendor

    @staticmethod
    def _conditions(filters: VendorFilters) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if filters.company_id:
            conditions.append(Vendor.company_id == filters.company_id)
        if filters.status:
            conditions.append(Vendor.status == filters.status)
        if filters.vendor_user_id:
            conditions.append(Vendor.vendor_user_id == filters.vendor_user_id)
        if filters.search:
            pattern = f"%{_escape_like(filters.search.strip())}%"
            conditions.append(
                or_(
                    Vendor.company_name.ilike(pattern, escape="\\"),
                    Vendor.description.ilike(pattern, escape="\\"),
                )
            )
        return conditions

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def find_by_id(self, vendor_id: str) -> Vendor | None:
        return await self.get_by_id(vendor_id)

    async def find_all(self, filters: VendorFilters | None = None) -> list[Vendor]:
        """Vendors matching ``filters``, newest first, paginated by limit/offset."""
        filters = filters or VendorFilters()
        return await self.find(
            self._conditions(filters), offset=filters.offset, limit=filters.limit
        )

    async def count(self, filters: VendorFilters | None = None) -> int:
        """Total matching ``filters``; pagination fields are ignored."""
        return await self.count_where(self._conditions(filters or VendorFilters()))

    async def find_by_company_id(self, company_id: str) -> list[Vendor]:
        return await self.find_all(VendorFilters(company_id=company_id))

    async def find_by_status(self, status: str) -> list[Vendor]:
        return await self.find_all(VendorFilters(status=status))

    async def find_by_vendor_user_id(self, vendor_user_id: str) -> list[Vendor]:
        return await self.find_all(VendorFilters(vendor_user_id=vendor_user_id))

    async def find_pending_approval(self) -> list[Vendor]:
        return await self.find_by_status(VendorStatus.SUBMITTED.value)

    async def find_approved_vendors(self, company_id: str | None = None) -> list[Vendor]:
        return await self.find_all(
            VendorFilters(status=VendorStatus.APPROVED.value, company_id=company_id)
        )

    async def find_active_vendors(self, company_id: str | None = None) -> list[Vendor]:
        return await self.find_all(
            VendorFilters(status=VendorStatus.ACTIVE.value, company_id=company_id)
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def save_if_status(self, vendor: Vendor, expected_status: str) -> bool:
        """Write the vendor's pending changes only if its stored status is still ``expected_status``."""
        return await self.save_changes(vendor, Vendor.status == expected_status)

    async def delete_draft(self, vendor_id: str) -> bool:
        return await self.delete_where(vendor_id, Vendor.status == VendorStatus.DRAFT.value)
