"""Audit log repository — append and read only; entries are never updated or deleted."""

from __future__ import annotations

from typing import Any

from app.domain.audit import AuditLog
from app.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    model = AuditLog

    async def create(
        self,
        *,
        action: str,
        user_id: str | None = None,
        vendor_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> AuditLog:
        return await self.add(
            AuditLog(action=action, user_id=user_id, vendor_id=vendor_id, details=details)
        )

    async def find_by_vendor_id(self, vendor_id: str) -> list[AuditLog]:
        return await self.find([AuditLog.vendor_id == vendor_id])

    async def find_by_user_id(self, user_id: str) -> list[AuditLog]:
        return await self.find([AuditLog.user_id == user_id])

    async def find_recent(self, limit: int = 100) -> list[AuditLog]:
        return await self.find(limit=limit)
