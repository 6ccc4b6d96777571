"""Vendor onboarding router — /api/v1/vendors.

Thin HTTP layer: parse and validate the request, resolve the actor, call
:class:`VendorService`, wrap the result in the response envelope. Errors raised
by the service are AppExceptions and are rendered by the global handlers.
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import not_found
from app.core.pagination import PageMeta, PaginationParams
from app.core.response import ApiResponse, ok
from app.core.security import Actor, get_approver, get_current_actor
from app.db.base import get_db
from app.domain.vendor import Vendor, VendorStatus
from app.repositories.vendor import VendorFilters
from app.schemas.vendor import (
    AuditLogOut,
    RejectRequest,
    VendorCreate,
    VendorListOut,
    VendorOut,
    VendorUpdate,
)
from app.services.vendor import VendorService

router = APIRouter(prefix="/vendors", tags=["Vendors"])


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _svc(request: Request, session: AsyncSession) -> VendorService:
    return VendorService.for_session(session, request.app.state.account_cipher)


def _public(vendor: Vendor) -> VendorOut:
    return VendorOut.model_validate(vendor.to_public())


# ------------------------------------------------------------------
# Queries
# ------------------------------------------------------------------

@router.get("", response_model=ApiResponse[VendorListOut])
async def list_vendors(
    request: Request,
    company_id: Optional[str] = Query(default=None, alias="companyId"),
    filter_status: Optional[VendorStatus] = Query(default=None, alias="status"),
    vendor_user_id: Optional[str] = Query(default=None, alias="vendorUserId"),
    search: Optional[str] = Query(default=None, max_length=255),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
):
    """List vendors, newest first. Filters combine with AND; `search` matches name or description."""
    filters = VendorFilters(
        company_id=company_id,
        status=filter_status.value if filter_status else None,
        vendor_user_id=vendor_user_id,
        search=search,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    vendors, total = await _svc(request, session).list_vendors(filters)
    return ok(
        VendorListOut(
            vendors=[_public(v) for v in vendors],
            pagination=PageMeta.build(total, pagination.page, pagination.limit),
        )
    )


@router.get("/pending", response_model=ApiResponse[list[VendorOut]])
async def list_pending_approvals(request: Request, session: AsyncSession = Depends(get_db)):
    vendors = await _svc(request, session).get_pending_approvals()
    return ok([_public(v) for v in vendors])


@router.get("/{vendor_id}", response_model=ApiResponse[VendorOut])
async def get_vendor(
    request: Request,
    vendor_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
):
    vendor = await _svc(request, session).get_vendor(str(vendor_id))
    if vendor is None:
        raise not_found("Vendor")
    return ok(_public(vendor))


@router.get("/{vendor_id}/audit-logs", response_model=ApiResponse[list[AuditLogOut]])
async def get_vendor_audit_logs(
    request: Request,
    vendor_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
):
    """Audit history of one vendor, newest first."""
    entries = await _svc(request, session).get_audit_history(str(vendor_id))
    return ok([AuditLogOut.model_validate(e) for e in entries])


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------

@router.post("", response_model=ApiResponse[VendorOut], status_code=status.HTTP_201_CREATED)
async def create_vendor(
    request: Request,
    body: VendorCreate,
    actor: Actor = Depends(get_current_actor),
    session: AsyncSession = Depends(get_db),
):
    vendor = await _svc(request, session).create_vendor(body, actor.id)
    return ok(_public(vendor), "Vendor created successfully")


@router.put("/{vendor_id}", response_model=ApiResponse[VendorOut])
async def update_vendor(
    request: Request,
    vendor_id: uuid.UUID,
    body: VendorUpdate,
    actor: Actor = Depends(get_current_actor),
    session: AsyncSession = Depends(get_db),
):
    vendor = await _svc(request, session).update_vendor(str(vendor_id), body, actor.id)
    return ok(_public(vendor), "Vendor updated successfully")


@router.patch("/{vendor_id}/submit", response_model=ApiResponse[VendorOut])
async def submit_vendor(
    request: Request,
    vendor_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    session: AsyncSession = Depends(get_db),
):
    vendor = await _svc(request, session).submit_vendor(str(vendor_id), actor.id)
    return ok(_public(vendor), "Vendor submitted for approval")


@router.patch("/{vendor_id}/approve", response_model=ApiResponse[VendorOut])
async def approve_vendor(
    request: Request,
    vendor_id: uuid.UUID,
    approver: Actor = Depends(get_approver),
    session: AsyncSession = Depends(get_db),
):
    vendor = await _svc(request, session).approve_vendor(str(vendor_id), approver.id)
    return ok(_public(vendor), "Vendor approved successfully")


@router.patch("/{vendor_id}/reject", response_model=ApiResponse[VendorOut])
async def reject_vendor(
    request: Request,
    vendor_id: uuid.UUID,
    body: Optional[RejectRequest] = Body(default=None),
    approver: Actor = Depends(get_approver),
    session: AsyncSession = Depends(get_db),
):
    reason = body.reason if body else None
    vendor = await _svc(request, session).reject_vendor(str(vendor_id), approver.id, reason)
    return ok(_public(vendor), "Vendor rejected")


@router.patch("/{vendor_id}/activate", response_model=ApiResponse[VendorOut])
async def activate_vendor(
    request: Request,
    vendor_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    session: AsyncSession = Depends(get_db),
):
    vendor = await _svc(request, session).activate_vendor(str(vendor_id), actor.id)
    return ok(_public(vendor), "Vendor activated successfully")


@router.delete("/{vendor_id}", response_model=ApiResponse[None])
async def delete_vendor(
    request: Request,
    vendor_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    session: AsyncSession = Depends(get_db),
):
    await _svc(request, session).delete_vendor(str(vendor_id), actor.id)
    return ok(message="Vendor deleted successfully")
