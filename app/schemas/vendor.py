"""Vendor Pydantic schemas (request DTOs and response models)."""


import uuid
from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, Field, StringConstraints, field_validator

from app.core.pagination import PageMeta
from app.schemas.common import CamelModel, RequestModel

_ZIP_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9 \-]{1,8}[A-Za-z0-9]$"
_PHONE_PATTERN = r"^\+?(?:[ ().\-]*[0-9]){7,20}[ ().\-]*$"
_ROUTING_PATTERN = r"^[0-9]{9}$"


def _check_uuid(value: str) -> str:
    # ValueError -> validation error; stored in canonical 36-char form
    return str(uuid.UUID(value))


def _check_url(value: str) -> str:
    if not value.lower().startswith(("http://", "https://")):
        raise ValueError("Invalid website URL")
    return value


CompanyName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
UserRef = Annotated[str, AfterValidator(_check_uuid)]
Description = Annotated[str, StringConstraints(max_length=1000)]
Address = Annotated[str, StringConstraints(max_length=255)]
City = Annotated[str, StringConstraints(max_length=100)]
State = Annotated[str, StringConstraints(max_length=50)]
ZipCode = Annotated[str, StringConstraints(strip_whitespace=True, pattern=_ZIP_PATTERN)]
Phone = Annotated[str, StringConstraints(strip_whitespace=True, pattern=_PHONE_PATTERN)]
Website = Annotated[str, StringConstraints(max_length=255), AfterValidator(_check_url)]
TaxId = Annotated[str, StringConstraints(max_length=50)]
BankName = Annotated[str, StringConstraints(max_length=255)]
RoutingNumber = Annotated[str, StringConstraints(pattern=_ROUTING_PATTERN)]
AccountNumber = Annotated[str, StringConstraints(min_length=1, max_length=20)]


class _VendorFields(RequestModel):
    """Optional profile and banking fields shared by create and update."""

    description: Optional[Description] = None
    address: Optional[Address] = None
    city: Optional[City] = None
    state: Optional[State] = None
    zip_code: Optional[ZipCode] = None
    phone: Optional[Phone] = None
    website: Optional[Website] = None
    tax_id: Optional[TaxId] = None
    bank_name: Optional[BankName] = None
    routing_number: Optional[RoutingNumber] = None
    # plaintext in the request only; encrypted before it reaches the entity
    account_number: Optional[AccountNumber] = None
    account_type: Optional[Literal["checking", "savings"]] = None


class VendorCreate(_VendorFields):
    company_id: str = Field(min_length=1, max_length=100)
    company_name: CompanyName
    vendor_user_id: Optional[UserRef] = None


class VendorUpdate(_VendorFields):
    company_name: Optional[CompanyName] = None

    @field_validator("company_name")
    @classmethod
    def _company_name_not_null(cls, v):
        if v is None:
            raise ValueError("Company name cannot be empty")
        return v


class RejectRequest(RequestModel):
    reason: Optional[str] = Field(default=None, max_length=1000)


class VendorOut(CamelModel):
    """Public projection of a vendor: never carries the account number."""

    id: str
    company_id: str
    company_name: str
    vendor_user_id: Optional[str] = None
    status: str
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    tax_id: Optional[str] = None
    bank_name: Optional[str] = None
    routing_number: Optional[str] = None
    account_type: Optional[str] = None
    bank_complete: bool = False
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    approver_user_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class VendorListOut(CamelModel):
    vendors: list[VendorOut]
    pagination: PageMeta


class AuditLogOut(CamelModel):
    id: str
    action: str
    user_id: Optional[str] = None
    vendor_id: Optional[str] = None
    details: Optional[dict] = None
    created_at: datetime
