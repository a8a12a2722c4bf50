"""
Pydantic models for certificates and their associations.

A certificate is either an ``A1`` (software file) or ``A3`` (token or
smart card) certificate, issued to a person (``PF``) or a company
(``PJ``).  ``allowed_actions`` lists what holders may do with it, for
example ``signing``, ``authentication`` or ``encryption``.

Naive datetimes are interpreted as UTC.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from .base import CamelModel, as_utc


CertificateType = Literal["A1", "A3"]
EntityType = Literal["PF", "PJ"]


class CertificateBase(CamelModel):
    name: str = Field(..., min_length=1, examples=["e-CNPJ Acme Corp"])
    type: CertificateType = Field(..., examples=["A1"])
    entity_type: Optional[EntityType] = Field(None, examples=["PJ"])
    expires_at: datetime = Field(..., examples=["2026-12-31T23:59:59Z"])
    created_by: int = Field(..., examples=[1])
    allowed_actions: List[str] = Field(default_factory=list, examples=[["signing", "authentication"]])

    @field_validator("expires_at")
    @classmethod
    def _expires_at_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class CertificateCreate(CertificateBase):
    """Schema for creating a certificate.

    ``issued_at`` defaults to the time of creation when omitted.
    """

    issued_at: Optional[datetime] = None

    @field_validator("issued_at")
    @classmethod
    def _issued_at_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class CertificateUpdate(CamelModel):
    """Schema for updating a certificate.

    All fields are optional; only provided fields will be updated.
    """

    name: Optional[str] = Field(None, min_length=1)
    type: Optional[CertificateType] = None
    entity_type: Optional[EntityType] = None
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_by: Optional[int] = None
    allowed_actions: Optional[List[str]] = None

    @field_validator("issued_at", "expires_at")
    @classmethod
    def _dates_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class CertificateRead(CertificateBase):
    id: int
    issued_at: datetime


class CertificatePolicyCreate(CamelModel):
    """Body of ``POST /certificates/policies``."""

    certificate_id: int = Field(..., gt=0)
    policy_id: int = Field(..., gt=0)


class CertificatePolicyRead(CertificatePolicyCreate):
    id: int


class CertificateGroupCreate(CamelModel):
    """Body of ``POST /certificates/groups``."""

    certificate_id: int = Field(..., gt=0)
    group_id: int = Field(..., gt=0)


class CertificateGroupRead(CertificateGroupCreate):
    id: int
