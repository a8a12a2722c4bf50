"""
Pydantic models for access policies.

An access policy bundles optional lists of allowed systems, allowed
and blocked URL patterns, free-form sensitive-information rules and a
weekly access window.  Policies are descriptive data attached to
certificates; this service stores them but never evaluates them
against live traffic.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from .base import CamelModel, check_time_of_day


class AccessHours(CamelModel):
    """Weekly access window: weekdays and/or weekends between two times."""

    work_days: bool = True
    weekend: bool = False
    start_time: str = Field(..., examples=["08:00"])
    end_time: str = Field(..., examples=["18:00"])

    @field_validator("start_time", "end_time")
    @classmethod
    def _valid_time(cls, v: str) -> str:
        return check_time_of_day(v)


class AccessHoursUpdate(CamelModel):
    """Partial access window; keys left out keep their stored value."""

    work_days: Optional[bool] = None
    weekend: Optional[bool] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _valid_time(cls, v: Optional[str]) -> Optional[str]:
        return check_time_of_day(v)


class AccessPolicyBase(CamelModel):
    name: str = Field(..., min_length=1, examples=["Horário Comercial"])
    description: Optional[str] = None
    allowed_systems: Optional[List[str]] = Field(None, examples=[["SEFAZ", "eSocial"]])
    blocked_urls: Optional[List[str]] = Field(None, examples=[["*.facebook.com"]])
    allowed_urls: Optional[List[str]] = Field(None, examples=[["*.fazenda.gov.br"]])
    sensitive_info_rules: Optional[List[Dict[str, Any]]] = None
    access_hours: Optional[AccessHours] = None


class AccessPolicyCreate(AccessPolicyBase):
    """Schema for creating an access policy."""
    pass


class AccessPolicyUpdate(CamelModel):
    """Schema for updating a policy.

    Unspecified fields remain unchanged, including keys left out of
    ``access_hours``.  The merged policy is validated again by the
    service.
    """

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    allowed_systems: Optional[List[str]] = None
    blocked_urls: Optional[List[str]] = None
    allowed_urls: Optional[List[str]] = None
    sensitive_info_rules: Optional[List[Dict[str, Any]]] = None
    access_hours: Optional[AccessHoursUpdate] = None


class AccessPolicyRead(AccessPolicyBase):
    id: int
