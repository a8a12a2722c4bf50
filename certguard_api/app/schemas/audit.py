"""
Pydantic models for audit log entries and dashboard statistics.

Audit entries are immutable once written: there is no update or
delete schema.  ``status`` records the access decision, usually
``allowed`` or ``blocked`` (the Portuguese ``Permitido``/``Bloqueado``
labels used by older clients are accepted as well).
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from .base import CamelModel


class AuditLogCreate(CamelModel):
    user_id: Optional[int] = Field(None, examples=[1])
    action: str = Field(..., min_length=1, examples=["SIGN_DOCUMENT"])
    certificate_id: Optional[int] = Field(None, examples=[1])
    details: Optional[Any] = Field(None, examples=[{"system": "SEFAZ"}])
    status: str = Field("allowed", min_length=1, examples=["allowed"])
    ip_address: Optional[str] = Field(None, examples=["192.168.1.20"])


class AuditLogRead(AuditLogCreate):
    id: int
    timestamp: datetime


class StatsRead(CamelModel):
    """Counters shown on the dashboard, recomputed on every request."""

    active_users: int
    active_certificates: int
    total_certificates: int
    expired_certificates: int
    active_groups: int
    restrictions_count: int
    blocked_access: int
