"""
Pydantic models for certificate permissions.

A permission grants one user group a set of rights (view, edit,
delete, download) over one certificate.  Every right defaults to
``False``.
"""

from typing import Optional

from pydantic import Field

from .base import CamelModel


class PermissionFlags(CamelModel):
    can_view: bool = False
    can_edit: bool = False
    can_delete: bool = False
    can_download: bool = False


class PermissionCreate(PermissionFlags):
    certificate_id: int = Field(..., gt=0)
    group_id: int = Field(..., gt=0)


class PermissionUpdate(CamelModel):
    """Only the rights can change; the certificate and group are fixed."""

    can_view: Optional[bool] = None
    can_edit: Optional[bool] = None
    can_delete: Optional[bool] = None
    can_download: Optional[bool] = None


class PermissionRead(PermissionCreate):
    id: int
