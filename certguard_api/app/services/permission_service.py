"""
Service layer for certificate permissions.

A permission row ties one certificate to one user group together with
the rights the group holds over it.  There is at most one row per
certificate and group: creating a second one raises
``DuplicateError``, and rights are changed through ``update_permission``.
As with the other association tables, rows outlive the records they
point to, and listings skip rows whose other end has been deleted.
"""

import logging
from typing import Any, Dict, List

from ..core.errors import DuplicateError
from ..core.storage import CERTIFICATES, MemStorage, PERMISSIONS, USER_GROUPS
from ..schemas.permission import PermissionCreate, PermissionRead


logger = logging.getLogger(__name__)


class PermissionService:
    """Service for group permissions on certificates."""

    @classmethod
    async def get_permission(cls, storage: MemStorage, permission_id: int) -> PermissionRead:
        row = storage.get(PERMISSIONS, permission_id)
        if row is None:
            raise ValueError("Permission not found")
        return PermissionRead.model_validate(row)

    @classmethod
    async def list_for_certificate(cls, storage: MemStorage, certificate_id: int) -> List[PermissionRead]:
        if not storage.exists(CERTIFICATES, certificate_id):
            raise ValueError("Certificate not found")
        return [
            PermissionRead.model_validate(row)
            for row in storage.find(PERMISSIONS, certificate_id=certificate_id)
            if storage.exists(USER_GROUPS, row["group_id"])
        ]

    @classmethod
    async def list_for_group(cls, storage: MemStorage, group_id: int) -> List[PermissionRead]:
        if not storage.exists(USER_GROUPS, group_id):
            raise ValueError("User group not found")
        return [
            PermissionRead.model_validate(row)
            for row in storage.find(PERMISSIONS, group_id=group_id)
            if storage.exists(CERTIFICATES, row["certificate_id"])
        ]

    @classmethod
    async def create_permission(cls, storage: MemStorage, data: PermissionCreate) -> PermissionRead:
        """Grant a group rights over a certificate.

        Raises ``ValueError`` if either record is missing and
        ``DuplicateError`` if the group already has a permission row
        for the certificate.
        """
        if not storage.exists(CERTIFICATES, data.certificate_id):
            raise ValueError("Certificate not found")
        if not storage.exists(USER_GROUPS, data.group_id):
            raise ValueError("User group not found")
        if storage.find(PERMISSIONS, certificate_id=data.certificate_id, group_id=data.group_id):
            raise DuplicateError("Permission already exists for this certificate and group")
        row = storage.insert(PERMISSIONS, data.model_dump())
        logger.info(
            "Permission %s created: group %s on certificate %s",
            row["id"], data.group_id, data.certificate_id,
        )
        return PermissionRead.model_validate(row)

    @classmethod
    async def update_permission(
        cls, storage: MemStorage, permission_id: int, updates: Dict[str, Any]
    ) -> PermissionRead:
        row = storage.update(PERMISSIONS, permission_id, updates)
        if row is None:
            raise ValueError("Permission not found")
        logger.info("Permission %s updated: %s", permission_id, sorted(updates))
        return PermissionRead.model_validate(row)

    @classmethod
    async def delete_permission(cls, storage: MemStorage, permission_id: int) -> PermissionRead:
        row = storage.get(PERMISSIONS, permission_id)
        if row is None:
            raise ValueError("Permission not found")
        storage.delete(PERMISSIONS, permission_id)
        logger.info("Permission %s deleted", permission_id)
        return PermissionRead.model_validate(row)
