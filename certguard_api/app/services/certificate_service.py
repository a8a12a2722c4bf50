"""
Service layer for certificates.

Besides CRUD this module manages the two many-to-many associations a
certificate takes part in: access policies (``certificate_to_policy``)
and user groups (``certificate_to_group``).  Associating an existing
pair again is a no-op that returns the existing row.  Deleting a
certificate leaves its association rows in place; list operations
skip rows whose other side has been deleted.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from ..core.storage import (
    ACCESS_POLICIES,
    CERTIFICATES,
    CERTIFICATE_TO_GROUP,
    CERTIFICATE_TO_POLICY,
    MemStorage,
    USER_GROUPS,
)
from ..schemas.certificate import (
    CertificateCreate,
    CertificateGroupCreate,
    CertificateGroupRead,
    CertificatePolicyCreate,
    CertificatePolicyRead,
    CertificateRead,
)
from ..schemas.group import UserGroupRead
from ..schemas.policy import AccessPolicyRead


logger = logging.getLogger(__name__)


class CertificateService:
    """Service class for certificates and their associations."""

    @classmethod
    async def list_certificates(cls, storage: MemStorage) -> List[CertificateRead]:
        return [CertificateRead.model_validate(row) for row in storage.list(CERTIFICATES)]

    @classmethod
    async def recent_certificates(cls, storage: MemStorage, limit: int = 3) -> List[CertificateRead]:
        """Return the ``limit`` most recently created certificates, newest first.

        Ids are assigned in creation order and never reused, so the
        highest ids are the newest records.
        """
        rows = sorted(storage.list(CERTIFICATES), key=lambda row: row["id"], reverse=True)
        return [CertificateRead.model_validate(row) for row in rows[:limit]]

    @classmethod
    async def get_certificate(cls, storage: MemStorage, certificate_id: int) -> CertificateRead:
        row = storage.get(CERTIFICATES, certificate_id)
        if row is None:
            raise ValueError("Certificate not found")
        return CertificateRead.model_validate(row)

    @classmethod
    async def create_certificate(cls, storage: MemStorage, data: CertificateCreate) -> CertificateRead:
        """Store a certificate, stamping ``issued_at`` with now when missing."""
        values = data.model_dump()
        if values.get("issued_at") is None:
            values["issued_at"] = datetime.now(timezone.utc)
        row = storage.insert(CERTIFICATES, values)
        logger.info("Certificate %s created (id=%s)", data.name, row["id"])
        return CertificateRead.model_validate(row)

    @classmethod
    async def update_certificate(
        cls, storage: MemStorage, certificate_id: int, updates: Dict[str, Any]
    ) -> CertificateRead:
        row = storage.update(CERTIFICATES, certificate_id, updates)
        if row is None:
            raise ValueError("Certificate not found")
        logger.info("Certificate %s updated: %s", certificate_id, sorted(updates))
        return CertificateRead.model_validate(row)

    @classmethod
    async def delete_certificate(cls, storage: MemStorage, certificate_id: int) -> CertificateRead:
        """Delete a certificate and return the removed record."""
        row = storage.get(CERTIFICATES, certificate_id)
        if row is None:
            raise ValueError("Certificate not found")
        storage.delete(CERTIFICATES, certificate_id)
        logger.info("Certificate %s deleted", certificate_id)
        return CertificateRead.model_validate(row)

    # ------------------------------------------------------------------
    # Access policies
    # ------------------------------------------------------------------
    @classmethod
    async def add_policy(cls, storage: MemStorage, data: CertificatePolicyCreate) -> CertificatePolicyRead:
        if not storage.exists(CERTIFICATES, data.certificate_id):
            raise ValueError("Certificate not found")
        if not storage.exists(ACCESS_POLICIES, data.policy_id):
            raise ValueError("Access policy not found")
        existing = storage.find(
            CERTIFICATE_TO_POLICY, certificate_id=data.certificate_id, policy_id=data.policy_id
        )
        if existing:
            return CertificatePolicyRead.model_validate(existing[0])
        row = storage.insert(CERTIFICATE_TO_POLICY, data.model_dump())
        logger.info("Policy %s assigned to certificate %s", data.policy_id, data.certificate_id)
        return CertificatePolicyRead.model_validate(row)

    @classmethod
    async def remove_policy(cls, storage: MemStorage, certificate_id: int, policy_id: int) -> None:
        rows = storage.find(CERTIFICATE_TO_POLICY, certificate_id=certificate_id, policy_id=policy_id)
        if not rows:
            raise ValueError("Policy assignment not found")
        for row in rows:
            storage.delete(CERTIFICATE_TO_POLICY, row["id"])
        logger.info("Policy %s removed from certificate %s", policy_id, certificate_id)

    @classmethod
    async def list_policies(cls, storage: MemStorage, certificate_id: int) -> List[AccessPolicyRead]:
        if not storage.exists(CERTIFICATES, certificate_id):
            raise ValueError("Certificate not found")
        policies = []
        for link in storage.find(CERTIFICATE_TO_POLICY, certificate_id=certificate_id):
            policy = storage.get(ACCESS_POLICIES, link["policy_id"])
            if policy is not None:
                policies.append(AccessPolicyRead.model_validate(policy))
        return policies

    # ------------------------------------------------------------------
    # User groups
    # ------------------------------------------------------------------
    @classmethod
    async def add_group(cls, storage: MemStorage, data: CertificateGroupCreate) -> CertificateGroupRead:
        if not storage.exists(CERTIFICATES, data.certificate_id):
            raise ValueError("Certificate not found")
        if not storage.exists(USER_GROUPS, data.group_id):
            raise ValueError("User group not found")
        existing = storage.find(
            CERTIFICATE_TO_GROUP, certificate_id=data.certificate_id, group_id=data.group_id
        )
        if existing:
            return CertificateGroupRead.model_validate(existing[0])
        row = storage.insert(CERTIFICATE_TO_GROUP, data.model_dump())
        logger.info("Certificate %s shared with group %s", data.certificate_id, data.group_id)
        return CertificateGroupRead.model_validate(row)

    @classmethod
    async def remove_group(cls, storage: MemStorage, certificate_id: int, group_id: int) -> None:
        rows = storage.find(CERTIFICATE_TO_GROUP, certificate_id=certificate_id, group_id=group_id)
        if not rows:
            raise ValueError("Group assignment not found")
        for row in rows:
            storage.delete(CERTIFICATE_TO_GROUP, row["id"])
        logger.info("Certificate %s unshared from group %s", certificate_id, group_id)

    @classmethod
    async def list_groups(cls, storage: MemStorage, certificate_id: int) -> List[UserGroupRead]:
        if not storage.exists(CERTIFICATES, certificate_id):
            raise ValueError("Certificate not found")
        groups = []
        for link in storage.find(CERTIFICATE_TO_GROUP, certificate_id=certificate_id):
            group = storage.get(USER_GROUPS, link["group_id"])
            if group is not None:
                groups.append(UserGroupRead.model_validate(group))
        return groups
