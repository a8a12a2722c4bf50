"""
Audit service for recording and querying certificate activity.

Entries are written once and never modified.  The timestamp is taken
at write time.  Every listing is sorted by ``timestamp`` descending
(newest first), with the id as a tie breaker so entries written within
the same clock tick keep a stable order.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from ..core.storage import AUDIT_LOGS, CERTIFICATES, MemStorage, USERS
from ..schemas.audit import AuditLogCreate, AuditLogRead


logger = logging.getLogger(__name__)

BLOCKED_STATUSES = {"blocked", "bloqueado"}


def is_blocked(status: Optional[str]) -> bool:
    return bool(status) and status.lower() in BLOCKED_STATUSES


class AuditService:
    """Service class for writing and retrieving audit logs."""

    @classmethod
    async def create_log(cls, storage: MemStorage, data: AuditLogCreate) -> AuditLogRead:
        """Insert a new audit record stamped with the current time."""
        values = data.model_dump()
        values["timestamp"] = datetime.now(timezone.utc)
        row = storage.insert(AUDIT_LOGS, values)
        logger.debug("Audit log %s recorded: %s (%s)", row["id"], data.action, data.status)
        return AuditLogRead.model_validate(row)

    @classmethod
    async def log(
        cls,
        storage: MemStorage,
        action: str,
        certificate_id: Optional[int] = None,
        user_id: Optional[int] = None,
        details: Optional[Any] = None,
        status: str = "allowed",
        ip_address: Optional[str] = None,
    ) -> Optional[AuditLogRead]:
        """Record an action performed through the API.

        Failures are logged and swallowed: an audit problem must never
        fail the request that triggered it.
        """
        try:
            return await cls.create_log(
                storage,
                AuditLogCreate(
                    user_id=user_id,
                    action=action,
                    certificate_id=certificate_id,
                    details=details,
                    status=status,
                    ip_address=ip_address,
                ),
            )
        except Exception:
            logger.exception("Failed to record audit log for %s", action)
            return None

    @classmethod
    async def list_logs(
        cls,
        storage: MemStorage,
        limit: Optional[int] = None,
        user_id: Optional[int] = None,
        certificate_id: Optional[int] = None,
    ) -> List[AuditLogRead]:
        """Retrieve audit records, newest first.

        ``user_id`` and ``certificate_id`` narrow the result; ``limit``
        caps the number of entries returned.
        """
        criteria = {}
        if user_id is not None:
            criteria["user_id"] = user_id
        if certificate_id is not None:
            criteria["certificate_id"] = certificate_id
        rows = storage.find(AUDIT_LOGS, **criteria)
        rows.sort(key=lambda row: (row["timestamp"], row["id"]), reverse=True)
        if limit is not None:
            rows = rows[:limit]
        return [AuditLogRead.model_validate(row) for row in rows]

    @classmethod
    async def list_logs_for_user(cls, storage: MemStorage, user_id: int) -> List[AuditLogRead]:
        # Same rule as for certificates: a deleted user's history stays
        # readable while it has entries.
        if not storage.exists(USERS, user_id) and not storage.find(AUDIT_LOGS, user_id=user_id):
            raise ValueError("User not found")
        return await cls.list_logs(storage, user_id=user_id)

    @classmethod
    async def list_logs_for_certificate(cls, storage: MemStorage, certificate_id: int) -> List[AuditLogRead]:
        # Logs outlive their certificate, so a deleted certificate's
        # history stays readable.
        if not storage.exists(CERTIFICATES, certificate_id) and not storage.find(
            AUDIT_LOGS, certificate_id=certificate_id
        ):
            raise ValueError("Certificate not found")
        return await cls.list_logs(storage, certificate_id=certificate_id)
