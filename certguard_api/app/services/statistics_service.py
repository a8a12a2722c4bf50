"""
Service layer for dashboard statistics.

Counters are recomputed from the store on every call; nothing is
cached or maintained incrementally.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from ..core.storage import ACCESS_POLICIES, AUDIT_LOGS, CERTIFICATES, MemStorage, USERS, USER_GROUPS
from ..schemas.audit import StatsRead
from ..schemas.base import as_utc
from .audit_service import is_blocked


class StatisticsService:
    """Service providing aggregated counters for the dashboard."""

    @classmethod
    async def overview(cls, storage: MemStorage, now: Optional[datetime] = None) -> StatsRead:
        """Return the dashboard counters.

        A certificate counts as active while its ``expires_at`` lies in
        the future relative to ``now`` (defaults to the current time).
        Blocked accesses are audit entries whose status is ``blocked``
        or ``bloqueado``, case-insensitively.
        """
        now = as_utc(now) if now is not None else datetime.now(timezone.utc)
        certificates = storage.list(CERTIFICATES)
        expired = sum(1 for cert in certificates if as_utc(cert["expires_at"]) <= now)
        return StatsRead(
            active_users=sum(1 for user in storage.list(USERS) if user.get("is_active")),
            active_certificates=len(certificates) - expired,
            total_certificates=len(certificates),
            expired_certificates=expired,
            active_groups=storage.count(USER_GROUPS),
            restrictions_count=storage.count(ACCESS_POLICIES),
            blocked_access=sum(1 for log in storage.list(AUDIT_LOGS) if is_blocked(log.get("status"))),
        )
