"""
Top-level API router.

This router aggregates the domain-specific routers (users, groups,
certificates, etc.) and is mounted under ``/api`` by ``create_app``.
When new domains are introduced, include their routers here.
"""

from fastapi import APIRouter

from .endpoints import (
    access_policies,
    audit,
    certificates,
    permissions,
    schedules,
    stats,
    user_groups,
    users,
)

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(user_groups.router, prefix="/user-groups", tags=["user-groups"])
router.include_router(certificates.router, prefix="/certificates", tags=["certificates"])
router.include_router(access_policies.router, prefix="/access-policies", tags=["access-policies"])
router.include_router(schedules.router, prefix="/schedules", tags=["schedules"])
router.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
# The audit and stats routers define their full paths internally
# (``/audit-logs``, ``/users/{id}/audit-logs``, ``/stats``...), so they
# are included without a prefix.
router.include_router(audit.router, tags=["audit-logs"])
router.include_router(stats.router, tags=["stats"])
