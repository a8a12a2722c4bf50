"""
Audit log endpoints.

Audit entries record actions taken against certificates together with
the access decision (``allowed``/``blocked``).  Listings are always
sorted newest first.  This router defines full paths itself because
the per-user and per-certificate listings live under ``/users`` and
``/certificates``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from certguard_api.app.core.storage import MemStorage, get_storage
from certguard_api.app.schemas.audit import AuditLogCreate, AuditLogRead
from certguard_api.app.services.audit_service import AuditService


router = APIRouter()


@router.get("/audit-logs", response_model=List[AuditLogRead])
async def list_audit_logs(
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of entries to return"),
    storage: MemStorage = Depends(get_storage),
) -> List[AuditLogRead]:
    """Return audit entries ordered by timestamp descending."""
    return await AuditService.list_logs(storage, limit=limit)


@router.post("/audit-logs", response_model=AuditLogRead, status_code=status.HTTP_201_CREATED)
async def create_audit_log(entry: AuditLogCreate, storage: MemStorage = Depends(get_storage)) -> AuditLogRead:
    """Record an audit entry; the timestamp is assigned by the server."""
    return await AuditService.create_log(storage, entry)


@router.get("/users/{user_id}/audit-logs", response_model=List[AuditLogRead])
async def list_user_audit_logs(user_id: int, storage: MemStorage = Depends(get_storage)) -> List[AuditLogRead]:
    try:
        return await AuditService.list_logs_for_user(storage, user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/certificates/{certificate_id}/audit-logs", response_model=List[AuditLogRead])
async def list_certificate_audit_logs(
    certificate_id: int,
    storage: MemStorage = Depends(get_storage),
) -> List[AuditLogRead]:
    try:
        return await AuditService.list_logs_for_certificate(storage, certificate_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
