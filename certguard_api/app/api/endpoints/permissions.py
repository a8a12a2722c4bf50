"""
Certificate permission endpoints.

A permission grants a user group view/edit/delete/download rights
over a certificate.  Rows are listed per certificate or per group and
changed through ``PUT /permissions/{id}``.  Writes are audited
against the certificate they concern.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from certguard_api.app.api.deps import client_ip
from certguard_api.app.core.errors import DuplicateError
from certguard_api.app.core.storage import MemStorage, get_storage
from certguard_api.app.schemas.permission import PermissionCreate, PermissionRead, PermissionUpdate
from certguard_api.app.services.audit_service import AuditService
from certguard_api.app.services.permission_service import PermissionService


router = APIRouter()


@router.get("/certificate/{certificate_id}", response_model=List[PermissionRead])
async def list_certificate_permissions(
    certificate_id: int,
    storage: MemStorage = Depends(get_storage),
) -> List[PermissionRead]:
    try:
        return await PermissionService.list_for_certificate(storage, certificate_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/group/{group_id}", response_model=List[PermissionRead])
async def list_group_permissions(group_id: int, storage: MemStorage = Depends(get_storage)) -> List[PermissionRead]:
    try:
        return await PermissionService.list_for_group(storage, group_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("", response_model=PermissionRead, status_code=status.HTTP_201_CREATED)
async def create_permission(
    permission: PermissionCreate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> PermissionRead:
    """Grant a group rights over a certificate.

    Returns HTTP 404 if either record is missing and HTTP 409 if the
    group already has a permission on the certificate.
    """
    try:
        created = await PermissionService.create_permission(storage, permission)
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "CREATE_PERMISSION",
        certificate_id=created.certificate_id,
        details={"permissionId": created.id, "groupId": created.group_id},
        ip_address=ip_address,
    )
    return created


@router.get("/{permission_id}", response_model=PermissionRead)
async def get_permission(permission_id: int, storage: MemStorage = Depends(get_storage)) -> PermissionRead:
    try:
        return await PermissionService.get_permission(storage, permission_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{permission_id}", response_model=PermissionRead)
async def update_permission(
    permission_id: int,
    updates: PermissionUpdate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> PermissionRead:
    update_dict = updates.model_dump(exclude_unset=True, exclude_none=True)
    try:
        updated = await PermissionService.update_permission(storage, permission_id, update_dict)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "UPDATE_PERMISSION",
        certificate_id=updated.certificate_id,
        details={"permissionId": permission_id, "updates": update_dict},
        ip_address=ip_address,
    )
    return updated


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_permission(
    permission_id: int,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> None:
    try:
        deleted = await PermissionService.delete_permission(storage, permission_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "DELETE_PERMISSION",
        certificate_id=deleted.certificate_id,
        details={"permissionId": permission_id, "groupId": deleted.group_id},
        ip_address=ip_address,
    )
    return None
