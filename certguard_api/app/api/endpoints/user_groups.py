"""
User group endpoints.

CRUD for groups plus membership management and the list of
certificates shared with a group.  Deleting a group does not remove
its membership rows.  Every successful write is audited; membership
changes carry the id of the user added or removed.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from certguard_api.app.api.deps import client_ip
from certguard_api.app.core.storage import MemStorage, get_storage
from certguard_api.app.schemas.certificate import CertificateRead
from certguard_api.app.schemas.group import (
    GroupMembershipCreate,
    GroupMembershipRead,
    UserGroupCreate,
    UserGroupRead,
    UserGroupUpdate,
)
from certguard_api.app.schemas.user import UserRead
from certguard_api.app.services.audit_service import AuditService
from certguard_api.app.services.group_service import GroupService


router = APIRouter()


@router.get("", response_model=List[UserGroupRead])
async def list_groups(storage: MemStorage = Depends(get_storage)) -> List[UserGroupRead]:
    return await GroupService.list_groups(storage)


@router.post("", response_model=UserGroupRead, status_code=status.HTTP_201_CREATED)
async def create_group(
    group: UserGroupCreate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> UserGroupRead:
    created = await GroupService.create_group(storage, group)
    await AuditService.log(
        storage,
        "CREATE_GROUP",
        details={"groupId": created.id, "name": created.name},
        ip_address=ip_address,
    )
    return created


@router.post("/members", response_model=GroupMembershipRead, status_code=status.HTTP_201_CREATED)
async def add_member(
    membership: GroupMembershipCreate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> GroupMembershipRead:
    """Add a user to a group.

    Both the user and the group must exist.  Adding an existing member
    again returns the existing membership.
    """
    try:
        created = await GroupService.add_member(storage, membership)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "ADD_GROUP_MEMBER",
        user_id=created.user_id,
        details={"groupId": created.group_id},
        ip_address=ip_address,
    )
    return created


@router.get("/{group_id}", response_model=UserGroupRead)
async def get_group(group_id: int, storage: MemStorage = Depends(get_storage)) -> UserGroupRead:
    try:
        return await GroupService.get_group(storage, group_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{group_id}", response_model=UserGroupRead)
async def update_group(
    group_id: int,
    updates: UserGroupUpdate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> UserGroupRead:
    update_dict = updates.model_dump(exclude_unset=True, exclude_none=True)
    try:
        updated = await GroupService.update_group(storage, group_id, update_dict)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "UPDATE_GROUP",
        details={"groupId": group_id, "updates": sorted(update_dict)},
        ip_address=ip_address,
    )
    return updated


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: int,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> None:
    try:
        deleted = await GroupService.delete_group(storage, group_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "DELETE_GROUP",
        details={"groupId": group_id, "name": deleted.name},
        ip_address=ip_address,
    )
    return None


@router.delete("/{group_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    group_id: int,
    user_id: int,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> None:
    try:
        await GroupService.remove_member(storage, group_id, user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "REMOVE_GROUP_MEMBER",
        user_id=user_id,
        details={"groupId": group_id},
        ip_address=ip_address,
    )
    return None


@router.get("/{group_id}/members", response_model=List[UserRead])
async def list_members(group_id: int, storage: MemStorage = Depends(get_storage)) -> List[UserRead]:
    try:
        return await GroupService.list_members(storage, group_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/{group_id}/certificates", response_model=List[CertificateRead])
async def list_group_certificates(
    group_id: int,
    storage: MemStorage = Depends(get_storage),
) -> List[CertificateRead]:
    """List the certificates shared with a group."""
    try:
        return await GroupService.list_certificates(storage, group_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
