"""
User endpoints.

Provide creation, listing, partial update and deletion of users, plus
the list of groups a user belongs to.  Passwords are accepted on
create/update and never returned.  Writes are audited with the id of
the user they concern, so ``/users/{id}/audit-logs`` shows them.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from certguard_api.app.api.deps import client_ip
from certguard_api.app.core.errors import DuplicateError
from certguard_api.app.core.storage import MemStorage, get_storage
from certguard_api.app.schemas.group import UserGroupRead
from certguard_api.app.schemas.user import UserCreate, UserRead, UserUpdate
from certguard_api.app.services.audit_service import AuditService
from certguard_api.app.services.user_service import UserService


router = APIRouter()


@router.get("", response_model=List[UserRead])
async def list_users(storage: MemStorage = Depends(get_storage)) -> List[UserRead]:
    """Return every user in creation order."""
    return await UserService.list_users(storage)


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    user: UserCreate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> UserRead:
    """Create a new user.

    Returns HTTP 409 if the username is already taken.
    """
    try:
        created = await UserService.create_user(storage, user)
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    await AuditService.log(
        storage,
        "CREATE_USER",
        user_id=created.id,
        details={"username": created.username},
        ip_address=ip_address,
    )
    return created


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int, storage: MemStorage = Depends(get_storage)) -> UserRead:
    try:
        return await UserService.get_user(storage, user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    updates: UserUpdate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> UserRead:
    """Update an existing user.

    Partial updates are supported; any unspecified fields remain
    unchanged.
    """
    update_dict = updates.model_dump(exclude_unset=True, exclude_none=True)
    try:
        updated = await UserService.update_user(storage, user_id, update_dict)
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    # Field names only; the new password never reaches the audit trail.
    await AuditService.log(
        storage,
        "UPDATE_USER",
        user_id=user_id,
        details={"updates": sorted(update_dict)},
        ip_address=ip_address,
    )
    return updated


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> None:
    """Delete a user.

    Group memberships and audit entries referencing the user are kept.
    """
    try:
        deleted = await UserService.delete_user(storage, user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "DELETE_USER",
        user_id=user_id,
        details={"username": deleted.username},
        ip_address=ip_address,
    )
    return None


@router.get("/{user_id}/groups", response_model=List[UserGroupRead])
async def list_user_groups(user_id: int, storage: MemStorage = Depends(get_storage)) -> List[UserGroupRead]:
    """List the groups the user is a member of."""
    try:
        return await UserService.list_groups_for_user(storage, user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
