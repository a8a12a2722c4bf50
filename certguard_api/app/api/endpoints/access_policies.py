"""
Access policy endpoints.

Policies are managed here and attached to certificates through
``POST /certificates/policies``.  A PUT may send only some of the
``accessHours`` keys; the rest keep their stored values.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from certguard_api.app.api.deps import client_ip
from certguard_api.app.core.storage import MemStorage, get_storage
from certguard_api.app.schemas.policy import AccessPolicyCreate, AccessPolicyRead, AccessPolicyUpdate
from certguard_api.app.services.audit_service import AuditService
from certguard_api.app.services.policy_service import PolicyService


router = APIRouter()


@router.get("", response_model=List[AccessPolicyRead])
async def list_policies(storage: MemStorage = Depends(get_storage)) -> List[AccessPolicyRead]:
    return await PolicyService.list_policies(storage)


@router.post("", response_model=AccessPolicyRead, status_code=status.HTTP_201_CREATED)
async def create_policy(
    policy: AccessPolicyCreate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> AccessPolicyRead:
    created = await PolicyService.create_policy(storage, policy)
    await AuditService.log(
        storage,
        "CREATE_POLICY",
        details={"policyId": created.id, "name": created.name},
        ip_address=ip_address,
    )
    return created


@router.get("/{policy_id}", response_model=AccessPolicyRead)
async def get_policy(policy_id: int, storage: MemStorage = Depends(get_storage)) -> AccessPolicyRead:
    try:
        return await PolicyService.get_policy(storage, policy_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{policy_id}", response_model=AccessPolicyRead)
async def update_policy(
    policy_id: int,
    updates: AccessPolicyUpdate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> AccessPolicyRead:
    update_dict = updates.model_dump(exclude_unset=True, exclude_none=True)
    try:
        updated = await PolicyService.update_policy(storage, policy_id, update_dict)
    except ValidationError:
        # Subclass of ValueError; leave it to the 400 handler.
        raise
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "UPDATE_POLICY",
        details={"policyId": policy_id, "updates": sorted(update_dict)},
        ip_address=ip_address,
    )
    return updated


@router.delete("/{policy_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_policy(
    policy_id: int,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> None:
    """Delete a policy; certificate assignments referencing it are kept."""
    try:
        deleted = await PolicyService.delete_policy(storage, policy_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "DELETE_POLICY",
        details={"policyId": policy_id, "name": deleted.name},
        ip_address=ip_address,
    )
    return None
