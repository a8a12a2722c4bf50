"""
Certificate endpoints.

CRUD for certificates, assignment of access policies and sharing
with user groups.  Every successful write records an audit entry
carrying the caller's IP address and the certificate id.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from certguard_api.app.api.deps import client_ip
from certguard_api.app.core.storage import MemStorage, get_storage
from certguard_api.app.schemas.certificate import (
    CertificateCreate,
    CertificateGroupCreate,
    CertificateGroupRead,
    CertificatePolicyCreate,
    CertificatePolicyRead,
    CertificateRead,
    CertificateUpdate,
)
from certguard_api.app.schemas.group import UserGroupRead
from certguard_api.app.schemas.policy import AccessPolicyRead
from certguard_api.app.services.audit_service import AuditService
from certguard_api.app.services.certificate_service import CertificateService


router = APIRouter()


@router.get("", response_model=List[CertificateRead])
async def list_certificates(storage: MemStorage = Depends(get_storage)) -> List[CertificateRead]:
    return await CertificateService.list_certificates(storage)


@router.get("/recent", response_model=List[CertificateRead])
async def list_recent_certificates(
    limit: int = Query(3, ge=1, description="Number of certificates to return"),
    storage: MemStorage = Depends(get_storage),
) -> List[CertificateRead]:
    """Return the most recently created certificates, newest first."""
    return await CertificateService.recent_certificates(storage, limit)


@router.post("", response_model=CertificateRead, status_code=status.HTTP_201_CREATED)
async def create_certificate(
    certificate: CertificateCreate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> CertificateRead:
    created = await CertificateService.create_certificate(storage, certificate)
    await AuditService.log(
        storage,
        "CREATE_CERTIFICATE",
        certificate_id=created.id,
        user_id=created.created_by,
        details={"name": created.name},
        ip_address=ip_address,
    )
    return created


@router.post("/policies", response_model=CertificatePolicyRead, status_code=status.HTTP_201_CREATED)
async def assign_policy(
    assignment: CertificatePolicyCreate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> CertificatePolicyRead:
    """Attach an access policy to a certificate."""
    try:
        link = await CertificateService.add_policy(storage, assignment)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "ASSIGN_POLICY",
        certificate_id=link.certificate_id,
        details={"policyId": link.policy_id},
        ip_address=ip_address,
    )
    return link


@router.post("/groups", response_model=CertificateGroupRead, status_code=status.HTTP_201_CREATED)
async def share_with_group(
    assignment: CertificateGroupCreate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> CertificateGroupRead:
    """Share a certificate with a user group."""
    try:
        link = await CertificateService.add_group(storage, assignment)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "SHARE_CERTIFICATE",
        certificate_id=link.certificate_id,
        details={"groupId": link.group_id},
        ip_address=ip_address,
    )
    return link


@router.get("/{certificate_id}", response_model=CertificateRead)
async def get_certificate(certificate_id: int, storage: MemStorage = Depends(get_storage)) -> CertificateRead:
    try:
        return await CertificateService.get_certificate(storage, certificate_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{certificate_id}", response_model=CertificateRead)
async def update_certificate(
    certificate_id: int,
    updates: CertificateUpdate,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> CertificateRead:
    """Update a certificate.

    Partial updates are supported; any unspecified fields remain
    unchanged.
    """
    update_dict = updates.model_dump(exclude_unset=True, exclude_none=True)
    try:
        updated = await CertificateService.update_certificate(storage, certificate_id, update_dict)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "UPDATE_CERTIFICATE",
        certificate_id=certificate_id,
        details={"updates": sorted(update_dict)},
        ip_address=ip_address,
    )
    return updated


@router.delete("/{certificate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_certificate(
    certificate_id: int,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> None:
    """Delete a certificate.

    Policy and group associations of the certificate are kept.
    """
    try:
        deleted = await CertificateService.delete_certificate(storage, certificate_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "DELETE_CERTIFICATE",
        certificate_id=certificate_id,
        details={"name": deleted.name},
        ip_address=ip_address,
    )
    return None


@router.get("/{certificate_id}/policies", response_model=List[AccessPolicyRead])
async def list_certificate_policies(
    certificate_id: int,
    storage: MemStorage = Depends(get_storage),
) -> List[AccessPolicyRead]:
    try:
        return await CertificateService.list_policies(storage, certificate_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{certificate_id}/policies/{policy_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_policy(
    certificate_id: int,
    policy_id: int,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> None:
    try:
        await CertificateService.remove_policy(storage, certificate_id, policy_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "REMOVE_POLICY",
        certificate_id=certificate_id,
        details={"policyId": policy_id},
        ip_address=ip_address,
    )
    return None


@router.get("/{certificate_id}/groups", response_model=List[UserGroupRead])
async def list_certificate_groups(
    certificate_id: int,
    storage: MemStorage = Depends(get_storage),
) -> List[UserGroupRead]:
    try:
        return await CertificateService.list_groups(storage, certificate_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{certificate_id}/groups/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_group(
    certificate_id: int,
    group_id: int,
    storage: MemStorage = Depends(get_storage),
    ip_address: Optional[str] = Depends(client_ip),
) -> None:
    try:
        await CertificateService.remove_group(storage, certificate_id, group_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    await AuditService.log(
        storage,
        "UNSHARE_CERTIFICATE",
        certificate_id=certificate_id,
        details={"groupId": group_id},
        ip_address=ip_address,
    )
    return None
