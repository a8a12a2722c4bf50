"""
In-memory data store.

``MemStorage`` keeps one dictionary per table, keyed by integer ids
assigned from a per-table counter that starts at 1 and never reuses
an id within the lifetime of the store.  Join tables (user to group,
certificate to policy, certificate to group, permissions) are ordinary
tables with their own ids rather than composite keys.

Nothing here is persisted; a new process starts from an empty store
(optionally seeded with demo data, see ``seed_demo_data``).  The
store does not enforce uniqueness or referential integrity and never
cascades deletes; those decisions belong to the service layer.

A store instance is attached to the FastAPI application in
``create_app`` and handed to routes through the ``get_storage``
dependency, so every application (and every test) has its own data.
"""

from __future__ import annotations

import copy
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from fastapi import Request

from .security import hash_password


USERS = "users"
USER_GROUPS = "user_groups"
USER_TO_GROUP = "user_to_group"
CERTIFICATES = "certificates"
ACCESS_POLICIES = "access_policies"
CERTIFICATE_TO_POLICY = "certificate_to_policy"
CERTIFICATE_TO_GROUP = "certificate_to_group"
AUDIT_LOGS = "audit_logs"
SCHEDULES = "schedules"
PERMISSIONS = "permissions"

TABLES = (
    USERS,
    USER_GROUPS,
    USER_TO_GROUP,
    CERTIFICATES,
    ACCESS_POLICIES,
    CERTIFICATE_TO_POLICY,
    CERTIFICATE_TO_GROUP,
    AUDIT_LOGS,
    SCHEDULES,
    PERMISSIONS,
)


class MemStorage:
    """Dictionary-backed repository for all CertGuard records."""

    def __init__(self) -> None:
        self._tables: Dict[str, Dict[int, Dict[str, Any]]] = {name: {} for name in TABLES}
        self._counters: Dict[str, int] = {name: 0 for name in TABLES}

    def _table(self, table: str) -> Dict[int, Dict[str, Any]]:
        try:
            return self._tables[table]
        except KeyError:
            raise KeyError(f"Unknown table {table!r}") from None

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """Store a new record and return a copy of it with its ``id``."""
        rows = self._table(table)
        self._counters[table] += 1
        record_id = self._counters[table]
        record = copy.deepcopy(values)
        record["id"] = record_id
        rows[record_id] = record
        return copy.deepcopy(record)

    def get(self, table: str, record_id: int) -> Optional[Dict[str, Any]]:
        record = self._table(table).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def exists(self, table: str, record_id: int) -> bool:
        return record_id in self._table(table)

    def list(self, table: str) -> List[Dict[str, Any]]:
        """Return every record of a table in insertion (id) order."""
        return [copy.deepcopy(record) for record in self._table(table).values()]

    def find(self, table: str, **criteria: Any) -> List[Dict[str, Any]]:
        """Return records whose fields equal all given keyword values.

        This is a linear scan over the table; there are no indexes.
        """
        return [
            copy.deepcopy(record)
            for record in self._table(table).values()
            if all(record.get(key) == value for key, value in criteria.items())
        ]

    def update(self, table: str, record_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge ``values`` into an existing record.

        Returns the updated record, or ``None`` if the id is unknown.
        The ``id`` field itself can not be changed.
        """
        rows = self._table(table)
        record = rows.get(record_id)
        if record is None:
            return None
        changes = {key: copy.deepcopy(value) for key, value in values.items() if key != "id"}
        record.update(changes)
        return copy.deepcopy(record)

    def delete(self, table: str, record_id: int) -> bool:
        return self._table(table).pop(record_id, None) is not None

    def count(self, table: str) -> int:
        return len(self._table(table))


def get_storage(request: Request) -> MemStorage:
    """FastAPI dependency returning the store attached to the running app."""
    return request.app.state.storage


def seed_demo_data(storage: MemStorage) -> None:
    """Populate ``storage`` with a small demo data set.

    Creates an administrator, three groups, three certificates (one of
    them already expired), two access policies, a schedule, the
    associations between them and a handful of audit records.
    """
    now = datetime.now(timezone.utc)

    admin = storage.insert(USERS, {
        "username": "admin",
        "password": hash_password("admin123"),
        "full_name": "Admin Demo",
        "email": "admin@whomdoc9.com",
        "role": "admin",
        "avatar_url": None,
        "is_active": True,
    })
    analyst = storage.insert(USERS, {
        "username": "mcosta",
        "password": hash_password("analista123"),
        "full_name": "Marina Costa",
        "email": "marina.costa@acmecorp.com",
        "role": "user",
        "avatar_url": None,
        "is_active": True,
    })

    financeiro = storage.insert(USER_GROUPS, {"name": "Financeiro", "description": "Equipe financeira da empresa"})
    ti = storage.insert(USER_GROUPS, {"name": "TI - Infraestrutura", "description": "Time de infraestrutura de TI"})
    juridico = storage.insert(USER_GROUPS, {"name": "Jurídico", "description": "Departamento jurídico"})

    storage.insert(USER_TO_GROUP, {"user_id": admin["id"], "group_id": ti["id"]})
    storage.insert(USER_TO_GROUP, {"user_id": analyst["id"], "group_id": financeiro["id"]})

    nfe = storage.insert(CERTIFICATES, {
        "name": "e-CNPJ Acme Corp",
        "type": "A1",
        "entity_type": "PJ",
        "issued_at": now - timedelta(days=30),
        "expires_at": now + timedelta(days=335),
        "created_by": admin["id"],
        "allowed_actions": ["signing", "authentication"],
    })
    token = storage.insert(CERTIFICATES, {
        "name": "e-CPF Diretoria",
        "type": "A3",
        "entity_type": "PF",
        "issued_at": now - timedelta(days=300),
        "expires_at": now + timedelta(days=45),
        "created_by": admin["id"],
        "allowed_actions": ["signing", "authentication", "encryption"],
    })
    expired = storage.insert(CERTIFICATES, {
        "name": "Assinatura de Contratos",
        "type": "A1",
        "entity_type": "PJ",
        "issued_at": now - timedelta(days=730),
        "expires_at": now - timedelta(days=365),
        "created_by": admin["id"],
        "allowed_actions": ["signing"],
    })

    office_hours = storage.insert(ACCESS_POLICIES, {
        "name": "Horário Comercial",
        "description": "Uso restrito a dias úteis em horário comercial",
        "allowed_systems": ["SEFAZ", "eSocial"],
        "blocked_urls": ["*.facebook.com"],
        "allowed_urls": ["*.fazenda.gov.br", "*.esocial.gov.br"],
        "sensitive_info_rules": [],
        "access_hours": {"work_days": True, "weekend": False, "start_time": "08:00", "end_time": "18:00"},
    })
    banking = storage.insert(ACCESS_POLICIES, {
        "name": "Internet Banking",
        "description": "Acesso somente aos portais bancários",
        "allowed_systems": [],
        "blocked_urls": [],
        "allowed_urls": ["*.bb.com.br", "*.itau.com.br"],
        "sensitive_info_rules": [],
        "access_hours": None,
    })

    storage.insert(CERTIFICATE_TO_POLICY, {"certificate_id": nfe["id"], "policy_id": office_hours["id"]})
    storage.insert(CERTIFICATE_TO_POLICY, {"certificate_id": token["id"], "policy_id": banking["id"]})
    storage.insert(CERTIFICATE_TO_GROUP, {"certificate_id": nfe["id"], "group_id": financeiro["id"]})
    storage.insert(CERTIFICATE_TO_GROUP, {"certificate_id": token["id"], "group_id": ti["id"]})
    storage.insert(CERTIFICATE_TO_GROUP, {"certificate_id": expired["id"], "group_id": juridico["id"]})

    storage.insert(PERMISSIONS, {
        "certificate_id": nfe["id"], "group_id": financeiro["id"],
        "can_view": True, "can_edit": False, "can_delete": False, "can_download": True,
    })
    storage.insert(PERMISSIONS, {
        "certificate_id": token["id"], "group_id": ti["id"],
        "can_view": True, "can_edit": True, "can_delete": True, "can_download": True,
    })

    storage.insert(SCHEDULES, {
        "name": "Expediente Financeiro",
        "description": "Janela de uso do certificado da equipe financeira",
        "is_active": True,
        "start_date": now - timedelta(days=30),
        "end_date": None,
        "week_days": {
            "monday": True,
            "tuesday": True,
            "wednesday": True,
            "thursday": True,
            "friday": True,
            "saturday": False,
            "sunday": False,
        },
        "start_time": "08:00",
        "end_time": "18:00",
        "user_group_id": financeiro["id"],
    })

    storage.insert(AUDIT_LOGS, {
        "user_id": analyst["id"],
        "action": "SIGN_DOCUMENT",
        "certificate_id": nfe["id"],
        "details": {"system": "SEFAZ"},
        "status": "allowed",
        "ip_address": "192.168.1.20",
        "timestamp": now - timedelta(hours=3),
    })
    storage.insert(AUDIT_LOGS, {
        "user_id": analyst["id"],
        "action": "ACCESS_URL",
        "certificate_id": nfe["id"],
        "details": {"url": "https://www.facebook.com"},
        "status": "blocked",
        "ip_address": "192.168.1.20",
        "timestamp": now - timedelta(hours=2),
    })
    storage.insert(AUDIT_LOGS, {
        "user_id": admin["id"],
        "action": "AUTHENTICATE",
        "certificate_id": token["id"],
        "details": {"system": "Internet Banking"},
        "status": "allowed",
        "ip_address": "192.168.1.1",
        "timestamp": now - timedelta(hours=1),
    })
