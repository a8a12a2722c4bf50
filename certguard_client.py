"""CertGuard API client.

A thin wrapper around the CertGuard REST API built on ``requests``.
Every public method returns a tuple ``(data, error)``: on success
``error`` is ``None``; on failure ``data`` is ``None`` (or an empty
list for listings) and ``error`` is a dictionary with ``status_code``
and ``message``.  No method raises on HTTP or network errors.

Example::

    api = CertGuardAPI(base_url="http://localhost:5000")
    certs, error = api.list_certificates()
    if error:
        print(error["message"])

The client supports an optional bearer token for deployments that put
an authenticating proxy in front of the API.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]
Result = Tuple[Optional[Any], Optional[Error]]


class CertGuardAPI:
    """Client for the CertGuard admin API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:5000``.
                The ``/api`` prefix is added by the client.
            api_key: Optional token sent as ``Authorization: Bearer <api_key>``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Result:
        """Perform an HTTP request against ``/api<path>``.

        Returns:
            A tuple ``(data, error)``.  ``data`` is the parsed JSON body
            (``None`` for empty responses such as HTTP 204).
        """
        url = f"{self.base_url}/api{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = self._error_message(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    @staticmethod
    def _error_message(exc: requests.HTTPError) -> str:
        """Extract a readable message from an error response.

        The server answers with ``{"detail": ...}`` for missing records
        and conflicts, and ``{"error": ..., "errors": [...]}`` for
        validation failures.
        """
        message = ""
        if exc.response is not None:
            try:
                err_json = exc.response.json()
            except ValueError:
                err_json = None
            if isinstance(err_json, dict):
                message = err_json.get("detail") or err_json.get("error") or str(err_json)
                field_errors = err_json.get("errors")
                if field_errors:
                    details = "; ".join(f"{e.get('field')}: {e.get('message')}" for e in field_errors)
                    message = f"{message} ({details})"
            else:
                message = exc.response.text
        return message or str(exc)

    def _list(self, path: str, params: Dict[str, Any] | None = None) -> Tuple[List[Any], Optional[Error]]:
        data, error = self._request("GET", path, params=params)
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    def _delete(self, path: str) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", path)
        return error is None, error

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def list_users(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/users")

    def get_user(self, user_id: int) -> Result:
        return self._request("GET", f"/users/{user_id}")

    def create_user(self, payload: Dict[str, Any]) -> Result:
        """Create a user.  ``payload`` uses the API's camelCase field names."""
        return self._request("POST", "/users", json_body=payload)

    def update_user(self, user_id: int, changes: Dict[str, Any]) -> Result:
        return self._request("PUT", f"/users/{user_id}", json_body=changes)

    def delete_user(self, user_id: int) -> Tuple[bool, Optional[Error]]:
        return self._delete(f"/users/{user_id}")

    def list_user_groups_for(self, user_id: int) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list(f"/users/{user_id}/groups")

    # ------------------------------------------------------------------
    # User groups
    # ------------------------------------------------------------------
    def list_groups(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/user-groups")

    def get_group(self, group_id: int) -> Result:
        return self._request("GET", f"/user-groups/{group_id}")

    def create_group(self, payload: Dict[str, Any]) -> Result:
        return self._request("POST", "/user-groups", json_body=payload)

    def update_group(self, group_id: int, changes: Dict[str, Any]) -> Result:
        return self._request("PUT", f"/user-groups/{group_id}", json_body=changes)

    def delete_group(self, group_id: int) -> Tuple[bool, Optional[Error]]:
        return self._delete(f"/user-groups/{group_id}")

    def add_group_member(self, group_id: int, user_id: int) -> Result:
        return self._request(
            "POST", "/user-groups/members", json_body={"userId": user_id, "groupId": group_id}
        )

    def remove_group_member(self, group_id: int, user_id: int) -> Tuple[bool, Optional[Error]]:
        return self._delete(f"/user-groups/{group_id}/members/{user_id}")

    def list_group_members(self, group_id: int) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list(f"/user-groups/{group_id}/members")

    def list_group_certificates(self, group_id: int) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list(f"/user-groups/{group_id}/certificates")

    # ------------------------------------------------------------------
    # Certificates
    # ------------------------------------------------------------------
    def list_certificates(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/certificates")

    def recent_certificates(self, limit: int = 3) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/certificates/recent", params={"limit": limit})

    def get_certificate(self, certificate_id: int) -> Result:
        return self._request("GET", f"/certificates/{certificate_id}")

    def create_certificate(self, payload: Dict[str, Any]) -> Result:
        return self._request("POST", "/certificates", json_body=payload)

    def update_certificate(self, certificate_id: int, changes: Dict[str, Any]) -> Result:
        return self._request("PUT", f"/certificates/{certificate_id}", json_body=changes)

    def delete_certificate(self, certificate_id: int) -> Tuple[bool, Optional[Error]]:
        return self._delete(f"/certificates/{certificate_id}")

    def assign_policy(self, certificate_id: int, policy_id: int) -> Result:
        return self._request(
            "POST",
            "/certificates/policies",
            json_body={"certificateId": certificate_id, "policyId": policy_id},
        )

    def remove_policy(self, certificate_id: int, policy_id: int) -> Tuple[bool, Optional[Error]]:
        return self._delete(f"/certificates/{certificate_id}/policies/{policy_id}")

    def list_certificate_policies(self, certificate_id: int) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list(f"/certificates/{certificate_id}/policies")

    def share_certificate(self, certificate_id: int, group_id: int) -> Result:
        return self._request(
            "POST",
            "/certificates/groups",
            json_body={"certificateId": certificate_id, "groupId": group_id},
        )

    def unshare_certificate(self, certificate_id: int, group_id: int) -> Tuple[bool, Optional[Error]]:
        return self._delete(f"/certificates/{certificate_id}/groups/{group_id}")

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------
    def list_certificate_permissions(self, certificate_id: int) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list(f"/permissions/certificate/{certificate_id}")

    def list_group_permissions(self, group_id: int) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list(f"/permissions/group/{group_id}")

    def grant_permission(self, certificate_id: int, group_id: int, **rights: bool) -> Result:
        """Grant rights, e.g. ``grant_permission(1, 2, canView=True)``."""
        body = {"certificateId": certificate_id, "groupId": group_id, **rights}
        return self._request("POST", "/permissions", json_body=body)

    def update_permission(self, permission_id: int, **rights: bool) -> Result:
        return self._request("PUT", f"/permissions/{permission_id}", json_body=rights)

    def revoke_permission(self, permission_id: int) -> Tuple[bool, Optional[Error]]:
        return self._delete(f"/permissions/{permission_id}")

    # ------------------------------------------------------------------
    # Access policies and schedules
    # ------------------------------------------------------------------
    def list_policies(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/access-policies")

    def create_policy(self, payload: Dict[str, Any]) -> Result:
        return self._request("POST", "/access-policies", json_body=payload)

    def update_policy(self, policy_id: int, changes: Dict[str, Any]) -> Result:
        return self._request("PUT", f"/access-policies/{policy_id}", json_body=changes)

    def delete_policy(self, policy_id: int) -> Tuple[bool, Optional[Error]]:
        return self._delete(f"/access-policies/{policy_id}")

    def list_schedules(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/schedules")

    def create_schedule(self, payload: Dict[str, Any]) -> Result:
        return self._request("POST", "/schedules", json_body=payload)

    def update_schedule(self, schedule_id: int, changes: Dict[str, Any]) -> Result:
        return self._request("PUT", f"/schedules/{schedule_id}", json_body=changes)

    def delete_schedule(self, schedule_id: int) -> Tuple[bool, Optional[Error]]:
        return self._delete(f"/schedules/{schedule_id}")

    # ------------------------------------------------------------------
    # Audit logs and stats
    # ------------------------------------------------------------------
    def list_audit_logs(self, limit: Optional[int] = None) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        params = {"limit": limit} if limit is not None else None
        return self._list("/audit-logs", params=params)

    def record_audit_log(self, payload: Dict[str, Any]) -> Result:
        return self._request("POST", "/audit-logs", json_body=payload)

    def list_user_audit_logs(self, user_id: int) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list(f"/users/{user_id}/audit-logs")

    def list_certificate_audit_logs(self, certificate_id: int) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list(f"/certificates/{certificate_id}/audit-logs")

    def get_stats(self) -> Result:
        return self._request("GET", "/stats")
