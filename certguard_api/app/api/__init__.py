"""
API package containing the HTTP routes.

``router`` aggregates one ``APIRouter`` per domain from the
``endpoints`` subpackage; the application mounts it under ``/api``.
"""
