"""
Request-scoped dependencies shared by the endpoint modules.

``get_storage`` lives in ``core.storage`` next to the store it hands
out; this module holds the helpers that only make sense for HTTP
handlers.
"""

from typing import Optional

from fastapi import Request


def client_ip(request: Request) -> Optional[str]:
    """Address of the caller, recorded on audit entries."""
    return request.client.host if request.client else None
