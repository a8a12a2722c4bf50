"""
Top-level package for the CertGuard API.

All functionality lives in submodules under ``app``; the ASGI
application is ``certguard_api.app.main:app``.
"""

__all__ = []
