"""
HTTP API for claim intake.

FastAPI app factory, claim endpoints and the service they delegate to.
"""

from .app import build_default_app, create_app, main
from .service import ClaimListQuery, ClaimService, resolve_pagination

__all__ = [
    "build_default_app",
    "create_app",
    "main",
    "ClaimListQuery",
    "ClaimService",
    "resolve_pagination",
]
