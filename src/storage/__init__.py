"""
Storage module for persisting claims and their audit events.

Provides:
- ClaimStore: the narrow create/find_many/count/find_one contract
- SqlClaimStore: SQLAlchemy implementation (SQLite by default)
- InMemoryClaimStore: dict-backed implementation for tests and demos
"""

from .base import ClaimFilter, ClaimStore
from .claim_store import DEFAULT_DATABASE_URL, SqlClaimStore, create_claims_engine
from .memory_store import InMemoryClaimStore

__all__ = [
    "ClaimFilter",
    "ClaimStore",
    "DEFAULT_DATABASE_URL",
    "InMemoryClaimStore",
    "SqlClaimStore",
    "create_claims_engine",
]
