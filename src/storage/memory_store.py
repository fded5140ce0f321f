"""
In-memory claim storage.

Dict-backed implementation of the store contract for tests and local demos.
Nothing survives a restart.
"""

import threading
import uuid
from datetime import datetime
from typing import Callable, Dict, List, Optional

from ..claims.clock import utc_now
from ..claims.errors import ClaimNumberConflictError
from ..claims.schema import Claim, ClaimDetail, ClaimDraft, ClaimEvent
from .base import ClaimFilter, ClaimStore


class InMemoryClaimStore(ClaimStore):
    """Thread-safe dict store keyed by claim id."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._claims: Dict[str, ClaimDetail] = {}
        self._lock = threading.Lock()

    def create(self, draft: ClaimDraft) -> ClaimDetail:
        now = self._clock()
        claim_id = str(uuid.uuid4())

        claim = ClaimDetail(
            id=claim_id,
            claim_number=draft.claim_number,
            lob=draft.lob,
            policy_number=draft.policy_number,
            insured_name=draft.insured_name,
            loss_date=draft.loss_date,
            loss_type=draft.loss_type,
            description=draft.description,
            contact_email=draft.contact_email,
            priority=draft.priority,
            status=draft.status,
            assigned_to=None,
            created_at=now,
            updated_at=now,
            events=[
                ClaimEvent(
                    id=str(uuid.uuid4()),
                    claim_id=claim_id,
                    type=item.type,
                    message=item.message,
                    created_at=now,
                )
                for item in draft.events
            ],
        )

        with self._lock:
            if any(c.claim_number == draft.claim_number for c in self._claims.values()):
                raise ClaimNumberConflictError(draft.claim_number)
            self._claims[claim_id] = claim

        return claim.model_copy(deep=True)

    def find_many(self, filters: ClaimFilter, skip: int = 0, take: int = 20) -> List[Claim]:
        with self._lock:
            matching = [c for c in self._claims.values() if filters.matches(c)]
            matching.sort(key=lambda c: (c.created_at, c.id), reverse=True)
            window = matching[skip:skip + take]
            return [Claim(**c.model_dump(exclude={"events"})) for c in window]

    def count(self, filters: ClaimFilter) -> int:
        with self._lock:
            return sum(1 for c in self._claims.values() if filters.matches(c))

    def find_one(self, claim_id: str) -> Optional[ClaimDetail]:
        with self._lock:
            claim = self._claims.get(claim_id)
            return claim.model_copy(deep=True) if claim else None
