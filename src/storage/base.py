"""
Claims store interface.

The API depends only on this narrow contract, so the relational backend can
be swapped for the in-memory one (or a mock) without touching the handlers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from ..claims.schema import Claim, ClaimDetail, ClaimDraft


@dataclass(frozen=True)
class ClaimFilter:
    """
    Optional constraints for listing claims.

    status, lob and assigned_to are exact matches. search is a
    case-insensitive substring match against the claim number, insured name
    or policy number. Constraints combine with AND; empty values are ignored.
    """
    status: Optional[str] = None
    lob: Optional[str] = None
    assigned_to: Optional[str] = None
    search: Optional[str] = None

    def matches(self, claim: Claim) -> bool:
        """Evaluate the filter against a claim in memory."""
        if self.status and claim.status.value != self.status:
            return False
        if self.lob and claim.lob.value != self.lob:
            return False
        if self.assigned_to and claim.assigned_to != self.assigned_to:
            return False
        if self.search:
            needle = self.search.lower()
            haystacks = (claim.claim_number, claim.insured_name, claim.policy_number)
            if not any(needle in value.lower() for value in haystacks):
                return False
        return True


class ClaimStore(ABC):
    """Persistence contract for claims and their events."""

    @abstractmethod
    def create(self, draft: ClaimDraft) -> ClaimDetail:
        """
        Persist a new claim together with its initial events.

        Assigns the id and timestamps. Claim and events are written
        atomically.

        Raises:
            ClaimNumberConflictError: If the claim number is already taken
        """

    @abstractmethod
    def find_many(self, filters: ClaimFilter, skip: int = 0, take: int = 20) -> List[Claim]:
        """List matching claims newest first, without events."""

    @abstractmethod
    def count(self, filters: ClaimFilter) -> int:
        """Count matching claims, ignoring any pagination window."""

    @abstractmethod
    def find_one(self, claim_id: str) -> Optional[ClaimDetail]:
        """Get a claim with its events oldest first, or None if absent."""
