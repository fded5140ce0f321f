"""
Claim intake service.

Orchestrates the request handlers' work:
- Submission: validate, number, persist with the initial event
- Listing: pagination window, filters, concurrent fetch + count
- Lookup by id

The store is passed in; the service keeps no other state.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional, Tuple

from fastapi.concurrency import run_in_threadpool

from ..claims.clock import utc_today
from ..claims.errors import ClaimNotFoundError, ClaimNumberConflictError, ClaimValidationError
from ..claims.numbering import ClaimNumberGenerator
from ..claims.schema import (
    ClaimDetail,
    ClaimDraft,
    ClaimEventDraft,
    ClaimEventType,
    ClaimPage,
    ClaimStatus,
)
from ..claims.validation import ensure_valid_submission
from ..storage.base import ClaimFilter, ClaimStore

logger = logging.getLogger(__name__)


# =============================================================================
# Pagination
# =============================================================================

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 5
MAX_PAGE_SIZE = 50

# Largest row offset a SQL OFFSET clause accepts (signed 64-bit)
MAX_OFFSET = 2**63 - 1

SUBMITTED_MESSAGE = "Claim submitted"


def parse_int(raw: Optional[str], default: int) -> int:
    """Parse a query-string number, flooring fractions and falling back on junk."""
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return math.floor(float(raw))
    except (ValueError, OverflowError):
        return default


def resolve_pagination(page: Optional[str], page_size: Optional[str]) -> Tuple[int, int]:
    """
    Normalize raw page parameters.

    Page defaults to 1 with a floor of 1, and is capped so the row offset
    stays within MAX_OFFSET. Page size defaults to 20, clamped to [5, 50].
    """
    resolved_size = min(MAX_PAGE_SIZE, max(MIN_PAGE_SIZE, parse_int(page_size, DEFAULT_PAGE_SIZE)))
    last_page = MAX_OFFSET // resolved_size + 1
    resolved_page = min(last_page, max(DEFAULT_PAGE, parse_int(page, DEFAULT_PAGE)))
    return resolved_page, resolved_size


@dataclass
class ClaimListQuery:
    """Raw list parameters as they arrive on the query string."""
    status: Optional[str] = None
    lob: Optional[str] = None
    assigned_to: Optional[str] = None
    search: Optional[str] = None
    page: Optional[str] = None
    page_size: Optional[str] = None

    def to_filter(self) -> ClaimFilter:
        return ClaimFilter(
            status=self.status or None,
            lob=self.lob or None,
            assigned_to=self.assigned_to or None,
            search=self.search or None,
        )


# =============================================================================
# Service
# =============================================================================


class ClaimService:
    """Claim submission and query operations over a ClaimStore."""

    def __init__(
        self,
        store: ClaimStore,
        number_generator: Optional[Callable[[], str]] = None,
        today: Callable[[], date] = utc_today,
        claim_number_attempts: int = 5,
    ):
        if claim_number_attempts < 1:
            raise ValueError("claim_number_attempts must be at least 1")
        self.store = store
        self._next_number = number_generator or ClaimNumberGenerator()
        self._today = today
        self._attempts = claim_number_attempts

    def submit(self, payload: Any) -> ClaimDetail:
        """
        Validate and persist a claim submission.

        Args:
            payload: JSON-decoded request body

        Returns:
            The stored claim with its "Claim submitted" event

        Raises:
            ClaimValidationError: With every violated rule
            ClaimNumberConflictError: If every generated number collided
        """
        try:
            submission = ensure_valid_submission(payload, self._today())
        except ClaimValidationError as e:
            logger.info(f"Rejected claim submission with {len(e.issues)} issue(s)")
            raise

        conflict: Optional[ClaimNumberConflictError] = None
        for attempt in range(1, self._attempts + 1):
            draft = ClaimDraft(
                **submission.model_dump(),
                claim_number=self._next_number(),
                status=ClaimStatus.SUBMITTED,
                events=[ClaimEventDraft(type=ClaimEventType.STATUS_CHANGED, message=SUBMITTED_MESSAGE)],
            )
            try:
                claim = self.store.create(draft)
            except ClaimNumberConflictError as e:
                conflict = e
                logger.warning(
                    f"Claim number {e.claim_number} already taken "
                    f"(attempt {attempt}/{self._attempts})"
                )
                continue

            logger.info(f"Created claim {claim.claim_number} ({claim.id}) for {claim.insured_name}")
            return claim

        logger.error(f"Giving up after {self._attempts} claim number collisions")
        raise conflict

    async def list_claims(self, query: ClaimListQuery) -> ClaimPage:
        """
        List one page of claims matching the query.

        The page items and the total count are fetched concurrently.
        """
        page, page_size = resolve_pagination(query.page, query.page_size)
        skip = (page - 1) * page_size
        filters = query.to_filter()

        items, total = await asyncio.gather(
            run_in_threadpool(self.store.find_many, filters, skip, page_size),
            run_in_threadpool(self.store.count, filters),
        )

        return ClaimPage(page=page, page_size=page_size, total=total, items=items)

    def get_claim(self, claim_id: str) -> ClaimDetail:
        """Get a claim with its events, raising ClaimNotFoundError if absent."""
        claim = self.store.find_one(claim_id)
        if claim is None:
            raise ClaimNotFoundError(claim_id)
        return claim
