"""
Tests for the claim stores.

Both backends run the same contract tests:
- create() assigns ids and timestamps and stores the initial events
- find_many() orders newest first, applies filters and the skip/take window
- count() ignores the window
- duplicate claim numbers are rejected
"""

from datetime import date, datetime, timezone

import pytest

from src.claims import (
    ClaimDraft,
    ClaimEventDraft,
    ClaimEventType,
    ClaimNumberConflictError,
    ClaimStatus,
    LineOfBusiness,
    Priority,
)
from src.storage import ClaimFilter, InMemoryClaimStore, SqlClaimStore

from conftest import TickClock


# ============================================================================
# Helper Functions
# ============================================================================


def make_draft(number: str, **overrides) -> ClaimDraft:
    fields = dict(
        lob=LineOfBusiness.HOMEOWNERS,
        policy_number="HO-0001",
        insured_name="Alex Rivers",
        loss_date=date(2026, 2, 14),
        loss_type="Water Damage",
        description="Kitchen leak caused cabinet and floor damage.",
        contact_email="alex@example.com",
        priority=Priority.HIGH,
        claim_number=number,
        status=ClaimStatus.SUBMITTED,
        events=[ClaimEventDraft(type=ClaimEventType.STATUS_CHANGED, message="Claim submitted")],
    )
    fields.update(overrides)
    return ClaimDraft(**fields)


def open_store(kind: str, tmp_path, clock):
    if kind == "memory":
        return InMemoryClaimStore(clock=clock)
    return SqlClaimStore(f"sqlite:///{tmp_path / 'claims.db'}", clock=clock)


@pytest.fixture(params=["memory", "sql"])
def claim_store(request, tmp_path):
    return open_store(request.param, tmp_path, TickClock())


@pytest.fixture(params=["memory", "sql"])
def frozen_store(request, tmp_path):
    """A store whose clock never moves, so every claim shares one timestamp."""
    instant = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    return open_store(request.param, tmp_path, lambda: instant)


# ============================================================================
# Create / Find One
# ============================================================================


class TestCreate:
    """Persisting a claim with its first event."""

    def test_create_assigns_identity(self, claim_store):
        claim = claim_store.create(make_draft("CLM-2026-100001"))

        assert claim.id
        assert claim.claim_number == "CLM-2026-100001"
        assert claim.status == ClaimStatus.SUBMITTED
        assert claim.assigned_to is None
        assert claim.created_at == claim.updated_at
        assert claim.created_at.tzinfo is not None

    def test_create_stores_initial_event(self, claim_store):
        claim = claim_store.create(make_draft("CLM-2026-100001"))

        assert len(claim.events) == 1
        event = claim.events[0]
        assert event.claim_id == claim.id
        assert event.type == ClaimEventType.STATUS_CHANGED
        assert event.message == "Claim submitted"
        assert event.created_at == claim.created_at

    def test_find_one_round_trip(self, claim_store):
        created = claim_store.create(make_draft("CLM-2026-100001"))
        found = claim_store.find_one(created.id)

        assert found is not None
        assert found.claim_number == created.claim_number
        assert found.loss_date == date(2026, 2, 14)
        assert found.lob == LineOfBusiness.HOMEOWNERS
        assert [e.id for e in found.events] == [e.id for e in created.events]

    def test_find_one_missing(self, claim_store):
        assert claim_store.find_one("does-not-exist") is None

    def test_duplicate_claim_number_rejected(self, claim_store):
        claim_store.create(make_draft("CLM-2026-100001"))

        with pytest.raises(ClaimNumberConflictError) as exc_info:
            claim_store.create(make_draft("CLM-2026-100001", insured_name="Someone Else"))

        assert exc_info.value.claim_number == "CLM-2026-100001"
        assert claim_store.count(ClaimFilter()) == 1


# ============================================================================
# Find Many / Count
# ============================================================================


class TestQueries:
    """Filtering, ordering and windowing."""

    def seed(self, store):
        store.create(make_draft("CLM-2026-100001", insured_name="Alex Rivers", policy_number="HO-0001"))
        store.create(make_draft(
            "CLM-2026-100002",
            insured_name="Jamie Chen",
            policy_number="PA-7788",
            lob=LineOfBusiness.PERSONAL_AUTO,
        ))
        store.create(make_draft(
            "CLM-2026-100003",
            insured_name="Acme Rivers LLC",
            policy_number="CM-5000",
            lob=LineOfBusiness.COMMERCIAL,
        ))

    def test_newest_first_without_events(self, claim_store):
        self.seed(claim_store)
        claims = claim_store.find_many(ClaimFilter())

        assert [c.claim_number for c in claims] == ["CLM-2026-100003", "CLM-2026-100002", "CLM-2026-100001"]
        assert all(not hasattr(c, "events") for c in claims)

    def test_window(self, claim_store):
        self.seed(claim_store)

        first = claim_store.find_many(ClaimFilter(), skip=0, take=2)
        rest = claim_store.find_many(ClaimFilter(), skip=2, take=2)

        assert [c.claim_number for c in first] == ["CLM-2026-100003", "CLM-2026-100002"]
        assert [c.claim_number for c in rest] == ["CLM-2026-100001"]
        assert claim_store.count(ClaimFilter()) == 3

    def test_search_case_insensitive(self, claim_store):
        self.seed(claim_store)

        for term in ("rivers", "RIVERS", "Rivers"):
            claims = claim_store.find_many(ClaimFilter(search=term))
            assert {c.insured_name for c in claims} == {"Alex Rivers", "Acme Rivers LLC"}
            assert claim_store.count(ClaimFilter(search=term)) == 2

    def test_search_matches_claim_and_policy_number(self, claim_store):
        self.seed(claim_store)

        assert [c.insured_name for c in claim_store.find_many(ClaimFilter(search="100002"))] == ["Jamie Chen"]
        assert [c.insured_name for c in claim_store.find_many(ClaimFilter(search="pa-77"))] == ["Jamie Chen"]

    def test_search_folds_accented_names(self, claim_store):
        self.seed(claim_store)
        claim_store.create(make_draft("CLM-2026-100004", insured_name="Élodie Ünal", policy_number="HO-0004"))

        for term in ("élodie", "ÉLODIE", "ünal", "ÜNAL"):
            assert [c.insured_name for c in claim_store.find_many(ClaimFilter(search=term))] == ["Élodie Ünal"]
            assert claim_store.count(ClaimFilter(search=term)) == 1

    def test_search_wildcards_are_literal(self, claim_store):
        self.seed(claim_store)
        claim_store.create(make_draft("CLM-2026-100004", policy_number="50%_OFF/1"))

        assert claim_store.count(ClaimFilter(search="%")) == 1
        assert claim_store.count(ClaimFilter(search="_")) == 1
        assert claim_store.count(ClaimFilter(search="/")) == 1
        assert claim_store.count(ClaimFilter(search="0%_o")) == 1
        assert claim_store.count(ClaimFilter(search="0_%o")) == 0

    def test_same_timestamp_order_is_stable(self, frozen_store):
        store = frozen_store
        for i in range(4):
            store.create(make_draft(f"CLM-2026-10000{i}"))

        ids = [c.id for c in store.find_many(ClaimFilter())]
        windows = [c.id for skip in range(4) for c in store.find_many(ClaimFilter(), skip=skip, take=1)]

        assert ids == sorted(ids, reverse=True)
        assert windows == ids

    def test_exact_filters_combine(self, claim_store):
        self.seed(claim_store)

        assert claim_store.count(ClaimFilter(lob="Commercial")) == 1
        assert claim_store.count(ClaimFilter(lob="Commercial", search="alex")) == 0
        assert claim_store.count(ClaimFilter(status="SUBMITTED")) == 3
        assert claim_store.count(ClaimFilter(status="CLOSED")) == 0
        assert claim_store.count(ClaimFilter(assigned_to="adjuster-1")) == 0

    def test_filters_are_exact(self, claim_store):
        self.seed(claim_store)

        assert claim_store.count(ClaimFilter(lob="commercial")) == 0
        assert claim_store.count(ClaimFilter(status="SUBMIT")) == 0


class TestSqlStore:
    """Behaviour specific to the relational backend."""

    def test_file_database_persists(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'nested' / 'claims.db'}"
        created = SqlClaimStore(url).create(make_draft("CLM-2026-100001"))

        reopened = SqlClaimStore(url)
        assert reopened.find_one(created.id).claim_number == "CLM-2026-100001"

    def test_in_memory_database(self):
        store = SqlClaimStore("sqlite://")
        store.create(make_draft("CLM-2026-100001"))
        assert store.count(ClaimFilter()) == 1
