"""
Shared fixtures for the claim intake tests.
"""

from datetime import date, datetime, timedelta, timezone
from itertools import count
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.storage import InMemoryClaimStore
from src.utils.config import Settings


# ============================================================================
# Helper Functions
# ============================================================================


class TickClock:
    """Deterministic UTC clock advancing one second per reading."""

    def __init__(self, start: datetime = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)):
        self._start = start
        self._ticks = count()

    def __call__(self) -> datetime:
        return self._start + timedelta(seconds=next(self._ticks))


class SequenceNumbers:
    """Claim number source replaying a fixed list, then counting up."""

    def __init__(self, *numbers: str):
        self._numbers = list(numbers)
        self._fallback = count(500000)
        self.issued = []

    def __call__(self) -> str:
        number = self._numbers.pop(0) if self._numbers else f"CLM-2026-{next(self._fallback)}"
        self.issued.append(number)
        return number


def yesterday() -> date:
    return datetime.now(timezone.utc).date() - timedelta(days=1)


def tomorrow() -> date:
    return datetime.now(timezone.utc).date() + timedelta(days=1)


def make_payload(**overrides: Any) -> Dict[str, Any]:
    """A valid submission payload in wire format."""
    payload = {
        "lob": "Homeowners",
        "policyNumber": "HO-0001",
        "insuredName": "Alex Rivers",
        "lossDate": yesterday().isoformat(),
        "lossType": "Water Damage",
        "description": "Kitchen leak caused cabinet and floor damage.",
        "contactEmail": "alex@example.com",
        "priority": "HIGH",
    }
    payload.update(overrides)
    return payload


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite://", claim_number_attempts=5)


@pytest.fixture
def store() -> InMemoryClaimStore:
    return InMemoryClaimStore(clock=TickClock())


@pytest.fixture
def app(store, settings):
    return create_app(store, settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
