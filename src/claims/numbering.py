"""Claim number generation: CLM-<year>-<6 digits>."""

import random
import re
from datetime import datetime
from typing import Callable, Optional

from .clock import utc_now

CLAIM_NUMBER_PATTERN = re.compile(r"^CLM-\d{4}-\d{6}$")

SUFFIX_MIN = 100000
SUFFIX_MAX = 999999


class ClaimNumberGenerator:
    """
    Builds display claim numbers.

    The suffix is drawn uniformly from [100000, 999999]. Uniqueness is not
    checked here; the store rejects duplicates and the service retries.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._rng = rng or random.Random()
        self._clock = clock

    def __call__(self) -> str:
        year = self._clock().year
        suffix = self._rng.randint(SUFFIX_MIN, SUFFIX_MAX)
        return f"CLM-{year}-{suffix}"


def is_claim_number(value: str) -> bool:
    """Check that a string has the claim number format."""
    return bool(CLAIM_NUMBER_PATTERN.match(value))
