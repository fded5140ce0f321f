"""
Client-side state for the claim intake view.

Holds the claim list, the form and its touched flags, and the loading,
saving and error indicators shared by the terminal and browser front-ends.
Field checks use the same rules as the API; the server still revalidates.
"""

import logging
from datetime import date
from typing import Callable, Dict, List, Optional

from ..claims.clock import utc_today
from ..claims.schema import Claim, LineOfBusiness, Priority
from ..claims.validation import FIELD_ORDER, issues_by_field, validate_field, validate_submission
from .api_client import ClaimsApiClient, resolve_error_message

logger = logging.getLogger(__name__)


LOAD_FAILED_MESSAGE = "Failed to load claims"
CREATE_FAILED_MESSAGE = "Failed to create claim"

FIELD_LABELS = {
    "lob": "Line of business",
    "policyNumber": "Policy number",
    "insuredName": "Insured name",
    "lossDate": "Loss date (YYYY-MM-DD)",
    "lossType": "Loss type",
    "description": "Description",
    "contactEmail": "Contact email",
    "priority": "Priority",
}


def empty_form() -> Dict[str, str]:
    """Form values for a fresh submission."""
    form = {name: "" for name in FIELD_ORDER}
    form["lob"] = list(LineOfBusiness)[0].value
    form["priority"] = Priority.MEDIUM.value
    return form


class ClaimIntakeState:
    """
    View state for the intake screen.

    Methods mirror user actions: mount/unmount the view, edit and leave a
    field, submit the form.
    """

    def __init__(self, api: ClaimsApiClient, today: Callable[[], date] = utc_today):
        self.api = api
        self._today = today

        self.claims: List[Claim] = []
        self.loading = False
        self.saving = False
        self.error: Optional[str] = None

        self.form = empty_form()
        self.touched = {name: False for name in FIELD_ORDER}

        self._mounted = False
        self._generation = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """Load the claim list once. Failures leave the list empty."""
        self._mounted = True
        self._generation += 1
        generation = self._generation

        self.loading = True
        try:
            claims = self.api.list_claims()
        except Exception as e:
            if self._is_current(generation):
                logger.warning(f"Loading claims failed: {e}")
                self.error = resolve_error_message(e, LOAD_FAILED_MESSAGE)
            return
        finally:
            self.loading = False

        if not self._is_current(generation):
            logger.debug("Discarding claim list loaded after unmount")
            return
        self.claims = claims

    def unmount(self) -> None:
        """Tear the view down; a load still in flight will be ignored."""
        self._mounted = False
        self._generation += 1

    def _is_current(self, generation: int) -> bool:
        return self._mounted and generation == self._generation

    # ------------------------------------------------------------------
    # Form
    # ------------------------------------------------------------------

    def set_field(self, name: str, value: str) -> None:
        if name not in self.form:
            raise KeyError(f"Unknown claim field: {name}")
        self.form[name] = value

    def touch(self, name: str) -> None:
        if name not in self.touched:
            raise KeyError(f"Unknown claim field: {name}")
        self.touched[name] = True

    def field_error(self, name: str) -> Optional[str]:
        """Message for a touched field that breaks a rule, else None."""
        if not self.touched.get(name):
            return None
        issue = validate_field(name, self.form[name], self._today())
        return issue.message if issue else None

    def is_valid(self) -> bool:
        _, issues = validate_submission(self.form, self._today())
        return not issues

    def form_errors(self) -> Dict[str, str]:
        """First message per field for the whole form, ignoring touched flags."""
        _, issues = validate_submission(self.form, self._today())
        return issues_by_field(issues)

    def reset_form(self) -> None:
        self.form = empty_form()
        self.touched = {name: False for name in FIELD_ORDER}

    def submit(self) -> Optional[Claim]:
        """
        Submit the form.

        Returns:
            The created claim, or None if the form was invalid or the call failed
        """
        if not self.is_valid():
            self.touched = {name: True for name in FIELD_ORDER}
            return None

        self.error = None
        self.saving = True
        try:
            claim = self.api.create_claim(dict(self.form))
        except Exception as e:
            logger.warning(f"Creating claim failed: {e}")
            self.error = resolve_error_message(e, CREATE_FAILED_MESSAGE)
            return None
        finally:
            self.saving = False

        self.claims = [claim] + self.claims
        self.reset_form()
        return claim
