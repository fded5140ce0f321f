"""
Exception taxonomy for the claim intake service.

Each client-facing error knows its HTTP status and renders the JSON body the
API returns for it.
"""

from typing import Any, Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .schema import ValidationIssue


class ClaimIntakeError(Exception):
    """Base class for claim intake errors."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def to_body(self) -> Dict[str, Any]:
        """JSON body returned to API clients."""
        return {"error": self.error_code}


class ClaimValidationError(ClaimIntakeError):
    """A submission violated one or more validation rules."""

    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(self, issues: List["ValidationIssue"]):
        self.issues = list(issues)
        super().__init__(f"{len(self.issues)} validation issue(s)")

    def to_body(self) -> Dict[str, Any]:
        return {
            "error": self.error_code,
            "issues": [issue.model_dump(mode="json", by_alias=True) for issue in self.issues],
        }


class ClaimNotFoundError(ClaimIntakeError):
    """No claim exists with the requested id."""

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, claim_id: str):
        self.claim_id = claim_id
        super().__init__(f"Claim {claim_id} not found")


class ClaimNumberConflictError(ClaimIntakeError):
    """The store already holds a claim with this claim number."""

    def __init__(self, claim_number: str):
        self.claim_number = claim_number
        super().__init__(f"Claim number {claim_number} already exists")
