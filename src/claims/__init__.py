"""
Claim intake domain.

Schema, validation rules and claim numbering shared by the API and the
front-ends.
"""

from .errors import (
    ClaimIntakeError,
    ClaimNotFoundError,
    ClaimNumberConflictError,
    ClaimValidationError,
)
from .numbering import ClaimNumberGenerator, is_claim_number
from .schema import (
    # Enums
    ClaimEventType,
    ClaimStatus,
    IssueCode,
    LineOfBusiness,
    Priority,
    # Models
    Claim,
    ClaimDetail,
    ClaimDraft,
    ClaimEvent,
    ClaimEventDraft,
    ClaimPage,
    ClaimSubmission,
    ValidationIssue,
)
from .validation import (
    ensure_valid_submission,
    validate_field,
    validate_submission,
)

__all__ = [
    # Errors
    "ClaimIntakeError",
    "ClaimNotFoundError",
    "ClaimNumberConflictError",
    "ClaimValidationError",
    # Numbering
    "ClaimNumberGenerator",
    "is_claim_number",
    # Enums
    "ClaimEventType",
    "ClaimStatus",
    "IssueCode",
    "LineOfBusiness",
    "Priority",
    # Models
    "Claim",
    "ClaimDetail",
    "ClaimDraft",
    "ClaimEvent",
    "ClaimEventDraft",
    "ClaimPage",
    "ClaimSubmission",
    "ValidationIssue",
    # Validation
    "ensure_valid_submission",
    "validate_field",
    "validate_submission",
]
