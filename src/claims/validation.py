"""
Validation rules for claim submissions.

One rule set shared by the API (authoritative) and the front-ends (advisory):
- Shape rules per field: the constraints declared on ClaimSubmission
- Domain rule: the loss date cannot be later than today (UTC)

Pydantic errors are translated into ValidationIssue records with stable
codes and messages. Shape rules always run first. The future-date rule only
runs once the whole payload passed the shape rules, so a payload violating
both reports the shape issues.
"""

from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from .clock import utc_today
from .errors import ClaimValidationError
from .schema import (
    ClaimSubmission,
    ContactEmail,
    Description,
    InsuredName,
    IssueCode,
    LineOfBusiness,
    LossDate,
    LossType,
    PolicyNumber,
    Priority,
    ValidationIssue,
)


# ============================================================================
# Rule Tables
# ============================================================================

# Wire name -> annotated field type, in the order issues are reported
FIELD_TYPES = {
    "lob": LineOfBusiness,
    "policyNumber": PolicyNumber,
    "insuredName": InsuredName,
    "lossDate": LossDate,
    "lossType": LossType,
    "description": Description,
    "contactEmail": ContactEmail,
    "priority": Priority,
}

FIELD_ORDER = tuple(FIELD_TYPES)

FIELD_ADAPTERS = {name: TypeAdapter(field_type) for name, field_type in FIELD_TYPES.items()}

# Pattern mismatches mean different things per field
PATTERN_CODES = {
    "lossDate": (IssueCode.INVALID_FORMAT, "Loss date must use the YYYY-MM-DD format."),
    "contactEmail": (IssueCode.INVALID_EMAIL, "Enter a valid email address."),
}

REQUIRED_MESSAGE = "This field is required."
FUTURE_DATE_MESSAGE = "Loss date cannot be in the future."

_MISSING = object()


def _issue(name: str, code: IssueCode, message: str) -> ValidationIssue:
    return ValidationIssue(path=[name], code=code, message=message)


def _wire_name(loc: Tuple[Any, ...]) -> Optional[str]:
    if not loc:
        return None
    name = str(loc[0])
    return name if name in FIELD_TYPES else to_camel(name)


def issue_from_error(name: str, error: Mapping[str, Any]) -> ValidationIssue:
    """
    Translate one pydantic error into a ValidationIssue.

    Args:
        name: Wire name of the field the error belongs to
        error: An entry of ValidationError.errors()

    Returns:
        The issue with its IssueCode and user-facing message
    """
    kind = error["type"]
    value = error.get("input")
    ctx = error.get("ctx") or {}

    if kind == "missing" or value is None or value == "":
        return _issue(name, IssueCode.REQUIRED, REQUIRED_MESSAGE)

    if kind == "enum":
        if not isinstance(value, str):
            return _issue(name, IssueCode.INVALID_TYPE, "Expected a string.")
        allowed = [member.value for member in FIELD_TYPES[name]]
        return _issue(name, IssueCode.INVALID_ENUM, f"Must be one of: {', '.join(allowed)}.")

    if kind == "string_too_short":
        return _issue(name, IssueCode.TOO_SHORT, f"Must be at least {ctx['min_length']} characters.")

    if kind == "string_too_long":
        return _issue(name, IssueCode.TOO_LONG, f"Must be at most {ctx['max_length']} characters.")

    if kind == "string_pattern_mismatch" and name in PATTERN_CODES:
        code, message = PATTERN_CODES[name]
        return _issue(name, code, message)

    if kind.startswith("date"):
        return _issue(name, IssueCode.INVALID_FORMAT, "Loss date is not a valid calendar date.")

    return _issue(name, IssueCode.INVALID_TYPE, "Expected a string.")


# ============================================================================
# Field Rules
# ============================================================================


def check_loss_date_not_future(loss_date: date, today: Optional[date] = None) -> Optional[ValidationIssue]:
    """Domain rule: a loss cannot be reported for a date after today (UTC)."""
    today = today or utc_today()
    if loss_date > today:
        return _issue("lossDate", IssueCode.FUTURE_DATE, FUTURE_DATE_MESSAGE)
    return None


def validate_field(name: str, value: Any = _MISSING, today: Optional[date] = None) -> Optional[ValidationIssue]:
    """
    Validate a single field for interactive feedback.

    Unlike validate_submission(), the future-date rule is applied as soon as
    the loss date itself is well-formed.

    Args:
        name: Wire name of the field (e.g. 'policyNumber')
        value: Submitted value; omit it to check a missing field
        today: Reference date for the future-date rule

    Returns:
        The first violated rule as an issue, or None if the value is valid
    """
    if name not in FIELD_ADAPTERS:
        raise KeyError(f"Unknown claim field: {name}")

    if value is _MISSING:
        return _issue(name, IssueCode.REQUIRED, REQUIRED_MESSAGE)

    try:
        parsed = FIELD_ADAPTERS[name].validate_python(value)
    except ValidationError as e:
        return issue_from_error(name, e.errors()[0])

    if name == "lossDate":
        return check_loss_date_not_future(parsed, today)
    return None


# ============================================================================
# Submission Rules
# ============================================================================


def validate_submission(
    payload: Any,
    today: Optional[date] = None,
) -> Tuple[Optional[ClaimSubmission], List[ValidationIssue]]:
    """
    Validate a decoded submission payload.

    Args:
        payload: JSON-decoded request body
        today: Reference date for the future-date rule (defaults to UTC today)

    Returns:
        (submission, []) when valid, (None, issues) otherwise. Every violated
        field is listed once, in FIELD_ORDER.
    """
    if not isinstance(payload, Mapping):
        return None, [
            ValidationIssue(path=[], code=IssueCode.INVALID_TYPE, message="Expected a JSON object.")
        ]

    try:
        submission = ClaimSubmission.model_validate(dict(payload))
    except ValidationError as e:
        found: Dict[str, ValidationIssue] = {}
        for error in e.errors():
            name = _wire_name(error["loc"])
            if name in FIELD_TYPES and name not in found:
                found[name] = issue_from_error(name, error)
        return None, [found[name] for name in FIELD_ORDER if name in found]

    future = check_loss_date_not_future(submission.loss_date, today)
    if future is not None:
        return None, [future]

    return submission, []


def ensure_valid_submission(payload: Any, today: Optional[date] = None) -> ClaimSubmission:
    """Validate a payload, raising ClaimValidationError with every issue."""
    submission, issues = validate_submission(payload, today)
    if issues:
        raise ClaimValidationError(issues)
    return submission


def issues_by_field(issues: List[ValidationIssue]) -> Dict[str, str]:
    """Map each field to its first issue message."""
    messages: Dict[str, str] = {}
    for issue in issues:
        if issue.field is not None:
            messages.setdefault(issue.field, issue.message)
    return messages
