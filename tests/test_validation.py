"""
Tests for claim submission validation.

Verifies that validate_submission() and validate_field():
- Accept a well-formed payload and normalize it into a ClaimSubmission
- Report every violated field, in field order, with a code and message
- Only apply the future-date rule once the payload is otherwise well-formed
"""

from datetime import date

import pytest
from pydantic import ValidationError

from src.claims import (
    ClaimSubmission,
    ClaimValidationError,
    IssueCode,
    LineOfBusiness,
    Priority,
    ensure_valid_submission,
    validate_field,
    validate_submission,
)
from src.claims.validation import FIELD_ORDER, issue_from_error, issues_by_field

from conftest import make_payload

TODAY = date(2026, 3, 10)


def codes(issues) -> dict:
    return {issue.field: issue.code for issue in issues}


# ============================================================================
# Valid Submissions
# ============================================================================


class TestValidSubmissions:
    """Payloads that pass every rule."""

    def test_valid_payload_normalized(self):
        submission, issues = validate_submission(make_payload(lossDate="2026-02-14"), TODAY)

        assert issues == []
        assert submission.lob == LineOfBusiness.HOMEOWNERS
        assert submission.priority == Priority.HIGH
        assert submission.loss_date == date(2026, 2, 14)
        assert submission.insured_name == "Alex Rivers"

    def test_loss_date_today_allowed(self):
        _, issues = validate_submission(make_payload(lossDate="2026-03-10"), TODAY)
        assert issues == []

    def test_unknown_keys_ignored(self):
        submission, issues = validate_submission(
            make_payload(lossDate="2026-02-14", status="CLOSED", assignedTo="adjuster-7"),
            TODAY,
        )
        assert issues == []
        assert submission is not None

    def test_length_bounds_inclusive(self):
        payload = make_payload(
            lossDate="2026-02-14",
            policyNumber="P" * 3,
            insuredName="Al",
            lossType="x" * 60,
            description="d" * 2000,
        )
        _, issues = validate_submission(payload, TODAY)
        assert issues == []

    @pytest.mark.parametrize("lob", ["Personal Auto", "Homeowners", "Commercial"])
    def test_every_line_of_business(self, lob):
        _, issues = validate_submission(make_payload(lob=lob, lossDate="2026-02-14"), TODAY)
        assert issues == []


# ============================================================================
# Invalid Submissions
# ============================================================================


class TestInvalidSubmissions:
    """Rule violations and how they are reported."""

    def test_empty_payload_lists_every_field_in_order(self):
        submission, issues = validate_submission({}, TODAY)

        assert submission is None
        assert [issue.field for issue in issues] == list(FIELD_ORDER)
        assert all(issue.code == IssueCode.REQUIRED for issue in issues)
        assert all(issue.message == "This field is required." for issue in issues)

    def test_empty_string_is_required(self):
        _, issues = validate_submission(make_payload(insuredName=""), TODAY)
        assert codes(issues) == {"insuredName": IssueCode.REQUIRED}

    def test_non_string_value(self):
        _, issues = validate_submission(make_payload(policyNumber=12345), TODAY)
        assert codes(issues) == {"policyNumber": IssueCode.INVALID_TYPE}

    def test_unknown_enum_values(self):
        _, issues = validate_submission(make_payload(lob="Marine", priority="URGENT"), TODAY)

        assert codes(issues) == {"lob": IssueCode.INVALID_ENUM, "priority": IssueCode.INVALID_ENUM}
        assert issues[0].message == "Must be one of: Personal Auto, Homeowners, Commercial."

    def test_enum_values_case_sensitive(self):
        _, issues = validate_submission(make_payload(priority="high"), TODAY)
        assert codes(issues) == {"priority": IssueCode.INVALID_ENUM}

    def test_too_short_and_too_long(self):
        payload = make_payload(policyNumber="AB", description="d" * 2001)
        _, issues = validate_submission(payload, TODAY)

        assert codes(issues) == {
            "policyNumber": IssueCode.TOO_SHORT,
            "description": IssueCode.TOO_LONG,
        }
        assert issues[0].message == "Must be at least 3 characters."
        assert issues[1].message == "Must be at most 2000 characters."

    def test_whitespace_counts_toward_length(self):
        _, issues = validate_submission(make_payload(insuredName="  ", lossDate="2026-02-14"), TODAY)
        assert issues == []

    @pytest.mark.parametrize("value", ["02/14/2026", "2026-2-14", "20260214", "2026-02-14T00:00:00"])
    def test_loss_date_format(self, value):
        _, issues = validate_submission(make_payload(lossDate=value), TODAY)
        assert codes(issues) == {"lossDate": IssueCode.INVALID_FORMAT}

    def test_loss_date_not_a_calendar_date(self):
        _, issues = validate_submission(make_payload(lossDate="2026-02-30"), TODAY)

        assert codes(issues) == {"lossDate": IssueCode.INVALID_FORMAT}
        assert issues[0].message == "Loss date is not a valid calendar date."

    @pytest.mark.parametrize("email", ["alex", "alex@", "alex@example", "alex@@example.com", ".alex@example.com"])
    def test_invalid_email(self, email):
        _, issues = validate_submission(make_payload(contactEmail=email, lossDate="2026-02-14"), TODAY)
        assert codes(issues) == {"contactEmail": IssueCode.INVALID_EMAIL}

    def test_future_loss_date(self):
        _, issues = validate_submission(make_payload(lossDate="2026-03-11"), TODAY)

        assert len(issues) == 1
        assert issues[0].path == ["lossDate"]
        assert issues[0].code == IssueCode.FUTURE_DATE
        assert issues[0].message == "Loss date cannot be in the future."

    def test_shape_errors_reported_before_future_date(self):
        payload = make_payload(lossDate="2030-01-01", contactEmail="nope")
        _, issues = validate_submission(payload, TODAY)

        assert codes(issues) == {"contactEmail": IssueCode.INVALID_EMAIL}

    @pytest.mark.parametrize("payload", [None, [], "claim", 42])
    def test_payload_must_be_object(self, payload):
        submission, issues = validate_submission(payload, TODAY)

        assert submission is None
        assert len(issues) == 1
        assert issues[0].path == []
        assert issues[0].code == IssueCode.INVALID_TYPE

    def test_ensure_valid_submission_raises_with_issues(self):
        with pytest.raises(ClaimValidationError) as exc_info:
            ensure_valid_submission(make_payload(lob=None, priority="NOPE"), TODAY)

        body = exc_info.value.to_body()
        assert body["error"] == "VALIDATION_ERROR"
        assert [issue["path"] for issue in body["issues"]] == [["lob"], ["priority"]]
        assert body["issues"][0]["code"] == "REQUIRED"


# ============================================================================
# Single Field Checks
# ============================================================================


class TestValidateField:
    """Per-field checks used for interactive feedback."""

    def test_valid_field(self):
        assert validate_field("policyNumber", "HO-0001") is None

    def test_missing_field(self):
        assert validate_field("contactEmail").code == IssueCode.REQUIRED

    def test_future_date_checked_per_field(self):
        issue = validate_field("lossDate", "2026-03-11", TODAY)
        assert issue.code == IssueCode.FUTURE_DATE

    def test_unknown_field(self):
        with pytest.raises(KeyError):
            validate_field("phoneNumber", "555-0100")


class TestHelpers:
    def test_leap_day_per_field(self):
        assert validate_field("lossDate", "2024-02-29", TODAY) is None
        assert validate_field("lossDate", "2023-02-29", TODAY).message == "Loss date is not a valid calendar date."
        assert validate_field("lossDate", "yesterday", TODAY).code == IssueCode.INVALID_FORMAT

    def test_field_errors_match_submission_errors(self):
        _, issues = validate_submission(make_payload(policyNumber="AB", contactEmail="alex@"), TODAY)

        for issue in issues:
            value = make_payload(policyNumber="AB", contactEmail="alex@")[issue.field]
            assert validate_field(issue.field, value, TODAY) == issue

    def test_issues_by_field_keeps_first_message(self):
        _, issues = validate_submission({"lob": "Homeowners"}, TODAY)
        messages = issues_by_field(issues)

        assert "lob" not in messages
        assert messages["policyNumber"] == "This field is required."


# ============================================================================
# Model Constraints
# ============================================================================


class TestClaimSubmissionModel:
    """The shape rules live on the ClaimSubmission model itself."""

    def test_model_rejects_short_policy_number(self):
        with pytest.raises(ValidationError) as exc_info:
            ClaimSubmission.model_validate(make_payload(policyNumber="AB"))

        error = exc_info.value.errors()[0]
        assert error["loc"] == ("policyNumber",)
        assert error["type"] == "string_too_short"

    def test_model_rejects_bad_email(self):
        with pytest.raises(ValidationError) as exc_info:
            ClaimSubmission.model_validate(make_payload(contactEmail="alex@example"))

        assert exc_info.value.errors()[0]["type"] == "string_pattern_mismatch"

    def test_model_rejects_loosely_formatted_date(self):
        with pytest.raises(ValidationError):
            ClaimSubmission.model_validate(make_payload(lossDate="2026-02-14T00:00:00"))

    def test_model_accepts_payload(self):
        submission = ClaimSubmission.model_validate(make_payload(lossDate="2026-02-14"))
        assert submission.loss_date == date(2026, 2, 14)

    def test_issue_from_error_uses_constraint_bounds(self):
        with pytest.raises(ValidationError) as exc_info:
            ClaimSubmission.model_validate(make_payload(insuredName="A"))

        issue = issue_from_error("insuredName", exc_info.value.errors()[0])
        assert issue.code == IssueCode.TOO_SHORT
        assert issue.message == "Must be at least 2 characters."
