"""
Canonical claim schema for the intake service.

Defines the enumerations and Pydantic models shared by the API, the stores
and the front-ends. Attributes are snake_case in Python and camelCase on the
wire.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Annotated, Any, List, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


# ============================================================================
# Enums
# ============================================================================


class LineOfBusiness(str, Enum):
    """Insurance product category of a claim."""
    PERSONAL_AUTO = "Personal Auto"
    HOMEOWNERS = "Homeowners"
    COMMERCIAL = "Commercial"


class Priority(str, Enum):
    """Handling priority requested at intake."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ClaimStatus(str, Enum):
    """
    Lifecycle status of a claim.

    Only SUBMITTED is ever written; the other values are reserved for the
    assignment and review workflow.
    """
    SUBMITTED = "SUBMITTED"
    ASSIGNED = "ASSIGNED"
    IN_REVIEW = "IN_REVIEW"
    CLOSED = "CLOSED"


class ClaimEventType(str, Enum):
    """Kind of audit-trail entry."""
    STATUS_CHANGED = "STATUS_CHANGED"
    ASSIGNED = "ASSIGNED"
    NOTE = "NOTE"


class IssueCode(str, Enum):
    """Machine-readable kind of a validation issue."""
    REQUIRED = "REQUIRED"
    INVALID_TYPE = "INVALID_TYPE"
    INVALID_ENUM = "INVALID_ENUM"
    TOO_SHORT = "TOO_SHORT"
    TOO_LONG = "TOO_LONG"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_EMAIL = "INVALID_EMAIL"
    FUTURE_DATE = "FUTURE_DATE"


# ============================================================================
# Base Model
# ============================================================================


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we write is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ============================================================================
# Validation Results
# ============================================================================


class ValidationIssue(CamelModel):
    """A single field-level violation."""
    path: List[str] = Field(default_factory=list, description="Key path of the offending field")
    message: str = Field(description="Human-readable explanation")
    code: IssueCode = Field(description="Machine-readable violation kind")

    @property
    def field(self) -> Optional[str]:
        """Top-level field name, or None for payload-level issues."""
        return self.path[0] if self.path else None


# ============================================================================
# Submission Fields
# ============================================================================

LOSS_DATE_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"

EMAIL_PATTERN = (
    r"^[A-Za-z0-9_'+-]+(?:\.[A-Za-z0-9_'+-]+)*"
    r"@(?:[A-Za-z0-9][A-Za-z0-9-]*\.)+[A-Za-z]{2,}$"
)

_LOSS_DATE_TEXT = TypeAdapter(Annotated[str, StringConstraints(pattern=LOSS_DATE_PATTERN)])


def _loss_date_text(value: Any) -> Any:
    """Only accept loss dates written as YYYY-MM-DD; parsing is left to pydantic."""
    if isinstance(value, date):
        return value
    try:
        return _LOSS_DATE_TEXT.validate_python(value)
    except ValidationError as e:
        error = e.errors()[0]
        raise PydanticCustomError(error["type"], error["msg"])


PolicyNumber = Annotated[str, Field(min_length=3, max_length=50)]
InsuredName = Annotated[str, Field(min_length=2, max_length=120)]
LossDate = Annotated[date, BeforeValidator(_loss_date_text)]
LossType = Annotated[str, Field(min_length=2, max_length=60)]
Description = Annotated[str, Field(min_length=5, max_length=2000)]
ContactEmail = Annotated[str, Field(pattern=EMAIL_PATTERN)]


class ClaimSubmission(CamelModel):
    """
    A claim as submitted by a client.

    Field constraints are the shape rules; the future-date rule lives in
    validation.py because it depends on the current date.
    """
    lob: LineOfBusiness
    policy_number: PolicyNumber
    insured_name: InsuredName
    loss_date: LossDate
    loss_type: LossType
    description: Description
    contact_email: ContactEmail
    priority: Priority


# ============================================================================
# Stored Entities
# ============================================================================


class ClaimEventDraft(BaseModel):
    """An event to be written together with a new claim."""
    type: ClaimEventType
    message: str


class ClaimDraft(ClaimSubmission):
    """Everything a store needs to create a claim."""
    claim_number: str
    status: ClaimStatus = ClaimStatus.SUBMITTED
    events: List[ClaimEventDraft] = Field(default_factory=list)


class ClaimEvent(CamelModel):
    """Immutable audit entry owned by a claim."""
    id: str
    claim_id: str
    type: ClaimEventType
    message: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class Claim(CamelModel):
    """
    A stored claim as returned by list queries.

    Events are not part of the list projection; see ClaimDetail.
    """
    id: str
    claim_number: str
    lob: LineOfBusiness
    policy_number: str
    insured_name: str
    loss_date: date
    loss_type: str
    description: str
    contact_email: str
    priority: Priority
    status: ClaimStatus
    assigned_to: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class ClaimDetail(Claim):
    """A stored claim including its events, oldest first."""
    events: List[ClaimEvent] = Field(default_factory=list)


class ClaimPage(CamelModel):
    """One page of a filtered claim listing."""
    page: int
    page_size: int
    total: int
    items: List[Claim]
