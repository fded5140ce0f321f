"""
FastAPI Endpoints for Claim Intake

Provides REST API for submitting and querying insurance claims.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, status
from pydantic import BaseModel

from ..claims.schema import ClaimDetail, ClaimPage, ValidationIssue
from .service import ClaimListQuery, ClaimService

# Initialize router
router = APIRouter(prefix="/claims", tags=["claims"])


class ErrorResponse(BaseModel):
    """Error body for failures without field detail."""
    error: str


class ValidationErrorResponse(BaseModel):
    """Error body for rejected submissions."""
    error: str = "VALIDATION_ERROR"
    issues: List[ValidationIssue]


EXAMPLE_SUBMISSION = {
    "lob": "Homeowners",
    "policyNumber": "HO-0001",
    "insuredName": "Alex Rivers",
    "lossDate": "2026-02-14",
    "lossType": "Water Damage",
    "description": "Kitchen leak caused cabinet and floor damage.",
    "contactEmail": "alex@example.com",
    "priority": "HIGH",
}


def get_claim_service(request: Request) -> ClaimService:
    """Resolve the claim service the app was built with."""
    return request.app.state.claim_service


@router.post(
    "",
    response_model=ClaimDetail,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse}},
)
def create_claim(
    payload: Dict[str, Any] = Body(..., examples=[EXAMPLE_SUBMISSION]),
    service: ClaimService = Depends(get_claim_service),
) -> ClaimDetail:
    """
    Submit a new insurance claim.

    The claim starts in SUBMITTED state with a single "Claim submitted" event.
    """
    return service.submit(payload)


@router.get("", response_model=ClaimPage)
async def list_claims(
    status_filter: Optional[str] = Query(None, alias="status"),
    lob: Optional[str] = Query(None),
    assigned_to: Optional[str] = Query(None, alias="assignedTo"),
    search: Optional[str] = Query(None, description="Matches claim number, insured name or policy number"),
    page: Optional[str] = Query(None, description="1-based page number (default 1)"),
    page_size: Optional[str] = Query(None, alias="pageSize", description="Items per page, 5-50 (default 20)"),
    service: ClaimService = Depends(get_claim_service),
) -> ClaimPage:
    """
    List claims newest first.

    Items do not include events; use GET /claims/{claim_id} for the full claim.
    """
    query = ClaimListQuery(
        status=status_filter,
        lob=lob,
        assigned_to=assigned_to,
        search=search,
        page=page,
        page_size=page_size,
    )
    return await service.list_claims(query)


@router.get(
    "/{claim_id}",
    response_model=ClaimDetail,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
def get_claim(
    claim_id: str,
    service: ClaimService = Depends(get_claim_service),
) -> ClaimDetail:
    """
    Get a specific claim with its events, oldest first.
    """
    return service.get_claim(claim_id)
