"""
HTTP client for the Claim Intake API.

Shared by both front-ends. Any httpx.Client can be injected, including
FastAPI's TestClient.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..claims.schema import Claim, ClaimDetail, ClaimPage

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    A failed API call.

    status_code is None when the server could not be reached.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body or {}


def resolve_error_message(error: Exception, fallback: str) -> str:
    """
    Pick the message to show the user for a failed call.

    Preference: first server issue message, server message, server error
    code, fallback with HTTP status, plain fallback.
    """
    if isinstance(error, ApiError):
        body = error.body
        issues = body.get("issues") or []
        if issues and isinstance(issues[0], dict) and issues[0].get("message"):
            return issues[0]["message"]
        if body.get("message"):
            return body["message"]
        if body.get("error"):
            return body["error"]
        if error.status_code:
            return f"{fallback} ({error.status_code})"
    return fallback


class ClaimsApiClient:
    """Thin wrapper over the claims REST endpoints."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self._owns_client = client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ClaimsApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ApiError(f"Could not reach the claims API: {e}") from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            raise ApiError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
                body=body,
            )

        return response.json()

    def fetch_claims(
        self,
        status: Optional[str] = None,
        lob: Optional[str] = None,
        assigned_to: Optional[str] = None,
        search: Optional[str] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> ClaimPage:
        """Fetch one page of claims."""
        params = {
            "status": status,
            "lob": lob,
            "assignedTo": assigned_to,
            "search": search,
            "page": page,
            "pageSize": page_size,
        }
        params = {key: value for key, value in params.items() if value not in (None, "")}
        return ClaimPage.model_validate(self._request("GET", "/claims", params=params))

    def list_claims(self) -> List[Claim]:
        """Fetch the first page of claims with default paging."""
        return self.fetch_claims().items

    def create_claim(self, submission: Dict[str, Any]) -> ClaimDetail:
        """Submit a claim payload (wire field names)."""
        return ClaimDetail.model_validate(self._request("POST", "/claims", json=submission))

    def get_claim(self, claim_id: str) -> ClaimDetail:
        """Fetch a claim with its events."""
        return ClaimDetail.model_validate(self._request("GET", f"/claims/{claim_id}"))
