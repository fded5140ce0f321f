"""
Front-end support for claim intake.

The API client and view state are shared by the terminal front-end
(console_app) and the browser front-end (streamlit_app).
"""

from .api_client import ApiError, ClaimsApiClient, resolve_error_message
from .state import FIELD_LABELS, ClaimIntakeState, empty_form

__all__ = [
    "ApiError",
    "ClaimsApiClient",
    "resolve_error_message",
    "FIELD_LABELS",
    "ClaimIntakeState",
    "empty_form",
]
