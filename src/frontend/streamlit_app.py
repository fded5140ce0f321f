"""
Browser front-end for the Claim Intake API.

Run with: streamlit run src/frontend/streamlit_app.py
"""

import streamlit as st

from src.claims.schema import LineOfBusiness, Priority
from src.claims.validation import FIELD_ORDER
from src.frontend.api_client import ClaimsApiClient
from src.frontend.state import FIELD_LABELS, ClaimIntakeState
from src.utils.config import get_settings

st.set_page_config(page_title="Claim Intake", layout="wide")

SELECT_OPTIONS = {
    "lob": [lob.value for lob in LineOfBusiness],
    "priority": [priority.value for priority in Priority],
}
TEXT_AREAS = {"description"}


def get_state() -> ClaimIntakeState:
    """Controller for this browser session, loaded on first render."""
    if "intake" not in st.session_state:
        settings = get_settings()
        api = ClaimsApiClient(base_url=settings.api_base_url, timeout=settings.api_timeout)
        state = ClaimIntakeState(api)
        with st.spinner("Loading claims..."):
            state.mount()
        st.session_state.intake = state
    return st.session_state.intake


def widget_key(name: str) -> str:
    return f"field_{name}"


def on_field_change(name: str) -> None:
    state = st.session_state.intake
    state.set_field(name, st.session_state[widget_key(name)] or "")
    state.touch(name)


def sync_widgets(state: ClaimIntakeState) -> None:
    # Widgets keep their own values across reruns; push a reset form into them.
    for name in FIELD_ORDER:
        st.session_state[widget_key(name)] = state.form[name]


def render_field(state: ClaimIntakeState, name: str) -> None:
    key = widget_key(name)
    if key not in st.session_state:
        st.session_state[key] = state.form[name]

    label = FIELD_LABELS[name]
    if name in SELECT_OPTIONS:
        st.selectbox(label, SELECT_OPTIONS[name], key=key, on_change=on_field_change, args=(name,))
    elif name in TEXT_AREAS:
        st.text_area(label, key=key, on_change=on_field_change, args=(name,))
    else:
        st.text_input(label, key=key, on_change=on_field_change, args=(name,))

    message = state.field_error(name)
    if message:
        st.caption(f":red[{message}]")


def on_submit() -> None:
    state = st.session_state.intake
    claim = state.submit()
    if claim is not None:
        sync_widgets(state)
        st.session_state.last_created = claim.claim_number


def render_form(state: ClaimIntakeState) -> None:
    st.subheader("New claim")
    for name in FIELD_ORDER:
        render_field(state, name)

    st.button(
        "Saving..." if state.saving else "Submit claim",
        type="primary",
        disabled=state.saving,
        on_click=on_submit,
    )

    created = st.session_state.pop("last_created", None)
    if created:
        st.success(f"Claim {created} submitted")


def render_claims(state: ClaimIntakeState) -> None:
    st.subheader("Recent claims")
    if state.loading:
        st.info("Loading claims...")
        return
    if not state.claims:
        st.caption("No claims yet.")
        return

    st.dataframe(
        [
            {
                "Claim #": claim.claim_number,
                "Status": claim.status.value,
                "Priority": claim.priority.value,
                "LOB": claim.lob.value,
                "Insured": claim.insured_name,
                "Policy #": claim.policy_number,
                "Loss Date": claim.loss_date.isoformat(),
                "Loss Type": claim.loss_type,
                "Created": claim.created_at.strftime("%Y-%m-%d %H:%M"),
            }
            for claim in state.claims
        ],
        hide_index=True,
        use_container_width=True,
    )


def main() -> None:
    st.title("Claim Intake")
    state = get_state()

    if state.error:
        st.error(state.error)

    form_column, list_column = st.columns([1, 2])
    with form_column:
        render_form(state)
    with list_column:
        render_claims(state)


main()
