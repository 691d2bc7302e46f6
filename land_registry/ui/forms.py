"""Streamlit rendering for sign-in, land registration and transfer forms.

Forms only collect input and hand it to the workflow objects; all validation,
uploads and notifications happen in land_registry.services.
"""

from __future__ import annotations

from typing import Any

import streamlit as st

from land_registry.domains.documents import ALLOWED_EXTENSIONS, DocumentFile
from land_registry.domains.validation import OWNERSHIP_TYPES
from land_registry.services.land_registration import LandRegistration
from land_registry.services.stores import AuthStore
from land_registry.services.submission import DocumentSubmission
from land_registry.services.transfer_submission import TransferSubmission


LAND_FORM = "register_land"
LAND_WIDGETS = ("parcel_id", "size", "ownership_type", "document")
TRANSFER_FORM = "initiate_transfer"
TRANSFER_WIDGETS = ("parcel_id", "recipient_name", "document")

STATUS_ICONS = {
    "Pending": "🕒",
    "Under Review": "🔎",
    "Approved": "✅",
    "Rejected": "❌",
}


class StreamlitNotifier:
    """Notification sink that shows toasts."""

    def success(self, title: str, body: str) -> None:
        st.toast(f"**{title}**\n\n{body}", icon="✅")

    def error(self, title: str, body: str) -> None:
        st.toast(f"**{title}**\n\n{body}", icon="⚠️")


def _field_error(errors: dict[str, str], field: str) -> None:
    if errors.get(field):
        st.caption(f":red[{errors[field]}]")


def _staged_document(uploaded: Any) -> DocumentFile | None:
    return DocumentFile.from_upload(uploaded) if uploaded is not None else None


def _generation(form: str) -> int:
    return st.session_state.get(f"{form}_generation", 0)


def _widget_key(form: str, field: str) -> str:
    """Session key for a form widget; a new generation gives the widget a blank state."""
    return f"{form}_{field}_{_generation(form)}"


def clear_form(form: str, fields: tuple[str, ...]) -> None:
    """Forget the widget values of `form` so the next run renders it empty."""
    for field in fields:
        st.session_state.pop(_widget_key(form, field), None)
    st.session_state[f"{form}_generation"] = _generation(form) + 1


def submit_form(workflow: DocumentSubmission, form: str, fields: tuple[str, ...]) -> dict[str, Any]:
    """Submit the workflow; the widgets are cleared only when it succeeds."""
    result = workflow.submit()
    if result["success"]:
        clear_form(form, fields)
    return result


def status_label(status: str | None) -> str:
    status = status or "Pending"
    return f"{STATUS_ICONS.get(status, '•')} {status}"


def render_auth(auth: AuthStore) -> None:
    """Sign-in / sign-up tabs shown when no user is loaded."""
    sign_in_tab, sign_up_tab = st.tabs(["Sign in", "Create account"])

    with sign_in_tab:
        with st.form("sign_in"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in", disabled=auth.loading)
        if submitted:
            res = auth.sign_in(email.strip(), password)
            if res["success"]:
                st.rerun()
            st.error(res["error"])

    with sign_up_tab:
        with st.form("sign_up"):
            full_name = st.text_input("Full name")
            email = st.text_input("Email", key="sign_up_email")
            password = st.text_input("Password", type="password", key="sign_up_password")
            submitted = st.form_submit_button("Create account", disabled=auth.loading)
        if submitted:
            res = auth.sign_up(email.strip(), password, full_name.strip())
            if not res["success"]:
                st.error(res["error"])
            elif auth.is_authenticated:
                st.rerun()
            else:
                st.info("Check your email to confirm your account, then sign in.")


def render_lands(lands: list[dict[str, Any]]) -> None:
    if not lands:
        st.info("You have not registered any land yet.")
        return
    st.dataframe(
        [
            {
                "Parcel ID": land.get("parcel_id"),
                "Size (sq m)": land.get("size"),
                "Ownership": land.get("ownership_type"),
                "Status": status_label(land.get("status")),
                "Document": land.get("supporting_document_url") or "",
            }
            for land in lands
        ],
        use_container_width=True,
        hide_index=True,
    )


def render_land_form(workflow: LandRegistration) -> None:
    st.subheader("Register Land")
    with st.form(LAND_FORM, clear_on_submit=False):
        parcel_id = st.number_input(
            "Parcel ID", min_value=0, step=1, value=0,
            key=_widget_key(LAND_FORM, "parcel_id"), disabled=workflow.busy,
        )
        _field_error(workflow.errors, "parcel_id")
        size = st.number_input(
            "Land size (sq m)", min_value=0.0, step=1.0, value=0.0,
            key=_widget_key(LAND_FORM, "size"), disabled=workflow.busy,
        )
        _field_error(workflow.errors, "size")
        ownership_type = st.selectbox(
            "Ownership type", OWNERSHIP_TYPES, index=None,
            key=_widget_key(LAND_FORM, "ownership_type"), disabled=workflow.busy,
        )
        _field_error(workflow.errors, "ownership_type")
        uploaded = st.file_uploader(
            "Supporting document (PDF, PNG, JPG up to 5MB)",
            type=list(ALLOWED_EXTENSIONS),
            key=_widget_key(LAND_FORM, "document"),
            disabled=workflow.busy,
        )
        _field_error(workflow.errors, "supporting_document")
        submitted = st.form_submit_button("Register land", disabled=workflow.busy)

    if submitted:
        workflow.set_field("parcel_id", int(parcel_id) or None)
        workflow.set_field("size", size or None)
        workflow.set_field("ownership_type", ownership_type)
        workflow.attach_document(_staged_document(uploaded))
        with st.spinner("Registering land…"):
            submit_form(workflow, LAND_FORM, LAND_WIDGETS)
        st.rerun()


def render_transfer_form(workflow: TransferSubmission) -> None:
    st.subheader("Initiate Land Transfer")
    options = workflow.parcel_options()
    labels = dict(options)
    with st.form(TRANSFER_FORM):
        parcel_id = st.selectbox(
            "Parcel ID",
            [pid for pid, _ in options],
            index=None,
            placeholder="Select a parcel to transfer",
            format_func=lambda pid: labels.get(pid, str(pid)),
            key=_widget_key(TRANSFER_FORM, "parcel_id"),
            disabled=workflow.busy,
        )
        _field_error(workflow.errors, "parcel_id")
        recipient_name = st.text_input(
            "Recipient Name", key=_widget_key(TRANSFER_FORM, "recipient_name"), disabled=workflow.busy,
        )
        _field_error(workflow.errors, "recipient_name")
        uploaded = st.file_uploader(
            "Contract document (PDF, PNG, JPG up to 5MB)",
            type=list(ALLOWED_EXTENSIONS),
            key=_widget_key(TRANSFER_FORM, "document"),
            disabled=workflow.busy,
        )
        _field_error(workflow.errors, "contract_document")
        col1, col2 = st.columns(2)
        with col1:
            submitted = st.form_submit_button(
                "Submitting..." if workflow.busy else "Initiate transfer",
                disabled=workflow.busy,
                use_container_width=True,
            )
        with col2:
            cancelled = st.form_submit_button("Cancel", disabled=workflow.busy, use_container_width=True)

    if cancelled:
        workflow.reset()
        clear_form(TRANSFER_FORM, TRANSFER_WIDGETS)
        st.rerun()
    if submitted:
        workflow.set_field("parcel_id", parcel_id)
        workflow.set_field("recipient_name", recipient_name)
        workflow.attach_document(_staged_document(uploaded))
        with st.spinner("Submitting transfer…"):
            submit_form(workflow, TRANSFER_FORM, TRANSFER_WIDGETS)
        st.rerun()


def render_transfers(transfers: list[dict[str, Any]]) -> None:
    if not transfers:
        st.caption("No transfers yet.")
        return
    for t in transfers:
        with st.container(border=True):
            st.markdown(
                f"**Parcel {t.get('parcel_id')}** → {t.get('recipient_name') or 'Unknown recipient'}"
                f" · {status_label(t.get('status'))}"
            )
            url = t.get("contract_document_url")
            if url:
                st.markdown(f"[Contract document]({url})")
            if t.get("created_at"):
                st.caption(str(t["created_at"]))
