"""Streamlit widgets for the payment-slip form, the shared-slip view and the share panel."""

from __future__ import annotations

import json

import streamlit as st
import streamlit.components.v1 as components

from uplatimi.domains.payment.record import FIELD_LIMITS, PaymentRecord
from uplatimi.orchestration.slip_controller import LinkState, SlipController
from uplatimi.rendering.hub3 import Hub3SlipRenderer
from uplatimi.utils.logger import get_logger

logger = get_logger()

# (attribute, label) in form order
FORM_FIELDS: list[tuple[str, str]] = [
    ("amount", "Amount"),
    ("receiver_name", "Receiver name"),
    ("receiver_street", "Receiver street"),
    ("receiver_place", "Receiver postcode and place"),
    ("iban", "IBAN"),
    ("model", "Model"),
    ("reference", "Reference number"),
    ("purpose", "Purpose code"),
    ("description", "Description"),
]

PAYMENT_AMOUNT_KEY = "payment_amount"


def _widget_key(field: str) -> str:
    return f"field_{field}"


def _on_field_change(controller: SlipController, field: str) -> None:
    key = _widget_key(field)
    raw = st.session_state.get(key, "")
    if field == "amount":
        record = controller.edit_amount(raw)
    else:
        record = controller.edit_text(field, raw)
    # show the stored (normalized) value
    st.session_state[key] = getattr(record, field)


def _on_payment_amount_change(controller: SlipController) -> None:
    record = controller.edit_payment_amount(st.session_state.get(PAYMENT_AMOUNT_KEY, ""))
    if record is not None:
        st.session_state[PAYMENT_AMOUNT_KEY] = record.amount


def browser_clipboard(text: str) -> None:
    """Clipboard collaborator: copy via the browser's clipboard API."""
    components.html(
        f"<script>navigator.clipboard.writeText({json.dumps(text)});</script>",
        height=0,
    )


def render_slip_form(controller: SlipController) -> None:
    """Editable form bound to the local record."""
    record = controller.data
    for field, label in FORM_FIELDS:
        key = _widget_key(field)
        if key not in st.session_state:
            st.session_state[key] = getattr(record, field)
        st.text_input(
            label,
            key=key,
            max_chars=FIELD_LIMITS[field],
            on_change=_on_field_change,
            args=(controller, field),
        )


def render_shared_slip(controller: SlipController) -> None:
    """Read-only view of an imported record; only the amount can be adjusted."""
    record = controller.payment_data
    if record is None:
        return
    st.subheader("Payment request")
    if PAYMENT_AMOUNT_KEY not in st.session_state:
        st.session_state[PAYMENT_AMOUNT_KEY] = record.amount
    st.text_input(
        "Amount to pay",
        key=PAYMENT_AMOUNT_KEY,
        max_chars=FIELD_LIMITS["amount"],
        on_change=_on_payment_amount_change,
        args=(controller,),
    )
    render_record_summary(record)


def render_record_summary(record: PaymentRecord) -> None:
    rows = [(label, getattr(record, field)) for field, label in FORM_FIELDS if field != "amount"]
    st.markdown("\n".join(f"- **{label}:** {value or '—'}" for label, value in rows))


def render_share_panel(controller: SlipController) -> None:
    """Generate-link action, the resulting short link and the copy action."""
    st.subheader("Share")
    if st.button("Generate link", disabled=controller.is_link_generating, use_container_width=True):
        with st.spinner("Generating link…"):
            state = controller.generate_link()
        logger.info("Link generation finished: %s", state.value)

    if controller.state == LinkState.GENERATION_FAILED:
        st.error("Could not generate a link. Please try again.")
    if controller.generated_link:
        st.code(controller.generated_link, language="text")
        if st.button("Copy link", key="copy_link"):
            controller.copy_link(browser_clipboard)
            st.toast("Link copied")


def render_slip_preview(renderer: Hub3SlipRenderer) -> None:
    """HUB3 payload of the slip currently shown."""
    st.subheader("Payment slip (HUB3)")
    if not renderer.last_payload:
        st.info("Fill in the form to see the slip.")
        return
    st.code(renderer.last_payload, language="text")
