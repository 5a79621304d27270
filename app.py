"""
uplatimi — Streamlit UI entry point.
"""

import streamlit as st

# Load .env first so the shortener endpoint and storage dir come from it
from uplatimi.utils.config import (
    app_origin,
    discard_stale_links,
    load_config,
    storage_dir,
)
load_config()

from uplatimi.infrastructure.shortener.yourls_client import YourlsClient
from uplatimi.infrastructure.storage.local_storage import FileStorage
from uplatimi.orchestration.slip_controller import SlipController
from uplatimi.rendering.hub3 import Hub3SlipRenderer
from uplatimi.services.record_store import PaymentRecordStore
from uplatimi.services.share_token import QUERY_KEY
from uplatimi.ui.slip_form import (
    render_shared_slip,
    render_share_panel,
    render_slip_form,
    render_slip_preview,
)
from uplatimi.utils.logger import setup_logger, get_logger

setup_logger()
log = get_logger()

st.set_page_config(page_title="uplatimi", layout="wide")
st.title("uplatimi")


# Storage and the shortening client are process-wide; controller state is per session
@st.cache_resource
def get_storage() -> FileStorage:
    return FileStorage(storage_dir())


@st.cache_resource
def get_shortener() -> YourlsClient:
    return YourlsClient()


if "controller" not in st.session_state:
    renderer = Hub3SlipRenderer()
    controller = SlipController(
        store=PaymentRecordStore(get_storage()),
        shortener=get_shortener(),
        renderer=renderer,
        origin=app_origin(),
        discard_stale_links=discard_stale_links(),
    )
    # The token is read once, when the session starts
    controller.initialize(st.query_params.get(QUERY_KEY))
    st.session_state.controller = controller
    st.session_state.renderer = renderer
    log.info("Session started (shared record: %s)", controller.payment_data is not None)

controller: SlipController = st.session_state.controller
renderer: Hub3SlipRenderer = st.session_state.renderer

if controller.is_link_invalid:
    st.warning("The link you opened is invalid. Showing your own payment slip instead.")

left, right = st.columns([1, 1])
with left:
    if controller.payment_data is not None:
        render_shared_slip(controller)
    else:
        render_slip_form(controller)
        render_share_panel(controller)
with right:
    render_slip_preview(renderer)
