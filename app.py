"""
Land Registry: Streamlit UI entry point.
"""

import logging

import streamlit as st

# Load .env first so the settings below see it
from land_registry.utils.config import load_config, load_settings, get_optional
load_config()

from land_registry.domains.errors import ConfigurationError
from land_registry.services.session import create_session
from land_registry.ui.forms import (
    StreamlitNotifier,
    render_auth,
    render_land_form,
    render_lands,
    render_transfer_form,
    render_transfers,
)
from land_registry.utils.logger import get_logger, mask_secret, setup_logger

setup_logger("land_registry", level=get_optional("LOG_LEVEL", "INFO") or logging.INFO)
log = get_logger()

st.set_page_config(page_title="Land Registry", layout="wide")
st.title("Land Registry")

try:
    settings = load_settings()
except ConfigurationError as e:
    log.error("Configuration error: %s", e)
    st.error(f"**Configuration error**\n\n{e}")
    st.stop()

# One client/store set per browser session; the access token lives in it
if "registry" not in st.session_state:
    st.session_state.registry = create_session(settings, StreamlitNotifier())
    st.session_state.registry.auth.get_current_user()

registry = st.session_state.registry
auth = registry.auth

if not auth.is_authenticated:
    render_auth(auth)
    st.stop()

with st.sidebar:
    user = auth.user or {}
    st.markdown(f"Signed in as **{user.get('full_name') or user.get('email')}**")
    st.caption(f"Project: `{settings.supabase_url}` · Key: `{mask_secret(settings.supabase_anon_key)}`")
    if st.button("Refresh", use_container_width=True):
        registry.refresh()
    if st.button("Sign out", use_container_width=True):
        res = auth.sign_out()
        if res["success"]:
            del st.session_state.registry
            st.session_state.pop("loaded_for", None)
            st.rerun()
        st.error(res["error"])

if "loaded_for" not in st.session_state or st.session_state.loaded_for != auth.user["id"]:
    registry.refresh()
    st.session_state.loaded_for = auth.user["id"]

for store in (registry.lands, registry.transfers):
    if store.error:
        st.warning(store.error)

my_land_tab, transfers_tab = st.tabs(["My Land", "Transfers"])

with my_land_tab:
    render_lands(registry.lands.lands)
    st.divider()
    render_land_form(registry.registration)

with transfers_tab:
    render_transfer_form(registry.transfer_form)
    st.divider()
    st.subheader("Your transfers")
    render_transfers(registry.transfers.transfers)
