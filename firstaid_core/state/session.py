import streamlit as st

from firstaid_core.config import create_case_service, load_settings
from firstaid_core.logging import get_logger, setup_logging
from firstaid_core.offline.case_service import ReconcilingCaseService
from firstaid_core.services.base_service import ServiceResult

logger = get_logger(__name__)

# Session-state keys used across the app. Filter widgets own their keys
# (search_term, filter_date, filter_department) and are not seeded here.
SESSION_DEFAULTS = {
    "editing_case_id": None,
    "last_action_message": None,
    "form_nonce": 0,
}


def init_state():
    """Initialize session state with defaults."""
    for k, v in SESSION_DEFAULTS.items():
        if k not in st.session_state:
            st.session_state[k] = v


def _log_case_event(event: str, result: ServiceResult) -> None:
    logger.info(f"Case event {event}: {result.error or 'ok'}")


@st.cache_resource
def get_case_service() -> ReconcilingCaseService:
    """
    The one ReconcilingCaseService for this process.

    Cached by Streamlit so every session and rerun shares the same stores.
    """
    settings = load_settings()
    setup_logging(settings.log_level_value, log_to_file=settings.log_to_file)
    service = create_case_service(settings)
    service.register_observer(_log_case_event)
    logger.info(f"Case service ready (remote configured: {service.remote_configured})")
    return service


def start_editing(case_id: str) -> None:
    st.session_state["editing_case_id"] = case_id


def clear_edit_state() -> None:
    st.session_state["editing_case_id"] = None


def flash(message: str, level: str = "success") -> None:
    """Keep a message across st.rerun(); shown by show_flash()."""
    st.session_state["last_action_message"] = (level, message)


def show_flash() -> None:
    pending = st.session_state.get("last_action_message")
    if not pending:
        return
    level, message = pending
    getattr(st, level, st.info)(message)
    st.session_state["last_action_message"] = None
