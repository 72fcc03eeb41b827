"""
First-Aid Case Log - overview page.

Run with:
    streamlit run app.py
"""
from __future__ import annotations
import streamlit as st

from firstaid_core.services.case_query import compute_case_kpis
from firstaid_core.state.session import get_case_service, init_state, show_flash
from firstaid_core.ui.theme import apply_css, header, storage_mode_pill

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="First-Aid Case Log",
    page_icon="🩹",
    layout="wide",
)

init_state()
apply_css()
service = get_case_service()

header("First-Aid Case Log", "Register workplace injuries and keep the site case log up to date")
storage_mode_pill(service.remote_configured)
show_flash()

# ============================================================================
# HEADLINE NUMBERS
# ============================================================================
cases = service.list_all()
kpis = compute_case_kpis(cases)

col1, col2, col3, col4 = st.columns(4)
col1.metric("Total cases", kpis.total_cases)
col2.metric("Hospital referrals", kpis.hospital_referrals, f"{kpis.referral_rate}% of cases", delta_color="off")
col3.metric("Last 7 days", kpis.recent_cases)
col4.metric("Contractor cases", kpis.contractor_cases)

st.markdown("### Where to next")
nav1, nav2 = st.columns(2)
with nav1:
    st.page_link("pages/01_Register_Case.py", label="Register a new case", icon="📝")
with nav2:
    st.page_link("pages/02_Case_Log.py", label="Open the case log", icon="📋")

if not service.remote_configured:
    st.info(
        "Cloud storage is not configured, so cases are kept on this device only. "
        "Add a `[supabase]` section to `.streamlit/secrets.toml` (url and key) "
        "or set `SUPABASE_URL` and `SUPABASE_KEY` to enable it."
    )
