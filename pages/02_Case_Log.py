# =============================================================================
# 02_Case_Log.py - Case log dashboard
# Search, filter, export, edit and delete registered cases
# =============================================================================
from __future__ import annotations
import streamlit as st
import plotly.express as px

from firstaid_core.errors.handlers import error_boundary
from firstaid_core.export.csv_export import cases_to_csv, export_filename
from firstaid_core.services.case_query import (
    cases_to_dataframe, compute_case_kpis, department_breakdown, filter_cases,
)
from firstaid_core.state.session import (
    flash, get_case_service, init_state, show_flash, start_editing,
)
from firstaid_core.ui.components import add_grid
from firstaid_core.ui.theme import PRIMARY_COLOR, apply_css, header, storage_mode_pill

st.set_page_config(
    page_title="Case Log - First-Aid Case Log",
    page_icon="📋",
    layout="wide",
)

init_state()
apply_css()
service = get_case_service()

header("Case Log", "All registered first-aid cases, most recent first", icon="📋")
storage_mode_pill(service.remote_configured)
show_flash()


@error_boundary(default_return=[], error_message="Could not load cases.")
def load_cases():
    return service.list_all()


cases = load_cases()
kpis = compute_case_kpis(cases)

# =============================================================================
# KPI ROW
# =============================================================================
col1, col2, col3, col4 = st.columns(4)
col1.metric("Total cases", kpis.total_cases)
col2.metric("Hospital referrals", kpis.hospital_referrals)
col3.metric("Last 7 days", kpis.recent_cases)
col4.metric("Contractor cases", kpis.contractor_cases)

# =============================================================================
# FILTERS
# =============================================================================
f1, f2, f3, f4 = st.columns([3, 2, 2, 1.4])
search = f1.text_input("Search", placeholder="Search by name or ID", key="search_term")
filter_date = f2.date_input("Date of event", value=None, key="filter_date")
filter_department = f3.text_input("Department", placeholder="Filter by department", key="filter_department")

filtered = filter_cases(cases, search=search, event_date=filter_date, department=filter_department)

with f4:
    st.write("")
    st.download_button(
        "⬇️ Export CSV",
        data=cases_to_csv(filtered),
        file_name=export_filename(),
        mime="text/csv",
        disabled=not filtered,
        use_container_width=True,
    )

st.caption(f"Showing {len(filtered)} of {len(cases)} cases")

# =============================================================================
# TABLE + CHART
# =============================================================================
table_col, chart_col = st.columns([3, 1.3])
with table_col:
    if filtered:
        st.dataframe(
            cases_to_dataframe(filtered).drop(columns=["id"]),
            hide_index=True,
            use_container_width=True,
        )
    else:
        st.info("No cases match the current filters.")

with chart_col:
    breakdown = department_breakdown(cases)
    if not breakdown.empty:
        fig = px.bar(
            breakdown,
            x="Cases",
            y="Department",
            orientation="h",
            title="Cases by department",
            color_discrete_sequence=[PRIMARY_COLOR],
        )
        fig.update_layout(height=320, margin=dict(l=10, r=10, t=40, b=10), yaxis=dict(autorange="reversed"))
        st.plotly_chart(add_grid(fig), use_container_width=True)

# =============================================================================
# EDIT / DELETE
# =============================================================================
if filtered:
    st.markdown("### Manage a case")
    labels = {
        case.id: f"{case.date_of_event} {case.time_of_event} · {case.person_name} · {case.person_id_number}"
        for case in filtered
    }
    selected_id = st.selectbox("Case", list(labels), format_func=labels.get)

    a1, a2, a3 = st.columns([1, 1, 3])
    if a1.button("✏️ Edit", use_container_width=True):
        start_editing(selected_id)
        st.switch_page("pages/01_Register_Case.py")

    confirm = a3.checkbox("I want to permanently delete this case", key=f"confirm_delete_{selected_id}")
    if a2.button("🗑️ Delete", disabled=not confirm, use_container_width=True):
        result = service.delete(selected_id)
        if result:
            flash("Case deleted.")
            st.rerun()
        else:
            st.error(
                "Failed to delete the case. Please check your internet connection "
                "or try refreshing the page."
            )
