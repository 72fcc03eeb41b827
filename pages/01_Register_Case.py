# =============================================================================
# 01_Register_Case.py - First-aid case registration / edit form
# =============================================================================
from __future__ import annotations
import streamlit as st
from datetime import date, datetime, time
from typing import Optional

from firstaid_core.errors import CaseValidationError
from firstaid_core.errors.handlers import handle_error
from firstaid_core.models.case import CaseRecord, CompanyType, INJURY_BODY_PARTS
from firstaid_core.state.session import (
    clear_edit_state, flash, get_case_service, init_state, show_flash,
)
from firstaid_core.ui.theme import apply_css, header, storage_mode_pill

st.set_page_config(
    page_title="Register Case - First-Aid Case Log",
    page_icon="📝",
    layout="wide",
)

init_state()
apply_css()
service = get_case_service()


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return date.today()


def _parse_time(value: str) -> time:
    try:
        return datetime.strptime(value, "%H:%M").time()
    except (TypeError, ValueError):
        return datetime.now().time().replace(second=0, microsecond=0)


# =============================================================================
# EDIT MODE
# =============================================================================
editing_id: Optional[str] = st.session_state.get("editing_case_id")
existing: Optional[CaseRecord] = None
if editing_id:
    existing = service.get_by_id(editing_id)
    if existing is None:
        st.warning("The case you were editing no longer exists. Starting a new registration.")
        clear_edit_state()
        editing_id = None

initial = existing or CaseRecord(
    date_registered=date.today().isoformat(),
    date_of_event=date.today().isoformat(),
    time_of_event=datetime.now().strftime("%H:%M"),
)

if editing_id:
    header("Edit Case", f"Updating case for {initial.person_name or 'unnamed person'}", icon="✏️")
else:
    header("Register Case", "Record a first-aid case. Fields marked * are required.", icon="📝")
storage_mode_pill(service.remote_configured)
show_flash()

if editing_id and st.button("Cancel editing"):
    clear_edit_state()
    st.rerun()

# Changing the nonce gives every widget a fresh key, which empties the form
nonce = st.session_state["form_nonce"]


def k(name: str) -> str:
    return f"{name}_{editing_id or 'new'}_{nonce}"


company_options = [c.value for c in CompanyType]

# =============================================================================
# FORM
# =============================================================================
with st.form(f"case_form_{nonce}", clear_on_submit=False):
    st.markdown("#### Incident")
    c1, c2 = st.columns(2)
    location = c1.text_input("Location of the incident *", initial.location_of_incident, key=k("location"))
    registered = c2.date_input("Date *", _parse_date(initial.date_registered), key=k("registered"))

    c1, c2 = st.columns(2)
    company = c1.radio(
        "Company Type",
        company_options,
        index=company_options.index(initial.company_type.value),
        horizontal=True,
        key=k("company"),
    )
    contractor = c2.text_input(
        "Contractor Name (required for Contractor)",
        initial.contractor_name or "",
        key=k("contractor"),
    )

    st.markdown("#### Injured person")
    c1, c2, c3 = st.columns(3)
    person_name = c1.text_input("Name *", initial.person_name, key=k("name"))
    designation = c2.text_input("Designation *", initial.designation, key=k("designation"))
    id_number = c3.text_input("ID No. *", initial.person_id_number, key=k("id_number"))

    c1, c2, c3, c4 = st.columns(4)
    case_number = c1.text_input("First Aid Case No.", initial.first_aid_case_number, key=k("case_number"))
    event_date = c2.date_input("Date of Event *", _parse_date(initial.date_of_event), key=k("event_date"))
    event_time = c3.time_input("Time of Event *", _parse_time(initial.time_of_event), step=60, key=k("event_time"))
    department = c4.text_input("Department *", initial.department, key=k("department"))

    st.markdown("#### Injury")
    body_parts = st.multiselect(
        "Part of Injury",
        INJURY_BODY_PARTS,
        default=[p for p in initial.injured_body_parts if p in INJURY_BODY_PARTS],
        key=k("body_parts"),
    )
    description = st.text_area("Description of Injury *", initial.injury_description, key=k("description"))
    referred = st.radio(
        "Referred to Hospital",
        ["No", "Yes"],
        index=1 if initial.referred_to_hospital else 0,
        horizontal=True,
        key=k("referred"),
    )

    st.markdown("#### Sign-off")
    c1, c2, c3 = st.columns(3)
    first_aider = c1.text_input("First Aider *", initial.first_aider_name, key=k("first_aider"))
    signature = c2.text_input("Injured Person Signature *", initial.injured_person_signature, key=k("signature"))
    ehs = c3.text_input("EHS In-charge *", initial.ehs_in_charge_name, key=k("ehs"))

    submitted = st.form_submit_button("Update Case" if editing_id else "Submit Case", type="primary")

# =============================================================================
# SUBMIT
# =============================================================================
if submitted:
    record = CaseRecord(
        id=editing_id or "",
        location_of_incident=location.strip(),
        date_registered=registered.isoformat() if registered else "",
        company_type=CompanyType.parse(company),
        contractor_name=contractor.strip() or None,
        person_name=person_name.strip(),
        designation=designation.strip(),
        first_aid_case_number=case_number.strip(),
        person_id_number=id_number.strip(),
        date_of_event=event_date.isoformat() if event_date else "",
        time_of_event=event_time.strftime("%H:%M") if event_time else "",
        department=department.strip(),
        injured_body_parts=body_parts,
        injury_description=description.strip(),
        referred_to_hospital=referred == "Yes",
        first_aider_name=first_aider.strip(),
        injured_person_signature=signature.strip(),
        ehs_in_charge_name=ehs.strip(),
    )

    try:
        record.validate()
    except CaseValidationError as e:
        handle_error(e, user_message="Please complete the form")
    else:
        with st.spinner("Saving case..."):
            result = service.update(record) if editing_id else service.add(record)

        if result:
            stored_locally = (result.metadata or {}).get("stored") == "local" or (
                (result.metadata or {}).get("remote") is False
            )
            if stored_locally:
                flash(
                    "Case saved on this device only; the cloud store could not be reached.",
                    level="warning",
                )
            else:
                flash("Case updated successfully." if editing_id else "Case registered successfully.")
            clear_edit_state()
            st.session_state["form_nonce"] = nonce + 1
            if editing_id:
                st.switch_page("pages/02_Case_Log.py")
            st.rerun()
        else:
            # Form values stay in place so the user can retry
            st.error(
                "Failed to save the case. Please check your internet connection and try again. "
                f"({result.error})"
            )
