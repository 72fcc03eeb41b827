# =============================================================================
# firstaid_core/export/csv_export.py
# CSV export of the case log
# =============================================================================

from __future__ import annotations
from datetime import date
from typing import Any, List, Optional, Sequence

from firstaid_core.models.case import CaseRecord

CSV_HEADERS = [
    "Serial",
    "Date",
    "Time",
    "Location of Incident",
    "Company Type",
    "Contractor Name",
    "Name",
    "Designation",
    "First Aid Case No",
    "ID No",
    "Department",
    "Part of Injury",
    "Description of Injury",
    "Referred to Hospital",
    "First Aider",
    "EHS In-Charge",
]


def contractor_label(case: CaseRecord) -> str:
    """Contractor name for contractor cases, N/A for everyone else."""
    if case.is_contractor:
        return case.contractor_name or "N/A"
    return "N/A"


def case_to_row(case: CaseRecord, serial: int) -> List[Any]:
    return [
        serial,
        case.date_of_event,
        case.time_of_event,
        case.location_of_incident,
        case.company_type.value,
        contractor_label(case),
        case.person_name,
        case.designation,
        case.first_aid_case_number,
        case.person_id_number,
        case.department,
        "; ".join(case.injured_body_parts),
        case.injury_description,
        "Yes" if case.referred_to_hospital else "No",
        case.first_aider_name,
        case.ehs_in_charge_name,
    ]


def _quote(field: Any) -> str:
    # Fields with commas are wrapped; embedded quotes are left as they are
    text = "" if field is None else str(field)
    return f'"{text}"' if "," in text else text


def cases_to_csv(cases: Sequence[CaseRecord]) -> str:
    """
    Render cases in display order as CSV text.

    Returns:
        Header plus one line per case, each ending in a newline; an empty
        string when there are no cases
    """
    if not cases:
        return ""

    lines = [",".join(CSV_HEADERS)]
    for serial, case in enumerate(cases, start=1):
        lines.append(",".join(_quote(field) for field in case_to_row(case, serial)))
    return "\n".join(lines) + "\n"


def export_filename(day: Optional[date] = None) -> str:
    """Download name, e.g. first-aid-cases-2024-05-01.csv"""
    day = day or date.today()
    return f"first-aid-cases-{day.isoformat()}.csv"
