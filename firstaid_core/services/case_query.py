"""
Case Query - dashboard search, filters and KPIs.

Pure functions over lists of CaseRecord; the pages call these on whatever
ReconcilingCaseService.list_all() returned.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Union

import pandas as pd

from firstaid_core.export.csv_export import contractor_label
from firstaid_core.models.case import CaseRecord

# =============================================================================
# DATA CLASSES
# =============================================================================

RECENT_WINDOW_DAYS = 7


@dataclass
class CaseKPIs:
    """Headline numbers for the dashboard (always over the unfiltered list)."""

    total_cases: int = 0
    hospital_referrals: int = 0
    recent_cases: int = 0                 # Event date within the last 7 days
    contractor_cases: int = 0
    cases_by_department: Dict[str, int] = field(default_factory=dict)

    @property
    def referral_rate(self) -> float:
        if not self.total_cases:
            return 0.0
        return round(100.0 * self.hospital_referrals / self.total_cases, 1)


# =============================================================================
# FILTERING
# =============================================================================

def _as_date_string(value: Optional[Union[str, date]]) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def filter_cases(
    cases: Iterable[CaseRecord],
    search: str = "",
    event_date: Optional[Union[str, date]] = None,
    department: str = "",
) -> List[CaseRecord]:
    """
    Apply the dashboard filters, keeping input order.

    Args:
        cases: Cases to filter
        search: Case-insensitive substring of the person's name or ID number
        event_date: Exact date of event (YYYY-MM-DD or date)
        department: Case-insensitive substring of the department

    Returns:
        Cases matching every non-empty filter
    """
    term = (search or "").strip().lower()
    wanted_date = _as_date_string(event_date)
    dept = (department or "").strip().lower()

    matched = []
    for case in cases:
        if term and term not in case.person_name.lower() and term not in case.person_id_number.lower():
            continue
        if wanted_date and case.date_of_event != wanted_date:
            continue
        if dept and dept not in case.department.lower():
            continue
        matched.append(case)
    return matched


# =============================================================================
# KPIs
# =============================================================================

def _event_date(case: CaseRecord) -> Optional[date]:
    try:
        return datetime.strptime(case.date_of_event, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None


def compute_case_kpis(cases: Sequence[CaseRecord], today: Optional[date] = None) -> CaseKPIs:
    """Count totals, referrals, recent and contractor cases, and cases per department."""
    today = today or date.today()
    window_start = today - timedelta(days=RECENT_WINDOW_DAYS)

    kpis = CaseKPIs(total_cases=len(cases))
    for case in cases:
        if case.referred_to_hospital:
            kpis.hospital_referrals += 1
        if case.is_contractor:
            kpis.contractor_cases += 1
        event_day = _event_date(case)
        if event_day is not None and event_day >= window_start:
            kpis.recent_cases += 1
        dept = case.department.strip() or "Unspecified"
        kpis.cases_by_department[dept] = kpis.cases_by_department.get(dept, 0) + 1
    return kpis


# =============================================================================
# TABLES FOR DISPLAY
# =============================================================================

TABLE_COLUMNS = [
    "Date", "Time", "Name", "ID No", "Company", "Department",
    "Part of Injury", "Description of Injury", "Referred to Hospital",
    "First Aider", "id",
]


def cases_to_dataframe(cases: Sequence[CaseRecord]) -> pd.DataFrame:
    """Case table for st.dataframe, in the given order."""
    rows = []
    for case in cases:
        company = case.company_type.value
        if case.is_contractor:
            company = f"{company} - {contractor_label(case)}"
        rows.append({
            "Date": case.date_of_event,
            "Time": case.time_of_event,
            "Name": case.person_name,
            "ID No": case.person_id_number,
            "Company": company,
            "Department": case.department,
            "Part of Injury": ", ".join(case.injured_body_parts),
            "Description of Injury": case.injury_description,
            "Referred to Hospital": "Yes" if case.referred_to_hospital else "No",
            "First Aider": case.first_aider_name,
            "id": case.id,
        })
    return pd.DataFrame(rows, columns=TABLE_COLUMNS)


def department_breakdown(cases: Sequence[CaseRecord]) -> pd.DataFrame:
    """Department -> case count, largest first (ties alphabetical)."""
    counts = compute_case_kpis(cases).cases_by_department
    df = pd.DataFrame(
        sorted(counts.items(), key=lambda item: (-item[1], item[0])),
        columns=["Department", "Cases"],
    )
    return df.reset_index(drop=True)
