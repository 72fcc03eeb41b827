# =============================================================================
# firstaid_core/models/case.py
# Case Record - the shared schema between pages, service and stores
# =============================================================================
"""
CaseRecord - one registered first-aid case.

Records travel as camelCase JSON documents (local mirror array and the remote
table's ``data`` column) and as ``CaseRecord`` instances everywhere else.
"""

from __future__ import annotations
import random
import string
import time
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from firstaid_core.errors import CaseValidationError


class CompanyType(str, Enum):
    """Employer of the injured person."""
    NOMAC = "NOMAC"
    EPC = "EPC"
    CONTRACTOR = "Contractor"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Any) -> CompanyType:
        if isinstance(value, cls):
            return value
        for member in cls:
            if str(value).strip().lower() == member.value.lower():
                return member
        return cls.OTHER


# Tags offered by the registration form
INJURY_BODY_PARTS = [
    "Head", "Arm", "Leg", "Internal", "Fracture", "Sprain/Strain",
    "Eyes", "Wrist", "Ankle", "Skin", "Burn/Scald", "Poisoning",
    "Face", "Hand", "Foot", "Lungs", "Cut/Bruise", "Foreign body",
    "Neck", "Finger", "Toe", "Groin", "Inhalation", "Electric Shock",
    "Shoulder", "Back", "Torso", "Multiple", "Abrasion", "Others",
]

# snake_case attribute -> camelCase document key
FIELD_KEYS = {
    "id": "id",
    "location_of_incident": "locationOfIncident",
    "date_registered": "dateRegistered",
    "company_type": "companyType",
    "contractor_name": "contractorName",
    "person_name": "personName",
    "designation": "designation",
    "first_aid_case_number": "firstAidCaseNumber",
    "person_id_number": "personIdNumber",
    "date_of_event": "dateOfEvent",
    "time_of_event": "timeOfEvent",
    "department": "department",
    "injured_body_parts": "injuredBodyParts",
    "injury_description": "injuryDescription",
    "referred_to_hospital": "referredToHospital",
    "first_aider_name": "firstAiderName",
    "injured_person_signature": "injuredPersonSignature",
    "ehs_in_charge_name": "ehsInChargeName",
}

# Key names used by older stored documents
LEGACY_KEYS = {
    "projectName": "location_of_incident",
    "date": "date_registered",
    "name": "person_name",
    "firstAidCaseNo": "first_aid_case_number",
    "idNo": "person_id_number",
    "partOfInjury": "injured_body_parts",
    "descriptionOfInjury": "injury_description",
    "firstAider": "first_aider_name",
    "ehsInCharge": "ehs_in_charge_name",
}

REQUIRED_TEXT_FIELDS = {
    "location_of_incident": "Location of incident",
    "date_registered": "Date",
    "person_name": "Name",
    "designation": "Designation",
    "person_id_number": "ID No.",
    "date_of_event": "Date of event",
    "time_of_event": "Time of event",
    "department": "Department",
    "injury_description": "Description of injury",
    "first_aider_name": "First aider",
    "injured_person_signature": "Injured person signature",
    "ehs_in_charge_name": "EHS in-charge",
}


def generate_local_id() -> str:
    """Id for records saved while the remote store is unavailable: ``<epoch-ms>_<6 base36 chars>``."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"{int(time.time() * 1000)}_{suffix}"


def _unique_tags(tags: Iterable[Any]) -> List[str]:
    seen = []
    for tag in tags or []:
        tag = str(tag).strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


@dataclass
class CaseRecord:
    """A first-aid case. An empty ``id`` marks an unsaved draft."""

    location_of_incident: str = ""
    date_registered: str = ""
    company_type: CompanyType = CompanyType.NOMAC
    contractor_name: Optional[str] = None
    person_name: str = ""
    designation: str = ""
    first_aid_case_number: str = ""
    person_id_number: str = ""
    date_of_event: str = ""
    time_of_event: str = ""
    department: str = ""
    injured_body_parts: List[str] = field(default_factory=list)
    injury_description: str = ""
    referred_to_hospital: bool = False
    first_aider_name: str = ""
    injured_person_signature: str = ""
    ehs_in_charge_name: str = ""
    id: str = ""

    def __post_init__(self):
        self.company_type = CompanyType.parse(self.company_type)
        self.injured_body_parts = _unique_tags(self.injured_body_parts)
        self.id = (self.id or "").strip()

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    @property
    def is_persisted(self) -> bool:
        return bool(self.id)

    @property
    def is_contractor(self) -> bool:
        return self.company_type == CompanyType.CONTRACTOR

    def with_id(self, new_id: str) -> CaseRecord:
        return replace(self, id=new_id, injured_body_parts=list(self.injured_body_parts))

    def ensure_id(self) -> CaseRecord:
        """Return self when an id is set, else a copy carrying a fresh local id."""
        if self.is_persisted:
            return self
        return self.with_id(generate_local_id())

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self, include_id: bool = True) -> Dict[str, Any]:
        document = {}
        for attr, key in FIELD_KEYS.items():
            if attr == "id" and not include_id:
                continue
            value = getattr(self, attr)
            if attr == "company_type":
                value = value.value
            elif attr == "injured_body_parts":
                value = list(value)
            document[key] = value
        return document

    @classmethod
    def from_dict(cls, data: Dict[str, Any], record_id: Optional[str] = None) -> CaseRecord:
        """
        Build a record from a stored document.

        Accepts camelCase keys, snake_case attribute names and the legacy
        keys listed in ``LEGACY_KEYS``. Missing keys take dataclass defaults.
        """
        key_to_attr = {key: attr for attr, key in FIELD_KEYS.items()}
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}

        for key, value in (data or {}).items():
            attr = key_to_attr.get(key) or LEGACY_KEYS.get(key) or (key if key in known else None)
            if attr is None or attr in kwargs:
                continue
            kwargs[attr] = value

        for attr in REQUIRED_TEXT_FIELDS:
            if kwargs.get(attr) is None:
                kwargs.pop(attr, None)
        kwargs["referred_to_hospital"] = bool(kwargs.get("referred_to_hospital", False))
        kwargs["injured_body_parts"] = list(kwargs.get("injured_body_parts") or [])
        if record_id is not None:
            kwargs["id"] = str(record_id)
        elif kwargs.get("id") is not None:
            kwargs["id"] = str(kwargs["id"])

        return cls(**kwargs)

    # -------------------------------------------------------------------------
    # Dates
    # -------------------------------------------------------------------------

    def event_timestamp(self) -> Optional[datetime]:
        """
        Combined event date and time as a naive datetime, or None.

        The date must be YYYY-MM-DD on its own; a time without a date never
        borrows today's date. Zone-suffixed times are converted to naive UTC.
        """
        try:
            ts = pd.Timestamp(datetime.strptime(self.date_of_event or "", "%Y-%m-%d"))
            if (self.time_of_event or "").strip():
                ts = pd.to_datetime(f"{self.date_of_event} {self.time_of_event.strip()}", errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
        if pd.isna(ts):
            return None
        if ts.tzinfo is not None:
            ts = ts.tz_convert(None)
        return ts.to_pydatetime()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validation_problems(self) -> List[str]:
        problems = []
        for attr, label in REQUIRED_TEXT_FIELDS.items():
            if not str(getattr(self, attr) or "").strip():
                problems.append(f"{label} is required")

        if self.date_of_event:
            try:
                datetime.strptime(self.date_of_event, "%Y-%m-%d")
            except ValueError:
                problems.append("Date of event must be YYYY-MM-DD")
        if self.time_of_event:
            try:
                datetime.strptime(self.time_of_event, "%H:%M")
            except ValueError:
                problems.append("Time of event must be HH:MM")

        if self.is_contractor and not (self.contractor_name or "").strip():
            problems.append("Contractor name is required for contractor cases")

        return problems

    def validate(self) -> CaseRecord:
        problems = self.validation_problems()
        if problems:
            raise CaseValidationError(
                "Case record is incomplete",
                problems=problems,
                case_id=self.id or None,
            )
        return self


def sort_by_event_desc(records: Iterable[CaseRecord]) -> List[CaseRecord]:
    """
    Most recent incident first.

    Records whose date/time does not parse go after all dated ones. Both
    groups keep their input order for ties, so the result is stable.
    """
    dated, undated = [], []
    for record in records:
        ts = record.event_timestamp()
        if ts is None:
            undated.append(record)
        else:
            dated.append((ts, record))
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [record for _, record in dated] + undated
