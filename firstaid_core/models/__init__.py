from .case import (
    CaseRecord,
    CompanyType,
    INJURY_BODY_PARTS,
    generate_local_id,
    sort_by_event_desc,
)

__all__ = [
    "CaseRecord",
    "CompanyType",
    "INJURY_BODY_PARTS",
    "generate_local_id",
    "sort_by_event_desc",
]
