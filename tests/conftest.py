# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import pytest
from typing import Dict, List, Optional
from unittest.mock import MagicMock

from firstaid_core.data.remote_store import RemoteCaseStore
from firstaid_core.models.case import CaseRecord, CompanyType, sort_by_event_desc
from firstaid_core.offline.local_mirror import LocalMirrorStore
from firstaid_core.services.base_service import ErrorKind, ServiceResult


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

def make_case(**overrides) -> CaseRecord:
    """A complete, valid case; override any attribute."""
    values = dict(
        location_of_incident="Block B substation",
        date_registered="2024-05-02",
        company_type=CompanyType.NOMAC,
        person_name="Amal Haddad",
        designation="Electrician",
        first_aid_case_number="FA-014",
        person_id_number="ID-2231",
        date_of_event="2024-05-02",
        time_of_event="09:15",
        department="Electrical",
        injured_body_parts=["Hand", "Cut/Bruise"],
        injury_description="Small cut on left hand from cable tray edge",
        referred_to_hospital=False,
        first_aider_name="R. Mendes",
        injured_person_signature="A. Haddad",
        ehs_in_charge_name="K. Osei",
    )
    values.update(overrides)
    return CaseRecord(**values)


@pytest.fixture
def case_factory():
    """The make_case builder, for tests that need several variants"""
    return make_case


@pytest.fixture
def sample_case():
    """A valid unsaved draft"""
    return make_case()


@pytest.fixture
def sample_cases() -> List[CaseRecord]:
    """Three saved cases on different days"""
    return [
        make_case(id="c1", person_name="Amal Haddad", date_of_event="2024-05-02", time_of_event="09:15"),
        make_case(
            id="c2",
            person_name="Jonas Berg",
            person_id_number="ID-7781",
            date_of_event="2024-05-03",
            time_of_event="14:40",
            department="Civil",
            company_type=CompanyType.CONTRACTOR,
            contractor_name="Gulf Scaffolding",
            referred_to_hospital=True,
            injury_description="Twisted ankle, stepped off scaffold, swelling",
        ),
        make_case(
            id="c3",
            person_name="Priya Nair",
            person_id_number="ID-1204",
            date_of_event="2024-04-28",
            time_of_event="07:05",
            department="Mechanical",
            company_type=CompanyType.EPC,
        ),
    ]


# =============================================================================
# STORE FIXTURES
# =============================================================================

class FakeRemoteStore(RemoteCaseStore):
    """
    In-memory remote store with switchable failures.

    ``reachable = False`` fails every call; the ``fail_*`` flags fail one
    operation. Ids are server-style ``srv-N``.
    """

    def __init__(self, records: Optional[List[CaseRecord]] = None):
        self.rows: Dict[str, CaseRecord] = {r.id: r for r in (records or [])}
        self.reachable = True
        self.fail_create = False
        self.fail_read_all = False
        self.fail_update = False
        self.fail_delete = False
        self.calls: List[str] = []
        self._next_id = 1

    def _down(self, flag: bool) -> bool:
        return not self.reachable or flag

    def _error(self, operation: str) -> ServiceResult:
        return ServiceResult.fail(f"remote {operation} unavailable", ErrorKind.REMOTE)

    def create(self, record):
        self.calls.append("create")
        if self._down(self.fail_create):
            return self._error("create")
        new_id = f"srv-{self._next_id}"
        self._next_id += 1
        self.rows[new_id] = record.with_id(new_id)
        return ServiceResult.ok(new_id)

    def read_all(self):
        self.calls.append("read_all")
        if self._down(self.fail_read_all):
            return []
        return sort_by_event_desc(self.rows.values())

    def read_by_id(self, case_id):
        self.calls.append("read_by_id")
        if self._down(False):
            return self._error("read_by_id")
        return ServiceResult.ok(self.rows.get(case_id))

    def update(self, case_id, record):
        self.calls.append("update")
        if self._down(self.fail_update):
            return self._error("update")
        if case_id not in self.rows:
            return ServiceResult.fail(f"{case_id} not found", ErrorKind.NOT_FOUND)
        self.rows[case_id] = record.with_id(case_id)
        return ServiceResult.ok(case_id)

    def delete(self, case_id):
        self.calls.append("delete")
        if self._down(self.fail_delete):
            return self._error("delete")
        self.rows.pop(case_id, None)
        return ServiceResult.ok(case_id)


@pytest.fixture
def local_store(tmp_path):
    """Local mirror backed by a temporary SQLite file"""
    store = LocalMirrorStore(tmp_path / "mirror.db")
    store.initialize()
    yield store
    store.close()


@pytest.fixture
def fake_remote():
    """Reachable, empty in-memory remote store"""
    return FakeRemoteStore()


@pytest.fixture
def case_service(fake_remote, local_store):
    """Service over the fake remote and a temporary mirror"""
    from firstaid_core.offline.case_service import ReconcilingCaseService

    return ReconcilingCaseService(fake_remote, local_store)


# =============================================================================
# MOCK FIXTURES
# =============================================================================

@pytest.fixture
def mock_supabase():
    """Mock Supabase client"""
    mock_client = MagicMock()
    mock_client.table.return_value.select.return_value.execute.return_value.data = []
    mock_client.table.return_value.insert.return_value.execute.return_value = MagicMock()
    return mock_client

