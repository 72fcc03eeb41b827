# =============================================================================
# tests/unit/test_case_service.py
# Unit Tests for ReconcilingCaseService
# =============================================================================

import pytest


def _without_id(record):
    return record.to_dict(include_id=False)


class TestListAll:
    """Test remote-first reads"""

    def test_remote_cases_replace_mirror(self, case_service, fake_remote, local_store, sample_cases):
        """Non-empty remote results are returned and mirrored"""
        for record in sample_cases:
            fake_remote.rows[record.id] = record
        local_store.save(sample_cases[0].with_id("stale-local"))

        cases = case_service.list_all()

        assert [c.id for c in cases] == ["c2", "c1", "c3"]
        assert sorted(c.id for c in local_store.get_all()) == ["c1", "c2", "c3"]

    def test_empty_remote_serves_mirror(self, case_service, local_store, sample_cases):
        """An empty remote collection falls back to the three local cases"""
        local_store.replace_all(sample_cases)

        cases = case_service.list_all()

        assert [c.id for c in cases] == ["c2", "c1", "c3"]
        assert local_store.count() == 3

    def test_unreachable_remote_serves_mirror(self, case_service, fake_remote, local_store, sample_cases):
        """Remote failure falls back to the mirror"""
        fake_remote.reachable = False
        local_store.replace_all(sample_cases)

        assert len(case_service.list_all()) == 3

    def test_mixed_time_zones_in_mirror(self, case_service, fake_remote, local_store, case_factory):
        """A zone-suffixed time in the mirror does not break list_all"""
        fake_remote.reachable = False
        local_store.save(case_factory(id="naive", time_of_event="09:15"))
        local_store.save(case_factory(id="aware", time_of_event="09:15Z"))

        assert sorted(c.id for c in case_service.list_all()) == ["aware", "naive"]


class TestGetById:
    """Test single-case reads"""

    def test_remote_hit(self, case_service, fake_remote, sample_case):
        """A remote record is returned directly"""
        fake_remote.rows["r1"] = sample_case.with_id("r1")

        assert case_service.get_by_id("r1").id == "r1"

    def test_falls_back_to_mirror(self, case_service, fake_remote, local_store, sample_case):
        """Local-only records are found when remote lacks them"""
        local_store.save(sample_case.with_id("local-1"))

        assert case_service.get_by_id("local-1").id == "local-1"
        fake_remote.reachable = False
        assert case_service.get_by_id("local-1").id == "local-1"

    def test_missing_everywhere(self, case_service):
        """Unknown ids give None"""
        assert case_service.get_by_id("nobody") is None
        assert case_service.get_by_id("") is None


class TestAdd:
    """Test case registration"""

    def test_add_with_remote_reachable(self, case_service, local_store, sample_case):
        """The new case shows up with its server id and is mirrored"""
        result = case_service.add(sample_case)

        assert result
        assert result.data == "srv-1"
        assert result.metadata["stored"] == "remote"
        cases = case_service.list_all()
        assert len(cases) == 1
        assert _without_id(cases[0]) == _without_id(sample_case)
        assert local_store.get_by_id("srv-1") is not None

    def test_add_with_remote_unreachable(self, case_service, fake_remote, sample_case):
        """Offline adds are saved locally under a generated id"""
        fake_remote.reachable = False

        result = case_service.add(sample_case)

        assert result
        assert result.metadata["stored"] == "local"
        cases = case_service.list_all()
        assert len(cases) == 1
        assert cases[0].id == result.data
        assert cases[0].id != ""
        assert _without_id(cases[0]) == _without_id(sample_case)

    def test_add_when_refresh_fails(self, case_service, fake_remote, local_store, sample_case):
        """Remote create ok but read_all fails: one local copy with an id"""
        fake_remote.fail_read_all = True

        result = case_service.add(sample_case)

        assert result
        assert result.data == "srv-1"
        local_cases = local_store.get_all()
        assert len(local_cases) == 1
        assert local_cases[0].id != ""

    def test_add_fails_when_both_fail(self, case_service, fake_remote, local_store, sample_case, monkeypatch):
        """With remote down and the mirror broken, add reports failure"""
        from firstaid_core.services.base_service import ErrorKind, ServiceResult

        fake_remote.reachable = False
        monkeypatch.setattr(
            local_store, "save",
            lambda record: ServiceResult.fail("disk full", ErrorKind.LOCAL_STORAGE),
        )

        result = case_service.add(sample_case)

        assert not result
        assert result.kind == ErrorKind.LOCAL_STORAGE


class TestUpdate:
    """Test case edits"""

    def test_update_changes_only_target(self, case_service, fake_remote, local_store, sample_cases):
        """Exactly the edited case changes"""
        for record in sample_cases:
            fake_remote.rows[record.id] = record
        local_store.replace_all(sample_cases)
        edited = sample_cases[1].with_id("c2")
        edited.injury_description = "Sprained ankle"

        result = case_service.update(edited)

        assert result
        by_id = {c.id: c for c in case_service.list_all()}
        assert by_id["c2"].injury_description == "Sprained ankle"
        assert by_id["c1"] == sample_cases[0]
        assert by_id["c3"] == sample_cases[2]

    def test_update_missing_everywhere_fails(self, case_service, sample_case):
        """An id neither store knows fails"""
        from firstaid_core.services.base_service import ErrorKind

        result = case_service.update(sample_case.with_id("ghost"))

        assert not result
        assert result.kind == ErrorKind.NOT_FOUND

    def test_update_requires_id(self, case_service, sample_case):
        """Drafts cannot be updated"""
        from firstaid_core.services.base_service import ErrorKind

        assert case_service.update(sample_case).kind == ErrorKind.VALIDATION

    def test_update_local_only_when_remote_down(self, case_service, fake_remote, local_store, sample_cases):
        """Remote failing, local succeeding: success, and later reads show the edit"""
        local_store.replace_all(sample_cases)
        fake_remote.reachable = False
        edited = sample_cases[0].with_id("c1")
        edited.department = "Logistics"

        result = case_service.update(edited)

        assert result
        assert result.metadata == {"remote": False, "local": True}
        by_id = {c.id: c for c in case_service.list_all()}
        assert by_id["c1"].department == "Logistics"

    def test_sync_gap_notifies_observer(self, case_service, fake_remote, local_store, sample_case):
        """Local-only success is reported to observers"""
        events = []
        case_service.register_observer(lambda event, result: events.append(event))
        local_store.save(sample_case.with_id("l1"))
        fake_remote.reachable = False

        case_service.update(sample_case.with_id("l1"))

        assert "remote_update_failed" in events
        assert "sync_gap" in events


class TestDelete:
    """Test case removal"""

    def test_delete_removes_everywhere(self, case_service, fake_remote, local_store, sample_cases):
        """Deleted cases disappear from both stores"""
        for record in sample_cases:
            fake_remote.rows[record.id] = record
        local_store.replace_all(sample_cases)

        assert case_service.delete("c1")
        assert "c1" not in fake_remote.rows
        assert local_store.get_by_id("c1") is None

    def test_delete_twice_succeeds_via_remote(self, case_service, fake_remote, local_store, sample_case):
        """Remote delete is idempotent, so the service still succeeds"""
        local_store.save(sample_case.with_id("d1"))

        assert case_service.delete("d1")
        assert case_service.delete("d1")
        assert not local_store.delete("d1")

    def test_delete_fails_when_both_fail(self, case_service, fake_remote):
        """Remote down and id unknown locally: failure"""
        fake_remote.reachable = False

        assert not case_service.delete("unknown")

    def test_delete_local_only_when_remote_down(self, case_service, fake_remote, local_store, sample_case):
        """A local-only case can be deleted offline"""
        fake_remote.reachable = False
        local_store.save(sample_case.with_id("offline-1"))

        assert case_service.delete("offline-1")
        assert local_store.count() == 0


class TestObservers:
    """Test observer registration"""

    def test_failing_observer_does_not_break_calls(self, case_service, fake_remote, sample_case):
        """Observer exceptions are logged, not raised"""
        def explode(event, result):
            raise RuntimeError("observer bug")

        case_service.register_observer(explode)
        fake_remote.reachable = False

        assert case_service.add(sample_case)

    def test_unregister(self, case_service, fake_remote, sample_case):
        """Unregistered observers are not called"""
        events = []

        def observer(event, result):
            events.append(event)

        case_service.register_observer(observer)
        case_service.unregister_observer(observer)
        fake_remote.reachable = False
        case_service.add(sample_case)

        assert events == []
