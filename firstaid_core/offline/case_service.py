# =============================================================================
# firstaid_core/offline/case_service.py
# Reconciling Case Service - Single API for remote/local case operations
# =============================================================================
"""
ReconcilingCaseService - the only entry point the pages use for case data.

Policy: the remote store is authoritative when reachable; the local mirror
is the fallback and the offline cache.

- Reads try remote first and fall back to the mirror
- Every successful remote read-all replaces the mirror wholesale
- Mutations go to remote, then keep the mirror in step (best effort)
- No method raises; results are ServiceResult values or plain values

Usage:
------
from firstaid_core.config import create_case_service

service = create_case_service()
cases = service.list_all()
if not service.add(draft):
    st.error("Could not save the case")
"""

from __future__ import annotations
from typing import Callable, List, Optional

from firstaid_core.data.remote_store import RemoteCaseStore
from firstaid_core.models.case import CaseRecord
from firstaid_core.offline.local_mirror import LocalMirrorStore
from firstaid_core.services.base_service import BaseService, ErrorKind, ServiceResult

# Observer signature: (event name, result that triggered it)
CaseEventObserver = Callable[[str, ServiceResult], None]


class ReconcilingCaseService(BaseService):
    """
    Composes the remote store and the local mirror.

    There is no write queue: a case saved while the remote store is
    unreachable stays local-only.
    """

    def __init__(
        self,
        remote_store: RemoteCaseStore,
        local_store: LocalMirrorStore,
        observers: Optional[List[CaseEventObserver]] = None,
    ):
        super().__init__()
        self._remote = remote_store
        self._local = local_store
        self._observers: List[CaseEventObserver] = list(observers or [])

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def remote_store(self) -> RemoteCaseStore:
        return self._remote

    @property
    def local_store(self) -> LocalMirrorStore:
        return self._local

    @property
    def remote_configured(self) -> bool:
        """Whether a remote client exists at all (not whether it is reachable)."""
        return self._remote.is_connected()

    # =========================================================================
    # OBSERVERS
    # =========================================================================

    def register_observer(self, observer: CaseEventObserver) -> None:
        """Register a callback for store failures and sync-gap conditions."""
        if observer not in self._observers:
            self._observers.append(observer)

    def unregister_observer(self, observer: CaseEventObserver) -> None:
        """Remove a registered callback."""
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self, event: str, result: ServiceResult) -> None:
        for observer in self._observers:
            try:
                observer(event, result)
            except Exception as e:
                self.logger.error(f"Error in case event observer: {e}")

    # =========================================================================
    # MIRROR REFRESH
    # =========================================================================

    def _refresh_mirror(self) -> bool:
        """
        Best-effort refresh: replace the mirror with a fresh remote read.

        Returns:
            True if the remote returned cases and the mirror was replaced
        """
        with self.log_operation("Refreshing local mirror"):
            return self._refresh_from_remote()

    def _refresh_from_remote(self) -> bool:
        remote_cases = self._remote.read_all()
        if not remote_cases:
            self.logger.warning("Could not refresh local mirror: remote returned no cases")
            self._notify("mirror_refresh_failed", ServiceResult.fail(
                "Remote read-all returned no cases", ErrorKind.REMOTE,
            ))
            return False

        replaced = self._local.replace_all(remote_cases)
        if not replaced:
            self._notify("mirror_write_failed", replaced)
            return False
        return True

    # =========================================================================
    # READS
    # =========================================================================

    def list_all(self) -> List[CaseRecord]:
        """
        All cases, most recent incident first.

        A non-empty remote result replaces the mirror and is returned. An
        empty remote result is treated like a failure: the mirror is served
        unchanged, even if that means stale cases.
        """
        remote_cases = self._remote.read_all()
        if remote_cases:
            replaced = self._local.replace_all(remote_cases)
            if not replaced:
                self._notify("mirror_write_failed", replaced)
            self.logger.debug(f"Serving {len(remote_cases)} cases from remote")
            return remote_cases

        local_cases = self._local.get_all()
        self.logger.info(f"Remote returned no cases; serving {len(local_cases)} from local mirror")
        return local_cases

    def get_by_id(self, case_id: str) -> Optional[CaseRecord]:
        """Remote first, then the mirror. None if neither has it."""
        if not case_id:
            return None

        remote = self._remote.read_by_id(case_id)
        if remote and remote.data is not None:
            return remote.data
        if not remote:
            self._notify("remote_read_failed", remote)

        return self._local.get_by_id(case_id)

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def add(self, record: CaseRecord) -> ServiceResult:
        """
        Register a new case.

        Returns:
            Success whenever the remote create succeeded; otherwise the
            result of saving the case to the mirror only
        """
        created = self._remote.create(record)

        if created:
            if not self._refresh_mirror():
                local_copy = record.ensure_id()
                saved = self._local.save(local_copy)
                self.logger.warning(
                    f"Case {created.data} created remotely; mirror may be approximate "
                    f"(saved locally as {local_copy.id})"
                )
                self._notify("mirror_approximate", saved)
            return ServiceResult.ok(created.data, metadata={"stored": "remote"})

        self._notify("remote_create_failed", created)
        local_copy = record.ensure_id()
        saved = self._local.save(local_copy)
        if saved:
            self.logger.warning(
                f"Saved case {local_copy.id} locally due to remote failure. "
                "It will not sync to the remote store."
            )
            return ServiceResult.ok(local_copy.id, metadata={"stored": "local"})

        self.logger.error(f"Case could not be saved remotely or locally: {saved.error}")
        return saved

    def update(self, record: CaseRecord) -> ServiceResult:
        """
        Replace a case by id in both stores.

        Succeeds if either store accepted the update.
        """
        if not record.is_persisted:
            return ServiceResult.fail("Cannot update a case without an id", ErrorKind.VALIDATION)

        remote = self._remote.update(record.id, record)
        # Always keep the fallback copy in step, whatever the remote did
        local = self._local.update(record)

        if remote:
            self._refresh_mirror()
        else:
            self._notify("remote_update_failed", remote)

        return self._combine("update", record.id, remote, local)

    def delete(self, case_id: str) -> ServiceResult:
        """
        Remove a case from both stores.

        The remote store reports success for unknown ids; the mirror does not.
        """
        if not case_id:
            return ServiceResult.fail("Cannot delete a case without an id", ErrorKind.VALIDATION)

        remote = self._remote.delete(case_id)
        local = self._local.delete(case_id)

        if remote:
            self._refresh_mirror()
        else:
            self._notify("remote_delete_failed", remote)

        return self._combine("delete", case_id, remote, local)

    def _combine(
        self,
        operation: str,
        case_id: str,
        remote: ServiceResult,
        local: ServiceResult,
    ) -> ServiceResult:
        if remote:
            self.logger.info(f"Case {case_id} {operation}d remotely")
            return ServiceResult.ok(case_id, metadata={"remote": True, "local": bool(local)})

        if local:
            self.logger.warning(
                f"Case {case_id} {operation}d locally due to remote failure. "
                "Data will not sync to the remote store."
            )
            self._notify("sync_gap", remote)
            return ServiceResult.ok(case_id, metadata={"remote": False, "local": True})

        self.logger.error(
            f"Failed to {operation} case {case_id}: remote={remote.error}; local={local.error}"
        )
        # Report the remote reason unless remote simply didn't know the id
        failure = local if remote.error_code == ErrorKind.NOT_FOUND else remote
        return ServiceResult.fail(
            failure.error or f"{operation} failed",
            failure.error_code or ErrorKind.UNKNOWN,
            metadata={"remote_error": remote.error, "local_error": local.error},
        )
