# =============================================================================
# firstaid_core/data/remote_store.py
# Remote Case Store - contract and Supabase implementation
# =============================================================================
"""
Remote case collection.

Rows in the Supabase table look like::

    id          text primary key (generated by the server)
    data        jsonb            (camelCase case document, without id)
    created_at  timestamptz

Every call may fail independently. Failures are logged and returned as
ServiceResult values of kind REMOTE; nothing here raises to the caller.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from firstaid_core.errors import RemoteStoreError
from firstaid_core.logging import get_logger
from firstaid_core.models.case import CaseRecord, sort_by_event_desc
from firstaid_core.services.base_service import ErrorKind, ServiceResult

logger = get_logger(__name__)


class RemoteCaseStore(ABC):
    """Abstract contract for the authoritative case collection."""

    @abstractmethod
    def create(self, record: CaseRecord) -> ServiceResult:
        """Insert a record; the new server-assigned id is the result data."""

    @abstractmethod
    def read_all(self) -> List[CaseRecord]:
        """Every record, most recent first. Empty on failure."""

    @abstractmethod
    def read_by_id(self, case_id: str) -> ServiceResult:
        """Result data is the record, or None when it does not exist."""

    @abstractmethod
    def update(self, case_id: str, record: CaseRecord) -> ServiceResult:
        """Replace the stored document for ``case_id``."""

    @abstractmethod
    def delete(self, case_id: str) -> ServiceResult:
        """Remove ``case_id``. Succeeds even when the id does not exist."""

    def is_connected(self) -> bool:
        return True


class SupabaseCaseStore(RemoteCaseStore):
    """
    Supabase-backed case collection.

    Usage:
        store = SupabaseCaseStore(create_supabase_client(settings), "first_aid_cases")
        result = store.create(case)
        if result:
            print(result.data)  # new id
    """

    BATCH_SIZE = 1000  # Supabase returns at most 1000 rows per request

    def __init__(self, client: Any, table_name: str = "first_aid_cases"):
        """
        Args:
            client: supabase.Client, or None when not configured
            table_name: Name of the Supabase table
        """
        self.client = client
        self.table_name = table_name

    def is_connected(self) -> bool:
        """Check if Supabase client is available."""
        return self.client is not None

    def _table(self, operation: str):
        if self.client is None:
            raise RemoteStoreError(
                "Remote store not configured",
                operation=operation,
                table=self.table_name,
            )
        return self.client.table(self.table_name)

    def _failure(self, operation: str, error: Exception) -> ServiceResult:
        logger.warning(f"Remote {operation} on {self.table_name} failed: {error}")
        return ServiceResult.from_exception(error, ErrorKind.REMOTE)

    @staticmethod
    def _row_to_case(row: Dict[str, Any]) -> CaseRecord:
        return CaseRecord.from_dict(row.get("data") or {}, record_id=row.get("id"))

    # =========================================================================
    # CRUD
    # =========================================================================

    def create(self, record: CaseRecord) -> ServiceResult:
        try:
            response = (
                self._table("create")
                .insert({"data": record.to_dict(include_id=False)})
                .execute()
            )
            rows = response.data or []
            if not rows or not rows[0].get("id"):
                raise RemoteStoreError(
                    "Insert returned no id",
                    operation="create",
                    table=self.table_name,
                )
            new_id = str(rows[0]["id"])
            logger.info(f"Remote case created with id {new_id}")
            return ServiceResult.ok(new_id)
        except Exception as e:
            return self._failure("create", e)

    def read_all(self) -> List[CaseRecord]:
        """
        Fetch ALL rows, paging past the 1000-row response limit.

        Returns:
            Records sorted most recent first, or [] on any failure
        """
        try:
            all_rows: List[Dict[str, Any]] = []
            offset = 0

            while True:
                response = (
                    self._table("read_all")
                    .select("*")
                    .order("created_at")
                    .order("id")  # created_at is not unique; keeps pages disjoint
                    .range(offset, offset + self.BATCH_SIZE - 1)
                    .execute()
                )
                batch = response.data or []
                all_rows.extend(batch)
                # Fewer than a full batch means we've reached the end
                if len(batch) < self.BATCH_SIZE:
                    break
                offset += self.BATCH_SIZE

            logger.debug(f"Fetched {len(all_rows)} cases from {self.table_name}")
            return sort_by_event_desc(self._row_to_case(row) for row in all_rows)
        except Exception as e:
            self._failure("read_all", e)
            return []

    def read_by_id(self, case_id: str) -> ServiceResult:
        try:
            response = (
                self._table("read_by_id")
                .select("*")
                .eq("id", case_id)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            return ServiceResult.ok(self._row_to_case(rows[0]) if rows else None)
        except Exception as e:
            return self._failure("read_by_id", e)

    def update(self, case_id: str, record: CaseRecord) -> ServiceResult:
        try:
            response = (
                self._table("update")
                .update({"data": record.to_dict(include_id=False)})
                .eq("id", case_id)
                .execute()
            )
            if not response.data:
                return ServiceResult.fail(
                    f"Case {case_id!r} not found remotely",
                    ErrorKind.NOT_FOUND,
                )
            logger.info(f"Remote case {case_id} updated")
            return ServiceResult.ok(case_id)
        except Exception as e:
            return self._failure("update", e)

    def delete(self, case_id: str) -> ServiceResult:
        try:
            self._table("delete").delete().eq("id", case_id).execute()
            logger.info(f"Remote case {case_id} deleted")
            return ServiceResult.ok(case_id)
        except Exception as e:
            return self._failure("delete", e)
