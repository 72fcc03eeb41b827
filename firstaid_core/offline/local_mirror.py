# =============================================================================
# firstaid_core/offline/local_mirror.py
# Local SQLite Mirror of the case collection
# =============================================================================
"""
LocalMirrorStore - on-device copy of every case record.

Features:
- One JSON array stored under one fixed key of a SQLite key/value table
- Full read-modify-write on every operation (the collection is small)
- Re-entrant lock around each cycle, one connection per thread
- Failures come back as ServiceResult values, never as exceptions
"""

from __future__ import annotations
import json
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from firstaid_core.errors import LocalStoreError
from firstaid_core.logging import get_logger
from firstaid_core.models.case import CaseRecord, sort_by_event_desc
from firstaid_core.services.base_service import ErrorKind, ServiceResult

logger = get_logger(__name__)

# Exceptions that mean the local medium could not be used
STORAGE_ERRORS = (sqlite3.Error, LocalStoreError, ValueError, TypeError, OSError)


class LocalMirrorStore:
    """
    Local SQLite store holding the full case set as one serialized array.

    Used as the offline fallback and as the mirror of the remote store.
    """

    DEFAULT_DB_PATH = Path("local_data") / "first_aid.db"
    DEFAULT_STORAGE_KEY = "first_aid_cases"

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """

    def __init__(
        self,
        db_path: Optional[Union[str, Path]] = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
    ):
        """
        Initialize the mirror.

        Args:
            db_path: Path to SQLite database file
            storage_key: Key the case array is stored under
        """
        self.db_path = Path(db_path) if db_path else self.DEFAULT_DB_PATH
        self.storage_key = storage_key
        self._local = threading.local()
        self._lock = threading.RLock()
        self._initialized = False

    # =========================================================================
    # CONNECTION MANAGEMENT
    # =========================================================================

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._local.connection = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
            )
            self._local.connection.row_factory = sqlite3.Row
        return self._local.connection

    @contextmanager
    def transaction(self):
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def initialize(self) -> None:
        """Create the key/value table and seed an empty array under the storage key."""
        if self._initialized:
            return

        with self._lock:
            with self.transaction() as conn:
                conn.execute(self.SCHEMA)
                conn.execute(
                    "INSERT OR IGNORE INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)",
                    [self.storage_key, "[]", datetime.now().isoformat()],
                )
            self._initialized = True
        logger.info(f"Local mirror initialized at: {self.db_path}")

    def close(self) -> None:
        """Close this thread's database connection."""
        if getattr(self._local, "connection", None) is not None:
            self._local.connection.close()
            self._local.connection = None

    # =========================================================================
    # RAW ARRAY ACCESS
    # =========================================================================

    def _load_documents(self) -> List[Dict[str, Any]]:
        self.initialize()
        row = self._get_connection().execute(
            "SELECT value FROM kv_store WHERE key = ?",
            [self.storage_key],
        ).fetchone()
        if row is None or row["value"] is None:
            return []

        documents = json.loads(row["value"])
        if not isinstance(documents, list):
            raise LocalStoreError(
                "Stored case collection is not a list",
                operation="load",
                db_path=str(self.db_path),
            )
        return [doc for doc in documents if isinstance(doc, dict)]

    def _write_documents(self, documents: List[Dict[str, Any]]) -> None:
        self.initialize()
        with self.transaction() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)",
                [self.storage_key, json.dumps(documents), datetime.now().isoformat()],
            )

    def _read_modify_write(
        self,
        operation: str,
        change: Callable[[List[Dict[str, Any]]], ServiceResult],
    ) -> ServiceResult:
        """Reload the array, apply ``change`` and write back only if it succeeded."""
        with self._lock:
            try:
                documents = self._load_documents()
                result = change(documents)
                if result:
                    self._write_documents(documents)
                return result
            except STORAGE_ERRORS as e:
                logger.error(f"Local mirror {operation} failed: {e}")
                return ServiceResult.fail(
                    f"Local {operation} failed: {e}",
                    ErrorKind.LOCAL_STORAGE,
                    metadata={"operation": operation, "db_path": str(self.db_path)},
                )

    @staticmethod
    def _index_of(documents: List[Dict[str, Any]], case_id: str) -> int:
        for index, document in enumerate(documents):
            if str(document.get("id", "")) == case_id:
                return index
        return -1

    # =========================================================================
    # CASE OPERATIONS
    # =========================================================================

    def replace_all(self, records: List[CaseRecord]) -> ServiceResult:
        """
        Overwrite the whole collection, discarding what was there.

        Never raises; a medium failure is logged and returned as a failed result.
        """
        with self._lock:
            try:
                self._write_documents([record.to_dict() for record in records])
            except STORAGE_ERRORS as e:
                logger.error(f"Failed to replace local cases: {e}")
                return ServiceResult.fail(
                    f"Local replace failed: {e}",
                    ErrorKind.LOCAL_STORAGE,
                    metadata={"operation": "replace_all", "db_path": str(self.db_path)},
                )
        logger.debug(f"Local mirror replaced with {len(records)} cases")
        return ServiceResult.ok(len(records))

    def save(self, record: CaseRecord) -> ServiceResult:
        """Append one record. The record must already carry an id."""
        if not record.is_persisted:
            return ServiceResult.fail("Cannot store a case without an id", ErrorKind.VALIDATION)

        def append(documents: List[Dict[str, Any]]) -> ServiceResult:
            documents.append(record.to_dict())
            return ServiceResult.ok(record.id)

        return self._read_modify_write("save", append)

    def get_all(self) -> List[CaseRecord]:
        """All records, most recent incident first. Empty list if the medium fails."""
        with self._lock:
            try:
                documents = self._load_documents()
            except STORAGE_ERRORS as e:
                logger.error(f"Failed to read local cases: {e}")
                return []
        records = [CaseRecord.from_dict(doc) for doc in documents]
        try:
            return sort_by_event_desc(records)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to sort local cases, returning stored order: {e}")
            return records

    def get_by_id(self, case_id: str) -> Optional[CaseRecord]:
        """First record with the given id, or None."""
        with self._lock:
            try:
                documents = self._load_documents()
            except STORAGE_ERRORS as e:
                logger.error(f"Failed to read local case {case_id}: {e}")
                return None
        index = self._index_of(documents, case_id)
        return CaseRecord.from_dict(documents[index]) if index >= 0 else None

    def update(self, record: CaseRecord) -> ServiceResult:
        """Replace the record with the same id in place. Not an upsert."""
        def replace_in_place(documents: List[Dict[str, Any]]) -> ServiceResult:
            index = self._index_of(documents, record.id) if record.id else -1
            if index < 0:
                return ServiceResult.fail(f"Case {record.id!r} not found locally", ErrorKind.NOT_FOUND)
            documents[index] = record.to_dict()
            return ServiceResult.ok(record.id)

        return self._read_modify_write("update", replace_in_place)

    def delete(self, case_id: str) -> ServiceResult:
        """Remove the first record with the given id."""
        def remove(documents: List[Dict[str, Any]]) -> ServiceResult:
            index = self._index_of(documents, case_id) if case_id else -1
            if index < 0:
                return ServiceResult.fail(f"Case {case_id!r} not found locally", ErrorKind.NOT_FOUND)
            del documents[index]
            return ServiceResult.ok(case_id)

        return self._read_modify_write("delete", remove)

    # =========================================================================
    # DIAGNOSTICS
    # =========================================================================

    def count(self) -> int:
        """Number of stored records (0 if the medium fails)."""
        with self._lock:
            try:
                return len(self._load_documents())
            except STORAGE_ERRORS as e:
                logger.error(f"Failed to count local cases: {e}")
                return 0

    def clear(self) -> ServiceResult:
        """Empty the collection."""
        return self.replace_all([])
