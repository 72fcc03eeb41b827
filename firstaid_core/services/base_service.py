# =============================================================================
# firstaid_core/services/base_service.py
# Base Service Class and the shared result container
# =============================================================================

from __future__ import annotations
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any

from firstaid_core.logging import get_logger, LogContext
from firstaid_core.errors import (
    FirstAidError,
    CaseValidationError,
    LocalStoreError,
    RemoteStoreError,
)


class ErrorKind(str, Enum):
    """Failure categories carried by a failed ServiceResult."""
    REMOTE = "remote"                  # Remote store unreachable, unconfigured or rejected
    LOCAL_STORAGE = "local_storage"    # Local medium failure (SQLite, bad JSON)
    NOT_FOUND = "not_found"            # Update/delete target missing
    VALIDATION = "validation"          # Precondition violated (blank id, bad form data)
    UNKNOWN = "unknown"


@dataclass
class ServiceResult:
    """
    Standard result container for store and service operations.

    Truthy on success, so callers can write ``if store.update(case): ...``.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[ErrorKind] = None
    metadata: Optional[Dict[str, Any]] = None

    def __bool__(self) -> bool:
        return self.success

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error_code

    @classmethod
    def ok(cls, data: Any = None, metadata: Dict[str, Any] = None) -> ServiceResult:
        """Create a successful result"""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(
        cls,
        error: str,
        error_code: ErrorKind = ErrorKind.UNKNOWN,
        metadata: Dict[str, Any] = None
    ) -> ServiceResult:
        """Create a failed result"""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata,
        )

    @classmethod
    def from_exception(
        cls,
        e: Exception,
        error_code: Optional[ErrorKind] = None,
    ) -> ServiceResult:
        """Create a failed result from an exception"""
        if error_code is None:
            if isinstance(e, RemoteStoreError):
                error_code = ErrorKind.REMOTE
            elif isinstance(e, LocalStoreError):
                error_code = ErrorKind.LOCAL_STORAGE
            elif isinstance(e, CaseValidationError):
                error_code = ErrorKind.VALIDATION
            else:
                error_code = ErrorKind.UNKNOWN
        if isinstance(e, FirstAidError):
            return cls(
                success=False,
                error=e.message,
                error_code=error_code,
                metadata=e.details,
            )
        return cls(
            success=False,
            error=str(e),
            error_code=error_code,
            metadata={"exception": e.__class__.__name__},
        )


class BaseService(ABC):
    """
    Abstract base class for services.

    Provides a class-named logger and timed logging contexts.

    Usage:
        class MyService(BaseService):
            def do_something(self) -> ServiceResult:
                with self.log_operation("Doing something"):
                    result = ...
                    return ServiceResult.ok(result)
    """

    def __init__(self):
        self.logger = get_logger(f"firstaid_core.{self.__class__.__name__}")

    def log_operation(self, operation: str) -> LogContext:
        """
        Create a logging context for an operation.

        Usage:
            with self.log_operation("Refreshing mirror"):
                ...
        """
        return LogContext(self.logger, operation)
