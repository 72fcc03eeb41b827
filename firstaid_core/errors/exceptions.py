# =============================================================================
# firstaid_core/errors/exceptions.py
# Custom Exception Hierarchy for the First-Aid Case Log
# =============================================================================

from typing import Optional, Dict, Any, List


class FirstAidError(Exception):
    """
    Base exception for all First-Aid Case Log errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "CASE_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "FA_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# CASE RECORD EXCEPTIONS
# =============================================================================

class CaseValidationError(FirstAidError):
    """Raised when a case record fails validation checks"""

    def __init__(
        self,
        message: str,
        problems: Optional[List[str]] = None,
        case_id: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if problems:
            details["problems"] = problems
        if case_id:
            details["case_id"] = case_id

        super().__init__(
            message=message,
            code="CASE_001",
            details=details,
            **kwargs,
        )
        self.problems = problems or []


# =============================================================================
# STORAGE EXCEPTIONS
# =============================================================================

class RemoteStoreError(FirstAidError):
    """Raised when the remote case store is unreachable or rejects a call"""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        table: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table

        super().__init__(
            message=message,
            code="STORE_001",
            details=details,
            **kwargs,
        )


class LocalStoreError(FirstAidError):
    """Raised when the local mirror cannot be read or written"""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        db_path: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if operation:
            details["operation"] = operation
        if db_path:
            details["db_path"] = db_path

        super().__init__(
            message=message,
            code="STORE_002",
            details=details,
            **kwargs,
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(FirstAidError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
