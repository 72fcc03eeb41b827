# =============================================================================
# firstaid_core/services/__init__.py
# Service Layer for the First-Aid Case Log
# =============================================================================

from .base_service import BaseService, ServiceResult, ErrorKind

__all__ = [
    "BaseService",
    "ServiceResult",
    "ErrorKind",
]
