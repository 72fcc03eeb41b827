# =============================================================================
# firstaid_core/errors/__init__.py
# Centralized Error Handling for the First-Aid Case Log
# =============================================================================

from .exceptions import (
    FirstAidError,
    CaseValidationError,
    RemoteStoreError,
    LocalStoreError,
    ConfigurationError,
)

__all__ = [
    "FirstAidError",
    "CaseValidationError",
    "RemoteStoreError",
    "LocalStoreError",
    "ConfigurationError",
]
