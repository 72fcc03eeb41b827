# =============================================================================
# firstaid_core/offline/__init__.py
# Remote-first persistence with a local fallback mirror
# =============================================================================
"""
Offline Fallback Module

┌──────────────────────────────────────────────┐
│          ReconcilingCaseService              │
│     (Single API - pages use this only)       │
└──────────────────────────────────────────────┘
             │                     │
             ▼                     ▼
   ┌──────────────────┐   ┌──────────────────┐
   │ SupabaseCaseStore│   │ LocalMirrorStore │
   │ (Remote, primary)│   │ (SQLite, mirror) │
   └──────────────────┘   └──────────────────┘

Usage:
------
from firstaid_core.config import create_case_service

service = create_case_service()
cases = service.list_all()       # remote if it has data, else the mirror
service.add(draft)               # remote create, local save on failure
"""

from firstaid_core.offline.local_mirror import LocalMirrorStore
from firstaid_core.offline.case_service import (
    ReconcilingCaseService,
    CaseEventObserver,
)

__all__ = [
    "LocalMirrorStore",
    "ReconcilingCaseService",
    "CaseEventObserver",
]
