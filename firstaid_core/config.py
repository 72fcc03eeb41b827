# =============================================================================
# firstaid_core/config.py
# Application Settings and service wiring
# =============================================================================
"""
Settings are read from Streamlit secrets first, then from the environment.

Expected secrets.toml format:
    [supabase]
    url = "https://your-project.supabase.co"
    key = "your-anon-key"
    table = "first_aid_cases"        # optional

    [app]
    local_db_path = "local_data/first_aid.db"   # optional
    log_level = "INFO"                          # optional
    log_to_file = true                          # optional

Environment fallbacks: SUPABASE_URL, SUPABASE_KEY, FIRSTAID_CASES_TABLE,
FIRSTAID_LOCAL_DB, FIRSTAID_LOG_LEVEL, FIRSTAID_LOG_TO_FILE.
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, TYPE_CHECKING

from dotenv import load_dotenv

from firstaid_core.errors import ConfigurationError
from firstaid_core.logging import get_logger

if TYPE_CHECKING:
    from firstaid_core.offline.case_service import ReconcilingCaseService

logger = get_logger(__name__)


@dataclass
class AppSettings:
    """Runtime configuration for the case log."""
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    cases_table: str = "first_aid_cases"
    local_db_path: Path = Path("local_data") / "first_aid.db"
    storage_key: str = "first_aid_cases"
    log_level: str = "INFO"
    log_to_file: bool = True

    @property
    def remote_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def log_level_value(self) -> int:
        value = logging.getLevelName(str(self.log_level).upper())
        if not isinstance(value, int):
            raise ConfigurationError(
                f"Unknown log level: {self.log_level}",
                config_key="log_level",
                expected_type="DEBUG|INFO|WARNING|ERROR|CRITICAL",
            )
        return value


def _read_streamlit_secrets() -> Dict[str, Dict[str, Any]]:
    """Return the [supabase] and [app] secrets sections, or {} outside Streamlit."""
    try:
        import streamlit as st

        return {
            section: dict(st.secrets[section])
            for section in ("supabase", "app")
            if section in st.secrets
        }
    except Exception as e:
        # No secrets.toml, or not running under Streamlit
        logger.debug(f"Streamlit secrets not available: {e}")
        return {}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def load_settings(
    secrets: Optional[Mapping[str, Mapping[str, Any]]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppSettings:
    """
    Build AppSettings from secrets and environment.

    Args:
        secrets: Secrets sections (defaults to st.secrets)
        environ: Environment mapping (defaults to os.environ after loading .env)

    Returns:
        AppSettings; missing Supabase credentials leave the app local-only
    """
    if environ is None:
        load_dotenv()
        environ = os.environ
    if secrets is None:
        secrets = _read_streamlit_secrets()

    supabase = dict(secrets.get("supabase", {}))
    app = dict(secrets.get("app", {}))
    defaults = AppSettings()

    settings = AppSettings(
        supabase_url=supabase.get("url") or environ.get("SUPABASE_URL") or None,
        supabase_key=supabase.get("key") or environ.get("SUPABASE_KEY") or None,
        cases_table=supabase.get("table") or environ.get("FIRSTAID_CASES_TABLE") or defaults.cases_table,
        local_db_path=Path(app.get("local_db_path") or environ.get("FIRSTAID_LOCAL_DB") or defaults.local_db_path),
        storage_key=app.get("storage_key") or defaults.storage_key,
        log_level=str(app.get("log_level") or environ.get("FIRSTAID_LOG_LEVEL") or defaults.log_level).upper(),
        log_to_file=_as_bool(app.get("log_to_file", environ.get("FIRSTAID_LOG_TO_FILE", defaults.log_to_file))),
    )
    # Fail fast on a bad level
    settings.log_level = logging.getLevelName(settings.log_level_value)
    return settings


def create_case_service(settings: Optional[AppSettings] = None) -> ReconcilingCaseService:
    """
    Wire the single ReconcilingCaseService for this process.

    Builds the Supabase client (None when unconfigured), both stores and the
    service. Call once at startup and share the instance.
    """
    from firstaid_core.data.remote_store import SupabaseCaseStore
    from firstaid_core.data.supabase_client import create_supabase_client
    from firstaid_core.offline.case_service import ReconcilingCaseService
    from firstaid_core.offline.local_mirror import LocalMirrorStore

    settings = settings or load_settings()

    local_store = LocalMirrorStore(settings.local_db_path, storage_key=settings.storage_key)
    local_store.initialize()
    remote_store = SupabaseCaseStore(create_supabase_client(settings), settings.cases_table)

    return ReconcilingCaseService(remote_store, local_store)
