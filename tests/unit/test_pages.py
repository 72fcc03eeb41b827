# =============================================================================
# tests/unit/test_pages.py
# Unit Tests for the Streamlit session defaults and the case log page
# =============================================================================

from pathlib import Path

import pytest

PAGES_DIR = Path(__file__).resolve().parents[2] / "pages"


class TestSessionDefaults:
    """Test seeded session-state keys"""

    def test_filter_widget_keys_not_seeded(self):
        """Widgets with their own defaults must not also be seeded"""
        from firstaid_core.state.session import SESSION_DEFAULTS

        for key in ("search_term", "filter_date", "filter_department"):
            assert key not in SESSION_DEFAULTS


class TestCaseLogPage:
    """Test the dashboard page renders cleanly"""

    def test_renders_without_state_warnings(self, tmp_path, monkeypatch):
        """A local-only run shows no warnings and starts with an empty date filter"""
        from streamlit.testing.v1 import AppTest

        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_KEY", raising=False)
        monkeypatch.setenv("FIRSTAID_LOCAL_DB", str(tmp_path / "cases.db"))
        monkeypatch.setenv("FIRSTAID_LOG_TO_FILE", "false")

        at = AppTest.from_file(str(PAGES_DIR / "02_Case_Log.py"), default_timeout=30)
        at.run()

        assert not at.exception
        assert len(at.warning) == 0
        assert at.date_input(key="filter_date").value is None
