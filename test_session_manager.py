from datetime import datetime
from unittest.mock import MagicMock

import pytest

import user_admin.session_manager as session_manager
from user_admin.session_manager import SessionManager, run_async

from test_fixtures import mock_streamlit


@pytest.fixture
def st(monkeypatch):
    st = mock_streamlit()
    monkeypatch.setattr(session_manager, "st", st)
    return st


def test_initialize_builds_manager_once(st):
    manager = MagicMock()
    factory = MagicMock(return_value=manager)

    SessionManager.initialize(factory)
    SessionManager.initialize(factory)

    factory.assert_called_once_with()
    assert SessionManager.get_manager() is manager
    assert SessionManager.get_session_id().startswith("session_")
    assert SessionManager.is_collection_loaded() is False


def test_get_manager_before_initialize(st):
    assert SessionManager.get_manager() is None
    assert SessionManager.get_session_id() == "unknown"


def test_mark_collection_loaded(st):
    SessionManager.initialize(MagicMock())

    SessionManager.mark_collection_loaded()

    assert SessionManager.is_collection_loaded() is True


def test_reset_session_resets_manager_and_forces_reload(st):
    manager = MagicMock()
    SessionManager.initialize(lambda: manager)
    SessionManager.mark_collection_loaded()

    SessionManager.reset_session()

    manager.reset.assert_called_once_with()
    assert SessionManager.is_collection_loaded() is False
    assert SessionManager.get_manager() is manager


def test_session_info(st):
    manager = MagicMock()
    manager.store.count = 3
    manager.is_form_open = True
    manager.pending_delete = None
    SessionManager.initialize(lambda: manager)

    info = SessionManager.get_session_info()

    assert info["record_count"] == 3
    assert info["form_open"] is True
    assert info["delete_pending"] is False
    assert info["collection_loaded"] is False
    datetime.fromisoformat(info["last_activity"])


def test_run_async_returns_result_and_updates_activity(st):
    SessionManager.initialize(MagicMock())
    st.session_state.last_activity = datetime(2000, 1, 1)

    async def action():
        return "done"

    assert run_async(action()) == "done"
    assert SessionManager.get_last_activity() > datetime(2000, 1, 1)
