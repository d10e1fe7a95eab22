"""
Session state management for the Streamlit user administration console.
Keeps the per-browser-session orchestrator alive across script reruns.
"""

import asyncio
import streamlit as st
from typing import Any, Callable, Coroutine, Dict, Optional, TypeVar
from datetime import datetime
import logging

from .orchestrator import RecordManager

logger = logging.getLogger(__name__)

T = TypeVar('T')


class SessionManager:
    """Manages Streamlit session state for the console."""

    @staticmethod
    def initialize(manager_factory: Callable[[], RecordManager]):
        """
        Initialize session state variables with default values.

        Existing keys are left untouched, so calling this on every rerun is safe.

        Args:
            manager_factory: Builds the RecordManager for a new session
        """
        defaults = {
            'session_id': None,
            'last_activity': datetime.now(),
            'collection_loaded': False,
        }

        for key, default_value in defaults.items():
            if key not in st.session_state:
                st.session_state[key] = default_value

        if 'record_manager' not in st.session_state:
            st.session_state['record_manager'] = manager_factory()

        # Generate session ID if not exists
        if not st.session_state.session_id:
            st.session_state.session_id = f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
            logger.info(f"Session initialized: {st.session_state.session_id}")

    @staticmethod
    def get_manager() -> Optional[RecordManager]:
        """Get the session's record manager."""
        return st.session_state.get('record_manager')

    @staticmethod
    def is_collection_loaded() -> bool:
        return st.session_state.get('collection_loaded', False)

    @staticmethod
    def mark_collection_loaded():
        st.session_state.collection_loaded = True

    @staticmethod
    def update_activity():
        """Update last activity timestamp."""
        st.session_state.last_activity = datetime.now()

    @staticmethod
    def get_last_activity() -> datetime:
        """Get last activity timestamp."""
        return st.session_state.get('last_activity', datetime.now())

    @staticmethod
    def get_session_id() -> str:
        """Get the session ID."""
        return st.session_state.get('session_id', 'unknown')

    @staticmethod
    def reset_session():
        """
        Reset the session: close surfaces, drop the loaded collection and
        force a reload. Calls still in flight cannot touch the fresh state.
        """
        logger.info(f"Resetting session: {SessionManager.get_session_id()}")

        manager = SessionManager.get_manager()
        if manager is not None:
            manager.reset()

        st.session_state.collection_loaded = False
        SessionManager.update_activity()

    @staticmethod
    def get_session_info() -> Dict[str, Any]:
        """Get session information for debugging."""
        manager = SessionManager.get_manager()
        return {
            'session_id': SessionManager.get_session_id(),
            'last_activity': SessionManager.get_last_activity().isoformat(),
            'collection_loaded': SessionManager.is_collection_loaded(),
            'record_count': manager.store.count if manager else 0,
            'form_open': manager.is_form_open if manager else False,
            'delete_pending': bool(manager and manager.pending_delete)
        }


def run_async(action: Coroutine[Any, Any, T]) -> T:
    """
    Run a manager coroutine to completion from a Streamlit callback.

    Streamlit executes the script synchronously, so each UI action gets
    its own short-lived event loop.
    """
    SessionManager.update_activity()
    return asyncio.run(action)
