"""
UI feedback utilities for the user administration console.
Provides loading indicators, toast notifications and confirmation prompts.
"""

import streamlit as st
from typing import Optional
from contextlib import contextmanager
import logging

# Configure logging
logger = logging.getLogger(__name__)


class LoadingIndicator:
    """Loading indicator utilities."""

    @staticmethod
    @contextmanager
    def spinner(message: str = "Loading..."):
        """Context manager for spinner loading indicator."""
        with st.spinner(message):
            yield


class Notify:
    """
    Toast-first notification helper.
    Uses st.toast for non-blocking notifications and falls back to inline
    messages if the toast call fails.

    The class itself satisfies the orchestrator's notifier interface:
    RecordManager(schema, store, notifier=Notify)
    """

    _ICONS = {
        'success': '✅',
        'error': '❌'
    }

    @staticmethod
    def _display_notification(message: str, notification_type: str) -> None:
        """Internal method to display notification based on type."""
        icon = Notify._ICONS[notification_type]

        try:
            st.toast(message, icon=icon)
        except Exception as e:
            logger.error(f"Error using st.toast: {e}", exc_info=True)
            full_message = f"{icon} {message}"
            if notification_type == 'success':
                st.success(full_message)
            else:
                st.error(full_message)

    @staticmethod
    def success(message: str) -> None:
        """Show success notification."""
        Notify._display_notification(message, 'success')

    @staticmethod
    def error(message: str) -> None:
        """Show error notification."""
        Notify._display_notification(message, 'error')


class UserFeedback:
    """User feedback utilities."""

    @staticmethod
    def confirmation_dialog(
        title: str,
        message: str,
        confirm_text: str = "Confirm",
        cancel_text: str = "Cancel",
        danger: bool = False,
        disabled: bool = False,
        key: str = "confirm"
    ) -> Optional[bool]:
        """
        Show an inline confirmation prompt.

        Returns:
            True if confirmed, False if cancelled, None while undecided
        """
        with st.container(border=True):
            st.subheader(f"⚠️ {title}" if danger else title)
            st.write(message)

            col1, col2 = st.columns(2)

            with col1:
                cancelled = st.button(cancel_text, key=f"{key}_cancel", disabled=disabled)

            with col2:
                confirmed = st.button(
                    confirm_text,
                    type="primary",
                    key=f"{key}_confirm",
                    disabled=disabled
                )

        if confirmed:
            return True
        elif cancelled:
            return False
        else:
            return None  # No action taken yet
