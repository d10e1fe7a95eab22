"""
Error handling utilities for the user administration console.
Maps exceptions to user-friendly messages and displays them.
"""

import streamlit as st
import logging
from typing import Optional

from .exceptions import UserAdminError

logger = logging.getLogger(__name__)


class ErrorType:
    """Error type constants."""
    CONFIGURATION = "configuration"
    SYSTEM = "system"


class ErrorHandler:
    """Error handling for the console."""

    @staticmethod
    def handle_error(
        error: Exception,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        show_details: bool = False
    ) -> None:
        """
        Handle errors with user-friendly messages.

        Args:
            error: The exception that occurred
            context: Context where the error occurred
            error_type: Type of error (from ErrorType constants)
            user_message: Custom user-friendly message
            show_details: Whether to show technical details
        """
        logger.error(f"Error in {context}: {str(error)}", exc_info=True)

        if not user_message:
            user_message = ErrorHandler.get_user_friendly_message(error, error_type)

        ErrorHandler._display_error(user_message, error, context, show_details)

    @staticmethod
    def get_user_friendly_message(error: Exception, error_type: str) -> str:
        """Generate user-friendly error messages based on error type."""
        # Our own errors already carry a user-facing message
        if isinstance(error, UserAdminError):
            return f"⚠️ {error.message}"

        error_messages = {
            ErrorType.CONFIGURATION: {
                ValueError: "⚙️ Invalid configuration value. Please check the api section of config.yaml.",
                "default": "⚙️ Configuration error. Please check config.yaml."
            },

            ErrorType.SYSTEM: {
                ImportError: "💻 Required system component is missing. Please contact support.",
                "default": "💻 System error occurred. Please try again or contact support."
            }
        }

        error_type_messages = error_messages.get(error_type, error_messages[ErrorType.SYSTEM])

        for exception_type, message in error_type_messages.items():
            if exception_type != "default" and isinstance(error, exception_type):
                return message

        return error_type_messages.get("default", "An unexpected error occurred.")

    @staticmethod
    def _display_error(
        user_message: str,
        error: Exception,
        context: str,
        show_details: bool = False
    ) -> None:
        """Display error message to user."""
        st.error(user_message)

        if show_details:
            with st.expander("🔍 Technical Details"):
                st.write(f"**Error Type:** {type(error).__name__}")
                st.write(f"**Context:** {context}")
                st.write(f"**Error Message:** {str(error)}")
                if isinstance(error, UserAdminError):
                    for suggestion in error.recovery_suggestions:
                        st.write(f"• {suggestion}")
