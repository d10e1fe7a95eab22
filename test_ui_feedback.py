"""
Unit tests for ui_feedback module.
"""

from unittest.mock import patch, MagicMock

from user_admin.ui_feedback import LoadingIndicator, Notify, UserFeedback


class TestLoadingIndicator:
    """Test class for loading indicators."""

    @patch('streamlit.spinner')
    def test_spinner_context_manager(self, mock_spinner):
        """Test spinner context manager."""
        mock_context = MagicMock()
        mock_spinner.return_value = mock_context

        with LoadingIndicator.spinner("Loading users..."):
            pass

        mock_spinner.assert_called_once_with("Loading users...")
        mock_context.__enter__.assert_called_once()
        mock_context.__exit__.assert_called_once()


class TestNotify:
    """Test class for toast notifications."""

    @patch('streamlit.toast')
    def test_success_toast(self, mock_toast):
        Notify.success("User created successfully!")

        mock_toast.assert_called_once_with("User created successfully!", icon='✅')

    @patch('streamlit.toast')
    def test_error_toast(self, mock_toast):
        Notify.error("An error occurred. Please try again.")

        mock_toast.assert_called_once_with("An error occurred. Please try again.", icon='❌')

    @patch('streamlit.toast')
    def test_only_success_and_error_kinds(self, mock_toast):
        Notify.success("Saved")
        Notify.error("Failed")

        icons = [c.kwargs['icon'] for c in mock_toast.call_args_list]
        assert icons == ['✅', '❌']
        assert not hasattr(Notify, 'info')

    @patch('streamlit.error')
    @patch('streamlit.toast', side_effect=RuntimeError("no toast"))
    def test_falls_back_to_inline_message(self, mock_toast, mock_error):
        Notify.error("Failed to delete user. Please try again.")

        mock_error.assert_called_once_with("❌ Failed to delete user. Please try again.")

    @patch('streamlit.success')
    @patch('streamlit.toast', side_effect=RuntimeError("no toast"))
    def test_success_fallback(self, mock_toast, mock_success):
        Notify.success("Saved")

        mock_success.assert_called_once_with("✅ Saved")


class TestUserFeedback:
    """Test class for the confirmation prompt."""

    def _patch_layout(self, mock_container, mock_columns):
        mock_container.return_value = MagicMock()
        mock_columns.return_value = (MagicMock(), MagicMock())

    @patch('streamlit.button')
    @patch('streamlit.write')
    @patch('streamlit.subheader')
    @patch('streamlit.columns')
    @patch('streamlit.container')
    def test_undecided(self, mock_container, mock_columns, mock_subheader, mock_write, mock_button):
        self._patch_layout(mock_container, mock_columns)
        mock_button.return_value = False

        result = UserFeedback.confirmation_dialog("Delete User", "Are you sure?", danger=True, key="delete_record")

        assert result is None
        mock_subheader.assert_called_once_with("⚠️ Delete User")
        mock_write.assert_called_once_with("Are you sure?")
        keys = [c.kwargs['key'] for c in mock_button.call_args_list]
        assert keys == ["delete_record_cancel", "delete_record_confirm"]

    @patch('streamlit.button')
    @patch('streamlit.write')
    @patch('streamlit.subheader')
    @patch('streamlit.columns')
    @patch('streamlit.container')
    def test_confirmed(self, mock_container, mock_columns, mock_subheader, mock_write, mock_button):
        self._patch_layout(mock_container, mock_columns)
        mock_button.side_effect = [False, True]

        assert UserFeedback.confirmation_dialog("Delete", "Sure?") is True

    @patch('streamlit.button')
    @patch('streamlit.write')
    @patch('streamlit.subheader')
    @patch('streamlit.columns')
    @patch('streamlit.container')
    def test_cancelled(self, mock_container, mock_columns, mock_subheader, mock_write, mock_button):
        self._patch_layout(mock_container, mock_columns)
        mock_button.side_effect = [True, False]

        assert UserFeedback.confirmation_dialog("Delete", "Sure?") is False

    @patch('streamlit.button')
    @patch('streamlit.write')
    @patch('streamlit.subheader')
    @patch('streamlit.columns')
    @patch('streamlit.container')
    def test_disabled_buttons(self, mock_container, mock_columns, mock_subheader, mock_write, mock_button):
        self._patch_layout(mock_container, mock_columns)
        mock_button.return_value = False

        UserFeedback.confirmation_dialog("Delete", "Sure?", disabled=True)

        assert all(c.kwargs['disabled'] for c in mock_button.call_args_list)
