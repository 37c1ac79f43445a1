"""
Unit tests for ui_feedback module.
"""

from unittest.mock import patch, MagicMock
import pytest

from schema_builder.ui_feedback import (
    LoadingIndicator,
    Notify,
    notify_blank_schema_name,
    notify_schema_created,
    notify_schema_deleted,
    notify_workspace_not_restored,
    show_loading,
)


class TestLoadingIndicator:
    """Test class for loading indicators."""

    @patch('streamlit.spinner')
    def test_spinner_context_manager(self, mock_spinner):
        """Test spinner context manager."""
        mock_context = MagicMock()
        mock_spinner.return_value = mock_context

        with LoadingIndicator.spinner("Loading..."):
            pass

        mock_spinner.assert_called_once_with("Loading...")
        mock_context.__enter__.assert_called_once()
        mock_context.__exit__.assert_called_once()

    @patch('streamlit.spinner')
    def test_show_loading(self, mock_spinner):
        with show_loading("Loading workspace..."):
            pass

        mock_spinner.assert_called_once_with("Loading workspace...")


class TestNotify:
    """Test class for toast notifications."""

    @pytest.mark.parametrize("method,icon", [
        (Notify.success, '✅'),
        (Notify.info, 'ℹ️'),
        (Notify.warn, '⚠️'),
        (Notify.error, '❌'),
    ])
    @patch('streamlit.toast')
    def test_toast_with_icon(self, mock_toast, method, icon):
        method("Schema saved")

        mock_toast.assert_called_once_with("Schema saved", icon=icon)

    @patch('streamlit.success')
    @patch('streamlit.toast', side_effect=RuntimeError("toast unavailable"))
    def test_falls_back_to_inline_message(self, mock_toast, mock_success):
        """Test that a failing toast is replaced by an inline message."""
        Notify.success("JSON copied to clipboard")

        mock_success.assert_called_once_with("✅ JSON copied to clipboard")

    @patch('streamlit.error')
    @patch('streamlit.toast', side_effect=RuntimeError("toast unavailable"))
    def test_unknown_type_shown_as_info(self, mock_toast, mock_error):
        with patch('streamlit.info') as mock_info:
            Notify._display_notification("Heads up", 'critical')

        mock_info.assert_called_once_with("ℹ️ Heads up")
        mock_error.assert_not_called()

    @patch('streamlit.toast')
    def test_once_shows_only_first_time(self, mock_toast):
        state = {}
        with patch('streamlit.session_state', state):
            assert Notify.once("Workspace restored", key="restored") is True
            assert Notify.once("Workspace restored", key="restored") is False

        mock_toast.assert_called_once()
        assert state["_notified_restored"] is True


class TestSchemaNotifications:
    """Test class for the schema action messages."""

    @patch('streamlit.toast')
    def test_created_and_deleted(self, mock_toast):
        notify_schema_created("Users")
        notify_schema_deleted("Orders")

        messages = [call[0][0] for call in mock_toast.call_args_list]
        assert messages == ["Created schema 'Users'", "Deleted schema 'Orders'"]

    @patch('streamlit.toast')
    def test_blank_name_is_a_warning(self, mock_toast):
        notify_blank_schema_name()

        mock_toast.assert_called_once_with("Schema name cannot be empty", icon='⚠️')

    @patch('streamlit.toast')
    def test_workspace_not_restored_shown_once(self, mock_toast):
        with patch('streamlit.session_state', {}):
            assert notify_workspace_not_restored("Saved schemas could not be restored") is True
            assert notify_workspace_not_restored("Saved schemas could not be restored") is False

        mock_toast.assert_called_once_with("Saved schemas could not be restored", icon='⚠️')
