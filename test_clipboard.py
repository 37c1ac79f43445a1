"""
Unit tests for the clipboard helper.
"""

import json
from unittest.mock import patch

from schema_builder.clipboard import build_copy_script, copy_to_clipboard


class TestBuildCopyScript:
    """Test cases for the copy snippet."""

    def test_payload_embedded_as_string_literal(self):
        script = build_copy_script('{"a": "b"}')

        assert json.dumps('{"a": "b"}') in script
        assert "navigator.clipboard.writeText" in script

    def test_closing_tags_escaped(self):
        script = build_copy_script('</script><script>alert(1)</script>')

        body = script.split("<script>", 1)[1].rsplit("</script>", 1)[0]
        assert "</" not in body


class TestCopyToClipboard:
    """Test cases for copy_to_clipboard."""

    @patch('schema_builder.clipboard.Notify')
    @patch('streamlit.components.v1.html')
    def test_success(self, mock_html, mock_notify):
        assert copy_to_clipboard("[]", label="Schema JSON") is True

        mock_html.assert_called_once()
        assert mock_html.call_args[1]['height'] == 0
        mock_notify.success.assert_called_once_with("Schema JSON copied to clipboard")

    @patch('streamlit.error')
    @patch('schema_builder.error_handler.Notify')
    @patch('schema_builder.clipboard.Notify')
    @patch('streamlit.components.v1.html', side_effect=RuntimeError("no browser"))
    def test_failure_is_reported(self, mock_html, mock_notify, mock_error_notify, mock_st_error):
        """Test that a failed copy shows the clipboard error toast instead of raising."""
        assert copy_to_clipboard("[]") is False

        mock_error_notify.error.assert_called_once()
        assert "copy it manually" in mock_error_notify.error.call_args[0][0]
        mock_notify.success.assert_not_called()
        mock_st_error.assert_not_called()
