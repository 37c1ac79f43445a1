"""
Error handling utilities for the schema builder.

Errors raised while a view renders are shown inline with st.error. Errors
raised inside widget callbacks are shown as toasts, since callbacks run
before the page is drawn and an inline message would be lost on the rerun.
"""

import streamlit as st
import logging
import traceback
from typing import Any, Callable, Dict, Optional, Tuple, Type

from .ui_feedback import Notify

logger = logging.getLogger(__name__)


class ErrorType:
    """Error type constants."""
    SCHEMA = "schema"
    SESSION = "session"
    CLIPBOARD = "clipboard"
    SYSTEM = "system"


# Per error type: (exception class, message) pairs checked in order, then the fallback
USER_MESSAGES: Dict[str, Tuple[Tuple[Tuple[Type[BaseException], str], ...], str]] = {
    ErrorType.SCHEMA: (
        (
            (KeyError, "📋 A schema or field could not be found. It may have been deleted."),
            (TypeError, "📋 This edit is not supported for the selected field."),
            (ValueError, "📋 The schema contains an invalid value."),
        ),
        "📋 The schema could not be updated. Please try again."
    ),
    ErrorType.SESSION: (
        (
            (ValueError, "💾 The saved workspace is corrupted and could not be restored."),
        ),
        "💾 The workspace could not be read from this session."
    ),
    ErrorType.CLIPBOARD: (
        (),
        "📋 Could not copy to the clipboard. Select the JSON and copy it manually."
    ),
    ErrorType.SYSTEM: (
        (
            (MemoryError, "💻 System is running low on memory. Please try again."),
            (ImportError, "💻 Required system component is missing. Please check the installation."),
        ),
        "💻 System error occurred. Please try again."
    ),
}


class ErrorHandler:
    """Error handling for the schema builder views and callbacks."""

    @staticmethod
    def handle_error(
        error: Exception,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        show_details: bool = False,
        inline: bool = True
    ) -> None:
        """
        Log an error and tell the user about it.

        Args:
            error: The exception that occurred
            context: Where the error occurred, for the log
            error_type: Type of error (from ErrorType constants)
            user_message: Custom user-friendly message
            show_details: Whether to show technical details (inline only)
            inline: Show with st.error; False shows a toast instead
        """
        logger.error(f"Error in {context}: {error}", exc_info=error)

        message = user_message or ErrorHandler.get_user_friendly_message(error, error_type)
        if inline:
            ErrorHandler._display_error(message, error, context, show_details)
        else:
            Notify.error(message)

    @staticmethod
    def get_user_friendly_message(error: Exception, error_type: str) -> str:
        """Friendly message for error, looked up in USER_MESSAGES for error_type."""
        matchers, fallback = USER_MESSAGES.get(error_type, USER_MESSAGES[ErrorType.SYSTEM])
        for exception_class, message in matchers:
            if isinstance(error, exception_class):
                return message
        return fallback

    @staticmethod
    def _display_error(
        user_message: str,
        error: Exception,
        context: str,
        show_details: bool = False
    ) -> None:
        st.error(user_message)

        if show_details:
            with st.expander("🔍 Technical Details"):
                st.write(f"**Error Type:** {type(error).__name__}")
                st.write(f"**Context:** {context}")
                st.write(f"**Error Message:** {error}")
                st.code("".join(traceback.format_exception(type(error), error, error.__traceback__)))

    @staticmethod
    def with_error_handling(
        func: Callable,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        show_details: bool = False,
        default_return: Any = None,
        inline: bool = True
    ) -> Any:
        """
        Run func, routing any exception through handle_error.

        Returns:
            Function result or default_return on error
        """
        try:
            return func()
        except Exception as e:
            ErrorHandler.handle_error(e, context, error_type, user_message, show_details, inline)
            return default_return


def with_error_handling(func: Callable, context: str, **kwargs) -> Any:
    """Convenience function for wrapping operations with error handling."""
    return ErrorHandler.with_error_handling(func, context, **kwargs)
