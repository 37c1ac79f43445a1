"""
UI feedback utilities for the schema builder.
Spinner for the workspace load and toast notifications for schema actions.
"""

import streamlit as st
from contextlib import contextmanager
import logging

logger = logging.getLogger(__name__)

NOTIFICATION_ICONS = {
    'success': '✅',
    'info': 'ℹ️',
    'warning': '⚠️',
    'error': '❌'
}

# st.* element used when a toast cannot be shown
_INLINE_ELEMENTS = {
    'success': 'success',
    'info': 'info',
    'warning': 'warning',
    'error': 'error'
}


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
    Toast notifications for schema actions.

    Toasts survive the st.rerun() that usually follows an action; when a
    toast cannot be shown the message is rendered inline instead.

    Usage:
    Notify.success("Schema JSON copied to clipboard")
    Notify.once("Saved workspace could not be restored", notification_type="warning", key="restore")
    """

    @staticmethod
    def _display_notification(message: str, notification_type: str = 'info') -> None:
        if notification_type not in NOTIFICATION_ICONS:
            notification_type = 'info'
        icon = NOTIFICATION_ICONS[notification_type]

        try:
            st.toast(message, icon=icon)
        except Exception as e:
            logger.error(f"Error using st.toast: {e}", exc_info=True)
            inline = getattr(st, _INLINE_ELEMENTS[notification_type])
            inline(f"{icon} {message}")

    @staticmethod
    def success(message: str) -> None:
        Notify._display_notification(message, 'success')

    @staticmethod
    def info(message: str) -> None:
        Notify._display_notification(message, 'info')

    @staticmethod
    def warn(message: str) -> None:
        Notify._display_notification(message, 'warning')

    @staticmethod
    def error(message: str) -> None:
        Notify._display_notification(message, 'error')

    @staticmethod
    def once(message: str, notification_type: str = 'info', key: str = 'default') -> bool:
        """
        Show notification only once per session for the given key.
        Returns True if shown, False if already shown.
        """
        shown_key = f"_notified_{key}"
        if st.session_state.get(shown_key):
            logger.debug(f"Notify.once: '{key}' already shown this session")
            return False
        Notify._display_notification(message, notification_type)
        st.session_state[shown_key] = True
        return True


def show_loading(message: str = "Loading..."):
    """Show loading spinner."""
    return LoadingIndicator.spinner(message)


def notify_schema_created(name: str) -> None:
    Notify.success(f"Created schema '{name}'")


def notify_schema_deleted(name: str) -> None:
    Notify.success(f"Deleted schema '{name}'")


def notify_blank_schema_name() -> None:
    Notify.warn("Schema name cannot be empty")


def notify_workspace_not_restored(message: str) -> bool:
    """
    Tell the user that the saved workspace could not be read.

    Shown once per session: the unreadable document stays in the session
    store until the next save replaces it, so every rerun would fail again.
    """
    return Notify.once(message, notification_type='warning', key='workspace_not_restored')
