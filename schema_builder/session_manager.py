"""
Session state management for the schema builder.

WorkspaceStore owns the workspace for one script run: it is loaded from a
single string key in the session store at the start of the run and written
back after every change. SessionManager keeps the remaining UI state
(current view, open schema, type pre-selected for new top-level fields).
"""

import streamlit as st
from typing import Dict, Any, MutableMapping, Optional
from datetime import datetime
import logging

from .config_loader import get_config_value
from .error_handler import ErrorHandler, ErrorType
from .models import Schema
from .schema_tree import Command
from .ui_feedback import notify_workspace_not_restored
from .validation_rules import DataType
from .workspace import Workspace

logger = logging.getLogger(__name__)

# Default values
DEFAULT_WORKSPACE_KEY = "schema_builder_workspace"
DEFAULT_VIEW = "list"
VIEWS = ("list", "edit", "json", "docs")


class WorkspaceStore:
    """Load-at-start / save-on-mutation wrapper around the session string store."""

    def __init__(self, store: Optional[MutableMapping[str, Any]] = None, key: Optional[str] = None):
        """
        Args:
            store: Mutable mapping holding the serialized workspace
                (defaults to st.session_state)
            key: Key the workspace is stored under (defaults to the
                session.workspace_key config value)
        """
        self._store = store
        self.key = key or get_config_value('session', 'workspace_key', DEFAULT_WORKSPACE_KEY)
        self.workspace = Workspace()
        self.load_error: Optional[Exception] = None

    @property
    def store(self) -> MutableMapping[str, Any]:
        return self._store if self._store is not None else st.session_state

    def load(self) -> Workspace:
        """
        Read the workspace from the store.

        A missing key or an unreadable document yields an empty workspace;
        the failure is logged, kept in load_error and never raised.
        """
        self.load_error = None
        raw = self.store.get(self.key)
        if raw is None:
            logger.debug(f"No saved workspace under '{self.key}', starting empty")
            self.workspace = Workspace()
            return self.workspace

        try:
            self.workspace = Workspace.from_json(raw)
            logger.debug(f"Loaded workspace with {len(self.workspace.schemas)} schemas from '{self.key}'")
        except (ValueError, TypeError) as e:
            logger.warning(f"Failed to load saved workspace from '{self.key}', starting empty: {e}")
            self.load_error = e
            self.workspace = Workspace()
        return self.workspace

    def report_load_error(self) -> bool:
        """
        Show why the saved workspace could not be restored, once per session.

        Only in debug mode (app.debug). Otherwise the failure stays in the log
        and the empty workspace is used silently.

        Returns:
            True if a notification was shown
        """
        if self.load_error is None or not get_config_value('app', 'debug', False):
            return False
        message = ErrorHandler.get_user_friendly_message(self.load_error, ErrorType.SESSION)
        return notify_workspace_not_restored(message)

    def save(self) -> None:
        """Write the current workspace back to the store (last writer wins)."""
        self.store[self.key] = self.workspace.to_json()
        logger.debug(f"Saved workspace with {len(self.workspace.schemas)} schemas to '{self.key}'")

    def replace(self, workspace: Workspace) -> bool:
        """Swap in a new workspace and persist it; returns False when nothing changed."""
        if workspace is self.workspace:
            return False
        self.workspace = workspace
        self.save()
        return True

    def dispatch(self, schema_id: str, command: Command) -> bool:
        """Apply a tree command to one schema; returns whether the tree changed."""
        changed = self.replace(self.workspace.apply(schema_id, command))
        if changed:
            logger.debug(f"Applied {type(command).__name__} to schema {schema_id}")
        return changed

    def create_schema(self, name: str) -> Optional[Schema]:
        workspace, schema = self.workspace.create_schema(name)
        self.replace(workspace)
        return schema

    def delete_schema(self, schema_id: str) -> bool:
        return self.replace(self.workspace.delete_schema(schema_id))

    def rename_schema(self, schema_id: str, name: str) -> bool:
        return self.replace(self.workspace.rename_schema(schema_id, name))


class SessionManager:
    """Manages Streamlit session state for the schema builder UI."""

    @staticmethod
    def initialize():
        """Initialize all session state variables with default values."""
        defaults = {
            'current_view': DEFAULT_VIEW,
            'selected_schema_id': None,
            'type_to_add': get_config_value('ui', 'default_type_to_add', DataType.STRING.value),
            'last_activity': datetime.now(),
            'session_id': None,
        }

        for key, default_value in defaults.items():
            if key not in st.session_state:
                st.session_state[key] = default_value

        if not st.session_state.session_id:
            st.session_state.session_id = f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
            logger.info(f"Session initialized: {st.session_state.session_id}")

    @staticmethod
    def get_current_view() -> str:
        return st.session_state.get('current_view', DEFAULT_VIEW)

    @staticmethod
    def set_current_view(view: str):
        """Set the current view and log the transition."""
        if view not in VIEWS:
            logger.warning(f"Ignoring unknown view: {view}")
            return

        old_view = st.session_state.get('current_view')
        if old_view != view:
            logger.info(f"View transition: {old_view} -> {view}")
            st.session_state.current_view = view
            if view != 'edit':
                st.session_state.selected_schema_id = None
            SessionManager.update_activity()

    @staticmethod
    def get_selected_schema_id() -> Optional[str]:
        return st.session_state.get('selected_schema_id')

    @staticmethod
    def open_schema(schema_id: str):
        """Select a schema and switch to the editor."""
        st.session_state.selected_schema_id = schema_id
        st.session_state.current_view = 'edit'
        logger.info(f"Opened schema {schema_id}")
        SessionManager.update_activity()

    @staticmethod
    def close_schema():
        """Leave the editor and return to the schema list."""
        SessionManager.set_current_view('list')
        st.session_state.selected_schema_id = None

    @staticmethod
    def get_type_to_add() -> DataType:
        try:
            return DataType(st.session_state.get('type_to_add', DataType.STRING.value))
        except ValueError:
            return DataType.STRING

    @staticmethod
    def set_type_to_add(data_type: str):
        st.session_state.type_to_add = DataType(data_type).value

    @staticmethod
    def update_activity():
        """Update last activity timestamp."""
        st.session_state.last_activity = datetime.now()

    @staticmethod
    def get_last_activity() -> datetime:
        return st.session_state.get('last_activity', datetime.now())

    @staticmethod
    def get_session_id() -> str:
        return st.session_state.get('session_id', 'unknown')

    @staticmethod
    def reset_session(workspace_key: str = DEFAULT_WORKSPACE_KEY):
        """Reset all UI state; the saved workspace under workspace_key is kept."""
        logger.info(f"Resetting session: {SessionManager.get_session_id()}")

        saved_workspace = st.session_state.get(workspace_key)
        for key in list(st.session_state.keys()):
            del st.session_state[key]

        if saved_workspace is not None:
            st.session_state[workspace_key] = saved_workspace
        SessionManager.initialize()

    @staticmethod
    def get_session_info() -> Dict[str, Any]:
        """Get session information for debugging."""
        return {
            'session_id': SessionManager.get_session_id(),
            'current_view': SessionManager.get_current_view(),
            'selected_schema_id': SessionManager.get_selected_schema_id(),
            'type_to_add': SessionManager.get_type_to_add().value,
            'last_activity': SessionManager.get_last_activity().isoformat()
        }
