"""
Schema list and workspace JSON views for the schema builder.
"""

import streamlit as st
import pandas as pd
import logging

from .clipboard import copy_to_clipboard
from .config_loader import get_config_value
from .error_handler import ErrorHandler, ErrorType
from .export import export_workspace, to_json_string
from .schema_tree import iter_fields
from .session_manager import SessionManager, WorkspaceStore
from .ui_feedback import notify_blank_schema_name, notify_schema_created, notify_schema_deleted
from .workspace import Workspace

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ["Name", "Fields", "Total Fields", "Created", "Updated"]


def build_summary_frame(workspace: Workspace) -> pd.DataFrame:
    """Tabular summary of the workspace, one row per schema in workspace order."""
    rows = [
        {
            "Name": schema.name,
            "Fields": len(schema.fields),
            "Total Fields": sum(1 for _ in iter_fields(schema.fields)),
            "Created": schema.created_at.strftime("%Y-%m-%d %H:%M"),
            "Updated": schema.updated_at.strftime("%Y-%m-%d %H:%M"),
        }
        for schema in workspace.schemas
    ]
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


class SchemaListView:
    """Workspace overview: create, open, delete and export schemas."""

    @staticmethod
    def render(store: WorkspaceStore) -> None:
        try:
            st.header("📋 Schemas")
            st.markdown("Create validation schemas, then open one to add fields and rules.")

            SchemaListView._render_create_form(store)
            st.divider()

            workspace = store.workspace
            if not workspace.schemas:
                st.info("📁 No schemas yet. Create your first schema to get started!")
                return

            st.dataframe(build_summary_frame(workspace), hide_index=True, width='stretch')

            for schema in workspace.schemas:
                with st.container(border=True):
                    col_name, col_edit, col_delete = st.columns([4, 1, 1])
                    with col_name:
                        st.write(f"**{schema.name}**")
                        st.caption(
                            f"{len(schema.fields)} fields • "
                            f"updated {schema.updated_at.strftime('%Y-%m-%d %H:%M')}"
                        )
                    with col_edit:
                        if st.button("✏️ Edit", key=f"edit_schema_{schema.id}"):
                            SessionManager.open_schema(schema.id)
                            st.rerun()
                    with col_delete:
                        if st.button("🗑️ Delete", key=f"delete_schema_{schema.id}"):
                            store.delete_schema(schema.id)
                            notify_schema_deleted(schema.name)
                            st.rerun()

        except Exception as e:
            ErrorHandler.handle_error(e, "schema list", ErrorType.SCHEMA)

    @staticmethod
    def _render_create_form(store: WorkspaceStore) -> None:
        with st.form("create_schema_form", clear_on_submit=True):
            col_name, col_submit = st.columns([4, 1])
            with col_name:
                name = st.text_input(
                    "Schema name",
                    placeholder="e.g. User Registration",
                    label_visibility="collapsed"
                )
            with col_submit:
                submitted = st.form_submit_button("➕ Create Schema", type="primary")

        if submitted:
            schema = store.create_schema(name)
            if schema is None:
                notify_blank_schema_name()
                return
            notify_schema_created(schema.name)
            SessionManager.open_schema(schema.id)
            st.rerun()

    @staticmethod
    def render_json_view(store: WorkspaceStore) -> None:
        """Export of every schema in the workspace."""
        try:
            st.header("🧾 Workspace JSON")

            workspace = store.workspace
            if not workspace.schemas:
                st.info("No schemas to export yet.")
                return

            indent = get_config_value('export', 'indent', 2)
            json_text = to_json_string(export_workspace(workspace), indent=indent)
            st.caption(f"{len(workspace.schemas)} schemas")
            st.code(json_text, language="json")

            col_copy, col_download = st.columns(2)
            with col_copy:
                if st.button("📋 Copy All", key="copy_workspace_json"):
                    copy_to_clipboard(json_text, "Workspace JSON")
            with col_download:
                st.download_button(
                    "⬇️ Download",
                    data=json_text,
                    file_name="schemas.json",
                    mime="application/json",
                    key="download_workspace_json"
                )

        except Exception as e:
            ErrorHandler.handle_error(e, "workspace export", ErrorType.SCHEMA)
