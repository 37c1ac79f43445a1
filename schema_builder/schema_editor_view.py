"""
Schema Editor View for the schema builder.
Renders one schema as a tree of field cards with their validation rules and
shows the live JSON export next to it.

Widget values are written from the field tree into st.session_state before
each widget is created; edits come back through on_change/on_click callbacks
that dispatch tree commands. The tree is therefore the only source of truth,
also after a type change regenerates a field's rules.
"""

import streamlit as st
import logging
from typing import Any, Optional

from .clipboard import copy_to_clipboard
from .config_loader import get_config_value
from .error_handler import ErrorHandler, ErrorType, with_error_handling
from .export import count_enabled_rules, to_export, to_json_string
from .models import Schema, SchemaField, create_schema_field
from .schema_tree import (
    ChangeType,
    Command,
    FieldPatch,
    InsertField,
    RemoveField,
    SetItemSchema,
    SetRule,
    ToggleExpanded,
    UpdateField,
    item_schema_path,
    build_path,
)
from .session_manager import SessionManager, WorkspaceStore
from .ui_feedback import Notify, notify_blank_schema_name
from .validation_rules import DataType, RuleKind, get_rules_for_type

logger = logging.getLogger(__name__)

TYPE_OPTIONS = [data_type.value for data_type in DataType]
TYPE_LABELS = {
    'string': 'String',
    'number': 'Number',
    'boolean': 'Boolean',
    'array': 'Array',
    'object': 'Object'
}


def _format_type(value: str) -> str:
    return TYPE_LABELS.get(value, value)


def _sync_widget(key: str, value: Any) -> None:
    """Write the model value into the widget's session slot before it renders."""
    st.session_state[key] = value


# ---------------------------------------------------------------------------
# Callbacks
# ---------------------------------------------------------------------------

def _dispatch(store: WorkspaceStore, schema_id: str, command: Command) -> bool:
    def apply() -> bool:
        store.load()
        changed = store.dispatch(schema_id, command)
        if not changed:
            logger.debug(f"{type(command).__name__} left schema {schema_id} unchanged")
        return changed

    return with_error_handling(
        apply,
        f"applying {type(command).__name__}",
        error_type=ErrorType.SCHEMA,
        default_return=False,
        inline=False
    )


def _on_name_changed(store: WorkspaceStore, schema_id: str, path: str, key: str) -> None:
    _dispatch(store, schema_id, UpdateField(path, FieldPatch(display_name=st.session_state[key])))


def _on_type_changed(store: WorkspaceStore, schema_id: str, path: str, key: str) -> None:
    _dispatch(store, schema_id, ChangeType(path, DataType(st.session_state[key])))


def _on_rule_toggled(store: WorkspaceStore, schema_id: str, path: str, rule_name: str, key: str) -> None:
    _dispatch(store, schema_id, SetRule(path, rule_name, bool(st.session_state[key])))


def _on_rule_value_changed(store: WorkspaceStore, schema_id: str, path: str, rule_name: str, key: str) -> None:
    _dispatch(store, schema_id, SetRule(path, rule_name, True, st.session_state[key]))


def _on_child_type_selected(store: WorkspaceStore, schema_id: str, path: str, key: str) -> None:
    patch = FieldPatch(ui_selected_type_to_add=DataType(st.session_state[key]))
    _dispatch(store, schema_id, UpdateField(path, patch))


def _on_add_field(store: WorkspaceStore, schema_id: str, parent_path: Optional[str], data_type: str) -> None:
    _dispatch(store, schema_id, InsertField(parent_path, create_schema_field(DataType(data_type))))


def _on_set_item_type(store: WorkspaceStore, schema_id: str, path: str, key: str) -> None:
    item_type = st.session_state.get(key) or DataType.STRING.value
    _dispatch(store, schema_id, SetItemSchema(path, DataType(item_type)))


def _on_schema_renamed(store: WorkspaceStore, schema_id: str, key: str) -> None:
    name = st.session_state[key].strip()
    if not name:
        notify_blank_schema_name()
        return
    store.load()
    store.rename_schema(schema_id, name)


def _on_type_to_add_changed(key: str) -> None:
    SessionManager.set_type_to_add(st.session_state[key])


# ---------------------------------------------------------------------------
# View
# ---------------------------------------------------------------------------

class SchemaEditor:
    """Editor for a single schema of the workspace."""

    @staticmethod
    def render(store: WorkspaceStore, schema_id: Optional[str]) -> None:
        """Main entry point for rendering the editor."""
        try:
            schema = store.workspace.get_schema(schema_id)
            if schema is None:
                Notify.warn("The selected schema no longer exists")
                SessionManager.close_schema()
                st.rerun()
                return

            SchemaEditor._render_header(store, schema)

            col_tree, col_json = st.columns([3, 2])
            with col_tree:
                SchemaEditor._render_add_controls(store, schema)
                if not schema.fields:
                    st.info("No fields yet. Pick a type and add the first field.")
                for field in schema.fields:
                    SchemaEditor._render_field(store, schema.id, field, field.id)

            with col_json:
                SchemaEditor._render_json_preview(schema)

        except Exception as e:
            ErrorHandler.handle_error(
                e,
                "schema editor",
                ErrorType.SCHEMA,
                show_details=bool(get_config_value('app', 'debug', False))
            )

    @staticmethod
    def _render_header(store: WorkspaceStore, schema: Schema) -> None:
        col_back, col_name = st.columns([1, 4])

        with col_back:
            if st.button("← Back to Schemas", key="editor_back_btn"):
                SessionManager.close_schema()
                st.rerun()

        with col_name:
            key = f"schema_name_{schema.id}"
            _sync_widget(key, schema.name)
            st.text_input(
                "Schema Name",
                key=key,
                on_change=_on_schema_renamed,
                args=(store, schema.id, key),
                label_visibility="collapsed"
            )
            st.caption(
                f"Created {schema.created_at.strftime('%Y-%m-%d %H:%M')} • "
                f"Updated {schema.updated_at.strftime('%Y-%m-%d %H:%M:%S')}"
            )

    @staticmethod
    def _render_add_controls(store: WorkspaceStore, schema: Schema) -> None:
        col_type, col_add = st.columns([2, 1])

        with col_type:
            key = "editor_type_to_add"
            type_to_add = SessionManager.get_type_to_add().value
            _sync_widget(key, type_to_add)
            st.selectbox(
                "Field type",
                options=TYPE_OPTIONS,
                format_func=_format_type,
                key=key,
                on_change=_on_type_to_add_changed,
                args=(key,),
                label_visibility="collapsed"
            )

        with col_add:
            st.button(
                "➕ Add Field",
                key=f"add_field_{schema.id}",
                type="primary",
                on_click=_on_add_field,
                args=(store, schema.id, None, type_to_add)
            )

    @staticmethod
    def _render_field(store: WorkspaceStore, schema_id: str, field: SchemaField, path: str) -> None:
        """Render one field card and, when expanded, its rules and children."""
        with st.container(border=True):
            col_toggle, col_name, col_type, col_badge, col_delete = st.columns([0.5, 3, 2, 1.5, 0.5])

            with col_toggle:
                if field.is_container:
                    st.button(
                        "▾" if field.ui_expanded else "▸",
                        key=f"expand_{field.id}",
                        help="Show or hide nested fields",
                        on_click=_dispatch,
                        args=(store, schema_id, ToggleExpanded(path))
                    )

            with col_name:
                key = f"name_{field.id}"
                _sync_widget(key, field.display_name)
                st.text_input(
                    "Display Name",
                    key=key,
                    placeholder="Field name",
                    on_change=_on_name_changed,
                    args=(store, schema_id, path, key)
                )

            with col_type:
                key = f"type_{field.id}"
                _sync_widget(key, field.data_type.value)
                st.selectbox(
                    "Data Type",
                    options=TYPE_OPTIONS,
                    format_func=_format_type,
                    key=key,
                    on_change=_on_type_changed,
                    args=(store, schema_id, path, key)
                )

            with col_badge:
                st.caption(f"{count_enabled_rules(field)} rules active")

            with col_delete:
                st.button(
                    "🗑️",
                    key=f"remove_{field.id}",
                    help="Remove this field",
                    on_click=_dispatch,
                    args=(store, schema_id, RemoveField(path))
                )

            SchemaEditor._render_validation_rules(store, schema_id, field, path)

            if field.data_type == DataType.ARRAY:
                SchemaEditor._render_item_schema(store, schema_id, field, path)
            elif field.data_type == DataType.OBJECT and field.ui_expanded:
                SchemaEditor._render_properties(store, schema_id, field, path)

    @staticmethod
    def _render_validation_rules(store: WorkspaceStore, schema_id: str, field: SchemaField, path: str) -> None:
        st.markdown("**Validation Rules**")

        for descriptor in get_rules_for_type(field.data_type):
            rule = field.get_rule(descriptor.name)
            if rule is None:
                continue

            col_switch, col_value = st.columns([2, 3])
            with col_switch:
                key = f"rule_{field.id}_{descriptor.name}"
                _sync_widget(key, rule.enabled)
                st.toggle(
                    descriptor.label,
                    key=key,
                    on_change=_on_rule_toggled,
                    args=(store, schema_id, path, descriptor.name, key)
                )

            if not rule.enabled or descriptor.kind == RuleKind.BOOLEAN:
                continue

            with col_value:
                key = f"rule_value_{field.id}_{descriptor.name}"
                if descriptor.kind == RuleKind.NUMBER:
                    _sync_widget(key, float(rule.value or 0))
                    st.number_input(
                        descriptor.label,
                        key=key,
                        step=1.0,
                        format="%g",
                        on_change=_on_rule_value_changed,
                        args=(store, schema_id, path, descriptor.name, key),
                        label_visibility="collapsed"
                    )
                else:
                    _sync_widget(key, "" if rule.value is None else str(rule.value))
                    st.text_input(
                        descriptor.label,
                        key=key,
                        placeholder=descriptor.placeholder or "",
                        on_change=_on_rule_value_changed,
                        args=(store, schema_id, path, descriptor.name, key),
                        label_visibility="collapsed"
                    )

    @staticmethod
    def _render_item_schema(store: WorkspaceStore, schema_id: str, field: SchemaField, path: str) -> None:
        st.markdown("**Array Item Schema**")

        if field.item_schema is None:
            col_type, col_set = st.columns([2, 1])
            key = f"item_type_{field.id}"
            with col_type:
                st.selectbox(
                    "Item type",
                    options=TYPE_OPTIONS,
                    format_func=_format_type,
                    key=key,
                    label_visibility="collapsed"
                )
            with col_set:
                st.button(
                    "Set Item Type",
                    key=f"set_item_type_{field.id}",
                    on_click=_on_set_item_type,
                    args=(store, schema_id, path, key)
                )
            return

        if field.ui_expanded:
            item = field.item_schema
            SchemaEditor._render_field(store, schema_id, item, item_schema_path(path, item.id))
        else:
            st.caption(f"Items: {_format_type(field.item_schema.data_type.value)}")

    @staticmethod
    def _render_properties(store: WorkspaceStore, schema_id: str, field: SchemaField, path: str) -> None:
        st.markdown("**Properties**")

        col_type, col_add = st.columns([2, 1])
        selected = (field.ui_selected_type_to_add or DataType.STRING).value
        with col_type:
            key = f"child_type_{field.id}"
            _sync_widget(key, selected)
            st.selectbox(
                "Property type",
                options=TYPE_OPTIONS,
                format_func=_format_type,
                key=key,
                on_change=_on_child_type_selected,
                args=(store, schema_id, path, key),
                label_visibility="collapsed"
            )
        with col_add:
            st.button(
                "➕ Add Property",
                key=f"add_property_{field.id}",
                on_click=_on_add_field,
                args=(store, schema_id, path, selected)
            )

        if not field.properties:
            st.caption("No properties yet")
        for child in field.properties or []:
            SchemaEditor._render_field(store, schema_id, child, build_path(path, child.id))

    @staticmethod
    def _render_json_preview(schema: Schema) -> None:
        st.subheader("🧾 JSON Preview")

        indent = get_config_value('export', 'indent', 2)
        json_text = to_json_string(to_export(schema.fields), indent=indent)
        st.code(json_text, language="json")

        col_copy, col_download = st.columns(2)
        with col_copy:
            if st.button("📋 Copy JSON", key=f"copy_schema_{schema.id}"):
                copy_to_clipboard(json_text, "Schema JSON")
        with col_download:
            st.download_button(
                "⬇️ Download",
                data=json_text,
                file_name=f"{schema.name or 'schema'}.json",
                mime="application/json",
                key=f"download_schema_{schema.id}"
            )
