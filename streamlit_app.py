"""
Main Streamlit application for the schema builder.
Visual editor for nested data-validation schemas with live JSON export.
"""

import streamlit as st
import logging

from schema_builder.config_loader import get_config_value, get_logging_level, load_config, validate_config

# Configure logging dynamically from config
try:
    log_level_str = get_config_value('logging', 'level', 'INFO')
    logging.basicConfig(level=get_logging_level(log_level_str))
    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured to level: {log_level_str}")
except Exception as e:
    # Fallback to INFO if config reading fails
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)
    logger.error(f"Failed to configure logging from config: {e}, using INFO level")

page_title = get_config_value('ui', 'page_title', 'Schema Builder')

# Page configuration
st.set_page_config(
    page_title=page_title,
    page_icon="🧩",
    layout="wide",
    initial_sidebar_state="expanded"
)

NAVIGATION = {
    'list': '📋 Schemas',
    'json': '🧾 Workspace JSON',
    'docs': '📖 Documentation'
}


def main():
    """Main application entry point."""
    from schema_builder.error_handler import ErrorHandler, ErrorType
    from schema_builder.session_manager import SessionManager, WorkspaceStore
    from schema_builder.ui_feedback import show_loading

    try:
        with show_loading("Loading workspace..."):
            SessionManager.initialize()
            store = WorkspaceStore()
            store.load()

        store.report_load_error()

        render_header()
        render_sidebar(store)
        render_main_content(store)

    except Exception as e:
        ErrorHandler.handle_error(e, "application startup", ErrorType.SYSTEM, show_details=True)


def render_header():
    """Render application header."""
    app_name = get_config_value('app', 'name', 'Schema Builder')
    st.title(f"🧩 {app_name}")
    st.markdown("**Build nested validation schemas visually and export them as JSON**")

    if not validate_config(load_config()):
        st.warning("⚠️ Some configuration settings are invalid, defaults are used where necessary.")


def render_sidebar(store):
    """Render navigation and workspace metrics."""
    from schema_builder.session_manager import SessionManager

    with st.sidebar:
        st.header(get_config_value('ui', 'sidebar_title', 'Navigation'))

        current_view = SessionManager.get_current_view()
        for view, label in NAVIGATION.items():
            is_active = current_view == view or (view == 'list' and current_view == 'edit')
            if st.button(label, key=f"nav_{view}", type="primary" if is_active else "secondary", width='stretch'):
                SessionManager.set_current_view(view)
                st.rerun()

        st.divider()

        st.header("Workspace")
        workspace = store.workspace
        col1, col2 = st.columns(2)
        with col1:
            st.metric("Schemas", len(workspace.schemas))
        with col2:
            st.metric("Fields", workspace.field_count())

        st.divider()

        if st.button("🔄 Reset View", help="Clear editor state; saved schemas are kept"):
            SessionManager.reset_session(store.key)
            st.rerun()

        if get_config_value('app', 'debug', False):
            render_debug_panel()

        version = get_config_value('app', 'version', 'Unknown')
        st.caption(f"Version {version} • Schemas are kept for this browser session only")


def render_debug_panel():
    """Show session and configuration details (app.debug only)."""
    from schema_builder.config_loader import get_config_summary
    from schema_builder.session_manager import SessionManager

    with st.expander("🐞 Debug"):
        st.json(SessionManager.get_session_info())
        st.json(get_config_summary(load_config()))


def render_main_content(store):
    """Render main content area based on current view."""
    from schema_builder.documentation_view import DocumentationView
    from schema_builder.schema_editor_view import SchemaEditor
    from schema_builder.schema_list_view import SchemaListView
    from schema_builder.session_manager import SessionManager

    view = SessionManager.get_current_view()

    if view == 'list':
        SchemaListView.render(store)
    elif view == 'edit':
        SchemaEditor.render(store, SessionManager.get_selected_schema_id())
    elif view == 'json':
        SchemaListView.render_json_view(store)
    elif view == 'docs':
        DocumentationView.render()
    else:
        st.error(f"Unknown view: {view}")
        logger.error(f"Unknown view in session state: {view}")


if __name__ == "__main__":
    main()
