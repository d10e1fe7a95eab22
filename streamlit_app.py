"""
Main Streamlit application for the user administration console.
Schema-driven list/create/edit/delete front-end for a REST user collection.
"""

import streamlit as st
import logging

from user_admin.config_loader import load_config, validate_config, get_config_summary
from user_admin.schema_loader import get_configured_schema
from user_admin.record_service import RecordService
from user_admin.record_store import RecordStore
from user_admin.orchestrator import RecordManager
from user_admin.session_manager import SessionManager
from user_admin.ui_feedback import Notify


def get_logging_level(level_str):
    """Map string logging level to logging constant."""
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    return level_map.get(str(level_str).upper(), logging.INFO)


# Load configuration early; the logging section drives basicConfig
config = load_config()
logging.basicConfig(
    level=get_logging_level(config['logging'].get('level', 'INFO')),
    format=config['logging'].get('format')
)
logger = logging.getLogger(__name__)

if not validate_config(config):
    logger.warning("Configuration issues detected; defaults are used where necessary")

logger.info(f"Starting app: {get_config_summary(config)}")

# Page configuration
st.set_page_config(
    page_title=config['ui'].get('page_title', 'User Management'),
    page_icon="👥",
    layout="wide"
)


def build_manager() -> RecordManager:
    """Create the per-session orchestrator from configuration."""
    schema = get_configured_schema(config)
    service = RecordService(
        base_url=config['api']['base_url'],
        timeout=float(config['api'].get('timeout', 30.0))
    )
    store = RecordStore(service, schema)
    return RecordManager(schema, store, notifier=Notify)


def main():
    """Main application entry point."""
    from user_admin.error_handler import ErrorHandler, ErrorType
    from user_admin.form_renderer import FormRenderer
    from user_admin.record_list_view import RecordListView
    from user_admin.sidebar import Sidebar

    try:
        SessionManager.initialize(build_manager)
    except ValueError as e:
        ErrorHandler.handle_error(e, "building the record manager", ErrorType.CONFIGURATION, show_details=True)
        return

    try:
        manager = SessionManager.get_manager()

        # Load users on first render of the session
        if not SessionManager.is_collection_loaded():
            SessionManager.mark_collection_loaded()
            RecordListView.load(manager)

        Sidebar.render(manager, config)
        render_header(manager)
        FormRenderer.render(manager)
        RecordListView.render(manager)

    except Exception as e:
        ErrorHandler.handle_error(
            e,
            "application startup",
            ErrorType.SYSTEM,
            show_details=True
        )


def render_header(manager: RecordManager):
    """Render application header with the add and reload actions."""
    label = manager.record_label

    col_title, col_reload, col_add = st.columns([4, 1, 1])

    with col_title:
        st.title(f"👥 {label} Management")

    with col_reload:
        if st.button("🔄 Reload", key="reload_records", disabled=manager.store.loading):
            SessionManager.reset_session()
            st.rerun()

    with col_add:
        st.button(
            f"➕ Add {label}",
            key="add_record",
            type="primary",
            disabled=manager.is_form_open,
            on_click=manager.open_create
        )


if __name__ == "__main__":
    main()
