"""
Sidebar with configuration, schema and session details.
"""

import streamlit as st
from typing import Any, Dict
import logging

from .config_loader import get_config_summary
from .orchestrator import RecordManager
from .schema_loader import get_schema_info, list_available_schemas
from .session_manager import SessionManager

logger = logging.getLogger(__name__)


class Sidebar:
    """Read-only status panel shown beside the main view."""

    @staticmethod
    def render(manager: RecordManager, config: Dict[str, Any]):
        with st.sidebar:
            st.header(config.get('ui', {}).get('sidebar_title', 'Console'))

            Sidebar._render_schema(manager)

            st.divider()

            Sidebar._render_connection(config)

            st.divider()

            with st.expander("🔍 Session"):
                st.json(SessionManager.get_session_info())

    @staticmethod
    def _render_schema(manager: RecordManager):
        info = get_schema_info(manager.schema)

        st.subheader(f"📋 {info['title']}")
        if info['description']:
            st.caption(info['description'])

        st.write(f"**Fields:** {info['field_count']}")
        st.write(f"**Required:** {', '.join(info['required_fields']) or 'none'}")
        if info['unique_field']:
            st.write(f"**Unique key:** {info['unique_field']}")

        available = list_available_schemas()
        if available:
            st.caption(f"Schema files: {', '.join(available)}")
        else:
            logger.warning("No schema files found; the built-in user schema is in use")
            st.caption("No schema files found, using the built-in schema")

    @staticmethod
    def _render_connection(config: Dict[str, Any]):
        summary = get_config_summary(config)

        st.subheader("🌐 API")
        st.write(f"**Endpoint:** {summary['api_base_url']}")
        st.write(f"**Timeout:** {summary['api_timeout']}s")
        st.caption(f"{summary['app_name']} v{summary['app_version']}")
