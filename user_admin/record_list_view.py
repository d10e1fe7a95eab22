"""
Record list view for the user administration console.
Shows the loaded collection as a table with per-row edit/delete actions
and the delete confirmation prompt.
"""

import streamlit as st
import pandas as pd
from typing import Sequence
import logging

from .field_schema import FormSchema
from .orchestrator import RecordManager
from .record import Record
from .session_manager import run_async
from .ui_feedback import LoadingIndicator, UserFeedback

# Configure logging
logger = logging.getLogger(__name__)

EMPTY_CELL = '-'


def build_table(schema: FormSchema, records: Sequence[Record]) -> pd.DataFrame:
    """
    Build the display table for a collection.

    Columns are the schema labels in declaration order; blank values are
    shown as "-" and select values by their choice label. Rows keep the
    collection order and are indexed by record id.
    """
    rows = []
    for record in records:
        row = {}
        for field in schema.fields:
            value = record.get(field.name)
            if value and field.choices:
                value = field.choice_label(value)
            row[field.label] = value or EMPTY_CELL
        rows.append(row)

    columns = [field.label for field in schema.fields]
    return pd.DataFrame(rows, columns=columns, index=pd.Index([r.id for r in records], name='id'))


class RecordListView:
    """Manages the record list interface."""

    @staticmethod
    def load(manager: RecordManager) -> bool:
        """Fetch the collection behind a spinner."""
        with LoadingIndicator.spinner(f"Loading {manager.record_label.lower()}s..."):
            return run_async(manager.refresh())

    @staticmethod
    def render(manager: RecordManager):
        """Render the complete list view."""
        label = manager.record_label

        st.metric(f"Total {label}s", manager.store.count)

        if manager.pending_delete is not None:
            RecordListView._render_delete_confirmation(manager)

        if manager.store.loading:
            st.info(f"⏳ Loading {label.lower()}s...")
            return

        records = manager.store.records
        if not records:
            RecordListView._render_empty_state(manager)
            return

        RecordListView._render_table(manager, records)

    @staticmethod
    def _render_empty_state(manager: RecordManager):
        label = manager.record_label
        st.markdown(f"### No {label.lower()}s yet")
        st.write(f'Click "Add {label}" to create your first {label.lower()}')

    @staticmethod
    def _render_table(manager: RecordManager, records: Sequence[Record]):
        table = build_table(manager.schema, records)
        by_id = {record.id: record for record in records}
        busy = manager.store.saving

        widths = [3] * len(table.columns) + [1, 1]

        header = st.columns(widths)
        for col, title in zip(header, list(table.columns) + ['', '']):
            with col:
                st.markdown(f"**{title}**" if title else "")

        for record_id, row in table.iterrows():
            record = by_id[record_id]
            cells = st.columns(widths)

            for col, value in zip(cells, row.tolist()):
                with col:
                    st.write(value)

            with cells[-2]:
                st.button(
                    "✏️ Edit",
                    key=f"edit_{record_id}",
                    help=f"Edit {manager.record_label.lower()}",
                    disabled=busy,
                    on_click=manager.open_edit,
                    args=(record,)
                )

            with cells[-1]:
                st.button(
                    "🗑️ Delete",
                    key=f"delete_{record_id}",
                    help=f"Delete {manager.record_label.lower()}",
                    disabled=busy,
                    on_click=manager.request_delete,
                    args=(record,)
                )

    @staticmethod
    def _render_delete_confirmation(manager: RecordManager):
        decision = UserFeedback.confirmation_dialog(
            manager.confirmation_title,
            manager.confirmation_message,
            confirm_text="Deleting..." if manager.store.saving else "Delete",
            cancel_text="Cancel",
            danger=True,
            disabled=manager.store.saving,
            key="delete_record"
        )

        if decision is True:
            run_async(manager.confirm_delete())
            st.rerun()
        elif decision is False:
            manager.cancel_delete()
            st.rerun()
