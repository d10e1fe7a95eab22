"""
Dynamic form renderer for the user administration console.
Creates Streamlit widgets from field schemas and feeds widget events
into the form state machine.
"""

import streamlit as st
from typing import Optional
import logging

from .field_schema import FieldKind, FieldSchema
from .form_state import FormStateMachine
from .orchestrator import RecordManager
from .session_manager import run_async

logger = logging.getLogger(__name__)

# Approximate pixel height of one text area row
TEXTAREA_ROW_HEIGHT = 28
MIN_TEXTAREA_HEIGHT = 68


class FormRenderer:
    """Renders the create/edit surface of a RecordManager."""

    @staticmethod
    def widget_key(manager: RecordManager, field_name: str) -> str:
        return f"field_{manager.form_version}_{field_name}"

    @staticmethod
    def _on_widget_commit(form: FormStateMachine, field_name: str, widget_key: str) -> None:
        """
        Widget callback. Streamlit commits a text widget when it loses focus
        (or on Enter), so a commit is applied as change followed by blur.
        """
        value = st.session_state.get(widget_key)
        form.change(field_name, '' if value is None else str(value))
        form.blur(field_name)

    @staticmethod
    def _field_label(field: FieldSchema) -> str:
        return f"{field.label} *" if field.required else field.label

    @staticmethod
    def _render_field(manager: RecordManager, form: FormStateMachine, field: FieldSchema) -> None:
        key = FormRenderer.widget_key(manager, field.name)

        # Seed the widget once; afterwards Streamlit owns the widget value
        if key not in st.session_state:
            st.session_state[key] = form.values.get(field.name, '')

        common = {
            'key': key,
            'disabled': field.disabled,
            'on_change': FormRenderer._on_widget_commit,
            'args': (form, field.name, key),
        }
        label = FormRenderer._field_label(field)

        if field.kind == FieldKind.SELECT:
            options = [''] + [option.value for option in field.choices]
            if st.session_state[key] not in options:
                st.session_state[key] = ''
            st.selectbox(
                label,
                options=options,
                format_func=lambda v, f=field: f"Select {f.label}" if v == '' else f.choice_label(v),
                **common
            )
        elif field.kind == FieldKind.TEXTAREA:
            rows = field.rows or 4
            st.text_area(
                label,
                placeholder=field.placeholder,
                height=max(MIN_TEXTAREA_HEIGHT, rows * TEXTAREA_ROW_HEIGHT),
                **common
            )
        else:
            placeholder = field.placeholder
            if placeholder is None and field.kind == FieldKind.DATE:
                placeholder = 'YYYY-MM-DD'
            st.text_input(label, placeholder=placeholder, **common)

        error = form.visible_error(field.name)
        if error:
            st.error(f"⚠️ {error}")

    @staticmethod
    def _handle_submit(manager: RecordManager) -> None:
        form = manager.form
        if form is None:
            return

        # Pick up widget values that were typed but not yet committed
        for field in form.fields:
            key = FormRenderer.widget_key(manager, field.name)
            if key in st.session_state:
                value = st.session_state[key]
                form.change(field.name, '' if value is None else str(value))

        run_async(manager.submit())

    @staticmethod
    def _handle_cancel(manager: RecordManager) -> None:
        manager.close_form()

    @staticmethod
    def render(manager: RecordManager) -> Optional[FormStateMachine]:
        """
        Render the open form, if any.

        Returns:
            The rendered form state machine, or None when no form is open
        """
        form = manager.form
        if form is None:
            return None

        with st.container(border=True):
            st.subheader(manager.surface_title)

            for field in form.fields:
                FormRenderer._render_field(manager, form, field)

            changes = manager.pending_changes()
            if changes:
                st.caption(f"Modified: {', '.join(changes)}")

            saving = manager.submit_disabled
            col_cancel, col_submit = st.columns(2)

            with col_cancel:
                st.button(
                    "Cancel",
                    key=f"form_cancel_{manager.form_version}",
                    disabled=saving,
                    on_click=FormRenderer._handle_cancel,
                    args=(manager,)
                )

            with col_submit:
                st.button(
                    "Saving..." if saving else manager.submit_label,
                    key=f"form_submit_{manager.form_version}",
                    type="primary",
                    disabled=saving,
                    on_click=FormRenderer._handle_submit,
                    args=(manager,)
                )

        return form
