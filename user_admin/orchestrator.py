"""
Application orchestrator for the record management console.

Wires the form schema, the form state machine and the record store
together: opens the create/edit surface, routes a valid submit to
create or update, asks for confirmation before deleting, and reports
every finished mutation through the notifier.
"""

from datetime import date
from typing import List, Optional, Protocol
import logging

from .exceptions import DuplicateRecordError, TransportError
from .field_schema import FormSchema, values_from_record
from .form_state import FormStateMachine
from .record import Record
from .record_diff import changed_labels
from .record_store import RecordStore

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = 'An error occurred. Please try again.'


class Notifier(Protocol):
    """Transient notification surface (toasts)."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class RecordManager:
    """Coordinates the edit surface, the delete confirmation and the store."""

    def __init__(self, schema: FormSchema, store: RecordStore, notifier: Notifier,
                 today: Optional[date] = None):
        self.schema = schema
        self.store = store
        self.notifier = notifier
        self._today = today

        self.form: Optional[FormStateMachine] = None
        self.editing: Optional[Record] = None
        self.pending_delete: Optional[Record] = None
        # Bumped on every open so widget keys of a previous form are not reused
        self.form_version = 0

    @property
    def record_label(self) -> str:
        return self.schema.record_label

    @property
    def is_form_open(self) -> bool:
        return self.form is not None

    @property
    def is_editing(self) -> bool:
        return self.editing is not None

    @property
    def surface_title(self) -> str:
        if self.is_editing:
            return f"Edit {self.record_label}"
        return f"Add New {self.record_label}"

    @property
    def submit_label(self) -> str:
        return 'Update' if self.is_editing else 'Create'

    @property
    def submit_disabled(self) -> bool:
        """Submit control state; blocks repeated submits while a save is in flight."""
        if self.store.saving:
            return True
        return self.form is not None and self.form.is_submitting

    # Edit surface

    def open_create(self) -> FormStateMachine:
        self.editing = None
        self.form_version += 1
        self.form = FormStateMachine(self.schema.fields, today=self._today)
        logger.info(f"Opened create form for {self.record_label}")
        return self.form

    def open_edit(self, record: Record) -> FormStateMachine:
        self.editing = record
        self.form_version += 1
        self.form = FormStateMachine(
            self.schema.fields,
            initial_values=values_from_record(record.values, self.schema.fields),
            today=self._today
        )
        logger.info(f"Opened edit form for record {record.id}")
        return self.form

    def close_form(self) -> None:
        self.form = None
        self.editing = None

    def pending_changes(self) -> List[str]:
        """Labels of fields changed in the edit form relative to the record."""
        if self.form is None or self.editing is None:
            return []
        original = values_from_record(self.editing.values, self.schema.fields)
        return changed_labels(original, self.form.values, self.schema.fields)

    async def submit(self) -> bool:
        """
        Validate the open form and persist it.

        Returns:
            True when the record was saved and the surface closed
        """
        form = self.form
        if form is None:
            logger.warning("Submit without an open form")
            return False

        if self.submit_disabled:
            logger.warning("Submit ignored while a save is in progress")
            return False

        values = form.submit_attempt()
        if values is None:
            return False

        editing = self.editing
        form.begin_submit()
        try:
            if editing is not None:
                await self.store.update(editing.id, values)
                message = f"{self.record_label} updated successfully!"
            else:
                await self.store.create(values)
                message = f"{self.record_label} created successfully!"
        except DuplicateRecordError as e:
            form.end_submit()
            form.set_field_error(e.field_name, e.message)
            self.notifier.error(e.message)
            return False
        except TransportError as e:
            form.end_submit()
            logger.error(f"Saving {self.record_label.lower()} failed: {e.get_full_details()}")
            self.notifier.error(GENERIC_FAILURE_MESSAGE)
            return False

        form.end_submit()
        self.notifier.success(message)

        # The user may have closed or reopened the surface meanwhile
        if self.form is form:
            self.close_form()
        return True

    # Delete confirmation

    def request_delete(self, record: Record) -> None:
        self.pending_delete = record

    def cancel_delete(self) -> None:
        self.pending_delete = None

    @property
    def confirmation_title(self) -> str:
        return f"Delete {self.record_label}"

    @property
    def confirmation_message(self) -> str:
        if self.pending_delete is None:
            return ''
        name = self.schema.display_name(self.pending_delete.values)
        return f"Are you sure you want to delete {name}? This action cannot be undone."

    async def confirm_delete(self) -> bool:
        """Delete the record awaiting confirmation."""
        record = self.pending_delete
        if record is None:
            logger.warning("Delete confirmed with nothing pending")
            return False

        if self.store.saving:
            logger.warning("Delete ignored while a save is in progress")
            return False

        try:
            await self.store.delete(record.id)
        except TransportError as e:
            logger.error(f"Deleting record {record.id} failed: {e.message}")
            self.notifier.error(f"Failed to delete {self.record_label.lower()}. Please try again.")
            return False

        self.notifier.success(f"{self.record_label} deleted successfully!")
        if self.pending_delete is record:
            self.pending_delete = None
        return True

    # Collection

    async def refresh(self) -> bool:
        """Reload the collection, notifying on failure."""
        ok = await self.store.load()
        if not ok:
            self.notifier.error(self.store.error or GENERIC_FAILURE_MESSAGE)
        return ok

    def reset(self) -> None:
        """Drop every open surface and the loaded collection."""
        self.close_form()
        self.pending_delete = None
        self.store.reset()
