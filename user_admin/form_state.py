"""
Form state machine for one active editing session.

Holds values, per-field errors and touched flags. Each transition builds
a fresh FormState instead of mutating the previous one, so a renderer
holding an older snapshot never sees a half-applied update.
"""

from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Callable, Iterable, Mapping
import logging

from pydantic import BaseModel, ConfigDict, Field

from .field_schema import FieldSchema, get_initial_values
from .validation import validate_schema_field, validate_form

logger = logging.getLogger(__name__)


class FormStatus(str, Enum):
    """Overall form phase."""
    EDITING = 'editing'
    SUBMITTING = 'submitting'


class FormState(BaseModel):
    """Immutable snapshot of a form."""

    model_config = ConfigDict(frozen=True)

    values: Dict[str, str] = Field(default_factory=dict)
    errors: Dict[str, str] = Field(default_factory=dict)
    touched: Dict[str, bool] = Field(default_factory=dict)
    status: FormStatus = FormStatus.EDITING


class FormStateMachine:
    """
    Drives value change, blur and submit transitions for a field list.

    Validation is lazy: a field's error is only computed once the field
    has been blurred (touched) or a submit was attempted.
    """

    def __init__(
        self,
        fields: Iterable[FieldSchema],
        initial_values: Optional[Mapping[str, str]] = None,
        on_submit: Optional[Callable[[Dict[str, str]], None]] = None,
        today: Optional[date] = None
    ):
        """
        Create a form seeded from field defaults or from existing values.

        Args:
            fields: Field declarations, in display order
            initial_values: Values of an existing record (edit); defaults are used when omitted
            on_submit: Called exactly once per successful submit attempt with the values
            today: Fixed date for "today" date bounds (tests)
        """
        self._fields: List[FieldSchema] = list(fields)
        self._on_submit = on_submit
        self._today = today

        values = get_initial_values(self._fields)
        if initial_values is not None:
            values.update({name: '' if value is None else str(value) for name, value in initial_values.items()})

        self.state = FormState(values=values)

    @property
    def fields(self) -> List[FieldSchema]:
        return list(self._fields)

    @property
    def values(self) -> Dict[str, str]:
        return dict(self.state.values)

    @property
    def errors(self) -> Dict[str, str]:
        return dict(self.state.errors)

    @property
    def touched(self) -> Dict[str, bool]:
        return dict(self.state.touched)

    @property
    def status(self) -> FormStatus:
        return self.state.status

    @property
    def is_submitting(self) -> bool:
        return self.state.status == FormStatus.SUBMITTING

    def get_field(self, name: str) -> Optional[FieldSchema]:
        for field in self._fields:
            if field.name == name:
                return field
        return None

    def replace_fields(self, fields: Iterable[FieldSchema]) -> None:
        """
        Swap the field list. Errors of removed fields are dropped; their
        values and touched flags stay but are never surfaced again.
        """
        self._fields = list(fields)
        names = {field.name for field in self._fields}
        prev = self.state
        self.state = prev.model_copy(update={
            'errors': {name: msg for name, msg in prev.errors.items() if name in names}
        })

    def _with_field_error(self, errors: Dict[str, str], field: FieldSchema, value: str) -> Dict[str, str]:
        new_errors = dict(errors)
        error = validate_schema_field(field, value, today=self._today)
        if error:
            new_errors[field.name] = error
        else:
            new_errors.pop(field.name, None)
        return new_errors

    def change(self, name: str, value: str) -> FormState:
        """Update a value; re-validate only if the field is already touched."""
        value = '' if value is None else value
        prev = self.state
        values = {**prev.values, name: value}
        errors = prev.errors

        field = self.get_field(name)
        if field is not None and prev.touched.get(name):
            errors = self._with_field_error(prev.errors, field, value)

        self.state = prev.model_copy(update={'values': values, 'errors': errors})
        return self.state

    def blur(self, name: str) -> FormState:
        """Mark a field touched and recompute its error."""
        prev = self.state
        errors = prev.errors

        field = self.get_field(name)
        if field is not None:
            errors = self._with_field_error(prev.errors, field, prev.values.get(name, ''))

        self.state = prev.model_copy(update={
            'touched': {**prev.touched, name: True},
            'errors': errors
        })
        return self.state

    def submit_attempt(self) -> Optional[Dict[str, str]]:
        """
        Touch every field and validate the whole form.

        Returns:
            The current values when the form is valid (after handing them to
            on_submit, if set), otherwise None with all errors visible
        """
        prev = self.state
        if prev.status == FormStatus.SUBMITTING:
            logger.warning("Submit attempt ignored: a submission is already in progress")
            return None

        touched = {field.name: True for field in self._fields}
        errors = validate_form(prev.values, self._fields, today=self._today)

        self.state = prev.model_copy(update={'touched': touched, 'errors': errors})

        if errors:
            logger.info(f"Submit rejected locally, invalid fields: {sorted(errors)}")
            return None

        values = dict(prev.values)
        if self._on_submit is not None:
            self._on_submit(values)
        return values

    def set_field_error(self, name: str, message: str) -> FormState:
        """Show an externally detected error (e.g. duplicate key) on a field."""
        if self.get_field(name) is None:
            logger.warning(f"Ignoring error for undeclared field '{name}': {message}")
            return self.state

        prev = self.state
        self.state = prev.model_copy(update={
            'errors': {**prev.errors, name: message},
            'touched': {**prev.touched, name: True}
        })
        return self.state

    def begin_submit(self) -> None:
        self.state = self.state.model_copy(update={'status': FormStatus.SUBMITTING})

    def end_submit(self) -> None:
        self.state = self.state.model_copy(update={'status': FormStatus.EDITING})

    def visible_error(self, name: str) -> Optional[str]:
        """Error shown for a field: only once touched and only for declared fields."""
        if self.get_field(name) is None:
            return None
        if not self.state.touched.get(name):
            return None
        return self.state.errors.get(name)

    def visible_errors(self) -> Dict[str, str]:
        result = {}
        for field in self._fields:
            error = self.visible_error(field.name)
            if error:
                result[field.name] = error
        return result
