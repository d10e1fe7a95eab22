"""
Declarative field schema model for the user administration console.

A form is described entirely by data: an ordered list of FieldSchema
entries, each naming its input kind, label, required flag and validation
rules. The validation engine, form state machine and Streamlit renderer
all consume this one shape, so adding a field is a configuration change.
"""

import re
from datetime import date
from enum import Enum
from typing import Dict, Any, List, Optional, Union, Literal, Callable, Mapping, Iterable
import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

# Named patterns understood by the validation engine
NamedPattern = Literal['email', 'phone', 'url', 'alphanumeric', 'alpha']

# Sentinel accepted by max_date/min_date, resolved at validation time
TODAY = 'today'


class FieldKind(str, Enum):
    """Input kinds a field can be rendered as."""
    TEXT = 'text'
    EMAIL = 'email'
    PHONE = 'tel'
    NUMBER = 'number'
    DATE = 'date'
    SELECT = 'select'
    TEXTAREA = 'textarea'
    URL = 'url'


class ValidationRules(BaseModel):
    """Optional validation bundle attached to a field."""

    model_config = ConfigDict(frozen=True, extra='forbid', arbitrary_types_allowed=True)

    min_length: Optional[int] = Field(default=None, ge=0)
    max_length: Optional[int] = Field(default=None, ge=0)
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    pattern: Optional[Union[NamedPattern, re.Pattern]] = Field(default=None, union_mode='left_to_right')
    min_date: Optional[str] = None
    max_date: Optional[str] = None
    custom: Optional[Callable[[str], Optional[str]]] = None

    @field_validator('min_date', 'max_date', mode='before')
    @classmethod
    def _normalize_date_bound(cls, value: Any) -> Any:
        # YAML turns unquoted 2024-01-31 into a date object
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, str) and value != TODAY:
            try:
                date.fromisoformat(value)
            except ValueError as e:
                raise ValueError(f"date bound must be an ISO date or '{TODAY}': {value!r}") from e
        return value

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in type(self).model_fields)


class ChoiceOption(BaseModel):
    """One (value, label) pair of a select field."""

    model_config = ConfigDict(frozen=True)

    value: str
    label: str


class FieldSchema(BaseModel):
    """
    Description of one editable record attribute.

    Schema files use the keys ``type`` and ``validation``; in Python the
    same attributes are ``kind`` and ``rules``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='ignore')

    name: str = Field(min_length=1)
    label: str
    kind: FieldKind = Field(default=FieldKind.TEXT, alias='type')
    required: bool = False
    placeholder: Optional[str] = None
    rules: ValidationRules = Field(default_factory=ValidationRules, alias='validation')
    choices: List[ChoiceOption] = Field(default_factory=list)
    rows: Optional[int] = Field(default=None, ge=1)
    disabled: bool = False
    default: Optional[str] = None

    @model_validator(mode='before')
    @classmethod
    def _fill_label(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get('label') and data.get('name'):
            data = dict(data)
            data['label'] = data['name']
        return data

    @field_validator('choices', mode='before')
    @classmethod
    def _coerce_choices(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            # Plain strings double as value and label
            return [
                {'value': str(item), 'label': str(item)} if not isinstance(item, (dict, ChoiceOption)) else item
                for item in value
            ]
        return value

    @field_validator('default', mode='before')
    @classmethod
    def _coerce_default(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, date):
            return value.isoformat()
        return str(value)

    @model_validator(mode='after')
    def _check_choices(self) -> 'FieldSchema':
        if self.kind == FieldKind.SELECT and not self.choices:
            raise ValueError(f"select field '{self.name}' must declare at least one choice")
        if self.kind != FieldKind.SELECT and self.choices:
            raise ValueError(f"field '{self.name}' declares choices but is not a select field")
        return self

    def choice_label(self, value: str) -> str:
        """Return the label for a select value, or the value itself."""
        for option in self.choices:
            if option.value == value:
                return option.label
        return value


class FormSchema(BaseModel):
    """Ordered field declaration describing one editable record type."""

    model_config = ConfigDict(frozen=True, extra='ignore')

    title: str = 'Untitled Schema'
    description: str = ''
    record_label: str = 'Record'
    display_fields: List[str] = Field(default_factory=list)
    unique_field: Optional[str] = None
    fields: List[FieldSchema] = Field(min_length=1)

    @field_validator('fields', mode='before')
    @classmethod
    def _fields_from_mapping(cls, value: Any) -> Any:
        # Schema files declare fields as an ordered mapping keyed by name
        if isinstance(value, dict):
            converted = []
            for field_name, field_config in value.items():
                if not isinstance(field_config, dict):
                    raise ValueError(f"Field '{field_name}' config must be a mapping")
                converted.append({**field_config, 'name': field_name})
            return converted
        return value

    @model_validator(mode='after')
    def _check_references(self) -> 'FormSchema':
        names = [f.name for f in self.fields]
        seen = set()
        for name in names:
            if name in seen:
                raise ValueError(f"duplicate field name '{name}'")
            seen.add(name)

        for name in self.display_fields:
            if name not in seen:
                raise ValueError(f"display field '{name}' is not declared")

        if self.unique_field is not None and self.unique_field not in seen:
            raise ValueError(f"unique field '{self.unique_field}' is not declared")

        return self

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[FieldSchema]:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def display_name(self, values: Mapping[str, str]) -> str:
        """Human readable name for a record, e.g. "Ada Lovelace"."""
        parts = [values.get(name, '') for name in self.display_fields]
        text = ' '.join(part for part in parts if part).strip()
        return text or f"this {self.record_label.lower()}"


def get_initial_values(fields: Iterable[FieldSchema]) -> Dict[str, str]:
    """
    Build the initial values mapping for a create form.

    Args:
        fields: Field declarations

    Returns:
        Mapping of field name to its declared default, or empty string
    """
    return {field.name: field.default or '' for field in fields}


def values_from_record(record_values: Mapping[str, Any], fields: Iterable[FieldSchema]) -> Dict[str, str]:
    """
    Seed an edit form from an existing record.

    Only declared fields are copied; a missing or null value becomes "".
    """
    values = {}
    for field in fields:
        value = record_values.get(field.name)
        values[field.name] = '' if value is None else str(value)
    return values
