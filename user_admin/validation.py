"""
Validation engine for schema-driven forms.

Pure functions: a single value is checked against one field's rules,
and a whole values mapping is checked against a field list. All values
are text; numeric and date rules parse the text at validation time.
"""

import math
import re
from datetime import date
from typing import Dict, Optional, Iterable, Mapping
import logging

from .field_schema import FieldSchema, ValidationRules, TODAY

logger = logging.getLogger(__name__)

# Pre-defined validation patterns
PATTERNS: Dict[str, re.Pattern] = {
    'email': re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'),
    'phone': re.compile(r'^[0-9]{10}$'),
    'url': re.compile(r'^https?://.+'),
    'alphanumeric': re.compile(r'^[a-zA-Z0-9\s]+$'),
    'alpha': re.compile(r'^[a-zA-Z\s]+$'),
}

# Pattern error messages
PATTERN_MESSAGES: Dict[str, str] = {
    'email': 'Please enter a valid email address',
    'phone': 'Please enter a valid 10-digit phone number',
    'url': 'Please enter a valid URL',
    'alphanumeric': 'Only letters and numbers are allowed',
    'alpha': 'Only letters are allowed',
}

REQUIRED_MESSAGE = 'This field is required'
INVALID_FORMAT_MESSAGE = 'Invalid format'

RADIX_LITERAL = re.compile(r"0[xX][0-9a-fA-F]+\Z|0[oO][0-7]+\Z|0[bB][01]+\Z")


def _parse_number(value: str) -> Optional[float]:
    """
    Parse text as a finite number; None when it is not one.

    Digit separators ("1_000") are rejected and unsigned 0x/0o/0b
    literals are accepted.
    """
    text = value.strip()
    if "_" in text:
        return None

    try:
        number = float(text)
    except ValueError:
        if not RADIX_LITERAL.match(text):
            return None
        number = float(int(text, 0))

    if not math.isfinite(number):
        return None
    return number


def validate_field(
    value: str,
    rules: Optional[ValidationRules] = None,
    required: bool = False,
    today: Optional[date] = None
) -> Optional[str]:
    """
    Validate a single field value against its rules.

    Checks run in a fixed order and the first failure wins: required,
    length, numeric range, pattern, date bounds, custom predicate.
    An empty optional value skips every rule.

    Args:
        value: Current text value
        rules: Validation rules of the field
        required: Whether the field must be filled
        today: Date used to resolve the "today" sentinel (defaults to the current date)

    Returns:
        Error message if invalid, None if valid
    """
    if value is None:
        value = ''

    if required and not value.strip():
        return REQUIRED_MESSAGE

    # If not required and empty, skip other validations
    if not value.strip():
        return None

    if rules is None:
        return None

    if rules.min_length is not None and len(value) < rules.min_length:
        return f"Must be at least {rules.min_length} characters"

    if rules.max_length is not None and len(value) > rules.max_length:
        return f"Must be no more than {rules.max_length} characters"

    # min/max reject non-numeric text even on non-numeric kinds
    if rules.min is not None:
        number = _parse_number(value)
        if number is None or number < rules.min:
            return f"Must be at least {rules.min}"

    if rules.max is not None:
        number = _parse_number(value)
        if number is None or number > rules.max:
            return f"Must be no more than {rules.max}"

    if rules.pattern is not None:
        # Named patterns must cover the whole value; custom expressions are
        # searched, so schema authors anchor them with \A and \Z themselves
        if isinstance(rules.pattern, str):
            matched = PATTERNS[rules.pattern].fullmatch(value)
            message = PATTERN_MESSAGES[rules.pattern]
        else:
            matched = rules.pattern.search(value)
            message = INVALID_FORMAT_MESSAGE

        if not matched:
            return message

    # ISO dates compare correctly as strings
    if rules.max_date is not None:
        if rules.max_date == TODAY:
            max_date = (today or date.today()).isoformat()
        else:
            max_date = rules.max_date
        if value > max_date:
            shown = 'today' if rules.max_date == TODAY else max_date
            return f"Date must be on or before {shown}"

    if rules.min_date is not None:
        if rules.min_date == TODAY:
            min_date = (today or date.today()).isoformat()
        else:
            min_date = rules.min_date
        if value < min_date:
            shown = 'today' if rules.min_date == TODAY else min_date
            return f"Date must be on or after {shown}"

    if rules.custom is not None:
        return rules.custom(value)

    return None


def validate_schema_field(field: FieldSchema, value: Optional[str], today: Optional[date] = None) -> Optional[str]:
    """Validate a value against a field declaration."""
    return validate_field(value or '', field.rules, field.required, today=today)


def validate_form(
    values: Mapping[str, str],
    fields: Iterable[FieldSchema],
    today: Optional[date] = None
) -> Dict[str, str]:
    """
    Validate all form fields.

    Only declared fields are checked; a missing value counts as empty.

    Args:
        values: Mapping of field name to text value
        fields: Field declarations
        today: Date used to resolve the "today" sentinel

    Returns:
        Mapping of field name to error message, for failing fields only
    """
    errors: Dict[str, str] = {}

    for field in fields:
        error = validate_schema_field(field, values.get(field.name), today=today)
        if error:
            errors[field.name] = error

    if errors:
        logger.debug(f"Form validation failed for fields: {sorted(errors)}")

    return errors
