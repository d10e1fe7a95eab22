"""
Change tracking between a record and the values of its edit form.
"""

from typing import Dict, Iterable, List, Mapping
import logging

from deepdiff import DeepDiff

from .field_schema import FieldSchema

logger = logging.getLogger(__name__)


def calculate_changes(original: Mapping[str, str], modified: Mapping[str, str],
                      fields: Iterable[FieldSchema]) -> Dict[str, Dict[str, str]]:
    """
    Compare two values mappings over the declared fields.

    Args:
        original: Values the form was seeded with
        modified: Current form values
        fields: Field declarations; other keys are ignored

    Returns:
        Mapping of field name to {'old': ..., 'new': ...}, in schema order
    """
    field_list = list(fields)
    names = [f.name for f in field_list]

    scoped_original = {name: original.get(name) or '' for name in names}
    scoped_modified = {name: modified.get(name) or '' for name in names}

    diff = DeepDiff(scoped_original, scoped_modified)
    changed = set(diff.affected_root_keys)

    changes = {}
    for name in names:
        if name in changed:
            changes[name] = {'old': scoped_original[name], 'new': scoped_modified[name]}

    if changes:
        logger.debug(f"Changed fields: {list(changes)}")
    return changes


def changed_labels(original: Mapping[str, str], modified: Mapping[str, str],
                   fields: Iterable[FieldSchema]) -> List[str]:
    """Labels of the fields whose value differs, in schema order."""
    field_list = list(fields)
    changes = calculate_changes(original, modified, field_list)
    return [f.label for f in field_list if f.name in changes]
