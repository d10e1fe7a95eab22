"""
In-memory record collection backed by the REST transport.

The store is the only in-memory owner of the loaded records. Every
transition replaces the whole StoreState; nothing is mutated in place.
Responses that arrive after reset() are dropped instead of being applied
to the fresh state.
"""

import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
import logging

from pydantic import BaseModel, ConfigDict

from .exceptions import DuplicateRecordError, TransportError
from .field_schema import FieldKind, FormSchema
from .record import Record, request_body
from .record_service import FAILURE_MESSAGES

logger = logging.getLogger(__name__)


class StoreState(BaseModel):
    """Immutable snapshot of the collection."""

    model_config = ConfigDict(frozen=True)

    records: Tuple[Record, ...] = ()
    loading: bool = False
    saving: bool = False
    error: Optional[str] = None


def phone_key(value: Optional[str]) -> str:
    """Digits-only form of a phone number, so 555-123-4567 equals 5551234567."""
    return re.sub(r'[^0-9]', '', value or '')


def text_key(value: Optional[str]) -> str:
    """Case- and surrounding-space-insensitive form of any other key."""
    return (value or '').strip().lower()


def key_normalizer_for(schema: FormSchema) -> Callable[[Optional[str]], str]:
    """Comparison function for the schema's uniqueness key, chosen by field kind."""
    field = schema.get_field(schema.unique_field) if schema.unique_field else None
    if field is not None and field.kind == FieldKind.PHONE:
        return phone_key
    return text_key


class RecordStore:
    """Record collection with loading/saving flags and last error."""

    def __init__(
        self,
        service: Any,
        schema: FormSchema,
        key_normalizer: Optional[Callable[[Optional[str]], str]] = None,
    ):
        """
        Args:
            service: Transport exposing async list/create/update/delete (RecordService)
            schema: Form schema of the managed record type
            key_normalizer: Maps a uniqueness-key value to its comparison form;
                defaults to digits-only for phone fields and case-folded text otherwise
        """
        self._service = service
        self._schema = schema
        self._normalize_key = key_normalizer or key_normalizer_for(schema)
        self._generation = 0
        self.state = StoreState()

    @property
    def records(self) -> List[Record]:
        return list(self.state.records)

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def saving(self) -> bool:
        return self.state.saving

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    @property
    def count(self) -> int:
        return len(self.state.records)

    def get(self, record_id: str) -> Optional[Record]:
        for record in self.state.records:
            if record.id == record_id:
                return record
        return None

    def _apply(self, generation: int, **changes: Any) -> bool:
        """Replace the state unless the store was reset since `generation`."""
        if generation != self._generation:
            logger.warning(f"Discarding stale response for a reset store: {sorted(changes)}")
            return False
        self.state = self.state.model_copy(update=changes)
        return True

    def _to_record(self, data: Mapping[str, Any], operation: str) -> Record:
        try:
            return Record.from_wire(data, self._schema.field_names())
        except (ValueError, TypeError) as e:
            raise TransportError(FAILURE_MESSAGES[operation], operation, detail=f"malformed record: {e}") from e

    def _check_unique(self, values: Mapping[str, str], exclude_id: Optional[str] = None) -> None:
        """Reject values whose uniqueness key is already used by another loaded record."""
        field_name = self._schema.unique_field
        if field_name is None:
            return

        raw_value = values.get(field_name, '')
        key = self._normalize_key(raw_value)
        if not key:
            return

        for record in self.state.records:
            if record.id == exclude_id:
                continue
            if self._normalize_key(record.get(field_name)) == key:
                field = self._schema.get_field(field_name)
                label = field.label if field else field_name
                message = f"A {self._schema.record_label.lower()} with this {label.lower()} already exists"
                logger.warning(f"Duplicate {field_name} rejected (conflicts with record {record.id})")
                raise DuplicateRecordError(field_name, raw_value, message=message, conflicting_id=record.id)

    async def load(self) -> bool:
        """
        Replace the local collection with the server's.

        Returns:
            True on success; on failure the error is recorded and the
            previous records are kept
        """
        generation = self._generation
        self._apply(generation, loading=True, error=None)
        logger.info("Loading records")

        try:
            data = await self._service.list()
            records = tuple(self._to_record(item, 'list') for item in data)
        except TransportError as e:
            logger.error(f"Failed to load records: {e.message}")
            self._apply(generation, loading=False, error=e.message)
            return False

        if self._apply(generation, records=records, loading=False):
            logger.info(f"Loaded {len(records)} records")
        return True

    async def create(self, values: Mapping[str, str]) -> Record:
        """
        Create a record and append it to the collection.

        Raises:
            DuplicateRecordError: uniqueness key already used (no network call made)
            TransportError: the server call failed (also recorded in state.error)
        """
        generation = self._generation
        self._check_unique(values)
        self._apply(generation, saving=True, error=None)

        try:
            data = await self._service.create(dict(values))
            record = self._to_record(data, 'create')
        except TransportError as e:
            self._apply(generation, saving=False, error=e.message)
            raise

        if self._apply(generation, records=self.state.records + (record,), saving=False):
            logger.info(f"Created record {record.id}")
        return record

    async def update(self, record_id: str, values: Mapping[str, str]) -> Record:
        """
        Update a record in place, keeping its position.

        Raises:
            DuplicateRecordError: uniqueness key used by another record (no network call made)
            TransportError: the server call failed (also recorded in state.error)
        """
        generation = self._generation
        self._check_unique(values, exclude_id=record_id)

        existing = self.get(record_id)
        body: Dict[str, Any] = dict(values)
        if existing is not None:
            # Keep attributes the server added that the schema does not declare
            body = request_body({**existing.to_wire(), **body})

        self._apply(generation, saving=True, error=None)

        try:
            data = await self._service.update(record_id, body)
            record = self._to_record(data, 'update')
        except TransportError as e:
            self._apply(generation, saving=False, error=e.message)
            raise

        if existing is None:
            logger.warning(f"Updated record {record_id} is not in the loaded collection")

        records = tuple(record if r.id == record_id else r for r in self.state.records)
        if self._apply(generation, records=records, saving=False):
            logger.info(f"Updated record {record_id}")
        return record

    async def delete(self, record_id: str) -> None:
        """
        Delete a record and drop it from the collection.

        Raises:
            TransportError: the server call failed (also recorded in state.error)
        """
        generation = self._generation
        self._apply(generation, saving=True, error=None)

        try:
            await self._service.delete(record_id)
        except TransportError as e:
            self._apply(generation, saving=False, error=e.message)
            raise

        records = tuple(r for r in self.state.records if r.id != record_id)
        if self._apply(generation, records=records, saving=False):
            logger.info(f"Deleted record {record_id}")

    def clear_error(self) -> None:
        self.state = self.state.model_copy(update={'error': None})

    def reset(self) -> None:
        """Discard all state; responses of calls still in flight are ignored."""
        self._generation += 1
        self.state = StoreState()
        logger.info("Record store reset")
