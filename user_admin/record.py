"""
Record entity managed by the console.

A record is an opaque server-assigned id, one text value per declared
schema field, and a side map of any other keys the server returned.
"""

from typing import Dict, Any, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field

ID_KEY = 'id'


class Record(BaseModel):
    """One managed record (e.g. a user)."""

    model_config = ConfigDict(frozen=True)

    id: str
    values: Dict[str, str] = Field(default_factory=dict)
    extra: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_wire(cls, data: Mapping[str, Any], field_names: Iterable[str]) -> 'Record':
        """
        Split a flat wire object into declared values and extra attributes.

        Args:
            data: JSON object as returned by the API
            field_names: Names of the declared schema fields

        Returns:
            Record instance
        """
        if ID_KEY not in data or data[ID_KEY] is None:
            raise ValueError("record is missing its 'id'")

        names = set(field_names)
        values = {}
        extra = {}
        for key, value in data.items():
            if key == ID_KEY:
                continue
            if key in names:
                values[key] = '' if value is None else str(value)
            else:
                extra[key] = value

        # Declared fields are always present as text
        for name in names:
            values.setdefault(name, '')

        return cls(id=str(data[ID_KEY]), values=values, extra=extra)

    def to_wire(self) -> Dict[str, Any]:
        """Flat JSON object including the id and extra attributes."""
        return {ID_KEY: self.id, **self.extra, **self.values}

    def get(self, name: str, default: str = '') -> str:
        return self.values.get(name, default)


def request_body(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Body for create/update requests; never carries an id."""
    return {key: value for key, value in values.items() if key != ID_KEY}
