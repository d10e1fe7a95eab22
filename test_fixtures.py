"""
Test fixtures and doubles shared by the console tests.

Provides an in-memory record service, a Streamlit stand-in with a
session state that supports both item and attribute access, and sample
user payloads.
"""

import asyncio
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock


def user_payload(record_id: str, first: str, last: str = "Test", phone: str = "5550000000",
                 **extra) -> Dict[str, Any]:
    """Wire object of a user as the REST backend returns it."""
    return {
        "id": record_id,
        "firstName": first,
        "lastName": last,
        "email": f"{first.lower()}@example.com",
        "phoneNumber": phone,
        **extra
    }


class StubService:
    """
    In-memory stand-in for RecordService.

    Every operation is an AsyncMock so tests can count calls or swap in a
    side effect. Each call yields to the event loop once, like a real
    network round trip.
    """

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None):
        self.records = list(records or [])
        self.next_id = 100
        self.list = AsyncMock(side_effect=self._list)
        self.create = AsyncMock(side_effect=self._create)
        self.update = AsyncMock(side_effect=self._update)
        self.delete = AsyncMock(side_effect=self._delete)

    async def _list(self):
        await asyncio.sleep(0)
        return list(self.records)

    async def _create(self, values):
        await asyncio.sleep(0)
        self.next_id += 1
        record = {"id": str(self.next_id), **values}
        self.records.append(record)
        return record

    async def _update(self, record_id, values):
        await asyncio.sleep(0)
        return {"id": record_id, **values}

    async def _delete(self, record_id):
        await asyncio.sleep(0)


class DummyContext:
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class SessionStateStub:
    """Dict-backed replacement for st.session_state."""

    def __init__(self, initial=None):
        super().__setattr__("_data", dict(initial or {}))

    def get(self, key, default=None):
        return self._data.get(key, default)

    def __getitem__(self, key):
        return self._data[key]

    def __setitem__(self, key, value):
        self._data[key] = value

    def __contains__(self, key):
        return key in self._data

    def __getattr__(self, name):
        if name in self._data:
            return self._data[name]
        raise AttributeError(name)

    def __setattr__(self, name, value):
        if name == "_data":
            super().__setattr__(name, value)
        else:
            self._data[name] = value


def mock_streamlit(session_state=None):
    """Build a namespace with the Streamlit calls the views make."""

    def _columns(spec, **_kwargs):
        count = spec if isinstance(spec, int) else len(spec)
        return tuple(DummyContext() for _ in range(count))

    return SimpleNamespace(
        session_state=SessionStateStub(session_state),
        container=MagicMock(return_value=DummyContext()),
        columns=MagicMock(side_effect=_columns),
        subheader=MagicMock(),
        markdown=MagicMock(),
        write=MagicMock(),
        caption=MagicMock(),
        metric=MagicMock(),
        info=MagicMock(),
        error=MagicMock(),
        button=MagicMock(return_value=False),
        text_input=MagicMock(),
        text_area=MagicMock(),
        selectbox=MagicMock(),
        rerun=MagicMock(),
        sidebar=DummyContext(),
        header=MagicMock(),
        divider=MagicMock(),
        expander=MagicMock(return_value=DummyContext()),
        json=MagicMock(),
    )


def run_now(action):
    """Synchronous stand-in for session_manager.run_async."""
    return asyncio.run(action)
