"""
REST transport for record CRUD.

Usage:
    async with RecordService(base_url="http://localhost:3001/users") as service:
        records = await service.list()
        created = await service.create({"firstName": "Ada", ...})

The base address is passed in by the caller (see config_loader); this
module never reads the environment.
"""

from typing import Any, Dict, List, Mapping, Optional
import logging

import httpx

from .exceptions import TransportError
from .record import request_body

logger = logging.getLogger(__name__)

# Failure messages per operation
FAILURE_MESSAGES = {
    'list': 'Failed to fetch records',
    'get': 'Failed to fetch record',
    'create': 'Failed to create record',
    'update': 'Failed to update record',
    'delete': 'Failed to delete record',
}


class RecordService:
    """Async client for a json-server style REST collection.

    Attributes:
        base_url: Collection URL, e.g. http://localhost:3001/users
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the service.

        Args:
            base_url: Collection URL (GET/POST here, PUT/DELETE at <base_url>/<id>)
            timeout: Request timeout in seconds
            client: Long-lived client to reuse; without one, each call opens its own.
                The service takes ownership of an injected client: close() and
                leaving `async with` close it, so do not share it with other code
        """
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def __aenter__(self) -> "RecordService":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the injected HTTP client, if any.

        The service owns the client it was given. Per-call clients are
        already closed when their request returns.
        """
        if self._client is not None:
            await self._client.aclose()

    async def _send(self, method: str, url: str, json: Optional[Dict[str, Any]]) -> httpx.Response:
        if self._client is not None:
            return await self._client.request(method=method, url=url, json=json)
        # Streamlit runs each action in its own event loop; a pooled client
        # must not outlive the loop it was created in
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.request(method=method, url=url, json=json)

    def _url(self, record_id: Optional[str] = None) -> str:
        if record_id is None:
            return self.base_url
        return f"{self.base_url}/{record_id}"

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        expect_body: bool = True,
    ) -> Any:
        """Make a request, translating every failure into TransportError."""
        message = FAILURE_MESSAGES[operation]
        logger.debug(f"{method} {url}")

        try:
            response = await self._send(method, url, json)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise TransportError(message, operation, detail=str(e)) from e

        if not response.is_success:
            logger.error(f"{method} {url} returned {response.status_code}")
            raise TransportError(
                message,
                operation,
                status_code=response.status_code,
                detail=response.text,
            )

        if not expect_body:
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{method} {url} returned invalid JSON: {e}")
            raise TransportError(message, operation, status_code=response.status_code, detail=str(e)) from e

    async def list(self) -> List[Dict[str, Any]]:
        """Fetch the full collection, in server order."""
        data = await self._request('list', 'GET', self._url())
        if not isinstance(data, list):
            raise TransportError(FAILURE_MESSAGES['list'], 'list', detail="expected a JSON array")
        return data

    async def get(self, record_id: str) -> Dict[str, Any]:
        """Fetch a single record by id."""
        return await self._request('get', 'GET', self._url(record_id))

    async def create(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Create a record; the server assigns the id."""
        return await self._request('create', 'POST', self._url(), json=request_body(values))

    async def update(self, record_id: str, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Replace a record's attributes."""
        return await self._request('update', 'PUT', self._url(record_id), json=request_body(values))

    async def delete(self, record_id: str) -> None:
        """Delete a record."""
        await self._request('delete', 'DELETE', self._url(record_id), expect_body=False)
