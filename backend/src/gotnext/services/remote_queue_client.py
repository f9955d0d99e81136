"""Client for the optional remote queue service.

The remote service keeps its own list of named entries. It is a mirror
only: nothing in the rotation reads from it, and every failure here is
reported back to the caller as a result instead of an exception.
"""

import itertools
import logging
from typing import Optional

import httpx

from gotnext.models.remote_queue import RemoteQueueEntry, RemoteQueueResult

logger = logging.getLogger(__name__)


class MockRemoteQueueClient:
    """In-memory stand-in for the remote queue service.

    Used when remote mirroring is disabled, and in tests.
    """

    def __init__(self):
        self.entries: dict[int, RemoteQueueEntry] = {}
        self._ids = itertools.count(1)

    async def add_player(self, name: str) -> RemoteQueueResult[RemoteQueueEntry]:
        if not name or not name.strip():
            return RemoteQueueResult(error="Player name cannot be empty")
        entry = RemoteQueueEntry(id=next(self._ids), name=name.strip())
        self.entries[entry.id] = entry
        return RemoteQueueResult(data=entry)

    async def list_queue(self) -> RemoteQueueResult[list[RemoteQueueEntry]]:
        return RemoteQueueResult(data=list(self.entries.values()))

    async def delete_player(self, entry_id: int) -> RemoteQueueResult[str]:
        if self.entries.pop(entry_id, None) is None:
            return RemoteQueueResult(error=f"Entry {entry_id} not found")
        return RemoteQueueResult(data=f"Deleted {entry_id}")

    async def close(self):
        pass


class RemoteQueueClient:
    """HTTP client for the remote queue service.

    Endpoints (relative to ``base_url``):
        POST   /add?name={name}  -> {"id": int, "name": str}
        GET    ""                -> [{"id": int, "name": str}, ...]
        DELETE /{id}             -> text
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the remote queue client.

        Args:
            base_url: Queue endpoint root, e.g. http://localhost:8080/api/queue
            timeout: Request timeout in seconds
            transport: Optional custom transport (tests pass httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _request(self, method: str, path: str = "", params: dict | None = None):
        url = f"{self.base_url}{path}"
        logger.debug(f"Remote queue {method} {url} params={params}")
        try:
            client = await self._get_client()
            response = await client.request(method, url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Remote queue {method} {url} failed: "
                f"status {e.response.status_code}, body: {e.response.text[:200]}"
            )
            return RemoteQueueResult(
                error=f"HTTP error! status: {e.response.status_code}, body: {e.response.text}"
            )
        except httpx.HTTPError as e:
            logger.error(f"Remote queue {method} {url} failed: {e}")
            return RemoteQueueResult(error=str(e) or type(e).__name__)

        if "application/json" in response.headers.get("content-type", ""):
            return RemoteQueueResult(data=response.json())
        return RemoteQueueResult(data=response.text)

    async def add_player(self, name: str) -> RemoteQueueResult[RemoteQueueEntry]:
        """Add a named entry to the remote queue."""
        if not name or not name.strip():
            logger.error("Cannot add player to remote queue: name is empty")
            return RemoteQueueResult(error="Player name cannot be empty")

        result = await self._request("POST", "/add", params={"name": name.strip()})
        if not result.ok:
            return result
        try:
            entry = RemoteQueueEntry(id=int(result.data["id"]), name=str(result.data["name"]))
        except (KeyError, TypeError, ValueError):
            logger.error(f"Unexpected remote queue add response: {result.data!r}")
            return RemoteQueueResult(error="Unexpected response from remote queue")
        return RemoteQueueResult(data=entry)

    async def list_queue(self) -> RemoteQueueResult[list[RemoteQueueEntry]]:
        """Fetch every entry in the remote queue."""
        result = await self._request("GET")
        if not result.ok:
            return result
        if not isinstance(result.data, list):
            logger.error(f"Unexpected remote queue list response: {result.data!r}")
            return RemoteQueueResult(error="Unexpected response from remote queue")
        entries = []
        for item in result.data:
            try:
                entries.append(RemoteQueueEntry(id=int(item["id"]), name=str(item["name"])))
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Skipping malformed remote queue entry: {item!r}")
        return RemoteQueueResult(data=entries)

    async def delete_player(self, entry_id: int) -> RemoteQueueResult[str]:
        """Delete an entry from the remote queue."""
        result = await self._request("DELETE", f"/{entry_id}")
        if not result.ok:
            return result
        return RemoteQueueResult(data=str(result.data))


def get_remote_queue_client(
    base_url: Optional[str] = None,
    timeout: float = 10.0,
    use_mock: bool = False,
) -> MockRemoteQueueClient | RemoteQueueClient:
    """Factory function to get the appropriate remote queue client.

    Args:
        base_url: Remote queue endpoint root
        timeout: Request timeout in seconds
        use_mock: Force use of the in-memory client

    Returns:
        RemoteQueueClient or MockRemoteQueueClient
    """
    if use_mock or not base_url:
        logger.info("Using MockRemoteQueueClient")
        return MockRemoteQueueClient()
    logger.info(f"Using RemoteQueueClient at {base_url}")
    return RemoteQueueClient(base_url, timeout=timeout)
