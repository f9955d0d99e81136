"""Business logic services."""

from gotnext.services.rotation_engine import RotationEngine
from gotnext.services.session_manager import RotationSessionManager, SessionNotFoundError
from gotnext.services.remote_queue_client import (
    MockRemoteQueueClient,
    RemoteQueueClient,
    get_remote_queue_client,
)
from gotnext.services.name_store import InMemoryNameStore, JsonFileNameStore

__all__ = [
    "RotationEngine",
    "RotationSessionManager",
    "SessionNotFoundError",
    "MockRemoteQueueClient",
    "RemoteQueueClient",
    "get_remote_queue_client",
    "InMemoryNameStore",
    "JsonFileNameStore",
]
