"""
Key-value stores holding the per-request hit counters.

Two backends implement :class:`KeyValueStore`: ``MemoryStore`` keeps
counters in this process behind a lock, ``RedisStore`` keeps them in
Redis. Both raise :class:`~app.errors.StoreUnavailable` when the
backend cannot serve a call.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

import redis

from app.config import Settings
from app.errors import StoreUnavailable

logger = logging.getLogger(__name__)


@dataclass
class KeyPage:
    """One page of a key listing.

    ``cursor`` is passed back to ``list_keys`` to fetch the next page and
    is meaningless once ``list_complete`` is true.
    """

    keys: List[str] = field(default_factory=list)
    cursor: int = 0
    list_complete: bool = True


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def put(self, key: str, value: str) -> None: ...

    def incr(self, key: str) -> int: ...

    def list_keys(self, prefix: str, cursor: int = 0, limit: int = 1000) -> KeyPage: ...


class MemoryStore:
    def __init__(self) -> None:
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def incr(self, key: str) -> int:
        with self._lock:
            raw = self._data.get(key) or "0"
            try:
                count = int(raw) + 1
            except ValueError as exc:
                raise StoreUnavailable(f"value under {key} is not an integer: {raw!r}") from exc
            self._data[key] = str(count)
            return count

    def list_keys(self, prefix: str, cursor: int = 0, limit: int = 1000) -> KeyPage:
        with self._lock:
            matching = sorted(k for k in self._data if k.startswith(prefix))
        end = cursor + limit
        return KeyPage(keys=matching[cursor:end], cursor=end, list_complete=end >= len(matching))

    def clear(self) -> None:
        with self._lock:
            self._data.clear()


class RedisStore:
    def __init__(self, client: Any) -> None:
        self._client = client

    def get(self, key: str) -> Optional[str]:
        try:
            return self._client.get(key)
        except redis.exceptions.RedisError as exc:
            raise StoreUnavailable(f"redis GET failed: {exc}") from exc

    def put(self, key: str, value: str) -> None:
        try:
            self._client.set(key, value)
        except redis.exceptions.RedisError as exc:
            raise StoreUnavailable(f"redis SET failed: {exc}") from exc

    def incr(self, key: str) -> int:
        try:
            return int(self._client.incr(key))
        except redis.exceptions.RedisError as exc:
            raise StoreUnavailable(f"redis INCR failed: {exc}") from exc

    def list_keys(self, prefix: str, cursor: int = 0, limit: int = 1000) -> KeyPage:
        try:
            next_cursor, keys = self._client.scan(cursor=cursor, match=f"{prefix}*", count=limit)
        except redis.exceptions.RedisError as exc:
            raise StoreUnavailable(f"redis SCAN failed: {exc}") from exc
        next_cursor = int(next_cursor)
        return KeyPage(keys=list(keys), cursor=next_cursor, list_complete=next_cursor == 0)


# Process-wide state: the memory backend and connected Redis clients by URL.
MEMORY_STORE = MemoryStore()
_REDIS_CLIENTS: Dict[str, Any] = {}
_CLIENTS_LOCK = threading.Lock()


def _redis_client(settings: Settings) -> Any:
    with _CLIENTS_LOCK:
        client = _REDIS_CLIENTS.get(settings.redis_url)
        if client is not None:
            return client
        try:
            client = redis.Redis.from_url(
                settings.redis_url,
                decode_responses=True,
                socket_timeout=settings.redis_socket_timeout,
                socket_connect_timeout=settings.redis_socket_timeout,
            )
            client.ping()
        except ValueError as exc:
            raise StoreUnavailable(f"invalid REDIS_URL: {exc}") from exc
        except redis.exceptions.RedisError as exc:
            raise StoreUnavailable(f"cannot connect to redis: {exc}") from exc
        logger.info("Connected to redis at %s", settings.redis_url)
        _REDIS_CLIENTS[settings.redis_url] = client
        return client


def open_store(settings: Settings) -> KeyValueStore:
    """Return the store selected by ``settings.store_backend``."""
    if settings.store_backend == "memory":
        return MEMORY_STORE
    if settings.store_backend == "redis":
        return RedisStore(_redis_client(settings))
    raise StoreUnavailable(f"unknown store backend {settings.store_backend!r}")
