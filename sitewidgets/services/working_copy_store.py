"""
Working Copy Storage (Redis with in-memory fallback)

Holds the in-progress row list of an editing session between requests.
Entries expire after ``working_copy_ttl_seconds``.
"""

import copy
import enum
import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import redis.asyncio as redis

from sitewidgets.config import settings

logger = logging.getLogger(__name__)


class WorkingCopyStatus(str, enum.Enum):
    INITIAL = "initial"
    EDITING = "editing"


@dataclass
class WorkingCopy:
    session_id: str
    block_id: int
    rows: list[dict[str, Any]] = field(default_factory=list)
    parent_session_id: str | None = None
    status: WorkingCopyStatus = WorkingCopyStatus.INITIAL

    def to_json(self) -> str:
        data = asdict(self)
        data["status"] = self.status.value
        return json.dumps(data)

    @classmethod
    def from_json(cls, raw: str) -> "WorkingCopy":
        data = json.loads(raw)
        data["status"] = WorkingCopyStatus(data.get("status", WorkingCopyStatus.INITIAL.value))
        return cls(**data)


class InMemoryWorkingCopyStore:
    """
    Process-local store used when Redis is not configured.

    Note: working copies are lost on restart and are not shared across workers.
    """

    def __init__(self, ttl_seconds: int | None = None):
        self.ttl_seconds = ttl_seconds or settings.working_copy_ttl_seconds
        self._copies: dict[str, WorkingCopy] = {}
        self._expirations: dict[str, datetime] = {}

    def _cleanup_expired(self):
        now = datetime.now(timezone.utc)
        for sid in [sid for sid, exp in self._expirations.items() if exp < now]:
            self._copies.pop(sid, None)
            self._expirations.pop(sid, None)

    async def connect(self):
        logger.info("Using in-memory working copy storage")

    async def disconnect(self):
        self._copies.clear()
        self._expirations.clear()

    async def get(self, session_id: str) -> WorkingCopy | None:
        self._cleanup_expired()
        stored = self._copies.get(session_id)
        # Copies keep callers from mutating stored rows in place
        return copy.deepcopy(stored) if stored is not None else None

    async def put(self, working_copy: WorkingCopy) -> None:
        self._cleanup_expired()
        self._copies[working_copy.session_id] = copy.deepcopy(working_copy)
        self._expirations[working_copy.session_id] = datetime.now(timezone.utc) + timedelta(seconds=self.ttl_seconds)

    async def delete(self, session_id: str) -> bool:
        self._expirations.pop(session_id, None)
        return self._copies.pop(session_id, None) is not None


class RedisWorkingCopyStore:
    """Working copies serialized as JSON under ``working_copy:<session_id>``."""

    def __init__(self, url: str, ttl_seconds: int | None = None):
        self.url = url
        self.ttl_seconds = ttl_seconds or settings.working_copy_ttl_seconds
        self._redis: redis.Redis | None = None

    @staticmethod
    def _key(session_id: str) -> str:
        return f"working_copy:{session_id}"

    async def connect(self):
        if self._redis is not None:
            return
        try:
            self._redis = redis.from_url(self.url, decode_responses=True)
            await self._redis.ping()
            logger.info("Working copy store connected to Redis")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self._redis = None
            raise

    async def disconnect(self):
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    async def get(self, session_id: str) -> WorkingCopy | None:
        if not self._redis:
            await self.connect()
        raw = await self._redis.get(self._key(session_id))
        if not raw:
            return None
        try:
            return WorkingCopy.from_json(raw)
        except (json.JSONDecodeError, TypeError, ValueError):
            logger.error(f"Failed to decode working copy {session_id}")
            return None

    async def put(self, working_copy: WorkingCopy) -> None:
        if not self._redis:
            await self.connect()
        await self._redis.setex(self._key(working_copy.session_id), self.ttl_seconds, working_copy.to_json())

    async def delete(self, session_id: str) -> bool:
        if not self._redis:
            await self.connect()
        return bool(await self._redis.delete(self._key(session_id)))


_store: RedisWorkingCopyStore | InMemoryWorkingCopyStore | None = None


async def get_working_copy_store() -> RedisWorkingCopyStore | InMemoryWorkingCopyStore:
    """
    Dependency returning the shared working copy store.

    Uses Redis when ``redis_url`` is configured and reachable, in-memory otherwise.
    """
    global _store

    if _store is not None:
        return _store

    if settings.redis_url:
        try:
            redis_store = RedisWorkingCopyStore(settings.redis_url)
            await redis_store.connect()
            _store = redis_store
            return _store
        except Exception as e:
            logger.warning(f"Redis not available, using in-memory working copies: {e}")

    _store = InMemoryWorkingCopyStore()
    await _store.connect()
    return _store


async def close_working_copy_store() -> None:
    global _store
    if _store is not None:
        await _store.disconnect()
        _store = None
