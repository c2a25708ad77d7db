"""Permission decision cache with commit-aware invalidation.

Decisions are keyed by ``(user_id, permission_key)`` and expire after the
configured TTL in both backends. Mutating services never clear the cache
directly: they queue the invalidation on their session with
``invalidate_after_commit`` and it runs once the transaction is committed.
The in-memory backend is per process; the TTL bounds how long another
worker's write can go unseen.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from threading import RLock
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Set, Tuple, cast

import httpx
from sqlalchemy import event
from sqlalchemy.orm import Session, SessionTransaction

from rbac_core.core.config import AppSettings

# (user_id, permission_key)
PermissionCacheKey = Tuple[str, str]

_PENDING_INVALIDATIONS = "rbac_pending_cache_invalidations"


class PermissionCache(Protocol):
    """Contract for caching has-permission decisions."""

    def get(self, key: PermissionCacheKey) -> Optional[bool]:
        ...

    def set(self, key: PermissionCacheKey, value: bool) -> None:
        ...

    def invalidate(self) -> None:
        ...

    def invalidate_for_user(self, user_id: str) -> None:
        ...


@dataclass
class InMemoryPermissionCache(PermissionCache):
    """Per-process decision store; entries lapse after ``ttl_seconds``."""

    ttl_seconds: int = 300
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)

    def __post_init__(self) -> None:
        self.ttl_seconds = max(self.ttl_seconds, 1)
        self._decisions: Dict[PermissionCacheKey, Tuple[bool, float]] = {}
        self._keys_by_user: Dict[str, Set[PermissionCacheKey]] = {}
        self._lock = RLock()

    def get(self, key: PermissionCacheKey) -> Optional[bool]:
        with self._lock:
            entry = self._decisions.get(key)
            if entry is None:
                return None
            granted, expires_at = entry
            if expires_at <= self.clock():
                self._forget(key)
                return None
            return granted

    def set(self, key: PermissionCacheKey, value: bool) -> None:
        with self._lock:
            self._decisions[key] = (value, self.clock() + self.ttl_seconds)
            self._keys_by_user.setdefault(key[0], set()).add(key)

    def invalidate(self) -> None:
        with self._lock:
            self._decisions.clear()
            self._keys_by_user.clear()

    def invalidate_for_user(self, user_id: str) -> None:
        with self._lock:
            for key in self._keys_by_user.pop(user_id, set()):
                self._decisions.pop(key, None)

    def _forget(self, key: PermissionCacheKey) -> None:
        self._decisions.pop(key, None)
        user_keys = self._keys_by_user.get(key[0])
        if user_keys is not None:
            user_keys.discard(key)
            if not user_keys:
                del self._keys_by_user[key[0]]


class RedisPermissionCache(PermissionCache):
    """Decisions shared across workers through the Upstash REST API.

    Each user has a set of their decision keys, and a registry set lists the
    users so a global invalidation can walk them.
    """

    def __init__(self, *, url: str, token: str, prefix: str, ttl_seconds: int) -> None:
        self._client = httpx.Client(
            base_url=url.rstrip("/"),
            headers={"Authorization": f"Bearer {token}"},
            timeout=5.0,
        )
        self._ttl = str(max(ttl_seconds, 1))
        self._prefix = prefix
        self._users_key = f"{prefix}:users"

    def get(self, key: PermissionCacheKey) -> Optional[bool]:
        result = self._execute("GET", self._decision_key(key))
        return None if result is None else str(result) == "1"

    def set(self, key: PermissionCacheKey, value: bool) -> None:
        user_id = key[0]
        decision_key = self._decision_key(key)
        self._execute("SET", decision_key, "1" if value else "0", "EX", self._ttl)
        for set_key, member in ((self._user_keys_key(user_id), decision_key), (self._users_key, user_id)):
            self._execute("SADD", set_key, member)
            self._execute("EXPIRE", set_key, self._ttl)

    def invalidate(self) -> None:
        for user_id in cast(Sequence[str], self._execute("SMEMBERS", self._users_key) or []):
            self.invalidate_for_user(user_id)
        self._execute("DEL", self._users_key)

    def invalidate_for_user(self, user_id: str) -> None:
        user_keys_key = self._user_keys_key(user_id)
        decision_keys = cast(Sequence[str], self._execute("SMEMBERS", user_keys_key) or [])
        self._execute("DEL", user_keys_key, *decision_keys)
        self._execute("SREM", self._users_key, user_id)

    def close(self) -> None:
        self._client.close()

    def _decision_key(self, key: PermissionCacheKey) -> str:
        user_id, permission_key = key
        return f"{self._prefix}:decision:{user_id}:{permission_key}"

    def _user_keys_key(self, user_id: str) -> str:
        return f"{self._prefix}:user:{user_id}"

    def _execute(self, *command: str) -> Optional[object]:
        response = self._client.post("/", json=list(command))
        response.raise_for_status()
        return response.json().get("result")


def invalidate_after_commit(session: Session, cache: PermissionCache, user_id: Optional[str] = None) -> None:
    """Queue a cache invalidation that runs when ``session`` commits.

    ``user_id`` limits it to one user's decisions; ``None`` clears everything.
    A rollback of the outermost transaction drops the queue.
    """

    pending: List[Tuple[PermissionCache, Optional[str]]] = session.info.setdefault(_PENDING_INVALIDATIONS, [])
    pending.append((cache, user_id))


@event.listens_for(Session, "after_commit")
def _run_pending_invalidations(session: Session) -> None:
    for cache, user_id in session.info.pop(_PENDING_INVALIDATIONS, []):
        if user_id is None:
            cache.invalidate()
        else:
            cache.invalidate_for_user(user_id)


@event.listens_for(Session, "after_transaction_end")
def _drop_pending_invalidations(session: Session, transaction: SessionTransaction) -> None:
    # after_commit has already drained the queue when the root transaction committed.
    if transaction.parent is None:
        session.info.pop(_PENDING_INVALIDATIONS, None)


def build_permission_cache(settings: AppSettings) -> PermissionCache:
    """Pick the cache backend from settings."""

    if settings.redis_url and settings.redis_token:
        return RedisPermissionCache(
            url=settings.redis_url,
            token=settings.redis_token,
            prefix=settings.redis_cache_prefix,
            ttl_seconds=settings.redis_cache_ttl,
        )
    return InMemoryPermissionCache(ttl_seconds=settings.redis_cache_ttl)
