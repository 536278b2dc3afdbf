from __future__ import annotations

import asyncio
import logging
import secrets
from collections import OrderedDict
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator

from resume_optimizer.core.errors import SessionNotFound

from .state_store import OptimizationStateStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 1000


@dataclass
class _Entry:
    store: OptimizationStateStore
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class SessionRegistry:
    """In-memory optimization sessions, least recently used evicted first.

    Mutations of one session are serialized through ``session()``; different
    sessions never block each other.
    """

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS):
        self._max_sessions = max(1, int(max_sessions))
        self._entries: OrderedDict[str, _Entry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._entries

    def create(self, store: OptimizationStateStore) -> str:
        session_id = secrets.token_urlsafe(12)
        while session_id in self._entries:
            session_id = secrets.token_urlsafe(12)
        self._entries[session_id] = _Entry(store=store)
        while len(self._entries) > self._max_sessions:
            evicted, _ = self._entries.popitem(last=False)
            logger.info("session_evicted session_id=%s", evicted)
        return session_id

    def _entry(self, session_id: str) -> _Entry:
        entry = self._entries.get(session_id)
        if entry is None:
            raise SessionNotFound(session_id)
        self._entries.move_to_end(session_id)
        return entry

    def get(self, session_id: str) -> OptimizationStateStore:
        return self._entry(session_id).store

    @asynccontextmanager
    async def session(self, session_id: str) -> AsyncIterator[OptimizationStateStore]:
        entry = self._entry(session_id)
        async with entry.lock:
            yield entry.store

    def discard(self, session_id: str) -> bool:
        return self._entries.pop(session_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()
