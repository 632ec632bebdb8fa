"""
In-memory chat session store. Keyed by thread id; history is not sent from frontend.

Bounded by session count only: once more than max_sessions threads exist, the
thread inserted first is dropped. Replacing an existing thread's history keeps
its original position.
"""

import logging
import threading
import time
from collections import OrderedDict

from app.agent.content import Turn
from app.core.config import MAX_SESSIONS

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    """Timestamp-based thread id (collisions within the same millisecond are accepted)."""
    return f"thread_{int(time.time() * 1000)}"


class SessionStore:
    def __init__(self, max_sessions: int = MAX_SESSIONS) -> None:
        self.max_sessions = max_sessions
        # thread id -> ordered turns; dict order is insertion order of the thread id
        self._sessions: OrderedDict[str, list[Turn]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str | None) -> list[Turn] | None:
        """Return the thread's turns (copy so caller cannot mutate store), or None if unknown."""
        if not session_id:
            return None
        with self._lock:
            turns = self._sessions.get(session_id)
            out = list(turns) if turns is not None else None
        logger.info(
            "[session_store:get] session_id=%s OUT turns=%s",
            session_id[:24], len(out) if out is not None else None,
        )
        return out

    def put(self, session_id: str, turns: list[Turn]) -> None:
        """Create or replace the thread's turns, then evict the oldest thread if over capacity."""
        with self._lock:
            self._sessions[session_id] = list(turns)
            evicted = None
            if len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
        logger.info("[session_store:put] session_id=%s turns=%d", session_id[:24], len(turns))
        if evicted is not None:
            logger.info("[session_store:put] evicted oldest session_id=%s", evicted[:24])

    def evict(self) -> str | None:
        """Drop the oldest thread. Returns its id, or None when the store is empty."""
        with self._lock:
            if not self._sessions:
                return None
            session_id, _ = self._sessions.popitem(last=False)
        return session_id

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions


session_store = SessionStore()
