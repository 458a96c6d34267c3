"""In-memory registries shared by concurrent protocol calls."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .constants import CHALLENGE_TTL, MAX_PENDING


@dataclass(frozen=True)
class UserRecord:
    """Public commitments ``y1 = alpha^x`` and ``y2 = beta^x`` of a user."""

    username: str
    y1: int
    y2: int


@dataclass(frozen=True)
class ChallengeSession:
    """Pending proof attempt awaiting the prover's response."""

    auth_id: str
    username: str
    r1: int
    r2: int
    c: int
    expires_at: float

    def expired(self, now: float) -> bool:
        return now >= self.expires_at


class UserRegistry:
    """Map of username to the latest registered commitments."""

    def __init__(self) -> None:
        self._users: Dict[str, UserRecord] = {}
        self._lock = threading.Lock()

    def put(self, record: UserRecord) -> None:
        with self._lock:
            self._users[record.username] = record

    def get(self, username: str) -> Optional[UserRecord]:
        with self._lock:
            return self._users.get(username)

    def __contains__(self, username: object) -> bool:
        with self._lock:
            return username in self._users

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)


class ChallengeStore:
    """Single-use, expiring map of auth id to pending challenge."""

    def __init__(
        self,
        ttl: float = CHALLENGE_TTL,
        max_pending: int = MAX_PENDING,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError("Challenge TTL must be positive")
        self.ttl = ttl
        self.max_pending = max_pending
        self._clock = clock
        self._sessions: Dict[str, ChallengeSession] = {}
        self._lock = threading.Lock()

    def deadline(self) -> float:
        return self._clock() + self.ttl

    def add(self, session: ChallengeSession) -> bool:
        """Store ``session`` unless its auth id is already taken."""

        with self._lock:
            if session.auth_id in self._sessions:
                return False
            if len(self._sessions) >= self.max_pending:
                self._purge_locked(self._clock())
            self._sessions[session.auth_id] = session
            return True

    def take(self, auth_id: str) -> Optional[ChallengeSession]:
        """Remove and return the live session for ``auth_id``, if any."""

        with self._lock:
            session = self._sessions.pop(auth_id, None)
        if session is None or session.expired(self._clock()):
            return None
        return session

    def purge_expired(self) -> int:
        with self._lock:
            return self._purge_locked(self._clock())

    def _purge_locked(self, now: float) -> int:
        stale = [auth_id for auth_id, session in self._sessions.items() if session.expired(now)]
        for auth_id in stale:
            del self._sessions[auth_id]
        return len(stale)

    def __contains__(self, auth_id: object) -> bool:
        with self._lock:
            return auth_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


__all__ = ["ChallengeSession", "ChallengeStore", "UserRecord", "UserRegistry"]
