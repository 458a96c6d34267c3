"""Verifier side of the protocol: registration, challenges and verification."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from .constants import ID_LENGTH
from .crypto import ChaumPedersen, random_below, random_token
from .errors import InvalidParameterError, InvalidProofError, NotFoundError
from .store import ChallengeSession, ChallengeStore, UserRecord, UserRegistry

logger = logging.getLogger(__name__)


class AuthService:
    """Sequences the three protocol operations against injected stores."""

    def __init__(
        self,
        users: Optional[UserRegistry] = None,
        challenges: Optional[ChallengeStore] = None,
        engine: Optional[ChaumPedersen] = None,
        id_length: int = ID_LENGTH,
    ) -> None:
        self.users = users if users is not None else UserRegistry()
        self.challenges = challenges if challenges is not None else ChallengeStore()
        self.engine = engine or ChaumPedersen()
        self.id_length = id_length

    def register(self, username: str, y1: int, y2: int) -> UserRecord:
        self._check_username(username)
        self._check_element("y1", y1)
        self._check_element("y2", y2)
        record = UserRecord(username=username, y1=y1, y2=y2)
        self.users.put(record)
        logger.info("Registered user %r", username)
        return record

    def create_challenge(self, username: str, r1: int, r2: int) -> Tuple[str, int]:
        self._check_element("r1", r1)
        self._check_element("r2", r2)
        if self.users.get(username) is None:
            logger.warning("Challenge requested for unknown user %r", username)
            raise NotFoundError(f"User '{username}' not found")

        c = random_below(self.engine.params.q)
        while True:
            auth_id = random_token(self.id_length)
            session = ChallengeSession(
                auth_id=auth_id,
                username=username,
                r1=r1,
                r2=r2,
                c=c,
                expires_at=self.challenges.deadline(),
            )
            if self.challenges.add(session):
                break
        logger.info("Issued challenge %s for user %r", auth_id, username)
        return auth_id, c

    def verify_response(self, auth_id: str, s: int) -> str:
        session = self.challenges.take(auth_id)
        if session is None:
            logger.warning("Verification attempted for unknown auth id %s", auth_id)
            raise NotFoundError(f"AuthId '{auth_id}' not found")
        record = self.users.get(session.username)
        if record is None:  # pragma: no cover - users are never removed
            raise NotFoundError(f"AuthId '{auth_id}' not found")
        if not 0 <= s < self.engine.params.q:
            logger.info("Rejected out-of-range response for user %r", session.username)
            raise InvalidProofError(f"AuthId '{auth_id}' has an incorrect challenge solution")

        verified = self.engine.verify(session.r1, session.r2, record.y1, record.y2, session.c, s)
        if not verified:
            logger.info("Rejected proof for user %r", session.username)
            raise InvalidProofError(f"AuthId '{auth_id}' has an incorrect challenge solution")

        session_id = random_token(self.id_length)
        logger.info("Verified proof for user %r", session.username)
        return session_id

    def _check_username(self, username: str) -> None:
        if not username:
            raise InvalidParameterError("Username must not be empty")

    def _check_element(self, name: str, value: int) -> None:
        if not 0 < value < self.engine.params.p:
            raise InvalidParameterError(f"{name} must lie in the multiplicative group")


__all__ = ["AuthService"]
