"""HTTP client that plays the prover against the authentication service."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .crypto import ChaumPedersenProver, bytes_to_int, int_to_bytes

logger = logging.getLogger(__name__)


class AuthClientError(RuntimeError):
    """The service rejected a request."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def _hex(value: int) -> str:
    return int_to_bytes(value).hex()


class AuthClient:
    def __init__(self, base_url: str = "", http: Optional[httpx.Client] = None) -> None:
        self._http = http if http is not None else httpx.Client(base_url=base_url)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "AuthClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _post(self, path: str, payload: dict) -> dict:
        response = self._http.post(path, json=payload)
        if response.status_code != 200:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            raise AuthClientError(response.status_code, str(detail))
        return response.json()

    def register(self, username: str, prover: ChaumPedersenProver) -> None:
        y1, y2 = prover.public_pair()
        self._post("/register", {"user": username, "y1": _hex(y1), "y2": _hex(y2)})
        logger.info("Registered %r", username)

    def login(self, username: str, prover: ChaumPedersenProver) -> str:
        """Run one challenge round and return the issued session id."""

        commitment = prover.commit()
        challenge = self._post(
            "/challenge",
            {"user": username, "r1": _hex(commitment.r1), "r2": _hex(commitment.r2)},
        )
        c = bytes_to_int(bytes.fromhex(challenge["c"]))
        s = prover.respond(commitment, c)
        result = self._post("/verify", {"auth_id": challenge["auth_id"], "s": _hex(s)})
        logger.info("Authenticated %r", username)
        return result["session_id"]


__all__ = ["AuthClient", "AuthClientError"]
