"""Core arithmetic helpers for the Chaum-Pedersen identification protocol."""

from __future__ import annotations

import hmac
import secrets
from dataclasses import dataclass
from typing import Tuple

from .constants import ALPHA, BETA_EXPONENT, ID_LENGTH, P, Q, TOKEN_ALPHABET


def int_to_bytes(value: int) -> bytes:
    """Encode a non-negative integer as big-endian unsigned bytes."""

    if value < 0:
        raise ValueError("Only non-negative integers can be encoded")
    length = max(1, (value.bit_length() + 7) // 8)
    return value.to_bytes(length, "big")


def bytes_to_int(data: bytes) -> int:
    return int.from_bytes(data, "big")


def random_below(limit: int) -> int:
    """Return a uniformly distributed integer in ``[0, limit)``."""

    if limit <= 0:
        raise ValueError("Limit must be positive")
    return secrets.randbelow(limit)


def random_token(length: int = ID_LENGTH) -> str:
    """Return a random alphanumeric identifier of exactly ``length`` symbols."""

    if length < 0:
        raise ValueError("Token length must not be negative")
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def password_to_secret(password: str) -> int:
    """Read the UTF-8 bytes of a password as a big-endian integer."""

    if not password:
        raise ValueError("Password must not be empty")
    return bytes_to_int(password.encode("utf-8"))


@dataclass(frozen=True)
class GroupParams:
    """Prime modulus, subgroup order and the two generators of that subgroup."""

    p: int
    q: int
    alpha: int
    beta: int

    @property
    def width(self) -> int:
        """Byte width of an element of Z/pZ."""
        return (self.p.bit_length() + 7) // 8


DEFAULT_PARAMS = GroupParams(p=P, q=Q, alpha=ALPHA, beta=pow(ALPHA, BETA_EXPONENT, P))


class ChaumPedersen:
    """Stateless math engine for a fixed group."""

    def __init__(self, params: GroupParams = DEFAULT_PARAMS) -> None:
        self.params = params

    def compute_pair(self, exponent: int) -> Tuple[int, int]:
        p = self.params.p
        return pow(self.params.alpha, exponent, p), pow(self.params.beta, exponent, p)

    def solve(self, k: int, c: int, x: int) -> int:
        """Compute the response ``s = k - c*x mod q`` without going negative."""

        q = self.params.q
        return (k + q - (c * x) % q) % q

    def verify(self, r1: int, r2: int, y1: int, y2: int, c: int, s: int) -> bool:
        p = self.params.p
        left = (pow(self.params.alpha, s, p) * pow(y1, c, p)) % p
        right = (pow(self.params.beta, s, p) * pow(y2, c, p)) % p
        # Both halves are compared in full before the results are combined.
        first = self._equal(r1, left)
        second = self._equal(r2, right)
        return first & second

    def _equal(self, a: int, b: int) -> bool:
        width = self.params.width
        if not 0 <= a < 2 ** (8 * width):
            return False
        return hmac.compare_digest(a.to_bytes(width, "big"), b.to_bytes(width, "big"))

    def random_exponent(self) -> int:
        return random_below(self.params.q)


@dataclass
class Commitment:
    """Ephemeral commitment sent when requesting a challenge."""

    r1: int
    r2: int
    nonce: int


class ChaumPedersenProver:
    """Prover that holds the long-lived secret and answers challenges."""

    def __init__(self, secret: int, engine: ChaumPedersen | None = None) -> None:
        if secret <= 0:
            raise ValueError("Secret must be a positive integer")
        self.secret = secret
        self.engine = engine or ChaumPedersen()

    @classmethod
    def from_password(cls, password: str, engine: ChaumPedersen | None = None) -> "ChaumPedersenProver":
        return cls(password_to_secret(password), engine)

    def public_pair(self) -> Tuple[int, int]:
        return self.engine.compute_pair(self.secret)

    def commit(self) -> Commitment:
        nonce = self.engine.random_exponent()
        r1, r2 = self.engine.compute_pair(nonce)
        return Commitment(r1=r1, r2=r2, nonce=nonce)

    def respond(self, commitment: Commitment, challenge: int) -> int:
        return self.engine.solve(commitment.nonce, challenge, self.secret)


__all__ = [
    "ChaumPedersen",
    "ChaumPedersenProver",
    "Commitment",
    "DEFAULT_PARAMS",
    "GroupParams",
    "bytes_to_int",
    "int_to_bytes",
    "password_to_secret",
    "random_below",
    "random_token",
]
