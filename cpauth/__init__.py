"""Chaum-Pedersen zero-knowledge authentication package."""

from .auth import AuthService
from .client import AuthClient, AuthClientError
from .config import Settings
from .crypto import (
    DEFAULT_PARAMS,
    ChaumPedersen,
    ChaumPedersenProver,
    Commitment,
    GroupParams,
    password_to_secret,
    random_below,
    random_token,
)
from .errors import AuthError, InvalidParameterError, InvalidProofError, NotFoundError
from .store import ChallengeSession, ChallengeStore, UserRecord, UserRegistry

__all__ = [
    "AuthService",
    "AuthClient",
    "AuthClientError",
    "Settings",
    "DEFAULT_PARAMS",
    "ChaumPedersen",
    "ChaumPedersenProver",
    "Commitment",
    "GroupParams",
    "password_to_secret",
    "random_below",
    "random_token",
    "AuthError",
    "InvalidParameterError",
    "InvalidProofError",
    "NotFoundError",
    "ChallengeSession",
    "ChallengeStore",
    "UserRecord",
    "UserRegistry",
]
