"""Runtime settings for the authentication service, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import CHALLENGE_TTL, MAX_PENDING

ENV_PREFIX = "CPAUTH_"


@dataclass
class Settings:
    host: str = "127.0.0.1"
    port: int = 41337
    challenge_ttl: float = CHALLENGE_TTL
    max_pending: int = MAX_PENDING
    log_level: str = "INFO"

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        defaults = cls()
        try:
            return cls(
                host=env.get(ENV_PREFIX + "HOST", defaults.host),
                port=int(env.get(ENV_PREFIX + "PORT", defaults.port)),
                challenge_ttl=float(env.get(ENV_PREFIX + "CHALLENGE_TTL", defaults.challenge_ttl)),
                max_pending=int(env.get(ENV_PREFIX + "MAX_PENDING", defaults.max_pending)),
                log_level=env.get(ENV_PREFIX + "LOG_LEVEL", defaults.log_level).upper(),
            )
        except ValueError as exc:
            raise ValueError(f"Invalid {ENV_PREFIX}* setting: {exc}") from exc


__all__ = ["ENV_PREFIX", "Settings"]
