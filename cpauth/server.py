"""FastAPI-powered Chaum-Pedersen authentication service."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .auth import AuthService
from .crypto import bytes_to_int, int_to_bytes
from .errors import InvalidParameterError, InvalidProofError, NotFoundError

logger = logging.getLogger(__name__)


class RegisterRequest(BaseModel):
    user: str
    y1: str
    y2: str


class RegisterResponse(BaseModel):
    pass


class ChallengeRequest(BaseModel):
    user: str
    r1: str
    r2: str


class ChallengeResponse(BaseModel):
    auth_id: str
    c: str


class VerifyRequest(BaseModel):
    auth_id: str
    s: str


class VerifyResponse(BaseModel):
    session_id: str


def decode_field(name: str, value: str) -> int:
    """Decode a hex string holding big-endian unsigned bytes."""

    try:
        return bytes_to_int(bytes.fromhex(value))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"{name} must be hex encoded") from exc


def encode_field(value: int) -> str:
    return int_to_bytes(value).hex()


def create_app(service: Optional[AuthService] = None) -> FastAPI:
    auth = service if service is not None else AuthService()
    application = FastAPI(
        title="Chaum-Pedersen Auth",
        description="Password-less authentication with a Chaum-Pedersen proof of knowledge",
    )
    application.state.auth = auth

    # Plain functions run in the worker pool so modular exponentiation
    # never blocks the event loop.
    @application.post("/register", response_model=RegisterResponse)
    def register(request: RegisterRequest) -> RegisterResponse:
        y1 = decode_field("y1", request.y1)
        y2 = decode_field("y2", request.y2)
        try:
            auth.register(request.user, y1, y2)
        except InvalidParameterError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return RegisterResponse()

    @application.post("/challenge", response_model=ChallengeResponse)
    def create_challenge(request: ChallengeRequest) -> ChallengeResponse:
        r1 = decode_field("r1", request.r1)
        r2 = decode_field("r2", request.r2)
        try:
            auth_id, c = auth.create_challenge(request.user, r1, r2)
        except InvalidParameterError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return ChallengeResponse(auth_id=auth_id, c=encode_field(c))

    @application.post("/verify", response_model=VerifyResponse)
    def verify(request: VerifyRequest) -> VerifyResponse:
        s = decode_field("s", request.s)
        try:
            session_id = auth.verify_response(request.auth_id, s)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except InvalidProofError as exc:
            raise HTTPException(status_code=403, detail=str(exc)) from exc
        return VerifyResponse(session_id=session_id)

    logger.debug("Created application with %d registered users", len(auth.users))
    return application


app = create_app()


__all__ = ["app", "create_app", "decode_field", "encode_field"]
