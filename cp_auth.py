"""Command line interface for the Chaum-Pedersen authentication service."""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys

import httpx
import uvicorn

from cpauth.auth import AuthService
from cpauth.client import AuthClient, AuthClientError
from cpauth.config import Settings
from cpauth.crypto import ChaumPedersenProver
from cpauth.errors import AuthError
from cpauth.server import create_app
from cpauth.store import ChallengeStore


def parse_args(argv: list[str], settings: Settings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Logging level (default: {settings.log_level})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the verifier over HTTP")
    serve_parser.add_argument("--host", default=settings.host)
    serve_parser.add_argument("--port", type=int, default=settings.port)
    serve_parser.add_argument(
        "--challenge-ttl",
        type=float,
        default=settings.challenge_ttl,
        help="Seconds a challenge stays answerable",
    )

    for name, help_text in (
        ("register", "Register a user with the verifier"),
        ("login", "Authenticate a registered user"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("username")
        command.add_argument(
            "--url",
            default=settings.base_url,
            help=f"Verifier base URL (default: {settings.base_url})",
        )

    demo_parser = subparsers.add_parser(
        "demo",
        help="Register and log in against an in-process verifier",
    )
    demo_parser.add_argument("username")

    return parser.parse_args(argv)


def read_prover(prompt: str) -> ChaumPedersenProver:
    return ChaumPedersenProver.from_password(getpass.getpass(prompt))


def serve(namespace: argparse.Namespace, settings: Settings) -> int:
    challenges = ChallengeStore(ttl=namespace.challenge_ttl, max_pending=settings.max_pending)
    application = create_app(AuthService(challenges=challenges))
    uvicorn.run(application, host=namespace.host, port=namespace.port, log_level=namespace.log_level.lower())
    return 0


def main(argv: list[str] | None = None) -> int:
    settings = Settings.from_env()
    namespace = parse_args(sys.argv[1:] if argv is None else argv, settings)
    logging.basicConfig(level=namespace.log_level.upper())

    if namespace.command == "serve":
        return serve(namespace, settings)

    try:
        if namespace.command == "register":
            prover = read_prover("Please provide password: ")
            with AuthClient(namespace.url) as client:
                client.register(namespace.username, prover)
            print(json.dumps({"registered": namespace.username}, indent=2))
            return 0

        if namespace.command == "login":
            prover = read_prover("Please provide the password (to login): ")
            with AuthClient(namespace.url) as client:
                session_id = client.login(namespace.username, prover)
            print(json.dumps({"user": namespace.username, "session_id": session_id}, indent=2))
            return 0
    except AuthClientError as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return 1
    except httpx.HTTPError as exc:
        print(f"Could not reach the verifier: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Invalid input: {exc}", file=sys.stderr)
        return 1

    if namespace.command == "demo":
        service = AuthService()
        try:
            registration = read_prover("Please provide password: ")
            y1, y2 = registration.public_pair()
            service.register(namespace.username, y1, y2)

            prover = read_prover("Please provide the password (to login): ")
            commitment = prover.commit()
            auth_id, c = service.create_challenge(namespace.username, commitment.r1, commitment.r2)
            session_id = service.verify_response(auth_id, prover.respond(commitment, c))
        except ValueError as exc:
            print(f"Invalid input: {exc}", file=sys.stderr)
            return 1
        except AuthError as exc:
            print(f"Login failed: {exc}", file=sys.stderr)
            return 1
        print(json.dumps({"user": namespace.username, "session_id": session_id}, indent=2))
        return 0

    raise RuntimeError("Unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
