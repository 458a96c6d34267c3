"""Exceptions raised by the authentication service."""


class AuthError(Exception):
    """Base class for protocol failures reported to the caller."""


class NotFoundError(AuthError, LookupError):
    """Unknown username or authentication id."""


class InvalidProofError(AuthError):
    """The response does not satisfy the verification equations."""


class InvalidParameterError(AuthError, ValueError):
    """A submitted value lies outside the group or is otherwise malformed."""


__all__ = ["AuthError", "InvalidParameterError", "InvalidProofError", "NotFoundError"]
