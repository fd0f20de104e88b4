"""Errors raised by the record client."""


class RecordClientError(Exception):
    """Base class for failures talking to the gateway."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConnectivityError(RecordClientError):
    """No response was received from the gateway."""


class RemoteError(RecordClientError):
    """The gateway answered with a non-2xx status or an error envelope."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(RemoteError):
    """The login call was rejected."""


class ShapeError(RecordClientError):
    """A successful response did not carry the expected envelope."""
