"""Typed errors raised by the remote clients and request decoders."""
from enum import Enum

from src.constants import MSG_REMOTE_API_ERROR, MSG_REMOTE_EMPTY, MSG_REMOTE_PARSE


class ErrorKind(Enum):
    REMOTE_API = "remote_api"
    EMPTY_RESPONSE = "empty_response"
    PARSE = "parse"


class RemoteClientError(Exception):
    """Base for failures produced by a remote client. `kind` is the discriminant."""

    kind: ErrorKind


class RemoteAPIError(RemoteClientError):
    kind = ErrorKind.REMOTE_API

    def __init__(self, provider: str, status_code: int, body: str) -> None:
        self.provider = provider
        self.status_code = status_code
        self.body = body
        super().__init__(MSG_REMOTE_API_ERROR % (provider, status_code, body))


class EmptyResponseError(RemoteClientError):
    kind = ErrorKind.EMPTY_RESPONSE

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(MSG_REMOTE_EMPTY % provider)


class ParseError(RemoteClientError):
    kind = ErrorKind.PARSE

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(MSG_REMOTE_PARSE % raw)


class ValidationError(Exception):
    """Caller input rejected before any remote call. Message is client-facing."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)
