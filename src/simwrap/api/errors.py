from __future__ import annotations

from typing import Any


class SimClientError(Exception):
    """Base for everything the client raises. `stage` and `action_index` are set by the workflows."""

    stage: str | None = None
    action_index: int | None = None


class ConfigError(SimClientError):
    pass


class ValidationError(SimClientError, ValueError):
    def __init__(self, field: str, value: Any, reason: str = "invalid"):
        super().__init__(f"Invalid {field} {value!r}: {reason}")
        self.field = field
        self.value = value


class TransportError(SimClientError):
    """No response came back (connect failure, timeout, TLS error...)."""


class UnexpectedStatusError(SimClientError):
    def __init__(self, method: str, url: str, status_code: int, body: Any):
        super().__init__(f"{method} {url} -> {status_code}: {body!r}")
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body


class ProtocolError(UnexpectedStatusError):
    """Named failure codes of the action endpoint."""


class InvalidActionError(ProtocolError):
    pass


class UnsupportedMediaTypeError(ProtocolError):
    pass


class ResponseShapeError(SimClientError):
    pass


class SimulationInitError(SimClientError):
    def __init__(self, stage: str, cause: BaseException):
        super().__init__(f"Error during {stage} stage of simulation init: {cause}")
        self.stage = stage
        self.cause = cause
