"""Tagged outcomes returned by the fetch and delete operations.

Callers of the view never see raw exceptions from the gateway. Every
failure is folded into a :class:`Result` tagged with an :class:`ErrorKind`
and a human readable message picked by :func:`error_message`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, Tuple, TypeVar

from appointment_desk.services.exceptions import (
    ServerError,
    ServiceError,
    TransportError,
)

T = TypeVar("T")


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    SERVER = "server"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "Result[T]":
        return cls(error_kind=kind, message=message)


def classify(exc: ServiceError) -> ErrorKind:
    if isinstance(exc, TransportError):
        return ErrorKind.TRANSPORT
    if isinstance(exc, ServerError):
        return ErrorKind.SERVER
    return ErrorKind.UNEXPECTED


def _server_message(exc: ServiceError) -> Optional[str]:
    return getattr(exc, "server_message", None)


def _exception_message(exc: ServiceError) -> Optional[str]:
    return str(exc)


# Checked in order; the first non-blank message wins.
_MESSAGE_RULES: Tuple[Callable[[ServiceError], Optional[str]], ...] = (
    _server_message,
    _exception_message,
)


def error_message(exc: ServiceError, default: str) -> str:
    """Return the most specific message available for ``exc``."""

    for rule in _MESSAGE_RULES:
        message = rule(exc)
        if message and message.strip():
            return message.strip()
    return default
