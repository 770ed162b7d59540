"""
Transport-facing interfaces.

A transport hands each response a ResponseWriter (header map + byte sink)
and the incoming Request. Herald never implements the transport itself.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from ._datastructures import Headers


@runtime_checkable
class ResponseWriter(Protocol):
    """Wire-level writer supplied by the transport."""

    headers: Headers

    def write_header(self, status_code: int) -> None:
        """Send the status line together with the current headers."""
        ...

    def write(self, data: bytes) -> int:
        """Write body bytes, returning the number written."""
        ...


@runtime_checkable
class Flusher(Protocol):
    """Writer capability required by streamed responses."""

    def flush(self) -> None:
        ...


@runtime_checkable
class Handler(Protocol):
    """Anything that can emit itself onto a writer."""

    def emit(self, writer: ResponseWriter, request: Request | None = None) -> None:
        ...


class CancelToken:
    """
    Cancellation signal for a single request.

    Backed by a threading.Event so the transport may cancel from another
    thread while a handler is running.
    """

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancelToken(cancelled={self.cancelled})"


@dataclass
class Request:
    """
    The parts of an incoming request that responses consult.

    Attributes:
        method: HTTP method
        path: Request path, used to resolve relative redirect targets
        headers: Request headers
        cancel_token: Fires when the client went away
    """

    method: str = "GET"
    path: str = "/"
    headers: Headers = field(default_factory=Headers)
    cancel_token: CancelToken = field(default_factory=CancelToken)

    @property
    def cancelled(self) -> bool:
        return self.cancel_token.cancelled
