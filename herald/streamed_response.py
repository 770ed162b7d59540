"""
Streamed response.

A step function is called repeatedly with the writer until it returns a
falsy value; the writer is flushed afterwards.
"""

import logging
from typing import Optional

from .faults import ResponseIOFault
from .response import StepFunc, ResponseVariant
from .writer import Flusher, Request, ResponseWriter

logger = logging.getLogger("herald.response")


class StreamedResponse(ResponseVariant):
    """
    Sends a body produced incrementally by ``step(writer) -> bool``.

    Cancellation is checked once, before anything is written. A step that
    is already running is never interrupted.
    """

    _step: Optional[StepFunc] = None

    @property
    def step(self) -> Optional[StepFunc]:
        return self._step

    def set_step(self, step: Optional[StepFunc]) -> "StreamedResponse":
        self._step = step
        return self

    def emit(self, writer: ResponseWriter, request: Optional[Request] = None) -> None:
        """
        Run the step loop and flush.

        Does nothing at all when the request was already cancelled.

        Raises:
            ResponseIOFault: the writer cannot flush, or a write/flush failed
        """
        if request is not None and request.cancelled:
            logger.debug("Request cancelled before streaming started")
            return

        if not isinstance(writer, Flusher):
            raise ResponseIOFault("flush", f"{type(writer).__name__} does not support flush")

        self._response.write_head(writer)

        steps = 0
        step = self._step
        if step is not None:
            while True:
                steps += 1
                try:
                    more = step(writer)
                except OSError as exc:
                    raise ResponseIOFault("write", str(exc), metadata={"step": steps}) from exc
                if not more:
                    break

        try:
            writer.flush()
        except (OSError, ValueError) as exc:
            raise ResponseIOFault("flush", str(exc)) from exc
        logger.debug("Streamed response finished after %d steps", steps)
