"""
Herald faults - Response fault types.

Provides concrete fault classes raised while building or emitting a response:
- argument faults (status code validation)
- adapter faults (unsupported operations)
- abort faults (I/O, encoding, redirect range) that terminate emission
- template faults
"""

from typing import Any, Optional

from .core import Fault, FaultDomain, Severity


# ============================================================================
# Argument & Adapter Faults
# ============================================================================

class InvalidArgumentFault(Fault):
    """An argument passed to a response mutator is malformed."""

    def __init__(self, argument: str, value: Any, reason: str, **kwargs):
        super().__init__(
            code="INVALID_ARGUMENT",
            message=reason,
            domain=FaultDomain.RESPONSE,
            severity=Severity.ERROR,
            retryable=False,
            metadata={"argument": argument, "value": value, **kwargs.get("metadata", {})},
        )


class UnsupportedOperationFault(Fault):
    """Operation is not supported by this response type."""

    def __init__(self, operation: str, owner: str = "HandlerWrapper", **kwargs):
        super().__init__(
            code="UNSUPPORTED_OPERATION",
            message=f"{owner}.{operation} is not supported",
            domain=FaultDomain.RESPONSE,
            severity=Severity.ERROR,
            retryable=False,
            metadata={"operation": operation, "owner": owner, **kwargs.get("metadata", {})},
        )


# ============================================================================
# Abort Faults
# ============================================================================

class ResponseAbort(Fault):
    """
    Base class for faults that abort the response being emitted.

    Nothing catches these inside herald; they propagate to the transport.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        domain: FaultDomain = FaultDomain.RESPONSE,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=domain,
            severity=Severity.FATAL,
            retryable=False,
            public=False,
            metadata=metadata,
        )


class ResponseIOFault(ResponseAbort):
    """Open, read, write, seek, flush or close failed during emission."""

    def __init__(self, operation: str, reason: str, *, path: Optional[str] = None, **kwargs):
        target = f" on '{path}'" if path else ""
        metadata = {"operation": operation, "reason": reason, **kwargs.get("metadata", {})}
        if path:
            metadata["path"] = path
        super().__init__(
            code="RESPONSE_IO",
            message=f"Response {operation}{target} failed: {reason}",
            domain=FaultDomain.IO,
            metadata=metadata,
        )


class EncodingFault(ResponseAbort):
    """Response content could not be serialized."""

    def __init__(self, format: str, reason: str, **kwargs):
        super().__init__(
            code="RESPONSE_ENCODING",
            message=f"Cannot encode response content as {format}: {reason}",
            metadata={"format": format, "reason": reason, **kwargs.get("metadata", {})},
        )


class RedirectStatusFault(ResponseAbort):
    """Redirect emitted with a status code outside 300-308."""

    def __init__(self, status_code: int, **kwargs):
        super().__init__(
            code="INVALID_REDIRECT_STATUS",
            message=f"can not redirect with HTTP status code `{status_code}`",
            metadata={"status_code": status_code, **kwargs.get("metadata", {})},
        )


# ============================================================================
# Template Faults
# ============================================================================

class TemplateRenderFault(Fault):
    """
    Template could not be compiled or rendered.

    Render failures are recovered by the HTML response (500 body); compile
    failures are raised with FATAL severity.
    """

    def __init__(self, reason: str, *, fatal: bool = False, **kwargs):
        super().__init__(
            code="TEMPLATE_RENDER_ERROR",
            message=f"Template rendering failed: {reason}",
            domain=FaultDomain.RESPONSE,
            severity=Severity.FATAL if fatal else Severity.ERROR,
            retryable=False,
            metadata={"reason": reason, **kwargs.get("metadata", {})},
        )
