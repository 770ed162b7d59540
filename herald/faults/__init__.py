"""
Herald faults - typed fault signals raised while building and emitting responses.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain enumeration
- Severity: Severity levels
- ResponseAbort: Base of every fault that aborts an in-flight response
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
    DOMAIN_DEFAULTS,
)

from .domains import (
    InvalidArgumentFault,
    UnsupportedOperationFault,
    ResponseAbort,
    ResponseIOFault,
    EncodingFault,
    RedirectStatusFault,
    TemplateRenderFault,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",
    "DOMAIN_DEFAULTS",

    # Response faults
    "InvalidArgumentFault",
    "UnsupportedOperationFault",
    "ResponseAbort",
    "ResponseIOFault",
    "EncodingFault",
    "RedirectStatusFault",
    "TemplateRenderFault",
]
