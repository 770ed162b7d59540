"""
Herald - HTTP response construction helpers.

Build a response (status, headers, cookies, body), optionally convert it to
a typed response (JSON, XML, reader, file, redirect, streamed, HTML) and
emit it onto a transport-supplied writer:

    from herald import Response

    response = Response(201)
    response.set_header("x-request-id", request_id)
    response.json({"id": 42}).emit(writer, request)
"""

__version__ = "0.1.0"

from ._datastructures import Cookie, Headers
from .config import ConfigError, ConfigLoader, ResponseConfig, get_default_config, set_default_config
from .faults import (
    Fault,
    FaultDomain,
    Severity,
    InvalidArgumentFault,
    UnsupportedOperationFault,
    ResponseAbort,
    ResponseIOFault,
    EncodingFault,
    RedirectStatusFault,
    TemplateRenderFault,
)
from .writer import CancelToken, Flusher, Handler, Request, ResponseWriter
from .response import Response, ResponseVariant
from .json_response import EncodedResponse, JSONResponse, XMLResponse
from .reader_response import FileResponse, ReaderResponse
from .redirect_response import RedirectResponse
from .streamed_response import StreamedResponse
from .html_response import HTMLResponse
from .handler import HandlerWrapper

__all__ = [
    # Data structures
    "Cookie",
    "Headers",

    # Config
    "ConfigError",
    "ConfigLoader",
    "ResponseConfig",
    "get_default_config",
    "set_default_config",

    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "InvalidArgumentFault",
    "UnsupportedOperationFault",
    "ResponseAbort",
    "ResponseIOFault",
    "EncodingFault",
    "RedirectStatusFault",
    "TemplateRenderFault",

    # Transport interfaces
    "CancelToken",
    "Flusher",
    "Handler",
    "Request",
    "ResponseWriter",

    # Responses
    "Response",
    "ResponseVariant",
    "EncodedResponse",
    "JSONResponse",
    "XMLResponse",
    "ReaderResponse",
    "FileResponse",
    "RedirectResponse",
    "StreamedResponse",
    "HTMLResponse",
    "HandlerWrapper",
]
