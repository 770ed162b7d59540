"""
Response - HTTP response builder emitted onto a transport writer.

Provides:
- Response: status code, header multimap, cookies and an opaque content value
- ResponseVariant: base for typed responses that share a Response by reference
- Conversion factories (json, xml, reader, file, redirect, stream, html)

Emission order is always: cookies, headers, status line, body.
"""

from __future__ import annotations

import logging
from typing import (
    TYPE_CHECKING, Any, BinaryIO, Callable, Dict, List, Mapping, Optional, Union
)
from os import PathLike

from ._datastructures import Cookie, Headers
from .config import ResponseConfig, get_default_config
from .faults import InvalidArgumentFault, ResponseIOFault
from .writer import Request, ResponseWriter

if TYPE_CHECKING:
    from .html_response import HTMLResponse
    from .json_response import JSONResponse, XMLResponse
    from .reader_response import FileResponse, ReaderResponse
    from .redirect_response import RedirectResponse
    from .streamed_response import StreamedResponse


logger = logging.getLogger("herald.response")

PathType = Union[str, PathLike]
StepFunc = Callable[[ResponseWriter], bool]

_UNSET: Any = object()


def validate_status_code(status_code: Any) -> int:
    """Return ``status_code`` if it lies in [100, 600), else raise InvalidArgumentFault."""
    if isinstance(status_code, bool) or not isinstance(status_code, int):
        raise InvalidArgumentFault(
            "status_code",
            status_code,
            f"Invalid status code: {status_code!r}",
        )
    if status_code < 100 or status_code >= 600:
        raise InvalidArgumentFault(
            "status_code",
            status_code,
            f"Invalid status code: {status_code}",
        )
    return status_code


# ============================================================================
# Wire helpers
# ============================================================================

def write_bytes(writer: ResponseWriter, data: bytes) -> None:
    """Write to the transport, turning any failure into a ResponseIOFault."""
    try:
        writer.write(data)
    except (OSError, ValueError) as exc:
        raise ResponseIOFault("write", str(exc)) from exc


def write_status(writer: ResponseWriter, status_code: int) -> None:
    try:
        writer.write_header(status_code)
    except (OSError, ValueError) as exc:
        raise ResponseIOFault("write_header", str(exc)) from exc


# ============================================================================
# Main Response Class
# ============================================================================

class Response:
    """
    Base HTTP response.

    Holds the state every response type shares. Typed responses created
    through the conversion factories keep a reference to this object, so
    status, header and cookie changes made on either side are visible on
    the other.

    Example:
        response = Response(200)
        response.set_header("x-request-id", "abc")
        response.json({"ok": True}).emit(writer, request)
    """

    def __init__(
        self,
        status_code: int = 200,
        content: Any = None,
        *,
        config: Optional[ResponseConfig] = None,
    ):
        self._status_code = validate_status_code(status_code)
        self._headers = Headers()
        self._cookies: List[Cookie] = []
        self._content = content
        self.config = config or get_default_config()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self._status_code})"

    # ========================================================================
    # Status & Content
    # ========================================================================

    @property
    def status_code(self) -> int:
        return self._status_code

    def set_status_code(self, status_code: int) -> None:
        """
        Set the HTTP status code.

        Raises:
            InvalidArgumentFault: code outside [100, 600)
        """
        self._status_code = validate_status_code(status_code)

    @property
    def content(self) -> Any:
        return self._content

    def set_content(self, content: Any) -> None:
        self._content = content

    # ========================================================================
    # Headers
    # ========================================================================

    @property
    def headers(self) -> Headers:
        return self._headers

    def set_header(self, name: str, value: str, replace: bool = True) -> None:
        """
        Set a header.

        Args:
            name: Header name (case-insensitive)
            value: Header value
            replace: Overwrite existing values when True, append when False
        """
        if replace:
            self._headers.set(name, value)
        else:
            self._headers.add(name, value)

    def set_headers(self, headers: Mapping[str, str]) -> None:
        for name, value in headers.items():
            self._headers.set(name, value)

    def has_header(self, name: str) -> bool:
        """
        True when the header's first value is non-empty.

        A header explicitly set to "" reads as absent.
        """
        return self.header(name) != ""

    def header(self, name: str) -> str:
        """First value of a header, or "" when it is not set."""
        return self._headers.get(name, "")

    # ========================================================================
    # Cookies
    # ========================================================================

    @property
    def cookies(self) -> List[Cookie]:
        return self._cookies

    def set_cookie(self, cookie: Cookie) -> None:
        self._cookies.append(cookie)

    # ========================================================================
    # Emission
    # ========================================================================

    def apply_cookies(self, writer: ResponseWriter) -> None:
        for cookie in self._cookies:
            value = cookie.to_header()
            if not value:
                logger.debug("Skipping cookie with invalid name %r", cookie.name)
                continue
            writer.headers.add("set-cookie", value)

    def apply_headers(self, writer: ResponseWriter) -> None:
        for name, values in self._headers.items():
            writer.headers[name] = list(values)

    def write_head(self, writer: ResponseWriter, status_code: Optional[int] = None) -> None:
        """Write cookies, headers and the status line."""
        self.apply_cookies(writer)
        self.apply_headers(writer)
        write_status(writer, status_code if status_code is not None else self._status_code)

    def body_bytes(self) -> bytes:
        """Encode the content for the wire."""
        content = self._content
        if content is None:
            return b""
        if isinstance(content, (bytes, bytearray, memoryview)):
            return bytes(content)
        if isinstance(content, str):
            return content.encode(self.config.encoding)
        return str(content).encode(self.config.encoding)

    def emit(self, writer: ResponseWriter, request: Optional[Request] = None) -> None:
        """
        Send the response.

        Raises:
            ResponseIOFault: the writer failed
        """
        logger.debug("Emitting %r", self)
        self.write_head(writer)
        write_bytes(writer, self.body_bytes())

    # ========================================================================
    # Conversion Factories
    # ========================================================================

    def json(self, data: Any = _UNSET) -> "JSONResponse":
        """JSON view of this response; defaults to the current content."""
        from .json_response import JSONResponse
        json_response = JSONResponse(self)
        json_response.set_content(self._content if data is _UNSET else data)
        return json_response

    def xml(self, data: Any = _UNSET) -> "XMLResponse":
        """XML view of this response; defaults to the current content."""
        from .json_response import XMLResponse
        xml_response = XMLResponse(self)
        xml_response.set_content(self._content if data is _UNSET else data)
        return xml_response

    def reader(self, source: Optional[BinaryIO]) -> "ReaderResponse":
        from .reader_response import ReaderResponse
        return ReaderResponse(self).set_reader(source)

    def file(self, path: PathType) -> "FileResponse":
        from .reader_response import FileResponse
        return FileResponse(self).set_file(path)

    def redirect(self, location: str) -> "RedirectResponse":
        from .redirect_response import RedirectResponse
        return RedirectResponse(self).set_location(location)

    def stream(self, step: Optional[StepFunc]) -> "StreamedResponse":
        from .streamed_response import StreamedResponse
        return StreamedResponse(self).set_step(step)

    def html(self, path: PathType, model: Optional[Dict[str, Any]] = None) -> "HTMLResponse":
        """
        HTML view of this response rendered from a template file.

        Raises:
            ResponseIOFault: the template file cannot be read
        """
        from .html_response import HTMLResponse
        return HTMLResponse(self).load_html(path).set_model(model)


# ============================================================================
# Typed Response Base
# ============================================================================

class ResponseVariant:
    """
    Typed response sharing a base Response by reference.

    Status, headers, cookies and config are read from and written to the
    shared base; subclasses add their own content and override ``emit``.
    """

    def __init__(self, response: Optional[Response] = None):
        self._response = response if response is not None else Response()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code})"

    @property
    def response(self) -> Response:
        return self._response

    @property
    def config(self) -> ResponseConfig:
        return self._response.config

    @property
    def status_code(self) -> int:
        return self._response.status_code

    def set_status_code(self, status_code: int) -> None:
        self._response.set_status_code(status_code)

    @property
    def content(self) -> Any:
        return self._response.content

    def set_content(self, content: Any) -> None:
        self._response.set_content(content)

    @property
    def headers(self) -> Headers:
        return self._response.headers

    def set_header(self, name: str, value: str, replace: bool = True) -> None:
        self._response.set_header(name, value, replace)

    def set_headers(self, headers: Mapping[str, str]) -> None:
        self._response.set_headers(headers)

    def has_header(self, name: str) -> bool:
        return self._response.has_header(name)

    def header(self, name: str) -> str:
        return self._response.header(name)

    @property
    def cookies(self) -> List[Cookie]:
        return self._response.cookies

    def set_cookie(self, cookie: Cookie) -> None:
        self._response.set_cookie(cookie)

    def emit(self, writer: ResponseWriter, request: Optional[Request] = None) -> None:
        self._response.emit(writer, request)
