"""
Redirect response.
"""

import logging
import posixpath
from typing import Optional
from urllib.parse import urlsplit

from .faults import RedirectStatusFault
from .response import ResponseVariant, write_status
from .writer import Request, ResponseWriter

logger = logging.getLogger("herald.response")

REDIRECT_MIN = 300
REDIRECT_MAX = 308


def resolve_location(location: str, request_path: str = "/") -> str:
    """
    Resolve a redirect target the way browsers expect it.

    Absolute URLs and protocol-relative targets are kept as-is. An empty
    target becomes ``/``. Other targets without a leading slash are taken
    relative to the directory of ``request_path``; the result is cleaned of
    ``.`` and ``..`` segments, keeping a trailing slash.
    """
    if not location:
        return "/"

    parts = urlsplit(location)
    if parts.scheme or parts.netloc:
        return location

    target = location
    if not target.startswith("/"):
        base_dir = posixpath.dirname(request_path or "/")
        if not base_dir.endswith("/"):
            base_dir += "/"
        target = base_dir + target

    query = ""
    if "?" in target:
        target, query = target.split("?", 1)
        query = "?" + query

    trailing = target.endswith("/")
    cleaned = posixpath.normpath(target)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    if trailing and not cleaned.endswith("/"):
        cleaned += "/"
    return cleaned + query


class RedirectResponse(ResponseVariant):
    """
    Sends a redirect to ``location`` using the base response's status code.

    The status code is validated at emission, not when it is set, since a
    response may be converted to a redirect after its status was chosen.
    """

    _location: str = ""

    @property
    def location(self) -> str:
        return self._location

    def set_location(self, location: str) -> "RedirectResponse":
        self._location = location
        return self

    def emit(self, writer: ResponseWriter, request: Optional[Request] = None) -> None:
        """
        Send cookies, headers, ``Location`` and the status line. No body.

        Raises:
            RedirectStatusFault: status code outside 300-308 (nothing is written)
            ResponseIOFault: the writer failed
        """
        status_code = self.status_code
        if status_code < REDIRECT_MIN or status_code > REDIRECT_MAX:
            raise RedirectStatusFault(status_code)

        request_path = request.path if request is not None else "/"
        location = resolve_location(self._location, request_path)

        response = self._response
        response.apply_cookies(writer)
        response.apply_headers(writer)
        writer.headers.set("location", location)
        logger.debug("Redirecting to %s with %d", location, status_code)
        write_status(writer, status_code)
