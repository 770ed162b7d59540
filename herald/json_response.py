"""
JSON and XML responses.

Both keep the caller's value untouched until emission, then serialize it,
force the content-type and hand off to the base response.
"""

from typing import Any, Optional

from .encoders import encode_json, encode_xml
from .response import ResponseVariant
from .writer import Request, ResponseWriter


class EncodedResponse(ResponseVariant):
    """Base for responses whose content is serialized at emission time."""

    media_type: str = "application/octet-stream"

    _data: Any = None

    @property
    def content(self) -> Any:
        return self._data

    def set_content(self, data: Any) -> None:
        self._data = data

    def encode(self) -> bytes:
        raise NotImplementedError

    def emit(self, writer: ResponseWriter, request: Optional[Request] = None) -> None:
        """
        Serialize and send.

        Raises:
            EncodingFault: the content cannot be serialized (nothing is written)
            ResponseIOFault: the writer failed
        """
        body = self.encode()
        self._response.set_content(body)
        self.set_header("content-type", self.media_type)
        self._response.emit(writer, request)


class JSONResponse(EncodedResponse):
    """Sends its content as JSON; ``None`` is sent as ``null``."""

    media_type = "application/json"

    def encode(self) -> bytes:
        return encode_json(self._data, sort_keys=self.config.json_sort_keys)


class XMLResponse(EncodedResponse):
    """Sends its content as XML."""

    media_type = "application/xml"

    def encode(self) -> bytes:
        return encode_xml(self._data)
