"""
Handler adapter.

Lets an arbitrary handler stand wherever a response is expected. Only
``emit`` is meaningful; everything else fails fast.
"""

from typing import Any, Callable, List, Mapping, NoReturn, Optional, Union

from ._datastructures import Cookie, Headers
from .faults import UnsupportedOperationFault
from .writer import Handler, Request, ResponseWriter

HandlerFunc = Callable[[ResponseWriter, Optional[Request]], None]


def _unsupported(operation: str) -> NoReturn:
    raise UnsupportedOperationFault(operation)


class HandlerWrapper:
    """
    Wraps a handler object (anything with ``emit``) or a plain callable
    ``handler(writer, request)``.
    """

    def __init__(self, handler: Union[Handler, HandlerFunc]):
        self._handler = handler

    @property
    def handler(self) -> Union[Handler, HandlerFunc]:
        return self._handler

    def emit(self, writer: ResponseWriter, request: Optional[Request] = None) -> None:
        emit = getattr(self._handler, "emit", None)
        if emit is not None:
            emit(writer, request)
        else:
            self._handler(writer, request)

    @property
    def status_code(self) -> int:
        _unsupported("status_code")

    def set_status_code(self, status_code: int) -> None:
        _unsupported("set_status_code")

    @property
    def content(self) -> Any:
        _unsupported("content")

    def set_content(self, content: Any) -> None:
        _unsupported("set_content")

    @property
    def headers(self) -> Headers:
        _unsupported("headers")

    def set_header(self, name: str, value: str, replace: bool = True) -> None:
        _unsupported("set_header")

    def set_headers(self, headers: Mapping[str, str]) -> None:
        _unsupported("set_headers")

    def has_header(self, name: str) -> bool:
        _unsupported("has_header")

    def header(self, name: str) -> str:
        _unsupported("header")

    @property
    def cookies(self) -> List[Cookie]:
        _unsupported("cookies")

    def set_cookie(self, cookie: Cookie) -> None:
        _unsupported("set_cookie")
