"""
Herald Testing - helpers for exercising responses without a transport.

Usage:
    from herald.testing import ResponseRecorder, make_test_request

    recorder = ResponseRecorder()
    Response(200, "hello").emit(recorder, make_test_request())
    assert recorder.body == b"hello"
"""

from .recorder import ResponseRecorder, NonFlushingRecorder
from .utils import make_test_request

__all__ = [
    "ResponseRecorder",
    "NonFlushingRecorder",
    "make_test_request",
]
