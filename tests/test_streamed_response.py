"""
Test StreamedResponse - step loop, cancellation and flushing.
"""

import pytest

from herald import Cookie, Response, StreamedResponse
from herald.faults import ResponseIOFault
from herald.testing import NonFlushingRecorder, ResponseRecorder


def counting_step(times, chunk=b"Hello, World!\n"):
    calls = []

    def step(writer):
        writer.write(chunk)
        calls.append(len(calls) + 1)
        return len(calls) < times

    return step, calls


def test_stream(recorder, http_request):
    step, calls = counting_step(3)
    Response(200).stream(step).emit(recorder, http_request)

    assert recorder.status_code == 200
    assert bytes(recorder.body) == b"Hello, World!\n" * 3
    assert len(calls) == 3
    assert recorder.flushes == 1


def test_set_step_replaces(recorder, http_request):
    called = []

    def step(writer):
        called.append(True)
        return False

    response = Response(200).stream(None)
    response.set_step(step)
    assert response.step is step
    response.emit(recorder, http_request)
    assert called == [True]


def test_true_n_times_then_false(recorder):
    results = iter([True, True, True, False])

    def step(writer):
        writer.write(b"x")
        return next(results)

    Response().stream(step).emit(recorder)
    assert recorder.writes == [b"x", b"x", b"x", b"x"]


def test_without_step_flushes(recorder, http_request):
    Response(202).stream(None).emit(recorder, http_request)
    assert recorder.status_code == 202
    assert bytes(recorder.body) == b""
    assert recorder.flushes == 1


def test_cancelled_request_does_nothing(recorder, cancelled_request):
    step, calls = counting_step(3)
    response = Response(200).stream(step)
    response.set_cookie(Cookie("a", "1"))
    response.set_header("x-stream", "1")
    response.emit(recorder, cancelled_request)

    assert calls == []
    assert bytes(recorder.body) == b""
    assert recorder.status_code is None
    assert recorder.flushes == 0
    assert len(recorder.headers) == 0


def test_cancellation_checked_only_at_start(recorder, http_request):
    calls = []

    def step(writer):
        calls.append(1)
        http_request.cancel_token.cancel()
        writer.write(b".")
        return len(calls) < 3

    Response().stream(step).emit(recorder, http_request)
    assert len(calls) == 3
    assert http_request.cancelled
    assert recorder.flushes == 1


def test_headers_and_cookies_written_first(recorder):
    seen = {}

    def step(writer):
        seen["status"] = writer.status_code
        seen["content-type"] = writer.headers.get("content-type")
        seen["cookie"] = writer.headers.get("set-cookie")
        return False

    base = Response(200)
    base.set_header("content-type", "text/event-stream")
    base.set_cookie(Cookie("s", "1"))
    base.stream(step).emit(recorder)
    assert seen == {"status": 200, "content-type": "text/event-stream", "cookie": "s=1"}


def test_writer_without_flush_is_fatal(http_request):
    writer = NonFlushingRecorder()
    step, calls = counting_step(1)
    with pytest.raises(ResponseIOFault) as exc_info:
        Response().stream(step).emit(writer, http_request)
    assert exc_info.value.metadata["operation"] == "flush"
    assert calls == []
    assert writer.status_code is None


def test_write_failure_in_step_is_fatal():
    recorder = ResponseRecorder(fail_writes=True, fail_after=1)
    step, calls = counting_step(5)
    with pytest.raises(ResponseIOFault) as exc_info:
        Response().stream(step).emit(recorder)
    assert exc_info.value.metadata["operation"] == "write"
    assert exc_info.value.metadata["step"] == 2
    assert recorder.flushes == 0


def test_step_value_error_propagates(recorder):
    def step(writer):
        raise ValueError("bad event payload")

    with pytest.raises(ValueError, match="bad event payload"):
        Response().stream(step).emit(recorder)
    assert recorder.flushes == 0


def test_flush_failure_is_fatal():
    class BrokenFlush(ResponseRecorder):
        def flush(self):
            raise OSError("flush failed")

    with pytest.raises(ResponseIOFault) as exc_info:
        Response().stream(None).emit(BrokenFlush())
    assert exc_info.value.metadata["operation"] == "flush"


def test_direct_construction(recorder):
    response = StreamedResponse().set_step(lambda writer: bool(writer.write(b"once")) and False)
    response.emit(recorder)
    assert bytes(recorder.body) == b"once"
