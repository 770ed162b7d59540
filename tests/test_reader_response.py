"""
Test ReaderResponse and FileResponse.
"""

import io

import pytest

from herald import Cookie, FileResponse, ReaderResponse, Response, ResponseConfig
from herald.faults import ResponseAbort, ResponseIOFault
from herald.testing import ResponseRecorder

PNG_HEADER = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR" + b"\x00" * 16


class ReadOnlySource:
    """Readable source without seek support."""

    def __init__(self, data: bytes):
        self._buf = io.BytesIO(data)

    def read(self, size=-1):
        return self._buf.read(size)


class UnseekableBytesIO(io.BytesIO):
    def seekable(self):
        return False


class FailingSource(io.BytesIO):
    def read(self, size=-1):
        raise OSError("disk on fire")


# ============================================================================
# ReaderResponse
# ============================================================================

class TestReaderResponse:

    def test_sniffs_text(self, recorder, http_request):
        data = b"Hello, World!"
        response = Response(200).reader(io.BytesIO(data))
        response.emit(recorder, http_request)

        assert recorder.status_code == 200
        assert recorder.sent_headers.get("content-type") == "text/plain; charset=utf-8"
        assert bytes(recorder.body) == data

    def test_sniffed_prefix_is_sent(self, recorder):
        data = b"0123456789" * 1000
        base = Response(200, config=ResponseConfig(sniff_limit=16, chunk_size=1024))
        base.reader(io.BytesIO(data)).emit(recorder)
        assert bytes(recorder.body) == data

    def test_sniffs_binary(self, recorder):
        Response().reader(io.BytesIO(PNG_HEADER)).emit(recorder)
        assert recorder.headers.get("content-type") == "image/png"
        assert bytes(recorder.body) == PNG_HEADER

    def test_explicit_content_type_wins(self, recorder):
        response = Response(200).reader(io.BytesIO(PNG_HEADER))
        response.set_content_type("text/plain")
        response.emit(recorder)
        assert recorder.headers.get_all("content-type") == ["text/plain"]
        assert bytes(recorder.body) == PNG_HEADER

    def test_explicit_content_type_beats_base_header(self, recorder):
        base = Response()
        base.set_header("content-type", "application/json")
        base.reader(io.BytesIO(b"x")).set_content_type("text/csv").emit(recorder)
        assert recorder.headers.get_all("content-type") == ["text/csv"]

    def test_no_reader(self, recorder):
        Response(200).reader(None).emit(recorder)
        assert recorder.status_code == 200
        assert recorder.headers.get("content-type") == "application/octet-stream"
        assert bytes(recorder.body) == b""

    def test_explicit_type_does_not_need_seek(self, recorder):
        response = Response().reader(ReadOnlySource(b"abc")).set_content_type("text/plain")
        response.emit(recorder)
        assert bytes(recorder.body) == b"abc"

    @pytest.mark.parametrize("source", [ReadOnlySource(b"abc"), UnseekableBytesIO(b"abc")])
    def test_sniff_requires_seek(self, recorder, source):
        with pytest.raises(ResponseIOFault) as exc_info:
            Response().reader(source).emit(recorder)
        assert exc_info.value.metadata["operation"] == "seek"
        assert recorder.status_code is None

    def test_chunked_copy(self, recorder):
        base = Response(config=ResponseConfig(chunk_size=4))
        base.reader(io.BytesIO(b"abcdefghij")).set_content_type("text/plain").emit(recorder)
        assert recorder.writes == [b"abcd", b"efgh", b"ij"]

    def test_read_failure_is_fatal(self, recorder):
        response = Response().reader(FailingSource(b"abc")).set_content_type("text/plain")
        with pytest.raises(ResponseIOFault) as exc_info:
            response.emit(recorder)
        assert exc_info.value.metadata["operation"] == "read"
        assert isinstance(exc_info.value, ResponseAbort)

    def test_write_failure_is_fatal(self):
        recorder = ResponseRecorder(fail_writes=True, fail_after=1)
        base = Response(config=ResponseConfig(chunk_size=2))
        response = base.reader(io.BytesIO(b"abcdef")).set_content_type("text/plain")
        with pytest.raises(ResponseIOFault):
            response.emit(recorder)
        assert bytes(recorder.body) == b"ab"

    def test_cookies_and_headers(self, recorder):
        base = Response(206)
        base.set_cookie(Cookie("a", "1"))
        base.set_header("x-extra", "yes")
        base.reader(io.BytesIO(b"data")).emit(recorder)
        assert recorder.status_code == 206
        assert recorder.headers.get("set-cookie") == "a=1"
        assert recorder.headers.get("x-extra") == "yes"

    def test_setters_chain(self):
        source = io.BytesIO(b"")
        response = ReaderResponse().set_reader(source).set_content_type("text/plain")
        assert response.reader is source
        assert response.content_type == "text/plain"


# ============================================================================
# FileResponse
# ============================================================================

class TrackingFile(io.BytesIO):
    closes = 0

    def close(self):
        TrackingFile.closes += 1
        super().close()


class BadCloseFile(io.BytesIO):
    def __init__(self, data):
        super().__init__(data)
        self._failed = False

    def close(self):
        super().close()
        if not self._failed:
            self._failed = True
            raise OSError("close failed")


@pytest.fixture
def tracked_open(monkeypatch):
    TrackingFile.closes = 0

    def fake_open(path, mode="r"):
        return TrackingFile(b"tracked contents")

    monkeypatch.setattr("herald.reader_response.open", fake_open, raising=False)
    return TrackingFile


class TestFileResponse:

    def test_emit(self, recorder, http_request, tmp_path):
        path = tmp_path / "response_test.txt"
        path.write_bytes(b"Hello, World!\n")

        Response(200).file(str(path)).emit(recorder, http_request)

        assert recorder.status_code == 200
        assert recorder.headers.get("content-type") == "text/plain; charset=utf-8"
        assert bytes(recorder.body) == b"Hello, World!\n"

    def test_pathlike(self, recorder, tmp_path):
        path = tmp_path / "image.bin"
        path.write_bytes(PNG_HEADER)
        Response().file(path).emit(recorder)
        assert recorder.headers.get("content-type") == "image/png"

    def test_explicit_content_type(self, recorder, tmp_path):
        path = tmp_path / "data.txt"
        path.write_bytes(b"a,b\n")
        response = Response().file(path)
        response.set_content_type("text/csv")
        response.emit(recorder)
        assert recorder.headers.get("content-type") == "text/csv"

    def test_missing_file(self, recorder, tmp_path):
        missing = tmp_path / "nope.txt"
        with pytest.raises(ResponseIOFault) as exc_info:
            Response(200).file(missing).emit(recorder)
        fault = exc_info.value
        assert fault.metadata["operation"] == "open"
        assert fault.metadata["path"] == str(missing)
        assert isinstance(fault.__cause__, FileNotFoundError)
        assert recorder.status_code is None
        assert bytes(recorder.body) == b""

    def test_closed_after_success(self, recorder, tracked_open):
        response = Response().file("whatever")
        response.emit(recorder)
        assert bytes(recorder.body) == b"tracked contents"
        assert tracked_open.closes == 1
        assert response.reader is None

    def test_closed_after_write_failure(self, tracked_open):
        with pytest.raises(ResponseIOFault):
            Response().file("whatever").emit(ResponseRecorder(fail_writes=True))
        assert tracked_open.closes == 1

    def test_closed_after_sniff_failure(self, recorder, monkeypatch):
        opened = []

        def fake_open(path, mode="r"):
            f = TrackingFile(b"abc")
            f.seekable = lambda: False
            opened.append(f)
            return f

        TrackingFile.closes = 0
        monkeypatch.setattr("herald.reader_response.open", fake_open, raising=False)
        with pytest.raises(ResponseIOFault) as exc_info:
            Response().file("whatever").emit(recorder)
        assert exc_info.value.metadata["operation"] == "seek"
        assert opened[0].closed
        assert TrackingFile.closes == 1

    def test_close_failure_is_fatal(self, recorder, monkeypatch):
        monkeypatch.setattr(
            "herald.reader_response.open",
            lambda path, mode="r": BadCloseFile(b"data"),
            raising=False,
        )
        with pytest.raises(ResponseIOFault) as exc_info:
            Response().file("whatever").emit(recorder)
        assert exc_info.value.metadata["operation"] == "close"
        assert bytes(recorder.body) == b"data"

    def test_set_file_chains(self):
        response = FileResponse().set_file("a.txt")
        assert response.filename == "a.txt"
