"""
Reader and file responses.

ReaderResponse streams a binary source to the writer. When no content type
is given it is sniffed from the source's first bytes, which requires the
source to be seekable so the sniffed prefix can be sent as well.
FileResponse opens a path and streams it the same way.
"""

import logging
import os
from typing import BinaryIO, Optional

from .faults import ResponseIOFault
from .response import PathType, ResponseVariant, write_bytes, write_status
from .sniff import OCTET_STREAM, detect_reader
from .writer import Request, ResponseWriter

logger = logging.getLogger("herald.response")


class ReaderResponse(ResponseVariant):
    """
    Sends the contents of a binary reader as the response body.

    Content type resolution:
    1. explicit content type set with ``set_content_type``
    2. sniffed from the reader (the reader is rewound afterwards)
    3. ``application/octet-stream`` when there is no reader
    """

    _reader: Optional[BinaryIO] = None
    _content_type: str = ""

    @property
    def reader(self) -> Optional[BinaryIO]:
        return self._reader

    def set_reader(self, reader: Optional[BinaryIO]) -> "ReaderResponse":
        self._reader = reader
        return self

    @property
    def content_type(self) -> str:
        return self._content_type

    def set_content_type(self, content_type: str) -> "ReaderResponse":
        self._content_type = content_type
        return self

    def _rewind(self) -> None:
        reader = self._reader
        seekable = getattr(reader, "seekable", None)
        if not hasattr(reader, "seek") or (seekable is not None and not seekable()):
            raise ResponseIOFault("seek", f"{type(reader).__name__} is not seekable")
        try:
            reader.seek(0, os.SEEK_SET)
        except (OSError, ValueError) as exc:
            raise ResponseIOFault("seek", str(exc)) from exc

    def _sniff(self) -> str:
        try:
            mime = detect_reader(self._reader, self.config.sniff_limit)
        except (OSError, ValueError) as exc:
            raise ResponseIOFault("read", str(exc)) from exc
        self._rewind()
        return mime

    def _resolve_content_type(self) -> str:
        if self._content_type:
            return self._content_type
        if self._reader is not None:
            return self._sniff()
        return OCTET_STREAM

    def _copy(self, writer: ResponseWriter) -> int:
        reader = self._reader
        chunk_size = self.config.chunk_size
        copied = 0
        while True:
            try:
                chunk = reader.read(chunk_size)
            except (OSError, ValueError) as exc:
                raise ResponseIOFault("read", str(exc), metadata={"bytes_sent": copied}) from exc
            if not chunk:
                break
            write_bytes(writer, chunk)
            copied += len(chunk)
        return copied

    def emit(self, writer: ResponseWriter, request: Optional[Request] = None) -> None:
        """
        Send cookies, headers, status and then the reader's contents.

        Raises:
            ResponseIOFault: sniffing, rewinding, reading or writing failed
        """
        response = self._response
        response.apply_cookies(writer)
        response.apply_headers(writer)
        writer.headers.set("content-type", self._resolve_content_type())
        write_status(writer, response.status_code)

        if self._reader is None:
            return

        copied = self._copy(writer)
        logger.debug("Streamed %d bytes from %s", copied, type(self._reader).__name__)


class FileResponse(ReaderResponse):
    """Sends a file from disk; the file is opened at emission and always closed."""

    _filename: Optional[PathType] = None

    @property
    def filename(self) -> Optional[PathType]:
        return self._filename

    def set_file(self, filename: PathType) -> "FileResponse":
        self._filename = filename
        return self

    def emit(self, writer: ResponseWriter, request: Optional[Request] = None) -> None:
        """
        Open the file and send it.

        Raises:
            ResponseIOFault: the file cannot be opened, read or closed,
                or the writer failed
        """
        path = os.fspath(self._filename) if self._filename is not None else ""
        try:
            f = open(path, "rb")
        except OSError as exc:
            raise ResponseIOFault("open", exc.strerror or str(exc), path=path) from exc

        try:
            self.set_reader(f)
            super().emit(writer, request)
        finally:
            self._reader = None
            try:
                f.close()
            except OSError as exc:
                raise ResponseIOFault("close", str(exc), path=path) from exc
