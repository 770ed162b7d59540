"""
Content-type sniffing over a byte prefix.

Binary formats are recognized by their magic numbers via ``filetype``;
markup and plain text are recognized from the decoded prefix.
"""

import codecs
import logging
from typing import BinaryIO

import filetype

logger = logging.getLogger("herald.sniff")

OCTET_STREAM = "application/octet-stream"
TEXT_PLAIN = "text/plain; charset=utf-8"

# Bytes that never appear in text (WHATWG mime sniffing "binary data bytes")
_BINARY_BYTES = frozenset(
    list(range(0x00, 0x09)) + [0x0B] + list(range(0x0E, 0x1B)) + list(range(0x1C, 0x20))
)

_HTML_PREFIXES = (
    "<!doctype html", "<html", "<head", "<body", "<script", "<iframe",
    "<h1", "<div", "<font", "<table", "<a", "<style", "<title", "<b",
    "<br", "<p", "<!--",
)

_BOMS = (
    (codecs.BOM_UTF8, "text/plain; charset=utf-8"),
    (codecs.BOM_UTF16_BE, "text/plain; charset=utf-16be"),
    (codecs.BOM_UTF16_LE, "text/plain; charset=utf-16le"),
)


def _is_utf8(data: bytes) -> bool:
    # A prefix may cut a multi-byte sequence in half; that is still UTF-8.
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(data, final=False)
    except UnicodeDecodeError:
        return False
    return True


def _sniff_markup(text: str) -> str | None:
    head = text.lstrip(" \t\r\n\f").lower()
    if head.startswith("<?xml"):
        return "text/xml; charset=utf-8"
    for prefix in _HTML_PREFIXES:
        if head.startswith(prefix):
            rest = head[len(prefix):len(prefix) + 1]
            if prefix == "<!--" or rest in ("", " ", ">"):
                return "text/html; charset=utf-8"
    return None


def detect(data: bytes) -> str:
    """
    Detect the content type of a byte prefix.

    Never fails: unknown binary content is ``application/octet-stream``.
    """
    if not data:
        return TEXT_PLAIN

    kind = filetype.guess(data)
    if kind is not None:
        return kind.mime

    for bom, mime in _BOMS:
        if data.startswith(bom):
            return mime

    if any(byte in _BINARY_BYTES for byte in data):
        return OCTET_STREAM

    if _is_utf8(data):
        text = data.decode("utf-8", errors="ignore")
        return _sniff_markup(text) or TEXT_PLAIN

    return "text/plain"


def read_prefix(source: BinaryIO, limit: int) -> bytes:
    """Read up to ``limit`` bytes, tolerating short reads."""
    buf = bytearray()
    while len(buf) < limit:
        chunk = source.read(limit - len(buf))
        if not chunk:
            break
        buf.extend(chunk)
    return bytes(buf)


def detect_reader(source: BinaryIO, limit: int = 3072) -> str:
    """
    Detect the content type of a readable source.

    Consumes up to ``limit`` bytes; callers that need the full body must
    rewind the source afterwards.
    """
    mime = detect(read_prefix(source, limit))
    logger.debug("Sniffed content type %s", mime)
    return mime
