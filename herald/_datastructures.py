"""
Core data structures for Herald responses.

Provides:
- Headers: Case-insensitive, ordered multi-value header map
- Cookie: Cookie record serialized into a Set-Cookie header value
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from email.utils import formatdate
from typing import (
    Dict, Iterator, List, Mapping, MutableMapping, Optional, Tuple, Union
)


# ============================================================================
# Headers
# ============================================================================

class Headers(MutableMapping[str, List[str]]):
    """
    Case-insensitive header map that supports multiple values per name.

    Names are normalized to lower case; insertion order of names is kept.
    """

    def __init__(self, items: Optional[Union[List[Tuple[str, str]], Mapping[str, Union[str, List[str]]]]] = None):
        self._data: Dict[str, List[str]] = {}

        if items:
            if isinstance(items, Mapping):
                for key, value in items.items():
                    self[key] = value
            else:
                for key, value in items:
                    self.add(key, value)

    def __getitem__(self, key: str) -> List[str]:
        """Get all values for a header."""
        return self._data[key.lower()]

    def __setitem__(self, key: str, value: Union[str, List[str]]) -> None:
        """Set values for a header (replaces existing)."""
        if isinstance(value, (list, tuple)):
            self._data[key.lower()] = list(value)
        else:
            self._data[key.lower()] = [value]

    def __delitem__(self, key: str) -> None:
        del self._data[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self == Headers(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({self._data})"

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get first value for a header."""
        values = self._data.get(key.lower())
        return values[0] if values else default

    def get_all(self, key: str) -> List[str]:
        """Get all values for a header."""
        return list(self._data.get(key.lower(), []))

    def set(self, key: str, value: str) -> None:
        """Set a single value, dropping any existing ones."""
        self._data[key.lower()] = [value]

    def add(self, key: str, value: str) -> None:
        """Add a value to a header (appends to list)."""
        name = key.lower()
        if name in self._data:
            self._data[name].append(value)
        else:
            self._data[name] = [value]

    def items_list(self) -> List[Tuple[str, str]]:
        """Return all headers as a flat list of (name, value) tuples."""
        result = []
        for key, values in self._data.items():
            for value in values:
                result.append((key, value))
        return result

    def copy(self) -> "Headers":
        clone = Headers()
        for key, values in self._data.items():
            clone._data[key] = list(values)
        return clone


# ============================================================================
# Cookie
# ============================================================================

_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def _sanitize_cookie_value(value: str) -> str:
    """Drop bytes not allowed in a cookie value, quoting on space or comma."""
    cleaned = "".join(
        ch for ch in value
        if 0x20 <= ord(ch) < 0x7F and ch not in ('"', ";", "\\")
    )
    if " " in cleaned or "," in cleaned:
        return f'"{cleaned}"'
    return cleaned


@dataclass
class Cookie:
    """
    HTTP cookie to be sent with a response.

    ``max_age`` follows the usual convention: ``None`` omits the attribute,
    a negative value means "delete now" and is sent as ``Max-Age=0``.
    """

    name: str
    value: str = ""
    path: Optional[str] = None
    domain: Optional[str] = None
    expires: Optional[datetime] = None
    max_age: Optional[int] = None
    secure: bool = False
    http_only: bool = False
    same_site: Optional[str] = None

    @property
    def valid(self) -> bool:
        return bool(self.name) and _TOKEN_RE.match(self.name) is not None

    def to_header(self) -> str:
        """
        Serialize for a Set-Cookie header.

        Returns an empty string when the cookie name is not a valid token.
        """
        if not self.valid:
            return ""

        cookie_parts = [f"{self.name}={_sanitize_cookie_value(self.value)}"]

        if self.path:
            cookie_parts.append(f"Path={self.path}")

        if self.domain:
            cookie_parts.append(f"Domain={self.domain.lstrip('.')}")

        if self.expires:
            cookie_parts.append(f"Expires={formatdate(self.expires.timestamp(), usegmt=True)}")

        if self.max_age is not None:
            cookie_parts.append(f"Max-Age={max(self.max_age, 0)}")

        if self.http_only:
            cookie_parts.append("HttpOnly")

        if self.secure:
            cookie_parts.append("Secure")

        if self.same_site:
            cookie_parts.append(f"SameSite={self.same_site}")

        return "; ".join(cookie_parts)

    def __str__(self) -> str:
        return self.to_header()
