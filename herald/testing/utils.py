"""
Herald Testing - Request factories.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from herald._datastructures import Headers
from herald.writer import CancelToken, Request


def make_test_request(
    method: str = "GET",
    path: str = "/",
    headers: Optional[List[Tuple[str, str]]] = None,
    *,
    cancelled: bool = False,
) -> Request:
    """
    Build a Request for testing.

    Args:
        method: HTTP method.
        path: Request path.
        headers: List of ``(name, value)`` tuples.
        cancelled: Cancel the request before returning it.

    Returns:
        Request instance.
    """
    token = CancelToken()
    if cancelled:
        token.cancel()
    return Request(
        method=method,
        path=path,
        headers=Headers(headers or []),
        cancel_token=token,
    )
