"""
HTTP Request and Response Definitions

This module defines the data structures exchanged between the HTTP listener
and request handlers. The listener converts to and from the ASGI framework's
own request/response objects, so handlers (and the response cache) only ever
see these plain, copyable dataclasses.
"""

import json
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Dict, Optional


@dataclass
class Request:
    """
    Represents an HTTP request as seen by a handler.

    Attributes:
        method: Request method, upper-cased (GET, POST, ...)
        target: Path plus query string, e.g. "/items?id=7"
        path: The path part of the target
        query: The query string without the leading '?' ("" if none)
        version: Protocol version, e.g. "HTTP/1.1"
        headers: Header map with lower-cased names
        body: Raw request body
    """
    method: str
    target: str
    path: str = "/"
    query: str = ""
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)


@dataclass
class Response:
    """
    Represents an HTTP response.

    Attributes:
        status: Numeric status code
        body: Raw response body (must be bytes)
        headers: Extra headers; Content-Length is computed by the listener
    """
    status: int = 200
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def reason(self) -> str:
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return ""

    @classmethod
    def text(cls, body: str, status: int = 200) -> "Response":
        """Create a plain-text response."""
        return cls(
            status=status,
            body=body.encode(),
            headers={"Content-Type": "text/plain; charset=utf-8"},
        )

    @classmethod
    def json(cls, payload: Any, status: int = 200) -> "Response":
        """Create a JSON response."""
        return cls(
            status=status,
            body=json.dumps(payload).encode(),
            headers={"Content-Type": "application/json"},
        )

    @classmethod
    def error(cls, status: int, message: Optional[str] = None) -> "Response":
        """Create an error response; the message defaults to the reason phrase."""
        if message is None:
            message = HTTPStatus(status).phrase
        return cls.text(message, status=status)
