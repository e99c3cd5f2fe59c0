"""Protocol module for TTL-Cache."""

from .messages import Request, Response

__all__ = [
    "Request",
    "Response",
]
