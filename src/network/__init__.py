"""Network module for TTL-Cache."""

from .handlers import CachingHandler
from .http_server import HTTPServer

__all__ = ["CachingHandler", "HTTPServer"]
