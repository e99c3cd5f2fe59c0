"""
Request Handlers

CachingHandler memoizes another handler's responses in a TTLCache, keyed
by a string derived from the request.
"""

import inspect
import logging
from typing import Callable, Optional

from ..cache.ttl_cache import TTLCache
from ..config.settings import settings
from ..protocol.messages import Request, Response
from .http_server import Handler

logger = logging.getLogger(__name__)

CACHEABLE_METHODS = ("GET", "HEAD")

KeyFunc = Callable[[Request, str], str]


def default_cache_key(request: Request, remote_ip: str) -> str:
    """Key responses by method and full request target."""
    return f"{request.method} {request.target}"


class CachingHandler:
    """
    Handler wrapper that serves repeated GET/HEAD requests from a TTLCache.

    On a fresh cache entry the stored response is returned with
    `X-Cache: HIT`. Otherwise (empty, undefined or expired) the inner handler
    runs, and its 2xx responses are written back with `X-Cache: MISS`.
    Other methods always reach the inner handler (`X-Cache: BYPASS`).

    The listener runs on a single event loop, so the default cache is an
    unlocked TTLCache. Pass a SynchronizedTTLCache when sharing it with
    other threads.

    Attributes:
        inner: The wrapped handler (sync or async)
        cache: TTLCache of responses
        key_func: Callable deriving the cache key from (request, remote_ip)
    """

    def __init__(
            self,
            inner: Handler,
            ttl_ms: Optional[int] = None,
            key_func: Optional[KeyFunc] = None,
            cache: Optional[TTLCache[Response]] = None,
    ):
        self.inner = inner
        if cache is None:
            cache = TTLCache(ttl_ms if ttl_ms is not None else settings.TTL_MS)
        self.cache = cache
        self.key_func = key_func if key_func is not None else default_cache_key

    async def __call__(self, request: Request, remote_ip: str) -> Response:
        if request.method not in CACHEABLE_METHODS:
            response = await self._call_inner(request, remote_ip)
            response.headers["X-Cache"] = "BYPASS"
            return response

        key = self.key_func(request, remote_ip)
        outcome = self.cache.read(key)
        if outcome.is_value():
            logger.debug(f"Cache hit: {key}")
            response = outcome.unwrap()
            response.headers["X-Cache"] = "HIT"
            return response

        logger.debug(f"Cache {outcome.kind.name.lower()}: {key}")
        response = await self._call_inner(request, remote_ip)
        if 200 <= response.status < 300:
            self.cache.write(key, response)
        response.headers["X-Cache"] = "MISS"
        return response

    async def _call_inner(self, request: Request, remote_ip: str) -> Response:
        response = self.inner(request, remote_ip)
        if inspect.isawaitable(response):
            response = await response
        return response
