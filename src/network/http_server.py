"""
HTTP Server Module

This module runs the HTTP listener for TTL-Cache: a FastAPI application
served by uvicorn, with a single catch-all route that forwards every request
to a caller-supplied handler together with the client's IP address:

    handler(request: Request, remote_ip: str) -> Response

The handler may be a plain function or a coroutine function. Anything that
goes wrong inside the handler, or while turning its result into an HTTP
response, is answered with 500 Internal Server Error. HTTP framing
(request parsing, Content-Length, keep-alive) is left to uvicorn/h11.
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

import uvicorn
from fastapi import FastAPI
from fastapi import Request as HTTPRequest
from fastapi.responses import Response as HTTPResponse

from ..config.settings import settings
from ..protocol.messages import Request, Response

logger = logging.getLogger(__name__)

Handler = Callable[[Request, str], Union[Response, Awaitable[Response]]]

ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# Computed by the framework from the body
_FRAMING_HEADERS = ("content-length", "transfer-encoding", "connection")


def to_http_response(response: Response) -> HTTPResponse:
    """
    Convert a handler Response into a framework response.

    Raises:
        TypeError: if the body is not bytes
        UnicodeEncodeError: if a header does not fit in Latin-1
    """
    if not isinstance(response.body, (bytes, bytearray)):
        raise TypeError(f"response body must be bytes, not {type(response.body).__name__}")

    headers = {
        name: value for name, value in response.headers.items()
        if name.lower() not in _FRAMING_HEADERS
    }
    return HTTPResponse(content=bytes(response.body), status_code=response.status, headers=headers)


async def to_request(http_request: HTTPRequest) -> Request:
    """Convert a framework request into a handler Request (reads the body)."""
    url = http_request.url
    target = url.path + (f"?{url.query}" if url.query else "")
    return Request(
        method=http_request.method.upper(),
        target=target,
        path=url.path or "/",
        query=url.query,
        version=f"HTTP/{http_request.scope.get('http_version', '1.1')}",
        headers=dict(http_request.headers.items()),
        body=await http_request.body(),
    )


class HTTPServer:
    """
    HTTP server dispatching every request to a handler.

    Usage:
        server = HTTPServer(my_handler, host='0.0.0.0', port=8080)
        await server.start()  # Runs until stop() or a shutdown signal

    Attributes:
        host: Server bind address (e.g., '0.0.0.0')
        port: Server port number (e.g., 8080)
        handler: Callable invoked as handler(request, remote_ip)
        app: The FastAPI application (usable without a socket, e.g. in tests)
    """

    def __init__(
            self,
            handler: Handler,
            host: Optional[str] = None,
            port: Optional[int] = None,
    ):
        """
        Initialize the server.

        Args:
            handler: Request handler, called with (request, remote_ip)
            host: Bind address (default from settings)
            port: Port number (default from settings)
        """
        self.handler = handler
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT

        self.app = FastAPI(title="TTL-Cache", docs_url=None, redoc_url=None, openapi_url=None)
        self.app.add_api_route("/{path:path}", self.dispatch, methods=ROUTE_METHODS)

        # Server state
        self._server: Optional[uvicorn.Server] = None
        self._running = False
        self._total_requests = 0
        self._handler_errors = 0

    async def dispatch(self, http_request: HTTPRequest) -> HTTPResponse:
        """
        Route endpoint: run the handler for one request.

        Args:
            http_request: The framework request

        Returns:
            The handler's response, 413 for oversized bodies, or 500 if the
            handler fails or returns something unusable
        """
        self._total_requests += 1
        remote_ip = http_request.client.host if http_request.client else ""

        declared = http_request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > settings.MAX_BODY_BYTES:
            return to_http_response(Response.error(413))

        request = await to_request(http_request)
        if len(request.body) > settings.MAX_BODY_BYTES:
            return to_http_response(Response.error(413))

        try:
            response = self.handler(request, remote_ip)
            if inspect.isawaitable(response):
                response = await response
            if not isinstance(response, Response):
                raise TypeError(f"handler returned {type(response).__name__}, expected Response")
            http_response = to_http_response(response)
        except Exception:
            self._handler_errors += 1
            logger.exception(f"Handler failed for {request.method} {request.target}")
            return to_http_response(Response.error(500))

        logger.debug(f"{remote_ip} {request.method} {request.target} -> {response.status}")
        return http_response

    def _config(self) -> uvicorn.Config:
        return uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            http="h11",
            h11_max_incomplete_event_size=settings.MAX_HEADER_BYTES,
            timeout_keep_alive=settings.KEEP_ALIVE_TIMEOUT,
            log_config=None,
            log_level="debug" if settings.DEBUG else settings.LOG_LEVEL.lower(),
            access_log=settings.DEBUG,
        )

    async def start(self) -> None:
        """
        Start the server and serve until stopped.

        uvicorn installs SIGINT/SIGTERM handlers while serving, so a signal
        also ends this coroutine.

        Example:
            server = HTTPServer(handler, port=8080)
            asyncio.run(server.start())
        """
        if self._running:
            return

        self._server = uvicorn.Server(self._config())
        self._running = True
        logger.info(f"Running on: {self.host}:{self.port}")

        try:
            await self._server.serve()
        except asyncio.CancelledError:
            # Expected during shutdown/fixture cleanup
            logger.debug("Server start cancelled")
        finally:
            self._running = False

    async def stop(self) -> None:
        """
        Stop the server gracefully.

        Asks uvicorn to exit and waits for start() to return.
        """
        if self._server is None:
            return

        self._server.should_exit = True
        while self._running:
            await asyncio.sleep(0.05)
        self._server = None

    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

    def is_ready(self) -> bool:
        """Check if the server socket is bound and accepting connections."""
        return self._server is not None and self._server.started

    def get_stats(self) -> dict:
        """
        Get server statistics.

        Returns:
            Dictionary with request and handler error counts.
        """
        return {
            "running": self._running,
            "host": self.host,
            "port": self.port,
            "total_requests": self._total_requests,
            "handler_errors": self._handler_errors,
        }


async def run_server(handler: Handler, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """
    Convenience function to create and run the server.

    Usage:
        asyncio.run(run_server(my_handler, port=8080))
    """
    server = HTTPServer(handler, host=host, port=port)

    try:
        await server.start()
    except asyncio.CancelledError:
        logger.info("Server shutdown requested")
    finally:
        await server.stop()
