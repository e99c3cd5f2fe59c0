#!/usr/bin/env python3
"""
TTL-Cache Server Entry Point

Runs the HTTP listener with a demo handler wrapped in a CachingHandler.
The demo handler reports the caller's IP, the requested path and the
time the response was generated, so cache hits are easy to spot.

Usage:
    python -m src.server                    # Default settings (0.0.0.0:8080)
    python -m src.server --port 9090        # Custom port
    python -m src.server --host 127.0.0.1   # Custom host
    python -m src.server --ttl-ms 5000      # Cache responses for 5 seconds
    python -m src.server --debug            # Enable debug logging

Environment Variables:
    TTL_CACHE_HOST       - Server bind address
    TTL_CACHE_PORT       - Server port
    TTL_CACHE_TTL_MS     - Response cache TTL in milliseconds
    TTL_CACHE_DEBUG      - Enable debug mode (true/false)
    TTL_CACHE_LOG_LEVEL  - Log level when not in debug mode
"""

import argparse
import asyncio
import logging
import sys

from .cache.clock import now_ms
from .config.settings import settings
from .network.handlers import CachingHandler
from .network.http_server import HTTPServer
from .protocol.messages import Request, Response


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="TTL-Cache: HTTP listener with a TTL response cache",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=settings.HOST,
        help="Host address to bind to",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help="Port number to listen on",
    )

    parser.add_argument(
        "--ttl-ms",
        type=int,
        default=settings.TTL_MS,
        help="Response cache TTL in milliseconds",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def whoami(request: Request, remote_ip: str) -> Response:
    """Demo handler: echo the caller's IP and path."""
    return Response.json({
        "ip": remote_ip,
        "path": request.path,
        "generated_at": now_ms(),
    })


def build_handler(ttl_ms: int) -> CachingHandler:
    """Wrap the demo handler in a per-client response cache."""
    return CachingHandler(
        whoami,
        ttl_ms=ttl_ms,
        key_func=lambda request, ip: f"{ip} {request.method} {request.target}",
    )


def main() -> None:
    """Main entry point for the server."""
    args = parse_args()

    settings.DEBUG = args.debug
    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    server = HTTPServer(
        build_handler(args.ttl_ms),
        host=args.host,
        port=args.port,
    )

    logger.info("Starting TTL-Cache server")
    logger.info(f"  Host: {args.host}")
    logger.info(f"  Port: {args.port}")
    logger.info(f"  TTL: {args.ttl_ms} ms")
    logger.info(f"  Debug: {args.debug}")

    # uvicorn handles SIGINT/SIGTERM and returns from start()
    try:
        asyncio.run(server.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    except Exception as e:
        logger.error(f"Server error: {e}")
        raise
    finally:
        logger.info("Server shutdown complete")


if __name__ == "__main__":
    main()
