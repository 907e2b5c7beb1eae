"""Health relay endpoint.

Peers probe this endpoint. With an ``address`` query parameter the request is
forwarded as a plain GET and the downstream status code is mirrored back, so
a peer's readiness is attested by a round trip through this node.
"""

from urllib.parse import urlparse

import requests
from fastapi import FastAPI, Query, Response, status
from urllib3.exceptions import HTTPError

from netpingpong import __version__
from netpingpong.config import DEFAULT_HTTP_TIMEOUT
from netpingpong.logging_config import get_logger

logger = get_logger(__name__)


def is_absolute_url(address: str) -> bool:
    """Return True if ``address`` has both a scheme and a host."""
    try:
        parsed = urlparse(address)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def relay_status(address: str | None, timeout: float = DEFAULT_HTTP_TIMEOUT) -> int:
    """Return the status code the relay answers with for ``address``."""
    if not address:
        return status.HTTP_200_OK

    if not is_absolute_url(address):
        logger.debug(f"Rejecting malformed relay address {address!r}")
        return status.HTTP_400_BAD_REQUEST

    try:
        response = requests.get(address, timeout=timeout)
    except (requests.RequestException, HTTPError) as e:
        logger.warning(f"Relay request to {address} failed: {e}")
        return status.HTTP_500_INTERNAL_SERVER_ERROR

    response.close()
    return response.status_code


def create_app(timeout: float = DEFAULT_HTTP_TIMEOUT) -> FastAPI:
    """Create the relay application."""
    app = FastAPI(
        title="netpingpong relay",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    # Sync handler: FastAPI runs it in its threadpool, one call per request
    @app.get("/")
    def relay(address: str | None = Query(default=None)) -> Response:
        return Response(status_code=relay_status(address, timeout))

    return app
