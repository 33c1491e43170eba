"""Failure-to-response mapping for the ASGI layer.

The router lets every exception escape; this is where they are caught
for a request served over ASGI. HTTPError keeps its status, anything
else becomes a 500.
"""

import logging
import traceback

from junction.config import AppConfig
from junction.errors import HTTPError
from junction.http.request import Request
from junction.http.response import Response

logger = logging.getLogger("junction.server")


def handle_http_error(exc: HTTPError, request: Request, config: AppConfig) -> Response:
    """Map an HTTPError raised while dispatching to a plain response."""
    logger.debug("%d %s %s - %s", exc.status, request.method, request.path, exc.detail)

    response = Response(
        body=exc.detail or f"Error {exc.status}",
        status=exc.status,
        content_type=config.default_content_type,
    )
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(exc: Exception, request: Request, config: AppConfig) -> Response:
    """Log an unexpected failure and answer 500."""
    logger.exception("500 %s %s", request.method, request.path)

    body = "Internal Server Error"
    if config.debug:
        body = "".join(traceback.format_exception(exc))
    return Response(body=body, status=500, content_type=config.default_content_type)
