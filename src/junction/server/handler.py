"""ASGI handler - translates ASGI scope/messages to junction types.

The only component that touches raw ASGI HTTP messages. Converts the
scope to a Request, dispatches through the Router, awaits whatever the
matched producer returned, and sends it back through ASGI send().
"""

from junction._internal.asgi import Receive, Scope, Send
from junction.config import AppConfig
from junction.errors import HTTPError
from junction.http.request import Request
from junction.http.response import Response, StreamingResponse
from junction.routing.router import Router
from junction.server.errors import handle_http_error, handle_internal_error
from junction.server.info import ServeInfo
from junction.server.sender import send_response, send_streaming_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    config: AppConfig,
) -> None:
    """Process a single HTTP request."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    info = ServeInfo.from_scope(scope)

    try:
        response = await router.dispatch(request, info)
        if not isinstance(response, Response | StreamingResponse):
            kind = type(response).__name__
            msg = f"Route for {request.method} {request.path} produced {kind}, not a Response"
            raise TypeError(msg)
    except HTTPError as exc:
        response = handle_http_error(exc, request, config)
    except Exception as exc:
        response = handle_internal_error(exc, request, config)

    extra_headers: tuple[tuple[str, str], ...] = ()
    if config.server_header:
        extra_headers = (("Server", config.server_header),)

    if isinstance(response, StreamingResponse):
        await send_streaming_response(response, send, extra_headers=extra_headers)
    else:
        await send_response(response, send, extra_headers=extra_headers)
