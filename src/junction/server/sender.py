"""ASGI response sending - translates junction Response types to ASGI messages.

Handles both standard single-body responses and chunked streaming
responses that handlers pass through.
"""

import logging
from collections.abc import AsyncIterable, Iterable

from junction._internal.asgi import Send
from junction.http.response import Response, StreamingResponse

logger = logging.getLogger("junction.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC 9110: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _raw_headers(
    content_type: str | None,
    headers: Iterable[tuple[str, str]],
) -> list[tuple[bytes, bytes]]:
    raw: list[tuple[bytes, bytes]] = []
    if content_type is not None:
        raw.append((b"content-type", content_type.encode("latin-1")))
    raw.extend((name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers)
    return raw


async def send_response(
    response: Response,
    send: Send,
    *,
    extra_headers: tuple[tuple[str, str], ...] = (),
) -> None:
    """Translate a Response into ASGI send() calls."""
    body = response.body_bytes if _body_allowed(response.status) else b""

    raw_headers = _raw_headers(response.content_type, (*response.headers, *extra_headers))
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )


async def send_streaming_response(
    response: StreamingResponse,
    send: Send,
    *,
    extra_headers: tuple[tuple[str, str], ...] = (),
) -> None:
    """Send a streaming response chunk by chunk.

    Headers go out immediately, then each non-empty chunk as a body
    message with ``more_body=True``, then an empty closing message.
    A failure mid-stream is logged and the stream is closed; the
    status line has already been sent, so nothing else can be reported.
    """
    raw_headers = _raw_headers(response.content_type, (*response.headers, *extra_headers))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )

    async def emit(chunk: str | bytes) -> None:
        if chunk:
            body = chunk.encode("utf-8") if isinstance(chunk, str) else chunk
            await send({"type": "http.response.body", "body": body, "more_body": True})

    try:
        if isinstance(response.chunks, AsyncIterable):
            async for chunk in response.chunks:
                await emit(chunk)
        else:
            for chunk in response.chunks:
                await emit(chunk)
    except Exception:
        logger.exception("Streaming response failed after %d status was sent", response.status)

    await send({"type": "http.response.body", "body": b"", "more_body": False})
