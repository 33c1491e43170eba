"""Immutable HTTP request.

Frozen metadata with async body access. The router only reads
``method`` and ``url``; the rest is there for handlers.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs, quote, unquote

from junction._internal.asgi import Message, Receive
from junction.http.headers import Headers

_DEFAULT_PORTS = {"http": 80, "https": 443}

# Printable ASCII kept as-is in a raw path; "%" so existing escapes survive
_RAW_PATH_SAFE = "!$%&'()*+,-./:;=@[]^_|~"


async def _empty_receive() -> Message:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``url`` is absolute (``scheme://host/raw/path?query``) with the path
    still percent-encoded, which is what route patterns match against.
    ``path`` is the decoded path as the server reported it.
    """

    method: str
    url: str
    path: str
    query_string: str
    headers: Headers
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive = _empty_receive

    # Private: body cache (the dict is mutable even though the field is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def query_params(self) -> dict[str, list[str]]:
        """The query string parsed into ``name -> [values]``."""
        return parse_qs(self.query_string, keep_blank_values=True)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        The ASGI receive channel is consumed once; later calls return
        the cached bytes.
        """
        if "_body" not in self._cache:
            self._cache["_body"] = b"".join([chunk async for chunk in self.stream()])
        return self._cache["_body"]

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        import json as json_module

        raw = await self.body()
        return json_module.loads(raw)

    async def text(self) -> str:
        """Read the body as UTF-8 text."""
        raw = await self.body()
        return raw.decode("utf-8")

    # -- Factories --

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], receive: Receive) -> Request:
        """Create a Request from an ASGI HTTP scope and receive callable."""
        headers = Headers(tuple(scope.get("headers", ())))
        server = scope.get("server")
        client = scope.get("client")
        raw_path = scope.get("raw_path")
        if raw_path:
            # Bytes go straight to quote(), so non-ASCII UTF-8 becomes %XX per byte
            encoded_path = quote(raw_path.partition(b"?")[0], safe=_RAW_PATH_SAFE)
        else:
            encoded_path = quote(scope["path"], safe="/:@!$&'()*+,;=-._~")
        query_string = scope.get("query_string", b"").decode("latin-1")

        scheme = scope.get("scheme", "http")
        authority = headers.get("host") or _authority(scheme, server)
        url = f"{scheme}://{authority}{encoded_path}"
        if query_string:
            url = f"{url}?{query_string}"

        return cls(
            method=scope["method"],
            url=url,
            path=scope["path"],
            query_string=query_string,
            headers=headers,
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )

    @classmethod
    def create(
        cls,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Request:
        """Build a request without a server, e.g. to call ``Router.handler`` directly.

        *url* may be absolute or a bare path; a bare path gets
        ``http://localhost`` in front of it.
        """
        if url.startswith("/"):
            url = f"http://localhost{url}"
        before_fragment = url.partition("#")[0]
        target, _, query_string = before_fragment.partition("?")
        path = unquote("/" + target.split("://", 1)[-1].partition("/")[2])

        async def receive() -> Message:
            return {"type": "http.request", "body": body, "more_body": False}

        return cls(
            method=method,
            url=url,
            path=path,
            query_string=query_string,
            headers=Headers.from_dict(headers or {}),
            _receive=receive,
        )


def _authority(scheme: str, server: Any) -> str:
    if not server:
        return "localhost"
    host, port = server[0], server[1]
    if port is None or _DEFAULT_PORTS.get(scheme) == port:
        return host
    return f"{host}:{port}"
