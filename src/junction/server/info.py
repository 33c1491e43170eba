"""Per-request serve information handed to route handlers."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ServeInfo:
    """Connection details for one request, taken from the ASGI scope.

    Handlers receive this as ``ctx.info``; the router never reads it.
    """

    remote_addr: tuple[str, int] | None
    server_addr: tuple[str, int] | None
    scheme: str = "http"
    extensions: Mapping[str, Any] | None = None

    @classmethod
    def from_scope(cls, scope: Mapping[str, Any]) -> "ServeInfo":
        client = scope.get("client")
        server = scope.get("server")
        return cls(
            remote_addr=tuple(client) if client else None,
            server_addr=tuple(server) if server else None,
            scheme=scope.get("scheme", "http"),
            extensions=scope.get("extensions"),
        )
