"""Method enum, Route and RouteContext frozen dataclasses."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeAlias

from junction.http.response import Response
from junction.routing.pattern import Pattern


class Method(StrEnum):
    """The HTTP methods a route can be registered for.

    A request with any other method (``HEAD``, ``OPTIONS``, lowercase
    ``get``, ...) never matches a route.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    @classmethod
    def lookup(cls, name: str) -> Method | None:
        """Return the member whose value equals *name* exactly, else ``None``."""
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class RouteContext:
    """What a handler receives: the request, serve info, and decoded params.

    ``info`` is whatever the serving layer passed to the dispatcher; the
    router never looks inside it.
    """

    request: Any
    info: Any
    params: dict[str, str | None]

    @property
    def query(self) -> dict[str, str | None]:
        """Alias for ``params``."""
        return self.params


# A static response, an awaitable of one, or a handler producing either
Handler: TypeAlias = Callable[[RouteContext], Response | Awaitable[Response]]
Producer: TypeAlias = Response | Awaitable[Response] | Handler


@dataclass(frozen=True, slots=True)
class Route:
    """One entry of the route table.

    ``pattern`` is compiled once at registration; ``methods`` holds at
    most one producer per method.
    """

    pattern: Pattern
    methods: Mapping[Method, Producer]

    @property
    def template(self) -> str:
        return self.pattern.template
