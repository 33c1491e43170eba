"""Ordered route table with first-match-wins dispatch.

Routes are kept in registration order and scanned linearly; the first
entry that has a producer for the request method and whose pattern
matches the URL answers the request.
"""

import inspect
from collections.abc import Mapping
from typing import Any

from junction._internal.invoke import SharedAwaitable, resolve
from junction.errors import ConfigurationError
from junction.http.response import Response
from junction.routing.params import decode_params
from junction.routing.pattern import compile_pattern
from junction.routing.route import Method, Producer, Route, RouteContext

# Returned whenever no route answers. One object for the process lifetime.
NOT_FOUND = Response(body=b"", status=404, content_type=None)


def _normalize_methods(template: str, methods: Mapping[str, Producer]) -> dict[Method, Producer]:
    normalized: dict[Method, Producer] = {}
    # One wrapper per coroutine, even when it is mapped to several methods
    shared: dict[int, SharedAwaitable] = {}
    for name, producer in methods.items():
        method = Method.lookup(name)
        if method is None:
            allowed = ", ".join(Method)
            msg = f"Route {template!r}: unsupported method {name!r} (allowed: {allowed})"
            raise ConfigurationError(msg)
        if inspect.iscoroutine(producer):
            if id(producer) not in shared:
                shared[id(producer)] = SharedAwaitable(producer)
            producer = shared[id(producer)]
        normalized[method] = producer
    return normalized


class Router:
    """Ordered route table and dispatcher.

    Usage::

        router = Router()
        router.get("/user/:id", lambda ctx: Response(ctx.params["id"]))
        router.route("/items", {"GET": listing, "POST": create})

        response = router.handler(request, info)   # Response or awaitable
        response = await router.dispatch(request, info)

    Registration appends and never reorders. ``handler`` reads the table
    without locking, so finish registering before serving.
    """

    __slots__ = ("_routes",)

    default_response: Response = NOT_FOUND

    def __init__(self) -> None:
        self._routes: list[Route] = []

    # -- Registration --

    def route(self, template: str, methods: Mapping[str, Producer]) -> None:
        """Register *template* for every method in *methods*.

        Raises ``PatternError`` for an invalid template and
        ``ConfigurationError`` for a key that is not a supported method.
        """
        pattern = compile_pattern(template)
        self._routes.append(Route(pattern=pattern, methods=_normalize_methods(template, methods)))

    def _register(self, method: Method, template: str, producer: Producer) -> None:
        self.route(template, {method: producer})

    def get(self, template: str, producer: Producer) -> None:
        self._register(Method.GET, template, producer)

    def post(self, template: str, producer: Producer) -> None:
        self._register(Method.POST, template, producer)

    def put(self, template: str, producer: Producer) -> None:
        self._register(Method.PUT, template, producer)

    def delete(self, template: str, producer: Producer) -> None:
        self._register(Method.DELETE, template, producer)

    def patch(self, template: str, producer: Producer) -> None:
        self._register(Method.PATCH, template, producer)

    # -- Introspection --

    @property
    def routes(self) -> tuple[Route, ...]:
        """Snapshot of the table in match-priority order."""
        return tuple(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    # -- Dispatch --

    def handler(self, request: Any, info: Any = None) -> Any:
        """Answer one request with a ``Response`` or an awaitable of one.

        *request* needs ``method`` and ``url``; *info* is passed to
        handlers untouched. Handler exceptions propagate unchanged. A
        malformed percent-escape in a captured value raises
        ``ParamDecodeError``. A path that matches a route registered
        only for other methods does not stop the scan; when nothing
        matches the result is ``NOT_FOUND``.
        """
        method = request.method
        url = request.url
        for route in self._routes:
            if method not in route.methods:
                continue
            if not route.pattern.test(url):
                continue
            producer = route.methods[method]
            if callable(producer):
                params = decode_params(route.pattern.extract(url))
                return producer(RouteContext(request=request, info=info, params=params))
            return producer
        return self.default_response

    async def dispatch(self, request: Any, info: Any = None) -> Response:
        """Like :meth:`handler`, but awaits a pending result."""
        return await resolve(self.handler(request, info))

    def __repr__(self) -> str:
        return f"<Router routes={len(self._routes)}>"
