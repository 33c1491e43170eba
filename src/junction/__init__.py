"""Junction - a small HTTP request router.

Maps a request's method and URL path to a registered producer, extracts
path parameters, and returns a response. Routes are matched in the order
they were registered; the first match wins.

Basic usage::

    from junction import Response, Router

    router = Router()
    router.get("/user/:id", lambda ctx: Response(ctx.params["id"]))

    response = await router.dispatch(request)

Serving over ASGI::

    from junction import App

    app = App()
    app.get("/", Response("hello"))
    # uvicorn module:app
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "HTTPError",
    "JunctionError",
    "Method",
    "NOT_FOUND",
    "NotFound",
    "ParamDecodeError",
    "Pattern",
    "PatternError",
    "Request",
    "Response",
    "RouteContext",
    "Router",
    "ServeInfo",
    "StreamingResponse",
    "compile_pattern",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import junction`` fast while providing a flat top-level API.
    """
    if name == "App":
        from junction.app import App

        return App

    if name == "AppConfig":
        from junction.config import AppConfig

        return AppConfig

    if name in ("Router", "NOT_FOUND"):
        from junction.routing import router as _router

        return getattr(_router, name)

    if name in ("Method", "RouteContext"):
        from junction.routing import route as _route

        return getattr(_route, name)

    if name in ("Pattern", "compile_pattern"):
        from junction.routing import pattern as _pattern

        return getattr(_pattern, name)

    if name == "Request":
        from junction.http.request import Request

        return Request

    if name in ("Response", "StreamingResponse"):
        from junction.http import response as _resp

        return getattr(_resp, name)

    if name == "ServeInfo":
        from junction.server.info import ServeInfo

        return ServeInfo

    if name in (
        "ConfigurationError",
        "HTTPError",
        "JunctionError",
        "NotFound",
        "ParamDecodeError",
        "PatternError",
    ):
        from junction import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
