"""Junction exception hierarchy.

Shared across the pattern compiler, Router, and the ASGI layer so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class JunctionError(Exception):
    """Base for all junction-specific errors."""


class ConfigurationError(JunctionError):
    """Raised when a route registration is invalid.

    Surfaces at the ``route()`` / ``get()`` / ... call site, before the
    entry ever reaches the route table.
    """


class PatternError(ConfigurationError):
    """A path template could not be compiled."""

    def __init__(self, template: str, reason: str) -> None:
        self.template = template
        self.reason = reason
        super().__init__(f"Invalid path template {template!r}: {reason}")


@dataclass(frozen=True, slots=True)
class HTTPError(JunctionError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers or by the dispatcher. The ASGI layer catches these
    and turns them into a plain response with the same status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 - conventional name in web frameworks
    """404 - raised by handlers that decide a resource does not exist."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class ParamDecodeError(HTTPError):
    """400 - a captured path parameter holds a malformed percent-escape.

    Fails the one request being dispatched; the route table is untouched.
    """

    def __init__(self, value: str) -> None:
        super().__init__(status=400, detail=f"Malformed percent-encoding in {value!r}")
