"""Application configuration.

AppConfig is a frozen dataclass - immutable after creation, no string-key
dict lookups, no environment variables.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Configuration for the ASGI layer around a Router. Immutable after creation.

    The routing core itself has no settings; these only shape how
    responses and failures are written back to the server::

        config = AppConfig(debug=True, server_header="junction")
    """

    # Include the traceback in 500 bodies
    debug: bool = False

    # Content type used for error bodies written by the ASGI layer
    default_content_type: str = "text/plain; charset=utf-8"

    # Optional ``Server`` header added to every response
    server_header: str | None = None
