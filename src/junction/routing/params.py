"""Percent-decoding of captured path parameters.

Follows ``decodeURIComponent``: ``%XX`` escapes decode as UTF-8, ``+``
stays ``+``, and a malformed escape is an error rather than being left
in place the way ``urllib.parse.unquote`` would.
"""

import re
from collections.abc import Mapping
from urllib.parse import unquote

from junction.errors import ParamDecodeError

# A "%" not followed by two hex digits
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def decode_component(value: str) -> str:
    """Decode one percent-encoded component.

    Raises ``ParamDecodeError`` for a truncated escape or for escapes
    that do not form valid UTF-8.
    """
    if "%" not in value:
        return value
    if _BAD_ESCAPE.search(value):
        raise ParamDecodeError(value)
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError as exc:
        raise ParamDecodeError(value) from exc


def decode_params(groups: Mapping[str, str | None]) -> dict[str, str | None]:
    """Decode every captured value.

    Falsy captures (``""`` or ``None`` for a group that did not take
    part in the match) are passed through untouched, never decoded.
    """
    return {name: decode_component(value) if value else value for name, value in groups.items()}
