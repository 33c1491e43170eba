"""Path templates compiled to anchored regular expressions.

The template grammar is the pathname subset of URLPattern::

    /users/:id              named capture, one segment
    /api/:version(v\\d+)     named capture with a custom regex
    /docs/:page?            optional capture (the leading "/" goes with it)
    /files/:path+           one or more segments
    /tags/:tag*             zero or more segments
    /assets/(.*)            anonymous capture, named "0"
    /static/*               wildcard, named by position like "0"
    /literal\\:colon         backslash escapes the next character

Matching runs against the raw, still-percent-encoded path, so ``%2F``
inside a segment never splits it.
"""

import re
from dataclasses import dataclass
from urllib.parse import quote, urlsplit

from junction.errors import PatternError

# Default regex for a ``:name`` capture
SEGMENT = r"[^/]+?"

# Regex for a bare ``*``
WILDCARD = r".*"

MODIFIERS = frozenset("?+*")

_NAME = re.compile(r"[A-Za-z_$][\w$]*")

# Characters left as-is when canonicalizing a path (everything else is
# percent-encoded, including non-ASCII)
_PATH_SAFE = "!$%&'()*+,-./:;=@[]^_|~"

# Schemes whose paths take "\" as "/" and drop "." and ".." segments
_SPECIAL_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp", "file"})

_SINGLE_DOT = frozenset({".", "%2e"})
_DOUBLE_DOT = frozenset({"..", ".%2e", "%2e.", "%2e%2e"})

_QUERY_OR_FRAGMENT = re.compile(r"[?#]")


def _resolve_dot_segments(path: str) -> str:
    """Drop ``.`` segments and let ``..`` remove its parent.

    A dot segment in last position leaves a trailing slash, so
    ``/a/b/..`` becomes ``/a/``. ``..`` never climbs above the root.
    """
    segments = path.split("/")[1:]
    output: list[str] = []
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        folded = segment.lower()
        if folded in _DOUBLE_DOT:
            if output:
                output.pop()
            if last:
                output.append("")
        elif folded in _SINGLE_DOT:
            if last:
                output.append("")
        else:
            output.append(segment)
    return "/" + "/".join(output)


def pathname_of(url: str) -> str:
    """Return the canonical, percent-encoded path component of *url*.

    Accepts absolute URLs (``http://host/a?b``) and bare paths (``/a?b``).
    Bare paths and http(s)-like URLs get ``\\`` read as ``/`` and their
    dot segments resolved, so ``/user/../admin`` is ``/admin``.
    """
    target = _QUERY_OR_FRAGMENT.split(url, maxsplit=1)[0]
    if target.startswith("/"):
        special = True
        path = target
    else:
        special = urlsplit(target).scheme.lower() in _SPECIAL_SCHEMES
        if special:
            target = target.replace("\\", "/")
        path = urlsplit(target).path or "/"
    if special:
        path = _resolve_dot_segments(path.replace("\\", "/"))
    return quote(path, safe=_PATH_SAFE)


@dataclass(frozen=True, slots=True)
class _Part:
    """A parsed piece of a template: literal text or a capture."""

    literal: str = ""
    name: str = ""
    regex: str = ""
    prefix: str = ""
    modifier: str = ""

    @property
    def is_capture(self) -> bool:
        return bool(self.name)


class _TemplateParser:
    """Single-pass parser from template text to a list of parts."""

    __slots__ = ("_anonymous", "_names", "_parts", "_pending", "_pos", "_slash_last", "template")

    def __init__(self, template: str) -> None:
        self.template = template
        self._pos = 0
        self._parts: list[_Part] = []
        self._pending: list[str] = []
        # True when the last pending char is an unescaped "/", which a
        # following capture takes as its prefix
        self._slash_last = False
        self._names: set[str] = set()
        self._anonymous = 0

    def parse(self) -> list[_Part]:
        template = self.template
        while self._pos < len(template):
            ch = template[self._pos]
            if ch == "\\":
                if self._pos + 1 >= len(template):
                    raise PatternError(template, "dangling escape at end of template")
                self._pending.append(template[self._pos + 1])
                self._slash_last = False
                self._pos += 2
            elif ch == ":":
                match = _NAME.match(template, self._pos + 1)
                if match is None:
                    raise PatternError(template, f"missing parameter name at offset {self._pos}")
                self._pos = match.end()
                regex = SEGMENT
                if self._pos < len(template) and template[self._pos] == "(":
                    regex = self._read_regex()
                self._capture(match.group(), regex)
            elif ch == "(":
                self._capture(self._next_anonymous(), self._read_regex())
            elif ch == "*":
                self._pos += 1
                self._capture(self._next_anonymous(), WILDCARD)
            elif ch in "?+":
                raise PatternError(
                    template, f"modifier {ch!r} at offset {self._pos} does not follow a parameter"
                )
            elif ch in "{}":
                raise PatternError(template, "group braces are not supported, escape them with '\\'")
            else:
                self._pending.append(ch)
                self._slash_last = ch == "/"
                self._pos += 1
        self._flush()
        return self._parts

    def _next_anonymous(self) -> str:
        name = str(self._anonymous)
        self._anonymous += 1
        return name

    def _read_regex(self) -> str:
        """Read a balanced ``(...)`` group starting at the current position."""
        template = self.template
        start = self._pos
        depth = 0
        pos = start
        while pos < len(template):
            ch = template[pos]
            if ch == "\\":
                pos += 2
                continue
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    body = template[start + 1 : pos]
                    self._pos = pos + 1
                    return self._check_regex(body)
            pos += 1
        raise PatternError(template, f"unbalanced '(' at offset {start}")

    def _check_regex(self, body: str) -> str:
        if not body:
            raise PatternError(self.template, "empty regex group")
        try:
            compiled = re.compile(body)
        except re.error as exc:
            raise PatternError(self.template, f"invalid regex {body!r}: {exc}") from exc
        if compiled.groups:
            raise PatternError(
                self.template, f"regex {body!r} has capturing groups, use '(?:...)' instead"
            )
        return body

    def _capture(self, name: str, regex: str) -> None:
        if name in self._names:
            raise PatternError(self.template, f"duplicate parameter name {name!r}")
        self._names.add(name)

        prefix = ""
        if self._slash_last:
            self._pending.pop()
            prefix = "/"
        self._flush()

        modifier = ""
        if self._pos < len(self.template) and self.template[self._pos] in MODIFIERS:
            modifier = self.template[self._pos]
            self._pos += 1
        self._parts.append(_Part(name=name, regex=regex, prefix=prefix, modifier=modifier))

    def _flush(self) -> None:
        if self._pending:
            self._parts.append(_Part(literal="".join(self._pending)))
            self._pending = []
        self._slash_last = False


def _part_source(part: _Part, group: str) -> str:
    """Regex source for one part; captures use the internal *group* name."""
    if not part.is_capture:
        return re.escape(quote(part.literal, safe=_PATH_SAFE))

    prefix = re.escape(part.prefix)
    if part.modifier in ("", "?"):
        if not prefix:
            return f"(?P<{group}>{part.regex}){part.modifier}"
        return f"(?:{prefix}(?P<{group}>{part.regex})){part.modifier}"

    repeated = f"(?P<{group}>(?:{part.regex})(?:{prefix}(?:{part.regex}))*)"
    optional = "?" if part.modifier == "*" else ""
    return f"(?:{prefix}{repeated}){optional}"


@dataclass(frozen=True, slots=True)
class PatternMatch:
    """Raw result of one successful match. Values are not decoded."""

    pathname: str
    groups: dict[str, str | None]


@dataclass(frozen=True, slots=True)
class Pattern:
    """A compiled path template. Build with :func:`compile_pattern`."""

    template: str
    regex: re.Pattern[str]
    names: tuple[str, ...]

    def test(self, url: str) -> bool:
        """True if the path component of *url* matches this template."""
        return self.regex.fullmatch(pathname_of(url)) is not None

    def exec(self, url: str) -> PatternMatch | None:
        """Match *url* and return its captured groups, or ``None``."""
        pathname = pathname_of(url)
        match = self.regex.fullmatch(pathname)
        if match is None:
            return None
        groups = {name: match.group(f"p{index}") for index, name in enumerate(self.names)}
        return PatternMatch(pathname=pathname, groups=groups)

    def extract(self, url: str) -> dict[str, str | None]:
        """Return the captured groups of a URL already known to match.

        Raises ``ValueError`` if it does not.
        """
        result = self.exec(url)
        if result is None:
            msg = f"{url!r} does not match {self.template!r}"
            raise ValueError(msg)
        return result.groups


def compile_pattern(template: str) -> Pattern:
    """Compile a path template. Raises ``PatternError`` if it is invalid."""
    parts = _TemplateParser(template).parse()

    names: list[str] = []
    sources: list[str] = []
    for part in parts:
        if part.is_capture:
            sources.append(_part_source(part, f"p{len(names)}"))
            names.append(part.name)
        else:
            sources.append(_part_source(part, ""))

    try:
        regex = re.compile("".join(sources))
    except re.error as exc:
        raise PatternError(template, str(exc)) from exc
    return Pattern(template=template, regex=regex, names=tuple(names))
