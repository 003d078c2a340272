"""
=============================================================================
HTTP HEADERS (RFC 7230 Section 3.2)
=============================================================================

An immutable, ordered, case-insensitive header collection, plus the
validation rules every header must pass before it is stored.

=============================================================================
STORAGE
=============================================================================

Header names are case-insensitive ("Content-Type" == "content-type") but
the case a caller supplied is what gets echoed back. One ordered dict keyed
by the lowercased name keeps both:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   key (lowercase)    │  display name     │  values                 │
    ├──────────────────────┼───────────────────┼─────────────────────────┤
    │   "host"             │  "Host"           │  ("example.com",)       │
    │   "accept"           │  "ACCEPT"         │  ("text/html", "*/*")   │
    │   "x-request-id"     │  "X-Request-Id"   │  ("abc123",)            │
    └─────────────────────────────────────────────────────────────────────┘

Values are tuples, so two Headers objects can share them safely. Every
with_* method builds a new dict (shallow copy) and leaves the old object
untouched.

=============================================================================
VALIDATION RULES
=============================================================================

    NAME   token = 1*tchar
           tchar = a-z A-Z 0-9 ! # $ % & ' * + - . ^ _ ` | ~

    VALUE  string or number (numbers become strings)
           no bare CR, no bare LF, no CRLF unless followed by SP/HTAB
           only HTAB, LF, CR, 0x20-0x7E, 0x80-0xFE
           leading/trailing SP and HTAB are trimmed (nothing else)

The CR/LF rule is what stops header injection / response splitting:

    with_header("X-Foo", "value\\r\\nSet-Cookie: admin=1")
                               ─┬──
                                └── rejected: CRLF not followed by SP/HTAB

=============================================================================
INTERVIEW QUESTIONS ABOUT HEADERS
=============================================================================

Q: "Why keep the original case if lookups ignore it?"
A: "Because some peers still care (and humans read logs). Lookup is
   case-insensitive, output preserves what the caller wrote."

Q: "Why not strip all whitespace from values?"
A: "RFC 7230 defines optional whitespace (OWS) as SP / HTAB only.
   Stripping vertical tabs or form feeds would silently change values."

=============================================================================
"""

import re
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from ..errors import InvalidHeaderName, InvalidHeaderValue


# =============================================================================
# COMPILED PATTERNS
# =============================================================================

HEADER_NAME_PATTERN = re.compile(r"[a-zA-Z0-9'`#$%&*+.^_|~!-]+")

# \n not preceded by \r, \r not followed by \n, or \r\n not followed by
# SP/HTAB (obsolete line folding is the only legal use of CRLF)
CRLF_INJECTION_PATTERN = re.compile(rb"(?:(?<!\r)\n)|(?:\r(?!\n))|(?:\r\n(?![ \t]))")

# Everything outside HTAB, LF, CR, visible ASCII and obs-text
ILLEGAL_VALUE_PATTERN = re.compile(rb"[^\x09\x0a\x0d\x20-\x7e\x80-\xfe]")

HeaderValue = Union[str, int, float]
HeaderInput = Union[HeaderValue, Iterable[HeaderValue]]


def validate_header_name(name: Any) -> str:
    """
    Check that name is a non-empty token.

    Raises:
        InvalidHeaderName: If name is empty, not a string, or has
                           characters outside the token grammar
    """
    if not isinstance(name, str) or name == "":
        raise InvalidHeaderName("Invalid header name; must be non-empty string")

    if not HEADER_NAME_PATTERN.fullmatch(name):
        raise InvalidHeaderName(f"Invalid header name; {name!r} contains illegal characters")

    return name


def validate_header_value(value: Any) -> str:
    """
    Check a single header value and return it as a trimmed string.

    The character check runs over the UTF-8 encoding, so non-ASCII text
    is allowed (UTF-8 never produces the byte 0xFF).

    Raises:
        InvalidHeaderValue: If value is not a string/number or contains
                            CR/LF injection or control characters
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise InvalidHeaderValue("Invalid header value; must be string or numeric")

    value = str(value)
    raw = value.encode("utf-8")

    if CRLF_INJECTION_PATTERN.search(raw):
        raise InvalidHeaderValue("Invalid header value; contains illegal line break")

    if ILLEGAL_VALUE_PATTERN.search(raw):
        raise InvalidHeaderValue("Invalid header value; contains illegal characters")

    return value.strip(" \t")


def normalize_header_values(value: Any) -> Tuple[str, ...]:
    """
    Coerce a scalar or a sequence of scalars into a tuple of valid values.

    Examples:
        "text/html"              → ("text/html",)
        42                       → ("42",)
        ["gzip", " deflate "]    → ("gzip", "deflate")
    """
    if isinstance(value, (list, tuple)):
        return tuple(validate_header_value(v) for v in value)

    return (validate_header_value(value),)


class Headers:
    """
    Immutable, ordered, case-insensitive mapping of header name to values.

    Example:
        headers = Headers({"Content-Type": "text/html"})
        headers = headers.with_added_header("accept", ["text/html", "*/*"])

        headers.get("CONTENT-TYPE")    # ["text/html"]
        headers.line("Accept")         # "text/html,*/*"
        headers.as_dict()              # {"Content-Type": [...], "accept": [...]}

    The initial headers may be a mapping or an iterable of (name, value)
    pairs. Repeated names (in any case) are merged: values are appended and
    the first spelling is kept, as with_added_header would do.
    """

    def __init__(
        self,
        headers: Optional[Union[Mapping[str, HeaderInput], Iterable[Tuple[str, HeaderInput]]]] = None,
    ):
        entries: Dict[str, Tuple[str, Tuple[str, ...]]] = {}

        if headers:
            pairs = headers.items() if isinstance(headers, Mapping) else headers
            for name, value in pairs:
                name = validate_header_name(name)
                values = normalize_header_values(value)
                key = name.lower()

                if key in entries:
                    display, existing = entries[key]
                    entries[key] = (display, existing + values)
                else:
                    entries[key] = (name, values)

        self._entries = entries

    @classmethod
    def _from_entries(cls, entries: Dict[str, Tuple[str, Tuple[str, ...]]]) -> "Headers":
        """Build from already validated entries."""
        headers = cls.__new__(cls)
        headers._entries = entries
        return headers

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        """Iterate over display names in insertion order."""
        return (display for display, _ in self._entries.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"Headers({self.as_dict()!r})"

    def get(self, name: str) -> List[str]:
        """All values for name (any case), or [] if absent."""
        if not isinstance(name, str):
            return []

        entry = self._entries.get(name.lower())
        return list(entry[1]) if entry else []

    def line(self, name: str) -> str:
        """All values for name joined with a comma, or "" if absent."""
        return ",".join(self.get(name))

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        for display, values in self._entries.values():
            yield display, list(values)

    def as_dict(self) -> Dict[str, List[str]]:
        """A fresh dict of display name → list of values."""
        return {display: list(values) for display, values in self._entries.values()}

    # =========================================================================
    # COPY-ON-WRITE MUTATORS
    # =========================================================================

    def with_header(self, name: str, value: HeaderInput) -> "Headers":
        """
        Replace every value of name (any case) and store it under this
        spelling. Returns self when nothing would change.
        """
        name = validate_header_name(name)
        values = normalize_header_values(value)
        key = name.lower()

        if self._entries.get(key) == (name, values):
            return self

        entries = dict(self._entries)
        entries.pop(key, None)
        entries[key] = (name, values)
        return Headers._from_entries(entries)

    def with_added_header(self, name: str, value: HeaderInput) -> "Headers":
        """
        Append values to name (any case), or create it if absent.
        Returns self when there is nothing to append.
        """
        name = validate_header_name(name)
        values = normalize_header_values(value)
        key = name.lower()

        entries = dict(self._entries)
        if key in entries:
            if not values:
                return self
            display, existing = entries[key]
            entries[key] = (display, existing + values)
        else:
            entries[key] = (name, values)

        return Headers._from_entries(entries)

    def without_header(self, name: str) -> "Headers":
        """Drop name (any case). Returns self if it was not present."""
        if name not in self:
            return self

        entries = dict(self._entries)
        del entries[name.lower()]
        return Headers._from_entries(entries)

    def with_first(self, name: str, value: HeaderInput) -> "Headers":
        """
        Replace name (any case) and move it to the front.

        Used for the Host header, which RFC 7230 wants first.
        """
        name = validate_header_name(name)
        values = normalize_header_values(value)
        key = name.lower()

        entries = {key: (name, values)}
        for existing_key, entry in self._entries.items():
            if existing_key != key:
                entries[existing_key] = entry

        if list(entries.items()) == list(self._entries.items()):
            return self
        return Headers._from_entries(entries)
