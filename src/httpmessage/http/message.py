"""
=============================================================================
HTTP MESSAGE
=============================================================================

The part every HTTP message has, whether request or response:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         MESSAGE                                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   protocol_version   "1.0" | "1.1" | "2"                            │
    │   headers            Headers (ordered, case-insensitive)            │
    │   body               Stream                                         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
IMMUTABILITY: THE with_* PATTERN
=============================================================================

A message never changes after construction. "Changing" it returns a copy:

    response = Response()
    json_response = response.with_header("Content-Type", "application/json")

    response.has_header("Content-Type")         # False - untouched
    json_response.has_header("Content-Type")    # True

Two rules every with_* method follows:

    1. Validate first, copy second. A rejected value raises before any
       new object exists.

    2. No-op returns self. Asking for the value the message already has
       returns the *same* instance, so `msg.with_x(msg.x) is msg`.

The copy is shallow: the new message gets its own Headers object (itself
immutable) and shares the body Stream unless with_body() replaced it.

=============================================================================
"""

import copy
import re
from typing import Any, Dict, List, Optional

from ..core.stream import Stream
from ..core.stream_factory import create_stream
from ..errors import InvalidBody, InvalidProtocolVersion
from .headers import HeaderInput, Headers


# HTTP/1 uses "<major>.<minor>", HTTP/2 does not
PROTOCOL_VERSION_PATTERN = re.compile(r"1\.[01]|2")


def validate_protocol_version(version: Any) -> str:
    """
    Raises:
        InvalidProtocolVersion: If version is not "1.0", "1.1" or "2"
    """
    if not isinstance(version, str) or version == "":
        raise InvalidProtocolVersion("Invalid protocol version; must be non-empty string")

    if not PROTOCOL_VERSION_PATTERN.fullmatch(version):
        raise InvalidProtocolVersion(f"Invalid protocol version; unsupported HTTP protocol {version!r}")

    return version


def validate_body(body: Any) -> Stream:
    if not isinstance(body, Stream):
        raise InvalidBody("Invalid body; must be a Stream")
    return body


class Message:
    """
    Base for Request and Response: protocol version, headers and body.

    Args:
        headers: Mapping (or iterable of pairs) of header name to value(s)
        body: Stream; defaults to an empty writable temporary stream
        protocol_version: "1.0", "1.1" (default) or "2"

    Raises:
        InvalidHeaderName, InvalidHeaderValue, InvalidBody,
        InvalidProtocolVersion
    """

    def __init__(
        self,
        headers: Optional[Any] = None,
        body: Optional[Stream] = None,
        protocol_version: str = "1.1",
    ):
        self._protocol_version = validate_protocol_version(protocol_version)
        self._headers = Headers(headers)
        self._body = validate_body(body) if body is not None else create_stream()

    def _clone(self, **changes: Any) -> "Message":
        """Shallow copy with the given private attributes replaced."""
        new = copy.copy(self)
        for name, value in changes.items():
            setattr(new, "_" + name, value)
        return new

    # =========================================================================
    # PROTOCOL VERSION
    # =========================================================================

    @property
    def protocol_version(self) -> str:
        return self._protocol_version

    def with_protocol_version(self, version: str) -> "Message":
        version = validate_protocol_version(version)

        if version == self._protocol_version:
            return self
        return self._clone(protocol_version=version)

    # =========================================================================
    # HEADERS
    # =========================================================================

    @property
    def headers(self) -> Dict[str, List[str]]:
        """
        All headers as a fresh dict: original-case name → list of values.

        Mutating the returned dict has no effect on the message.
        """
        return self._headers.as_dict()

    def has_header(self, name: str) -> bool:
        """Case-insensitive check for a header."""
        return name in self._headers

    def get_header(self, name: str) -> List[str]:
        """All values of a header (any case), or [] if absent."""
        return self._headers.get(name)

    def get_header_line(self, name: str) -> str:
        """
        Header values joined with a comma, or "" if absent.

        Example:
            msg.with_header("Accept", ["text/html", "*/*"]).get_header_line("accept")
            # "text/html,*/*"
        """
        return self._headers.line(name)

    def with_header(self, name: str, value: HeaderInput) -> "Message":
        """Replace a header's values, stored under this spelling of name."""
        headers = self._headers.with_header(name, value)

        if headers is self._headers:
            return self
        return self._clone(headers=headers)

    def with_added_header(self, name: str, value: HeaderInput) -> "Message":
        """Append values to a header, creating it if needed."""
        headers = self._headers.with_added_header(name, value)

        if headers is self._headers:
            return self
        return self._clone(headers=headers)

    def without_header(self, name: str) -> "Message":
        """Remove a header. Returns self if it is not present."""
        headers = self._headers.without_header(name)

        if headers is self._headers:
            return self
        return self._clone(headers=headers)

    # =========================================================================
    # BODY
    # =========================================================================

    @property
    def body(self) -> Stream:
        return self._body

    def with_body(self, body: Stream) -> "Message":
        body = validate_body(body)

        if body is self._body:
            return self
        return self._clone(body=body)
