"""
=============================================================================
HTTP REQUEST
=============================================================================

An outgoing (client-side) request: a Message plus method, URI and an
optional request-target override.

=============================================================================
REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │    GET /api/users?page=1 HTTP/1.1\\r\\n       ← request line          │
    │    ─┬─ ────────┬──────── ────┬───                                   │
    │     │          │             │                                      │
    │   method   request target  protocol version                         │
    │                                                                      │
    │    Host: www.example.com\\r\\n                ← synthesized from URI  │
    │    Accept: application/json\\r\\n                                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
HOST HEADER SYNCHRONIZATION
=============================================================================

HTTP/1.1 requires a Host header, and it must agree with the URI. So:

    Request("GET", "http://www.example.com/")
        → Host: www.example.com             (synthesized, first header)

    Request("GET", "http://www.example.com/", headers={"Host": "other"})
        → Host: other                       (caller's header wins)

    request.with_uri(Uri("http://example.org:8080/"))
        → Host: example.org:8080            (replaced, any case)

    request.with_uri(uri, preserve_host=True)
        → Host unchanged, if there was one

A URI without a host never produces a Host header.

=============================================================================
REQUEST TARGET
=============================================================================

    1. An explicit with_request_target(...) value, returned as-is
    2. Otherwise path + "?" + query from the *current* URI
    3. "/" when both are empty

Nothing is cached: after with_uri(), the target follows the new URI.

=============================================================================
"""

import logging
import re
from typing import Any, Optional, Union

from ..core.stream import Stream
from ..errors import InvalidMethod, InvalidRequestTarget, InvalidUri
from .message import Message
from .uri import Uri


logger = logging.getLogger(__name__)


# RFC 7230 token: method names follow the same grammar as header names
METHOD_PATTERN = re.compile(r"[!#$%&'*+.^_`|~0-9a-z-]+", re.IGNORECASE)

WHITESPACE_PATTERN = re.compile(r"\s")


def validate_method(method: Any) -> str:
    """
    Check a request method. Empty (or None) means "not set" and is allowed.

    Raises:
        InvalidMethod: If method is not a string or not a valid token
    """
    if method is None or method == "":
        return ""

    if not isinstance(method, str):
        raise InvalidMethod("Invalid method; must be a string")

    if not METHOD_PATTERN.fullmatch(method):
        raise InvalidMethod(f"Invalid method; {method} is unsupported")

    return method


def _coerce_uri(uri: Any) -> Uri:
    if uri is None:
        return Uri()
    if isinstance(uri, Uri):
        return uri
    if isinstance(uri, str):
        return Uri(uri)
    raise InvalidUri("Invalid URI; must be a Uri or a string")


class Request(Message):
    """
    Immutable HTTP request.

    Example:
        request = Request("get", "http://www.example.com/user?foo=bar")
        request.method                      # "GET"
        request.request_target              # "/user?foo=bar"
        request.get_header_line("host")     # "www.example.com"

        post = request.with_method("POST").with_header("Content-Type", "application/json")

    Args:
        method: HTTP method; upper-cased here, "" means not set
        uri: Uri or URI string; defaults to the empty Uri
        headers: Mapping (or iterable of pairs) of header name to value(s)
        body: Stream; defaults to an empty writable temporary stream
        protocol_version: "1.0", "1.1" (default) or "2"
    """

    def __init__(
        self,
        method: str = "",
        uri: Optional[Union[Uri, str]] = None,
        headers: Optional[Any] = None,
        body: Optional[Stream] = None,
        protocol_version: str = "1.1",
    ):
        method = validate_method(method)
        uri = _coerce_uri(uri)

        super().__init__(headers=headers, body=body, protocol_version=protocol_version)

        self._method = method.upper()
        self._uri = uri
        self._request_target: Optional[str] = None

        if not self.has_header("Host"):
            self._update_host_from_uri()

    def _update_host_from_uri(self) -> None:
        """
        Put "Host: host[:port]" first, replacing any Host header.

        Only called on a fresh instance (constructor or clone).
        """
        host = self._uri.host
        if not host:
            return

        port = self._uri.port
        if port is not None:
            host += ":" + str(port)

        self._headers = self._headers.with_first("Host", host)
        logger.debug("Host header set from URI: %s", host)

    # =========================================================================
    # REQUEST TARGET
    # =========================================================================

    @property
    def request_target(self) -> str:
        if self._request_target is not None:
            return self._request_target

        target = self._uri.path
        query = self._uri.query
        if query:
            target += "?" + query

        return target or "/"

    def with_request_target(self, request_target: str) -> "Request":
        """
        Override the request target (e.g. "*" or an absolute form).

        The value is used verbatim; only whitespace is rejected.

        Raises:
            InvalidRequestTarget: If the target is not a string or
                                  contains whitespace
        """
        if not isinstance(request_target, str):
            raise InvalidRequestTarget("Invalid request target; must be a string")

        if WHITESPACE_PATTERN.search(request_target):
            raise InvalidRequestTarget("Invalid request target; cannot contain whitespace")

        if request_target == self._request_target:
            return self
        return self._clone(request_target=request_target)

    # =========================================================================
    # METHOD
    # =========================================================================

    @property
    def method(self) -> str:
        return self._method

    def with_method(self, method: str) -> "Request":
        """Set the method, keeping its case exactly as given."""
        method = validate_method(method)

        if method == self._method:
            return self
        return self._clone(method=method)

    # =========================================================================
    # URI
    # =========================================================================

    @property
    def uri(self) -> Uri:
        return self._uri

    def with_uri(self, uri: Uri, preserve_host: bool = False) -> "Request":
        """
        Replace the URI and, unless preserving an existing Host header,
        re-synthesize Host from it.
        """
        if uri is self._uri:
            return self

        if not isinstance(uri, Uri):
            raise InvalidUri("Invalid URI; must be a Uri")

        new = self._clone(uri=uri)

        if not preserve_host or not self.has_header("Host"):
            new._update_host_from_uri()

        return new
