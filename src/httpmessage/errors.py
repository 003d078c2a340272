"""
=============================================================================
HTTP MESSAGE ERRORS
=============================================================================

Typed exceptions raised by the message, URI, stream and upload value types.

=============================================================================
TWO KINDS OF FAILURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      EXCEPTION HIERARCHY                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   HTTPMessageError                                                  │
    │   ├── InvalidArgumentError (ValueError)                            │
    │   │     Bad input, detected before anything is built.               │
    │   │     InvalidHeaderName, InvalidHeaderValue, InvalidUri, ...      │
    │   │                                                                 │
    │   └── IllegalStateError (RuntimeError)                             │
    │         Right input, wrong moment.                                  │
    │         NoResource, StreamNotReadable, AlreadyMoved, ...            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Every error carries a `field` naming what was rejected ("header name",
"port", "stream", ...), so callers can report it without parsing the text.

Validation is eager: constructors and with_* methods check everything
before building the new instance, so an object is never left half-built.
Nothing is retried internally.

=============================================================================
"""

from typing import Optional


class HTTPMessageError(Exception):
    """
    Base class for all errors raised by this package.

    Attributes:
        message: Human-readable error message
        field: Name of the offending field (e.g. "header value")
    """

    default_field: Optional[str] = None

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field if field is not None else self.default_field


# =============================================================================
# INVALID ARGUMENT - malformed input
# =============================================================================

class InvalidArgumentError(HTTPMessageError, ValueError):
    """Input rejected at construction or mutation time."""


class InvalidHeaderName(InvalidArgumentError):
    default_field = "header name"


class InvalidHeaderValue(InvalidArgumentError):
    default_field = "header value"


class InvalidProtocolVersion(InvalidArgumentError):
    default_field = "protocol version"


class InvalidBody(InvalidArgumentError):
    default_field = "body"


class InvalidUri(InvalidArgumentError):
    default_field = "uri"


class InvalidScheme(InvalidArgumentError):
    default_field = "scheme"


class InvalidPort(InvalidArgumentError):
    default_field = "port"


class InvalidPath(InvalidArgumentError):
    default_field = "path"


class InvalidQuery(InvalidArgumentError):
    default_field = "query"


class InvalidMethod(InvalidArgumentError):
    default_field = "method"


class InvalidRequestTarget(InvalidArgumentError):
    default_field = "request target"


class InvalidStatusCode(InvalidArgumentError):
    default_field = "status code"


class InvalidReasonPhrase(InvalidArgumentError):
    default_field = "reason phrase"


class InvalidStream(InvalidArgumentError):
    default_field = "stream"


class InvalidUploadedFile(InvalidArgumentError):
    default_field = "uploaded file"


class InvalidTargetPath(InvalidArgumentError):
    default_field = "target path"


class InvalidParsedBody(InvalidArgumentError):
    default_field = "parsed body"


# =============================================================================
# ILLEGAL STATE - operation not allowed right now
# =============================================================================

class IllegalStateError(HTTPMessageError, RuntimeError):
    """Operation invoked on an object whose state forbids it."""


class NoResource(IllegalStateError):
    """The stream has been closed or detached."""

    default_field = "stream"


class StreamNotReadable(IllegalStateError):
    default_field = "stream"


class StreamNotWritable(IllegalStateError):
    default_field = "stream"


class StreamNotSeekable(IllegalStateError):
    default_field = "stream"


class StreamOperationFailed(IllegalStateError):
    """The underlying handle raised while reading, writing or seeking."""

    default_field = "stream"


class UploadFailed(IllegalStateError):
    """The upload finished with a non-OK status."""

    default_field = "upload status"


class AlreadyMoved(IllegalStateError):
    default_field = "uploaded file"


class MoveFailed(IllegalStateError):
    default_field = "target path"
