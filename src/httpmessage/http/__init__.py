"""
=============================================================================
HTTP MESSAGE VALUE TYPES
=============================================================================

Immutable objects representing already-parsed HTTP messages. Nothing here
touches a socket; these are the values that handlers, middleware and
clients pass between each other.

=============================================================================
TYPE HIERARCHY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Message                 protocol version, headers, body           │
    │     ├── Request           + method, uri, request target             │
    │     │     └── ServerRequest  + server/cookie/query params,          │
    │     │                        uploaded files, parsed body,           │
    │     │                        attributes                             │
    │     └── Response          + status code, reason phrase              │
    │                                                                      │
    │   Uri                     scheme, user info, host, port,            │
    │                           path, query, fragment                     │
    │   Headers                 ordered, case-insensitive header storage  │
    │   UploadedFile            one uploaded file, movable once           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
MODULE COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ HEADERS (headers.py)                                                │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Name/value validation and storage                                   │
    │                                                                      │
    │ Handles:                                                             │
    │   • Token grammar for names                                         │
    │   • CR/LF injection and control bytes in values                     │
    │   • Case-insensitive lookup, original case echoed back              │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ URI (uri.py)                                                        │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Parse, percent-encode and rebuild URIs                              │
    │                                                                      │
    │ Example:  Uri("HTTP://Example.COM:80/a b")                          │
    │           → "http://example.com/a%20b"                              │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ STATUS CODES (status_codes.py)                                      │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Code → reason phrase registry used by Response                      │
    │                                                                      │
    │ Example:  HTTPStatus.NOT_FOUND → 404, phrase="Not Found"            │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .headers import Headers
from .message import Message
from .request import Request
from .response import Response
from .server_request import ServerRequest
from .status_codes import HTTPStatus, reason_phrase_for
from .uploaded_file import PathSource, StreamSource, UploadedFile, UploadStatus, filesystem_move
from .uri import Uri

__all__ = [
    # Messages
    "Message",
    "Request",
    "Response",
    "ServerRequest",

    # Building blocks
    "Headers",
    "Uri",

    # Status codes
    "HTTPStatus",
    "reason_phrase_for",

    # Uploads
    "UploadedFile",
    "UploadStatus",
    "StreamSource",
    "PathSource",
    "filesystem_move",
]
