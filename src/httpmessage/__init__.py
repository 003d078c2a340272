"""
=============================================================================
HTTPMESSAGE - Immutable HTTP Message Value Objects
=============================================================================

Requests, responses, URIs, body streams and uploaded files as immutable
values with one shared contract, so independently written components can
hand HTTP messages to each other without caring who produced them.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    httpmessage/
    ├── __init__.py          # This file - package exports
    ├── config.py            # MessageConfig dataclass
    ├── errors.py            # Exception hierarchy
    ├── log.py               # Logging setup (text or JSON)
    ├── core/                # Low-level I/O
    │   ├── stream.py        # Stream adapter over binary handles
    │   └── stream_factory.py
    └── http/                # HTTP value types
        ├── headers.py       # Header validation and storage
        ├── message.py       # Message base
        ├── request.py       # Request
        ├── response.py      # Response
        ├── server_request.py
        ├── status_codes.py  # Status code registry
        ├── uploaded_file.py # UploadedFile
        └── uri.py           # Uri

=============================================================================
QUICK START
=============================================================================

    from httpmessage import Request, Response, Uri, create_stream

    request = Request("GET", "https://api.example.com/users?page=2")
    request.get_header_line("Host")     # "api.example.com"
    request.request_target              # "/users?page=2"

    response = (
        Response(201)
        .with_header("Content-Type", "application/json")
        .with_body(create_stream(b'{"id": 7}'))
    )
    response.reason_phrase              # "Created"
    str(response.body)                  # '{"id": 7}'

Every with_* call returns a new object; the original is never changed.

=============================================================================
"""

__version__ = "1.0.0"

from .config import MessageConfig
from .core import Stream, create_stream, create_stream_from_file, create_stream_from_resource
from .errors import HTTPMessageError, IllegalStateError, InvalidArgumentError
from .http import (
    Headers,
    HTTPStatus,
    Message,
    Request,
    Response,
    ServerRequest,
    UploadedFile,
    UploadStatus,
    Uri,
)
from .log import setup_logging

__all__ = [
    "Message",
    "Request",
    "Response",
    "ServerRequest",
    "Uri",
    "Headers",
    "HTTPStatus",
    "UploadedFile",
    "UploadStatus",
    "Stream",
    "create_stream",
    "create_stream_from_file",
    "create_stream_from_resource",
    "MessageConfig",
    "setup_logging",
    "HTTPMessageError",
    "InvalidArgumentError",
    "IllegalStateError",
    "__version__",
]
