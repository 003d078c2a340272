"""
=============================================================================
CORE I/O COMPONENTS
=============================================================================

Low-level building blocks that the HTTP value types sit on.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Message.body  ──────►  Stream  ──────►  binary handle            │
    │                            ▲               (file, BytesIO,          │
    │                            │                spooled temp file)      │
    │                     stream_factory                                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

1. Stream - read/write/seek adapter with lazy failure
2. create_stream / create_stream_from_file / create_stream_from_resource

=============================================================================
"""

from .stream import Stream
from .stream_factory import create_stream, create_stream_from_file, create_stream_from_resource

__all__ = [
    "Stream",
    "create_stream",
    "create_stream_from_file",
    "create_stream_from_resource",
]
