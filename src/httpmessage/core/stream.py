"""
=============================================================================
STREAM ADAPTER
=============================================================================

Wraps an open binary I/O handle behind a small, fixed contract:

    read / write / seek / tell / eof / get_contents / get_size / metadata

=============================================================================
LAZY FAILURE
=============================================================================

The handle is checked when an operation needs it, not up front:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                   OPERATION vs STREAM STATE                         │
    ├──────────────────┬──────────────┬─────────────────┬────────────────┤
    │  Operation       │  Detached    │  Wrong mode     │  Attached, OK  │
    ├──────────────────┼──────────────┼─────────────────┼────────────────┤
    │  get_size()      │  None        │  -              │  int           │
    │  eof()           │  True        │  -              │  bool          │
    │  is_readable()   │  False       │  False          │  True          │
    │  is_writable()   │  False       │  False          │  True          │
    │  tell()          │  NoResource  │  -              │  int           │
    │  seek()          │  NoResource  │  NotSeekable    │  None          │
    │  read()          │  NoResource  │  NotReadable    │  bytes         │
    │  write()         │  NoResource  │  NotWritable    │  int           │
    │  get_contents()  │  NoResource  │  NotReadable    │  bytes         │
    │  str(stream)     │  ""          │  ""             │  text          │
    └──────────────────┴──────────────┴─────────────────┴────────────────┘

Readability and writability come from the handle's open mode, exactly like
the "mode" metadata a file object reports ("rb", "w+b", "ab", ...).

Two Stream objects wrapping the same handle do not coordinate positions;
callers must not do that.

=============================================================================
"""

import io
import logging
import os
import tempfile
from typing import Any, Dict, Optional, Union

from ..errors import (
    InvalidStream,
    NoResource,
    StreamNotReadable,
    StreamNotSeekable,
    StreamNotWritable,
    StreamOperationFailed,
)


logger = logging.getLogger(__name__)


# Handle types the adapter accepts. Text wrappers are excluded: a stream
# deals in bytes.
_HANDLE_TYPES = (io.IOBase, tempfile.SpooledTemporaryFile)


def _mode_of(handle: Any) -> str:
    """
    Return the open mode of a handle.

    Real files report it directly. In-memory buffers (BytesIO) have no
    mode attribute, so one is synthesized from readable()/writable().
    """
    mode = getattr(handle, "mode", None)
    if isinstance(mode, str):
        return mode

    readable = handle.readable()
    writable = handle.writable()
    if readable and writable:
        return "r+b"
    if writable:
        return "wb"
    return "rb"


class Stream:
    """
    A readable/writable/seekable view over a binary handle.

    Example:
        stream = Stream(open("body.json", "rb"))
        stream.read(10)
        stream.rewind()
        text = str(stream)      # full contents from offset zero
        stream.close()

    A Stream is also a context manager:

        with Stream(io.BytesIO(b"data")) as stream:
            data = stream.get_contents()
    """

    def __init__(self, handle: Any):
        """
        Wrap an open binary handle.

        Args:
            handle: Binary file object (open(..., "rb"), BytesIO,
                    SpooledTemporaryFile, ...)

        Raises:
            InvalidStream: If handle is not an open binary handle
        """
        if not isinstance(handle, _HANDLE_TYPES) or isinstance(handle, io.TextIOBase):
            raise InvalidStream("Invalid resource; must be an open binary file object")

        if handle.closed:
            raise InvalidStream("Invalid resource; handle is already closed")

        self._handle = handle
        self._hit_eof = False

    # =========================================================================
    # STRING CONVERSION - never raises
    # =========================================================================

    def __str__(self) -> str:
        return self._read_all().decode("utf-8", errors="replace")

    def __bytes__(self) -> bytes:
        return self._read_all()

    def __repr__(self) -> str:
        if not self._attached():
            return "<Stream detached>"
        return f"<Stream mode={_mode_of(self._handle)!r}>"

    def __enter__(self) -> "Stream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _read_all(self) -> bytes:
        """Full contents from offset zero, or b"" on any failure."""
        if not self.is_readable():
            return b""

        try:
            if self.is_seekable():
                self.rewind()
            return self.get_contents()
        except (StreamNotSeekable, StreamNotReadable, StreamOperationFailed, NoResource):
            return b""

    # =========================================================================
    # RESOURCE LIFECYCLE
    # =========================================================================

    def _attached(self) -> bool:
        return self._handle is not None and not self._handle.closed

    def close(self) -> None:
        """Close the underlying handle. Safe to call more than once."""
        handle = self.detach()
        if handle is not None:
            handle.close()
            logger.debug("Closed stream handle %r", handle)

    def detach(self) -> Optional[Any]:
        """
        Separate the handle from this stream and return it.

        After detaching, the stream behaves as if it had no resource.
        Returns None if already detached.
        """
        if not self._attached():
            self._handle = None
            return None

        handle = self._handle
        self._handle = None
        logger.debug("Detached stream handle %r", handle)
        return handle

    # =========================================================================
    # METADATA
    # =========================================================================

    def get_size(self) -> Optional[int]:
        """
        Get the size of the stream in bytes, or None if unknown.

        Seekable handles are measured by seeking to the end and back, so
        unflushed writes are counted. Others fall back to fstat().
        """
        if not self._attached():
            return None

        handle = self._handle
        try:
            if handle.seekable():
                position = handle.tell()
                size = handle.seek(0, os.SEEK_END)
                handle.seek(position)
                return size
            return os.fstat(handle.fileno()).st_size
        except (OSError, ValueError, AttributeError):
            return None

    def get_metadata(self, key: Optional[str] = None) -> Union[Dict[str, Any], Any]:
        """
        Get stream metadata.

        Keys:
            mode:     Open mode ("rb", "w+b", ...)
            seekable: Whether seek() is supported
            uri:      File name, or None for in-memory buffers

        Args:
            key: Single key to return; None returns the whole dict

        Returns:
            The metadata dict ({} when detached) or the value for key
            (None when detached or unknown)
        """
        if not self._attached():
            return {} if key is None else None

        name = getattr(self._handle, "name", None)
        meta = {
            "mode": _mode_of(self._handle),
            "seekable": self._handle.seekable(),
            "uri": name if isinstance(name, (str, bytes, os.PathLike)) else None,
        }

        if key is None:
            return meta
        return meta.get(key)

    def is_readable(self) -> bool:
        if not self._attached():
            return False

        mode = _mode_of(self._handle)
        return "r" in mode or "+" in mode

    def is_writable(self) -> bool:
        if not self._attached():
            return False

        mode = _mode_of(self._handle)
        return any(flag in mode for flag in "xwca+")

    def is_seekable(self) -> bool:
        if not self._attached():
            return False

        return bool(self._handle.seekable())

    # =========================================================================
    # POSITIONING
    # =========================================================================

    def tell(self) -> int:
        """Current position of the read/write pointer."""
        if not self._attached():
            raise NoResource("No resource available; cannot tell position")

        try:
            return self._handle.tell()
        except (OSError, ValueError) as exc:
            raise StreamOperationFailed("Unable to determine stream position") from exc

    def eof(self) -> bool:
        """
        True when the pointer is at (or past) the end of the stream.

        A detached stream is always at EOF. For handles that cannot seek,
        EOF is reached once a read returns fewer bytes than requested.
        """
        if not self._attached():
            return True

        if self._handle.seekable():
            size = self.get_size()
            if size is None:
                return True
            return self.tell() >= size

        return self._hit_eof

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> None:
        if not self._attached():
            raise NoResource("No resource available; cannot seek")

        if not self.is_seekable():
            raise StreamNotSeekable("Stream not seekable")

        try:
            self._handle.seek(offset, whence)
        except (OSError, ValueError) as exc:
            raise StreamOperationFailed("Error seeking within stream") from exc

    def rewind(self) -> None:
        if not self.is_seekable():
            raise StreamNotSeekable("Unable to rewind; stream not seekable")

        self.seek(0)

    # =========================================================================
    # READ / WRITE
    # =========================================================================

    def write(self, data: Union[bytes, str]) -> int:
        """
        Write data to the stream.

        Strings are encoded as UTF-8.

        Returns:
            Number of bytes written
        """
        if not self._attached():
            raise NoResource("No resource available; cannot write")

        if not self.is_writable():
            raise StreamNotWritable("Stream not writable")

        if isinstance(data, str):
            data = data.encode("utf-8")

        try:
            written = self._handle.write(data)
        except (OSError, ValueError) as exc:
            raise StreamOperationFailed("Error writing to stream") from exc

        return len(data) if written is None else written

    def read(self, length: int) -> bytes:
        """Read up to length bytes."""
        if not self._attached():
            raise NoResource("No resource available; cannot read")

        if not self.is_readable():
            raise StreamNotReadable("Stream not readable")

        try:
            data = self._handle.read(length)
        except (OSError, ValueError) as exc:
            raise StreamOperationFailed("Error reading from stream") from exc

        if data is None:
            data = b""
        if len(data) < length:
            self._hit_eof = True
        return data

    def get_contents(self) -> bytes:
        """Read everything from the current position to the end."""
        if not self._attached():
            raise NoResource("No resource available; cannot read")

        if not self.is_readable():
            raise StreamNotReadable("Stream not readable")

        try:
            data = self._handle.read()
        except (OSError, ValueError) as exc:
            raise StreamOperationFailed("Error reading from stream") from exc

        self._hit_eof = True
        return data or b""
