"""
=============================================================================
UPLOADED FILES
=============================================================================

One file from a multipart/form-data upload, as handed over by the web
server or framework that received it.

=============================================================================
LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   created ──── move_to(target) ────►  moved                         │
    │     │              (once)               │                           │
    │     │                                   │                           │
    │   get_stream() OK                     get_stream()  → AlreadyMoved  │
    │                                       move_to()     → AlreadyMoved  │
    │                                                                      │
    │   status != OK:                                                     │
    │     get_stream() / move_to()  → UploadFailed                        │
    │     status                    → still reports the original status   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
SOURCES AND MOVERS
=============================================================================

The data lives in one of two places, chosen when the object is built:

    StreamSource(stream)   already open; move_to() copies it in chunks
    PathSource(path)       a file on disk; move_to() hands it to the mover

The mover is a plain callable `mover(source_path, target_path)`. The
default moves files on the local filesystem. A web integration that must
use its own "move uploaded file" primitive passes that instead:

    UploadedFile.from_path(tmp, size, mover=framework.move_upload)

A file is moved by one caller at a time; concurrent move_to() calls on the
same object are not supported.

=============================================================================
"""

import contextlib
import logging
import os
import shutil
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Optional, Union

from ..config import MessageConfig
from ..core.stream import Stream
from ..core.stream_factory import create_stream_from_file
from ..errors import (
    AlreadyMoved,
    InvalidTargetPath,
    InvalidUploadedFile,
    MoveFailed,
    NoResource,
    StreamNotReadable,
    StreamOperationFailed,
    UploadFailed,
)


logger = logging.getLogger(__name__)


Mover = Callable[[str, str], Any]


class UploadStatus(IntEnum):
    """
    Outcome of a file upload.

    Values match the widely used upload error codes (there is no 5).
    """

    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8

    @property
    def message(self) -> str:
        return _STATUS_MESSAGES[self]


_STATUS_MESSAGES = {
    UploadStatus.OK: "There is no error, the file uploaded with success",
    UploadStatus.INI_SIZE: "The uploaded file exceeds the maximum upload size allowed by the server",
    UploadStatus.FORM_SIZE: "The uploaded file exceeds the maximum size specified in the HTML form",
    UploadStatus.PARTIAL: "The uploaded file was only partially uploaded",
    UploadStatus.NO_FILE: "No file was uploaded",
    UploadStatus.NO_TMP_DIR: "Missing a temporary folder",
    UploadStatus.CANT_WRITE: "Failed to write file to disk",
    UploadStatus.EXTENSION: "A server extension stopped the file upload",
}


@dataclass(frozen=True)
class StreamSource:
    """Upload data held in an open Stream."""

    stream: Stream


@dataclass(frozen=True)
class PathSource:
    """Upload data held in a file on disk, opened lazily."""

    path: str


UploadSource = Union[StreamSource, PathSource]


def upload_source(value: Any) -> UploadSource:
    """
    Resolve a Stream, an open binary handle or a path into a source.

    Raises:
        InvalidUploadedFile: If value is none of these
    """
    if isinstance(value, (StreamSource, PathSource)):
        return value

    if isinstance(value, Stream):
        return StreamSource(value)

    if isinstance(value, (str, os.PathLike)):
        return PathSource(os.fspath(value))

    try:
        return StreamSource(Stream(value))
    except ValueError as exc:
        raise InvalidUploadedFile("Invalid file or stream provided") from exc


def filesystem_move(source: str, target: str) -> None:
    """Default mover: a plain filesystem move (rename when possible)."""
    shutil.move(source, target)


class UploadedFile:
    """
    A single uploaded file.

    Example:
        upload = UploadedFile.from_path("/tmp/upload-a1b2", 1024,
                                        client_filename="avatar.png",
                                        client_media_type="image/png")
        if upload.status is UploadStatus.OK:
            upload.move_to("/srv/avatars/42.png")

    Args:
        source: StreamSource, PathSource, Stream, binary handle or path
        size: Size in bytes as reported by the client/server
        status: UploadStatus (or its integer value)
        client_filename: File name sent by the client, if any
        client_media_type: Media type sent by the client, if any
        mover: Callable used to move a PathSource; default filesystem_move
        config: Chunk size for copying a StreamSource

    Raises:
        InvalidUploadedFile: On an unknown status or malformed arguments
    """

    def __init__(
        self,
        source: Any,
        size: int,
        status: Union[UploadStatus, int] = UploadStatus.OK,
        client_filename: Optional[str] = None,
        client_media_type: Optional[str] = None,
        mover: Optional[Mover] = None,
        config: Optional[MessageConfig] = None,
    ):
        if isinstance(status, bool) or not isinstance(status, int):
            raise InvalidUploadedFile("Invalid error status for UploadedFile", field="status")
        try:
            status = UploadStatus(status)
        except ValueError as exc:
            raise InvalidUploadedFile("Invalid error status for UploadedFile", field="status") from exc

        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise InvalidUploadedFile("Invalid size; must be a non-negative integer", field="size")

        if client_filename is not None and not isinstance(client_filename, str):
            raise InvalidUploadedFile("Invalid filename; must be string or None", field="client filename")

        if client_media_type is not None and not isinstance(client_media_type, str):
            raise InvalidUploadedFile("Invalid media type; must be string or None", field="client media type")

        self._source = upload_source(source)
        self._size = size
        self._status = status
        self._client_filename = client_filename
        self._client_media_type = client_media_type
        self._mover = mover or filesystem_move
        self._config = config or MessageConfig()
        self._moved = False

    @classmethod
    def from_stream(cls, stream: Any, size: int, *args: Any, **kwargs: Any) -> "UploadedFile":
        """Build from a Stream or an open binary handle."""
        if not isinstance(stream, Stream):
            stream = Stream(stream)
        return cls(StreamSource(stream), size, *args, **kwargs)

    @classmethod
    def from_path(cls, path: Union[str, "os.PathLike[str]"], size: int, *args: Any, **kwargs: Any) -> "UploadedFile":
        """Build from a file path; nothing is opened until needed."""
        return cls(PathSource(os.fspath(path)), size, *args, **kwargs)

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def size(self) -> int:
        return self._size

    @property
    def status(self) -> UploadStatus:
        return self._status

    @property
    def client_filename(self) -> Optional[str]:
        return self._client_filename

    @property
    def client_media_type(self) -> Optional[str]:
        return self._client_media_type

    @property
    def moved(self) -> bool:
        return self._moved

    def _assert_usable(self, action: str) -> None:
        if self._moved:
            raise AlreadyMoved(f"Cannot {action}; already moved")

        if self._status is not UploadStatus.OK:
            raise UploadFailed(f"Cannot {action}; upload error: {self._status.message}")

    def get_stream(self) -> Stream:
        """
        The uploaded data as a Stream.

        A PathSource is opened anew on each call.

        Raises:
            AlreadyMoved: After a successful move_to()
            UploadFailed: If the upload status is not OK
        """
        self._assert_usable("retrieve stream")

        if isinstance(self._source, StreamSource):
            return self._source.stream

        return create_stream_from_file(self._source.path, "rb")

    # =========================================================================
    # MOVING
    # =========================================================================

    def move_to(self, target_path: Union[str, "os.PathLike[str]"]) -> None:
        """
        Move the uploaded file to target_path. Can only succeed once.

        Raises:
            AlreadyMoved: If the file was already moved
            UploadFailed: If the upload status is not OK
            InvalidTargetPath: If target_path is empty or not a path
            NoResource: If the source stream was closed or detached
            StreamNotReadable: If the source stream cannot be read
            MoveFailed: If the move or copy itself fails
        """
        self._assert_usable("move file")

        if not isinstance(target_path, (str, os.PathLike)) or not os.fspath(target_path):
            raise InvalidTargetPath("Invalid target path; must be a non-empty string")

        target = os.fspath(target_path)

        try:
            if isinstance(self._source, PathSource):
                self._mover(self._source.path, target)
            else:
                self._copy_stream_to(target)
        except (NoResource, StreamNotReadable) as exc:
            logger.warning("Cannot move uploaded file to %s: %s", target, exc)
            raise
        except (OSError, StreamOperationFailed) as exc:
            logger.warning("Failed to move uploaded file to %s: %s", target, exc)
            raise MoveFailed(f"Unable to move uploaded file to {target}") from exc

        self._moved = True
        logger.info("Moved uploaded file %r to %s", self._client_filename, target)

    def _copy_stream_to(self, target: str) -> None:
        """
        Copy the source stream to target from offset zero.

        The first read happens before target is opened, so a detached or
        unreadable stream fails without creating a file. A copy that fails
        partway removes the partial target.
        """
        stream = self._source.stream
        if stream.is_seekable():
            stream.rewind()

        chunk = stream.read(self._config.chunk_size)

        created = False
        try:
            with open(target, "wb") as handle:
                created = True
                while chunk:
                    handle.write(chunk)
                    chunk = stream.read(self._config.chunk_size)
        except (OSError, StreamOperationFailed):
            if created:
                with contextlib.suppress(OSError):
                    os.unlink(target)
            raise
