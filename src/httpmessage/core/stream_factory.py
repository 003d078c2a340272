"""
Factory functions for building Stream objects.

    create_stream(b"hello")              temporary, writable, spooled
    create_stream_from_file("a.txt")     opened in binary mode
    create_stream_from_resource(handle)  wraps an already open handle
"""

import tempfile
from typing import Any, Optional, Union

from ..config import MessageConfig
from ..errors import InvalidStream
from .stream import Stream


def create_stream(
    content: Union[bytes, str] = b"",
    config: Optional[MessageConfig] = None,
) -> Stream:
    """
    Create a temporary read/write stream holding content.

    The data lives in memory up to config.spool_max_size bytes, then
    rolls over to a temporary file. The pointer is left at the end of the
    written content.

    Args:
        content: Initial bytes (strings are encoded as UTF-8)
        config: Spool settings; defaults to MessageConfig()

    Returns:
        A writable, readable, seekable Stream
    """
    config = config or MessageConfig()

    handle = tempfile.SpooledTemporaryFile(max_size=config.spool_max_size, mode="w+b")
    stream = Stream(handle)
    if content:
        stream.write(content)

    return stream


def create_stream_from_file(filename: str, mode: str = "r") -> Stream:
    """
    Open a file and wrap it in a Stream.

    The file is always opened in binary mode ("r" becomes "rb").

    Raises:
        InvalidStream: If the file cannot be opened
    """
    if "b" not in mode:
        mode += "b"

    try:
        handle = open(filename, mode)
    except (OSError, ValueError) as exc:
        raise InvalidStream(f"Invalid file; could not open {filename}") from exc

    return Stream(handle)


def create_stream_from_resource(handle: Any) -> Stream:
    """
    Wrap an already open binary handle.

    Raises:
        InvalidStream: If handle is not an open binary file object
    """
    return Stream(handle)
