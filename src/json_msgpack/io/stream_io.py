"""Whole-stream reading and writing with error wrapping."""

import logging
from typing import Any, Optional, Union

from ..types import StreamIOError


logger = logging.getLogger(__name__)


def read_all(source: Any) -> Union[bytes, str]:
    """
    Read the entire input stream into memory.

    JSON has no length prefix, so the whole document is buffered before
    parsing.

    Args:
        source: Readable file-like object (binary or text)

    Returns:
        Everything read from the stream

    Raises:
        StreamIOError: If reading fails
    """
    try:
        data = source.read()
    except OSError as e:
        raise StreamIOError(f"convert_stream reading input: {e}", context={"cause": e}) from e

    if data is None:
        # Non-blocking streams return None when nothing is available
        data = b""

    logger.debug(f"Read {len(data)} units from input stream")
    return data


def write_all(sink: Any, data: bytes, name: Optional[str] = None) -> int:
    """
    Write data to the output stream in a single call.

    Args:
        sink: Writable binary file-like object
        data: Bytes to write
        name: Optional stream name used in error messages

    Returns:
        Number of bytes written

    Raises:
        StreamIOError: If writing fails
    """
    target = name or "out stream"
    try:
        sink.write(data)
        flush = getattr(sink, "flush", None)
        if flush is not None:
            flush()
    except (OSError, TypeError) as e:
        raise StreamIOError(f"convert_stream writing to {target}: {e}", context={"cause": e}) from e

    logger.debug(f"Wrote {len(data)} bytes to {target}")
    return len(data)
