"""Byte-level I/O for the JSON to MessagePack converter."""

from .msgpack_writer import MsgpackWriter
from .stream_io import read_all, write_all

__all__ = ["MsgpackWriter", "read_all", "write_all"]
