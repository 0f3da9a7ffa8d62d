"""Append-only MessagePack primitive writer."""

import struct
from typing import Union

import msgpack


# Integer markers, signed family
INT8 = 0xd0
INT16 = 0xd1
INT32 = 0xd2
INT64 = 0xd3

# Integer markers, unsigned family
UINT8 = 0xcc
UINT16 = 0xcd
UINT32 = 0xce
UINT64 = 0xcf

FLOAT32 = 0xca
FLOAT64 = 0xcb

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MAX = (1 << 64) - 1


class MsgpackWriter:
    """
    Buffer of MessagePack primitives owned by a single conversion.

    Non-numeric values and container headers go through msgpack.Packer.
    Integers keep their signedness family: a signed value is never written
    with an unsigned marker and vice versa, and within the family the
    narrowest marker that holds the value is used.
    """

    def __init__(self):
        self._packer = msgpack.Packer(use_bin_type=True, autoreset=True)
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def getvalue(self) -> bytes:
        """Return the bytes written so far."""
        return bytes(self._buffer)

    def append_nil(self) -> None:
        self._buffer += self._packer.pack(None)

    def append_bool(self, value: bool) -> None:
        self._buffer += self._packer.pack(bool(value))

    def append_str(self, value: str) -> None:
        self._buffer += self._packer.pack(value)

    def append_bin(self, value: Union[bytes, bytearray, memoryview]) -> None:
        self._buffer += self._packer.pack(bytes(value))

    def append_array_header(self, size: int) -> None:
        self._buffer += self._packer.pack_array_header(size)

    def append_map_header(self, size: int) -> None:
        self._buffer += self._packer.pack_map_header(size)

    def append_int(self, value: int) -> None:
        """
        Write a signed 64-bit integer.

        Args:
            value: Integer within the int64 range
        """
        if not INT64_MIN <= value <= INT64_MAX:
            raise OverflowError(f"{value} is outside the int64 range")

        if value >= 0:
            if value <= 0x7f:
                self._buffer.append(value)
            elif value <= 0x7fff:
                self._buffer += struct.pack(">Bh", INT16, value)
            elif value <= 0x7fffffff:
                self._buffer += struct.pack(">Bi", INT32, value)
            else:
                self._buffer += struct.pack(">Bq", INT64, value)
            return

        if value >= -32:
            self._buffer += struct.pack(">b", value)
        elif value >= -0x80:
            self._buffer += struct.pack(">Bb", INT8, value)
        elif value >= -0x8000:
            self._buffer += struct.pack(">Bh", INT16, value)
        elif value >= -0x80000000:
            self._buffer += struct.pack(">Bi", INT32, value)
        else:
            self._buffer += struct.pack(">Bq", INT64, value)

    def append_uint(self, value: int) -> None:
        """
        Write an unsigned 64-bit integer.

        Args:
            value: Integer within the uint64 range
        """
        if not 0 <= value <= UINT64_MAX:
            raise OverflowError(f"{value} is outside the uint64 range")

        if value <= 0x7f:
            self._buffer.append(value)
        elif value <= 0xff:
            self._buffer += struct.pack(">BB", UINT8, value)
        elif value <= 0xffff:
            self._buffer += struct.pack(">BH", UINT16, value)
        elif value <= 0xffffffff:
            self._buffer += struct.pack(">BI", UINT32, value)
        else:
            self._buffer += struct.pack(">BQ", UINT64, value)

    def append_float32(self, value: float) -> None:
        """Write a single-precision float; values beyond its range become infinities."""
        try:
            packed = struct.pack(">Bf", FLOAT32, value)
        except OverflowError:
            packed = struct.pack(">Bf", FLOAT32, float("inf") if value > 0 else float("-inf"))
        self._buffer += packed

    def append_float64(self, value: float) -> None:
        self._buffer += struct.pack(">Bd", FLOAT64, value)
