"""Numeric leaf resolution using type hints and the array position counter."""

import logging
import math
from typing import Dict, Optional, Tuple, Union

from .io.msgpack_writer import MsgpackWriter
from .types import (
    ConversionContext,
    NumericOverflowError,
    TypeHintTable,
    TypeTag,
    UnsupportedNumericValueError,
    UnsupportedTypeHintError,
)


Number = Union[int, float]

INT64_MIN = -(1 << 63)
INT64_LIMIT = 1 << 63

# Largest double that still rounds to a finite float32
FLOAT32_MAX = float.fromhex("0x1.fffffefffffffp127")

# tag -> (signed, bit width); float tags are handled separately
INTEGER_TAGS: Dict[TypeTag, Tuple[bool, int]] = {
    TypeTag.BYTE: (False, 8),
    TypeTag.INT8: (True, 8),
    TypeTag.INT16: (True, 16),
    TypeTag.INT32: (True, 32),
    TypeTag.INT64: (True, 64),
    TypeTag.INT: (True, 64),
    TypeTag.UINT8: (False, 8),
    TypeTag.UINT16: (False, 16),
    TypeTag.UINT32: (False, 32),
    TypeTag.UINT64: (False, 64),
    TypeTag.UINT: (False, 64),
}

_TAGS_BY_NAME = {tag.value: tag for tag in TypeTag}


def narrow(value: int, signed: bool, bits: int) -> int:
    """Two's-complement wrap of value into a signed or unsigned width."""
    modulus = 1 << bits
    wrapped = value % modulus
    if signed and wrapped >= modulus >> 1:
        wrapped -= modulus
    return wrapped


def lossless_int64(value: Number) -> Optional[int]:
    """Return value as an int64 if the conversion loses nothing, else None."""
    if isinstance(value, int):
        return value if INT64_MIN <= value < INT64_LIMIT else None
    if not math.isfinite(value) or not value.is_integer():
        return None
    if not INT64_MIN <= value < INT64_LIMIT:
        return None
    return int(value)


class NumericResolver:
    """
    Chooses the MessagePack representation of a numeric leaf.

    The hint for the current key is read cyclically at the current array
    position. Hinted values are truncated and narrowed to the hinted width
    without a range check unless strict mode is on. Unhinted values must be
    lossless 64-bit signed integers; anything else is rejected, never
    written as a float.
    """

    def __init__(self, strict: bool = False, logger: Optional[logging.Logger] = None):
        """
        Initialize the numeric resolver.

        Args:
            strict: Reject hinted values that do not fit the hinted width
            logger: Optional logger instance
        """
        self.strict = strict
        self.logger = logger or logging.getLogger(__name__)

    def select_hint(self, ctx: ConversionContext, type_hints: Optional[TypeHintTable]) -> Optional[str]:
        """
        Look up the hint tag for the current key and array position.

        Returns:
            The raw tag string, or None when no usable hint exists
        """
        if not type_hints:
            return None
        sequence = type_hints.get(ctx.current_key)
        if not sequence:
            return None
        return sequence[ctx.current_hint % len(sequence)]

    def resolve(self, value: Number, ctx: ConversionContext,
                type_hints: Optional[TypeHintTable], writer: MsgpackWriter) -> None:
        """
        Encode a numeric leaf into the writer.

        Args:
            value: The number (JSON numbers arrive as floats)
            ctx: Current conversion context
            type_hints: Hint table for this conversion, may be None
            writer: Output buffer

        Raises:
            UnsupportedTypeHintError: If the selected hint is not a known tag
            UnsupportedNumericValueError: If no hint applies and value is not
                a lossless int64, or an integer hint meets a non-finite value
            NumericOverflowError: In strict mode, if value does not fit the hint
        """
        hint = self.select_hint(ctx, type_hints)
        if hint is not None:
            tag = _TAGS_BY_NAME.get(hint)
            if tag is None:
                raise UnsupportedTypeHintError(ctx.current_key, hint)
            self.logger.debug(f"Encoding {value!r} as {tag.value} "
                              f"(key={ctx.current_key!r}, position={ctx.current_hint})")
            if tag in INTEGER_TAGS:
                self._encode_integer(value, tag, ctx, writer)
            elif tag == TypeTag.FLOAT32:
                self._encode_float32(value, tag, ctx, writer)
            else:
                writer.append_float64(self._to_float(value, tag, ctx))
            return

        # Unhinted numbers default to int64
        as_int = lossless_int64(value)
        if as_int is None:
            raise UnsupportedNumericValueError(value, key=ctx.current_key)
        writer.append_int(as_int)

    def _encode_integer(self, value: Number, tag: TypeTag,
                        ctx: ConversionContext, writer: MsgpackWriter) -> None:
        signed, bits = INTEGER_TAGS[tag]
        if isinstance(value, float) and not math.isfinite(value):
            raise UnsupportedNumericValueError(value, key=ctx.current_key)

        truncated = math.trunc(value)
        narrowed = narrow(truncated, signed, bits)
        if self.strict and narrowed != value:
            raise NumericOverflowError(ctx.current_key, tag.value, value)

        if signed:
            writer.append_int(narrowed)
        else:
            writer.append_uint(narrowed)

    def _encode_float32(self, value: Number, tag: TypeTag,
                        ctx: ConversionContext, writer: MsgpackWriter) -> None:
        as_float = self._to_float(value, tag, ctx)
        if self.strict and math.isfinite(as_float) and abs(as_float) > FLOAT32_MAX:
            raise NumericOverflowError(ctx.current_key, tag.value, value)
        writer.append_float32(as_float)

    def _to_float(self, value: Number, tag: TypeTag, ctx: ConversionContext) -> float:
        try:
            return float(value)
        except OverflowError:
            # Integers beyond the double range
            if self.strict:
                raise NumericOverflowError(ctx.current_key, tag.value, value)
            return math.inf if value > 0 else -math.inf

