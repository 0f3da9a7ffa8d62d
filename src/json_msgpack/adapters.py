"""Adapters for values that did not come out of the JSON parser."""

import numbers
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from .io.msgpack_writer import MsgpackWriter, INT64_MIN, INT64_MAX, UINT64_MAX
from .types import UnsupportedNumericValueError, UnsupportedValueTypeError, Value


def to_value(obj: Any) -> Value:
    """
    Convert a foreign container into the generic JSON model.

    Only the outer level is converted; children are adapted as the encoder
    reaches them.

    Args:
        obj: Object outside of None/bool/int/float/str/bytes/list/dict

    Returns:
        An equivalent list, dict or bytes value

    Raises:
        UnsupportedValueTypeError: If obj has no generic equivalent
    """
    if isinstance(obj, Mapping):
        return dict(obj)
    if isinstance(obj, (bytearray, memoryview)):
        return bytes(obj)
    if isinstance(obj, Sequence) and not isinstance(obj, (str, bytes)):
        return list(obj)
    raise UnsupportedValueTypeError(obj)


def is_native_scalar(obj: Any) -> bool:
    """True for real numbers of any numeric tower type, Decimal included."""
    return isinstance(obj, (numbers.Real, Decimal))


def append_best_guess(obj: Any, writer: MsgpackWriter) -> None:
    """
    Encode a native numeric scalar without hints or heuristics.

    Integers become int64 when they fit, otherwise uint64; every other real
    number becomes float64.
    """
    if isinstance(obj, numbers.Integral):
        as_int = int(obj)
        if INT64_MIN <= as_int <= INT64_MAX:
            writer.append_int(as_int)
        elif 0 <= as_int <= UINT64_MAX:
            writer.append_uint(as_int)
        else:
            raise UnsupportedNumericValueError(obj)
        return
    writer.append_float64(float(obj))
