"""
JSON to MessagePack - schema-less, deterministic JSON to MessagePack conversion.

Infers the binary type of every leaf from string heuristics and optional
numeric type hints, and always produces the same bytes for the same
logical document.
"""

__version__ = "1.0.0"

from .converter import JSONMsgpackConverter, convert, convert_stream
from .identifiers import NdauAddressValidator, NullIdentifierValidator
from .types import (
    ConversionError,
    ConversionResult,
    IdentifierValidator,
    NestingDepthError,
    NumericOverflowError,
    StreamIOError,
    TypeHintTable,
    TypeTag,
    UnsupportedNumericValueError,
    UnsupportedTypeHintError,
    UnsupportedValueTypeError,
    UpstreamParseError,
)

__all__ = [
    "JSONMsgpackConverter",
    "convert",
    "convert_stream",
    "NdauAddressValidator",
    "NullIdentifierValidator",
    "IdentifierValidator",
    "NestingDepthError",
    "ConversionError",
    "ConversionResult",
    "NumericOverflowError",
    "StreamIOError",
    "TypeHintTable",
    "TypeTag",
    "UnsupportedNumericValueError",
    "UnsupportedTypeHintError",
    "UnsupportedValueTypeError",
    "UpstreamParseError",
]
