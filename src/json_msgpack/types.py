"""Core type definitions for the JSON to MessagePack converter."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Dict, List, Optional, Union

from .profiler import PerformanceMetrics


# A generic JSON document tree: None, bool, int, float, str, bytes, list, dict.
Value = Any

# Hint key (object field name, or "" for positional leaves) -> cyclic tag list.
TypeHintTable = Dict[str, List[str]]


class TypeTag(Enum):
    """Numeric type tags accepted in a type-hint table."""
    BYTE = "byte"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    INT = "int"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    UINT = "uint"
    FLOAT32 = "float32"
    FLOAT64 = "float64"

    @classmethod
    def names(cls) -> List[str]:
        return [tag.value for tag in cls]


class LeafKind(Enum):
    """Binary representation chosen for a string leaf."""
    STRING = "string"
    BYTES = "bytes"


class ErrorType(Enum):
    """Enumeration of error types."""
    TYPE_HINT = "type_hint"
    NUMERIC = "numeric"
    OVERFLOW = "overflow"
    VALUE_TYPE = "value_type"
    DEPTH = "depth"
    PARSE = "parse"
    IO = "io"


@dataclass(frozen=True)
class BinaryLeaf:
    """A classified string leaf ready for emission."""
    kind: LeafKind
    data: Union[str, bytes]


@dataclass(frozen=True)
class ConversionContext:
    """
    State threaded through the recursive walk.

    current_key is the last object key seen anywhere in the document so far,
    not the key of the enclosing object. current_hint is the position counter
    of the most recently entered array; nested arrays reset it and do not
    restore the outer value on exit.
    """
    current_key: str = ""
    current_hint: int = 0


@dataclass
class ValidationError:
    """Validation error details."""
    type: ErrorType
    message: str
    location: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str]


@dataclass
class ErrorResponse:
    """Response for error handling."""
    can_recover: bool
    suggested_action: str


@dataclass
class ConversionResult:
    """Summary of a stream conversion."""
    input_size: int
    output_size: int
    metrics: Optional[PerformanceMetrics] = None


class ConversionError(Exception):
    """Base exception for every conversion failure."""

    def __init__(self, message: str, error_type: ErrorType, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_type = error_type
        self.context = context or {}


class UnsupportedTypeHintError(ConversionError):
    """A hint table names a tag outside of TypeTag."""

    def __init__(self, key: str, tag: str):
        super().__init__(
            f"Unsupported numeric type hint {key}={tag}",
            ErrorType.TYPE_HINT,
            context={"key": key, "tag": tag}
        )
        self.key = key
        self.tag = tag


class UnsupportedNumericValueError(ConversionError):
    """A number has no hint and is not a lossless 64-bit signed integer."""

    def __init__(self, value: Any, key: Optional[str] = None):
        super().__init__(
            f"Unsupported numeric value {value!r}",
            ErrorType.NUMERIC,
            context={"value": value, "key": key}
        )
        self.value = value
        self.key = key


class NumericOverflowError(ConversionError):
    """A hinted value does not fit the hinted width (strict mode only)."""

    def __init__(self, key: str, tag: str, value: Any):
        super().__init__(
            f"Numeric value {value!r} does not fit type hint {key}={tag}",
            ErrorType.OVERFLOW,
            context={"key": key, "tag": tag, "value": value}
        )
        self.key = key
        self.tag = tag
        self.value = value


class UnsupportedValueTypeError(ConversionError):
    """A value outside the generic JSON model reached the encoder."""

    def __init__(self, value: Any, reason: Optional[str] = None):
        message = reason or f"Unsupported value type: {type(value).__name__}"
        super().__init__(message, ErrorType.VALUE_TYPE, context={"type": type(value).__name__})
        self.value = value


class NestingDepthError(ConversionError):
    """The document nests deeper than the encoder can walk."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorType.DEPTH, context)


class UpstreamParseError(ConversionError):
    """The JSON input could not be parsed."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorType.PARSE, context)


class StreamIOError(ConversionError):
    """Reading the input or writing the output stream failed."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorType.IO, context)


# Abstract base classes for interfaces

class IdentifierValidator(ABC):
    """Recognizes strings that must always stay strings."""

    @abstractmethod
    def validate(self, text: str) -> bool:
        """Return True if text is a well-formed identifier."""
        pass


class ConverterInterface(ABC):
    """Abstract interface for the document converter."""

    @abstractmethod
    def convert(self, value: Value, type_hints: Optional[TypeHintTable] = None) -> bytes:
        """Convert a parsed JSON value into MessagePack bytes."""
        pass

    @abstractmethod
    def convert_stream(
        self,
        source: BinaryIO,
        sink: BinaryIO,
        type_hints: Optional[TypeHintTable] = None
    ) -> ConversionResult:
        """Read JSON from source and write MessagePack to sink."""
        pass


class ErrorHandlerInterface(ABC):
    """Abstract interface for error handling."""

    @abstractmethod
    def validate_type_hints(self, type_hints: Any) -> ValidationResult:
        """Validate a type-hint table."""
        pass

    @abstractmethod
    def handle_conversion_error(self, error: ConversionError) -> ErrorResponse:
        """Handle conversion errors."""
        pass
