"""Document-level conversion from JSON to MessagePack."""

import logging
import sys
from contextlib import nullcontext
from typing import Any, Optional

from .io import MsgpackWriter, read_all, write_all
from .numeric_resolver import NumericResolver
from .parser import JSONParser
from .profiler import PerformanceProfiler
from .string_classifier import StringClassifier
from .structural_encoder import StructuralEncoder
from .types import (
    ConversionContext,
    ConversionResult,
    ConverterInterface,
    IdentifierValidator,
    NestingDepthError,
    TypeHintTable,
    Value,
)


class JSONMsgpackConverter(ConverterInterface):
    """
    Converts parsed JSON documents into deterministic MessagePack bytes.

    Strings are converted using the following heuristic:

    - if the string is not valid UTF-8, its raw bytes are emitted as bin
    - if the string is a valid identifier (an ndau address by default), it
      is emitted as str
    - if the string is valid padded standard base64, it is decoded and the
      bytes are emitted as bin
    - otherwise it is emitted as str

    Numbers need type hints to pick a representation. If every "Fee" is an
    int64 and every "ChangeOn" a uint64, use::

        {"Fee": ["int64"], "ChangeOn": ["uint64"]}

    Unnamed values in arrays such as ``[[0, 1], [-2, 3]]`` are hinted through
    the empty key, cycling through the list at each array position::

        {"": ["int64", "uint64"]}

    Without a hint a number must be an exact 64-bit signed integer.

    Each call builds a fresh context, buffer and profiler; nothing is shared
    between calls, and a failed conversion produces no output at all.
    """

    def __init__(self, type_hints: Optional[TypeHintTable] = None,
                 identifier_validator: Optional[IdentifierValidator] = None,
                 strict: bool = False,
                 logger: Optional[logging.Logger] = None,
                 enable_profiling: bool = False):
        """
        Initialize the converter.

        Args:
            type_hints: Default hint table, used when a call passes none
            identifier_validator: Validator for strings that must stay strings
            strict: Reject hinted values that do not fit the hinted width
            logger: Optional logger instance
            enable_profiling: Attach performance metrics to stream conversion results
        """
        self.type_hints = type_hints
        self.strict = strict
        self.logger = logger or logging.getLogger(__name__)

        self.parser = JSONParser(self.logger)
        self.encoder = StructuralEncoder(
            string_classifier=StringClassifier(identifier_validator, self.logger),
            numeric_resolver=NumericResolver(strict=strict, logger=self.logger),
            logger=self.logger
        )
        self.enable_profiling = enable_profiling

    def convert(self, value: Value, type_hints: Optional[TypeHintTable] = None) -> bytes:
        """
        Recursively convert a value into its MessagePack representation.

        Args:
            value: Parsed JSON value
            type_hints: Hint table for this call (defaults to the instance table)

        Returns:
            The encoded bytes

        Raises:
            NestingDepthError: If the value nests deeper than the interpreter stack allows
            ConversionError: On the first value that cannot be encoded
        """
        hints = type_hints if type_hints is not None else self.type_hints
        writer = MsgpackWriter()
        try:
            self.encoder.encode(value, ConversionContext(), hints, writer)
        except RecursionError as e:
            raise NestingDepthError(
                "Document is nested too deeply to convert",
                context={"recursion_limit": sys.getrecursionlimit()}
            ) from e
        return writer.getvalue()

    def convert_stream(self, source: Any, sink: Any,
                       type_hints: Optional[TypeHintTable] = None) -> ConversionResult:
        """
        Read JSON from source until EOF and write it to sink as MessagePack.

        The whole input is read and converted in memory before a single byte
        is written, so a parse or encode failure leaves sink untouched.

        Args:
            source: Readable file-like object
            sink: Writable binary file-like object
            type_hints: Hint table for this call (defaults to the instance table)

        Returns:
            ConversionResult with input and output sizes, and metrics when
            profiling is enabled

        Raises:
            UpstreamParseError: If the input is not valid JSON
            StreamIOError: If reading or writing fails
            ConversionError: If the document cannot be encoded
        """
        profiler = PerformanceProfiler(self.logger) if self.enable_profiling else None
        profiling = profiler.profile_operation("convert_stream") if profiler else nullcontext()

        with profiling:
            raw = read_all(source)
            input_size = len(raw)
            if profiler:
                profiler.record_input(input_size)

            document = self.parser.parse(raw)
            data = self.convert(document, type_hints)
            if profiler:
                profiler.record_output(len(data))

            output_size = write_all(sink, data, getattr(sink, "name", None))

        self.logger.info(f"Converted {input_size} bytes of JSON to {output_size} bytes of MessagePack")
        metrics = profiler.metrics_history[-1] if profiler else None
        return ConversionResult(input_size=input_size, output_size=output_size, metrics=metrics)


def convert(value: Value, type_hints: Optional[TypeHintTable] = None) -> bytes:
    """Convert a parsed JSON value with a default converter."""
    return JSONMsgpackConverter().convert(value, type_hints)


def convert_stream(source: Any, sink: Any,
                   type_hints: Optional[TypeHintTable] = None) -> ConversionResult:
    """Convert a JSON stream with a default converter."""
    return JSONMsgpackConverter().convert_stream(source, sink, type_hints)
