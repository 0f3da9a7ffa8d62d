"""Recursive walk that turns a JSON value tree into MessagePack."""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from .adapters import append_best_guess, is_native_scalar, to_value
from .io.msgpack_writer import MsgpackWriter
from .numeric_resolver import NumericResolver
from .string_classifier import StringClassifier
from .types import (
    ConversionContext,
    LeafKind,
    TypeHintTable,
    UnsupportedValueTypeError,
    Value,
)


class StructuralEncoder:
    """
    Encoder for generic JSON value trees.

    Dispatches on the kind of each value and delegates leaves to the
    StringClassifier and NumericResolver. Object entries are emitted in
    sorted key order so identical documents always produce identical bytes.

    The conversion context is immutable: every encode call receives the
    context in effect before the value and returns the context left behind
    after it, so "last key seen" and "innermost array position" carry
    across siblings and out of nested containers.
    """

    def __init__(self, string_classifier: Optional[StringClassifier] = None,
                 numeric_resolver: Optional[NumericResolver] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the structural encoder.

        Args:
            string_classifier: Optional StringClassifier instance
            numeric_resolver: Optional NumericResolver instance
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.string_classifier = string_classifier or StringClassifier(logger=self.logger)
        self.numeric_resolver = numeric_resolver or NumericResolver(logger=self.logger)

    def encode(self, value: Value, ctx: ConversionContext,
               type_hints: Optional[TypeHintTable], writer: MsgpackWriter) -> ConversionContext:
        """
        Encode a value and everything below it.

        Args:
            value: JSON value (None, bool, int, float, str, bytes, list, dict)
            ctx: Context in effect before this value
            type_hints: Hint table for this conversion, may be None
            writer: Output buffer

        Returns:
            Context in effect after this value

        Raises:
            ConversionError: On the first leaf or nested failure
        """
        if value is None:
            writer.append_nil()
        elif isinstance(value, bool):
            writer.append_bool(value)
        elif isinstance(value, (int, float)):
            self.numeric_resolver.resolve(value, ctx, type_hints, writer)
        elif isinstance(value, (str, bytes)):
            self._encode_string(value, writer)
        elif isinstance(value, list):
            return self._encode_array(value, ctx, type_hints, writer)
        elif isinstance(value, dict):
            return self._encode_object(value, ctx, type_hints, writer)
        else:
            return self._encode_foreign(value, ctx, type_hints, writer)
        return ctx

    def _encode_string(self, value: Any, writer: MsgpackWriter) -> None:
        leaf = self.string_classifier.classify(value)
        if leaf.kind == LeafKind.BYTES:
            writer.append_bin(leaf.data)
        else:
            writer.append_str(leaf.data)

    def _encode_array(self, items: List[Value], ctx: ConversionContext,
                      type_hints: Optional[TypeHintTable], writer: MsgpackWriter) -> ConversionContext:
        writer.append_array_header(len(items))

        # The counter restarts for every array and is not restored when a
        # nested array ends, so positional hints only follow the innermost one.
        ctx = replace(ctx, current_hint=0)
        for item in items:
            ctx = self.encode(item, ctx, type_hints, writer)
            ctx = replace(ctx, current_hint=ctx.current_hint + 1)
        return ctx

    def _encode_object(self, entries: Dict[str, Value], ctx: ConversionContext,
                       type_hints: Optional[TypeHintTable], writer: MsgpackWriter) -> ConversionContext:
        writer.append_map_header(len(entries))

        for key in self.sorted_keys(entries):
            writer.append_str(key)
            ctx = replace(ctx, current_key=key)
            ctx = self.encode(entries[key], ctx, type_hints, writer)
        return ctx

    def _encode_foreign(self, value: Any, ctx: ConversionContext,
                        type_hints: Optional[TypeHintTable], writer: MsgpackWriter) -> ConversionContext:
        """Encode a value that did not come from the JSON parser."""
        if is_native_scalar(value):
            append_best_guess(value, writer)
            return ctx

        adapted = to_value(value)
        self.logger.debug(f"Adapted {type(value).__name__} to {type(adapted).__name__}")
        return self.encode(adapted, ctx, type_hints, writer)

    @staticmethod
    def sorted_keys(entries: Dict[Any, Value]) -> List[str]:
        """
        Return object keys in byte-lexicographic order.

        Code point order of str is the byte order of their UTF-8 encoding.

        Raises:
            UnsupportedValueTypeError: If a key is not UTF-8 encodable text
        """
        for key in entries:
            if not isinstance(key, str):
                raise UnsupportedValueTypeError(
                    key, f"Object keys must be strings, got {type(key).__name__}"
                )
            try:
                key.encode("utf-8")
            except UnicodeEncodeError:
                raise UnsupportedValueTypeError(key, f"Object key is not valid UTF-8: {key!r}")
        return sorted(entries)
