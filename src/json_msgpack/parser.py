"""JSON parser producing the generic value tree consumed by the encoder."""

import json
import logging
import math
import re
from typing import Optional, Union

from .types import UpstreamParseError, Value


# \uD800-\uDFFF escapes, the only way UTF-8 input can yield a lone surrogate
_SURROGATE_ESCAPE = re.compile(r"\\u[dD][89a-fA-F]")


def _reject_constant(name: str) -> None:
    raise ValueError(f"non-standard JSON constant {name}")


def _parse_number(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number {text} is out of range")
    return value


def _replace_surrogates(text: str) -> str:
    """Replace lone surrogates left by \\uXXXX escapes with U+FFFD."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return text.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
    return text


def _clean(value: Value) -> Value:
    if isinstance(value, str):
        return _replace_surrogates(value)
    if isinstance(value, list):
        for index, item in enumerate(value):
            value[index] = _clean(item)
        return value
    if isinstance(value, dict):
        cleaned = {}
        for key, item in value.items():
            cleaned[_replace_surrogates(key)] = _clean(item)
        return cleaned
    return value


class JSONParser:
    """
    JSON parser for the converter's input documents.

    Every number is parsed as a double, since JSON itself does not tell
    integers from floats; the numeric type is decided later from hints.
    Numbers outside the double range are rejected, and escaped lone
    surrogates decode to U+FFFD, so the tree only holds finite numbers and
    valid UTF-8 text.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the JSON parser.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def parse(self, raw: Union[bytes, str]) -> Value:
        """
        Parse a JSON document.

        Args:
            raw: Document bytes (UTF-8) or text

        Returns:
            The parsed value tree

        Raises:
            UpstreamParseError: If the document is empty or not valid JSON
        """
        if isinstance(raw, (bytes, bytearray)):
            # Invalid UTF-8 sequences become U+FFFD rather than failing the parse
            text = bytes(raw).decode("utf-8", errors="replace")
        else:
            text = raw

        if not text.strip():
            raise UpstreamParseError("JSON parsing failed: input is empty")

        try:
            data = json.loads(
                text,
                parse_float=_parse_number,
                parse_int=_parse_number,
                parse_constant=_reject_constant
            )
            if _SURROGATE_ESCAPE.search(text):
                data = _clean(data)
        except json.JSONDecodeError as e:
            raise UpstreamParseError(
                f"JSON parsing failed: {e.msg} at line {e.lineno}, column {e.colno}",
                context={"line": e.lineno, "column": e.colno}
            ) from e
        except (ValueError, RecursionError) as e:
            raise UpstreamParseError(f"JSON parsing failed: {e}") from e

        self.logger.debug(f"Parsed JSON document of {len(text)} characters")
        return data
