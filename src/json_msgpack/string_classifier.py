"""String leaf classification: text, decoded base64, or raw bytes."""

import base64
import binascii
import logging
from typing import Optional, Union

from .identifiers import NdauAddressValidator
from .types import BinaryLeaf, IdentifierValidator, LeafKind


def raw_bytes(text: str) -> bytes:
    """
    Recover the raw bytes behind a str that is not valid UTF-8.

    Strings decoded with the surrogateescape handler round-trip exactly;
    other lone surrogates are kept as their surrogatepass encoding.
    """
    try:
        return text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        return text.encode("utf-8", "surrogatepass")


class StringClassifier:
    """
    Decides how a string leaf is represented in MessagePack.

    The checks run in a fixed order and the first match wins:

    1. not valid UTF-8: the raw bytes are emitted as bin
    2. a valid identifier: emitted as str, even if it also decodes as base64
    3. valid padded standard base64: the decoded bytes are emitted as bin
    4. anything else: emitted as str

    Classification is total; it never raises.
    """

    def __init__(self, identifier_validator: Optional[IdentifierValidator] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the string classifier.

        Args:
            identifier_validator: Validator for strings that must stay strings
                (defaults to ndau address validation)
            logger: Optional logger instance
        """
        self.identifier_validator = identifier_validator or NdauAddressValidator()
        self.logger = logger or logging.getLogger(__name__)

    def classify(self, value: Union[str, bytes]) -> BinaryLeaf:
        """
        Classify a string leaf.

        Args:
            value: Text, or raw bytes of possibly non-UTF-8 text

        Returns:
            BinaryLeaf holding either the text or the bytes to emit
        """
        text = self._as_text(value)
        if text is None:
            data = value if isinstance(value, bytes) else raw_bytes(value)
            return BinaryLeaf(LeafKind.BYTES, data)

        if self.identifier_validator.validate(text):
            return BinaryLeaf(LeafKind.STRING, text)

        decoded = self.decode_base64(text)
        if decoded is not None:
            self.logger.debug(f"Decoded base64 string of length {len(text)} to {len(decoded)} bytes")
            return BinaryLeaf(LeafKind.BYTES, decoded)

        return BinaryLeaf(LeafKind.STRING, text)

    @staticmethod
    def decode_base64(text: str) -> Optional[bytes]:
        """
        Decode strict standard base64.

        Only the standard alphabet with "=" padding is accepted; URL-safe and
        unpadded forms return None.
        """
        if len(text) % 4:
            return None
        try:
            return base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError):
            return None

    @staticmethod
    def _as_text(value: Union[str, bytes]) -> Optional[str]:
        """Return value as text, or None when it is not valid UTF-8."""
        if isinstance(value, bytes):
            try:
                return value.decode("utf-8")
            except UnicodeDecodeError:
                return None

        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            return None
        return value
