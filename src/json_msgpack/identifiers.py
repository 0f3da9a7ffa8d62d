"""Identifier validators consulted before the base64 heuristic."""

import base64
import binascii
import logging
from typing import Iterable, Optional

from .types import IdentifierValidator


# ndau base32 alphabet: no l, o, 0 or 1
NDAU_ALPHABET = "abcdefghijkmnpqrstuvwxyz23456789"
_TO_RFC4648 = str.maketrans(NDAU_ALPHABET, "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567")

NDAU_PREFIX = "nd"
ADDRESS_LENGTH = 48
ADDRESS_KINDS = frozenset("anexbm")

# CRC-16/AUG-CCITT
CHECKSUM_SEED = 0x1d0f


class NdauAddressValidator(IdentifierValidator):
    """
    Validator for ndau account addresses.

    An address is 48 characters of the ndau base32 alphabet, starting with
    "nd" and a kind character. It decodes to 30 bytes: 28 bytes of payload
    followed by a big-endian CRC-16 of that payload.
    """

    def __init__(self, kinds: Optional[Iterable[str]] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the validator.

        Args:
            kinds: Accepted kind characters (defaults to all known kinds)
            logger: Optional logger instance
        """
        self.kinds = frozenset(kinds) if kinds is not None else ADDRESS_KINDS
        self.logger = logger or logging.getLogger(__name__)

    def validate(self, text: str) -> bool:
        if len(text) != ADDRESS_LENGTH:
            return False
        if not text.startswith(NDAU_PREFIX):
            return False
        if text[len(NDAU_PREFIX)] not in self.kinds:
            return False
        if any(char not in NDAU_ALPHABET for char in text):
            return False

        try:
            raw = base64.b32decode(text.translate(_TO_RFC4648))
        except (binascii.Error, ValueError):
            return False

        payload, checksum = raw[:-2], raw[-2:]
        expected = binascii.crc_hqx(payload, CHECKSUM_SEED).to_bytes(2, "big")
        if checksum != expected:
            self.logger.debug(f"Address-shaped string failed checksum: {text}")
            return False
        return True


class NullIdentifierValidator(IdentifierValidator):
    """Validator that recognizes nothing; disables the identifier check."""

    def validate(self, text: str) -> bool:
        return False
