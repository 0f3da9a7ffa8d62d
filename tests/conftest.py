"""Pytest configuration and fixtures."""

import pytest

from json_msgpack import JSONMsgpackConverter
from json_msgpack.io import MsgpackWriter


def unhex(text: str) -> bytes:
    """Bytes from a space separated hex dump."""
    return bytes.fromhex(text.replace(" ", ""))


# Valid ndau addresses (kinds a, n, m)
USER_ADDRESS = "ndaea8w9gz84ncxrytepzxgkg9ymi4k7c9p427i6b57xw3r4"
NDAU_ADDRESS = "ndnf9ffbzhyf8mk7z5vvqc4quzz5i2exp5zgsmhyhc9cuwr4"
MARKET_MAKER_ADDRESS = "ndmmw2cwhhgcgk9edp5tiieqab3pq7uxdic2wabzx49twwxh"


@pytest.fixture
def converter():
    """Converter with default settings."""
    return JSONMsgpackConverter()


@pytest.fixture
def writer():
    """Fresh output buffer."""
    return MsgpackWriter()


@pytest.fixture
def fee_table():
    """Fee table document with identifiers and a trailing null."""
    return [
        {"Fee": 4000000.0, "To": [USER_ADDRESS]},
        {"Fee": 9800000.0, "To": None},
    ]


@pytest.fixture
def rate_table():
    """Rate table of [duration, rate] pairs of differing numeric types."""
    return [
        [7776000000000.0, 10000000000.0],
        [15552000000000.0, 20000000000.0],
    ]
