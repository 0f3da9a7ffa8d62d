"""Tests for numeric leaf resolution."""

import math

import pytest

from conftest import unhex
from json_msgpack.io import MsgpackWriter
from json_msgpack.numeric_resolver import NumericResolver, lossless_int64, narrow
from json_msgpack.types import (
    ConversionContext,
    NumericOverflowError,
    UnsupportedNumericValueError,
    UnsupportedTypeHintError,
)


def resolve(value, hints=None, key="", position=0, strict=False):
    """Resolve a single value and return the bytes written."""
    writer = MsgpackWriter()
    ctx = ConversionContext(current_key=key, current_hint=position)
    NumericResolver(strict=strict).resolve(value, ctx, hints, writer)
    return writer.getvalue()


class TestUnhintedNumbers:
    """Tests for numbers without a type hint."""

    @pytest.mark.parametrize("value,expected", [
        (255.0, "d1 00 ff"),
        (255, "d1 00 ff"),
        (0.0, "00"),
        (-0.0, "00"),
        (-5.0, "fb"),
        (172800000000.0, "d3 00 00 00 28 3b ae c0 00"),
        (9007199254740991.0, "d3 00 1f ff ff ff ff ff ff"),
        (-9223372036854775808.0, "d3 80 00 00 00 00 00 00 00"),
    ])
    def test_lossless_integers_are_int64(self, value, expected):
        """Test that integral values become signed 64-bit integers."""
        assert resolve(value) == unhex(expected)

    @pytest.mark.parametrize("value", [1.5, -0.25, 9223372036854775808.0, 1e19, math.inf, -math.inf, math.nan])
    def test_other_values_are_rejected(self, value):
        """Test that fractional, out-of-range and non-finite values fail."""
        with pytest.raises(UnsupportedNumericValueError):
            resolve(value)

    def test_large_python_int_is_rejected(self):
        """Test that ints beyond int64 fail without a hint."""
        with pytest.raises(UnsupportedNumericValueError) as exc_info:
            resolve(2 ** 63, key="Big")
        assert exc_info.value.value == 2 ** 63
        assert exc_info.value.key == "Big"

    def test_hint_for_other_key_is_ignored(self):
        """Test that hints only apply to their own key."""
        assert resolve(255.0, hints={"Fee": ["uint64"]}, key="Other") == unhex("d1 00 ff")

    def test_empty_hint_sequence_is_ignored(self):
        """Test that an empty tag list counts as no hint."""
        assert resolve(255.0, hints={"Fee": []}, key="Fee") == unhex("d1 00 ff")


class TestHintedNumbers:
    """Tests for numbers with a type hint."""

    @pytest.mark.parametrize("tag,value,expected", [
        ("uint64", 4000000.0, "ce 00 3d 09 00"),
        ("uint64", 0.0, "00"),
        ("uint", 10000000000.0, "cf 00 00 00 02 54 0b e4 00"),
        ("int64", 7776000000000.0, "d3 00 00 07 12 7d b7 c0 00"),
        ("int", 255.0, "d1 00 ff"),
        ("int32", 255.0, "d1 00 ff"),
        ("uint8", 255.0, "cc ff"),
        ("byte", 255.0, "cc ff"),
        ("uint16", 256.0, "cd 01 00"),
        ("uint32", 65536.0, "ce 00 01 00 00"),
        ("int8", -100.0, "d0 9c"),
        ("int16", -129.0, "d1 ff 7f"),
        ("float32", 1.5, "ca 3f c0 00 00"),
        ("float64", 1.5, "cb 3f f8 00 00 00 00 00 00"),
        ("float64", 1, "cb 3f f0 00 00 00 00 00 00"),
    ])
    def test_tags(self, tag, value, expected):
        """Test each tag's encoding."""
        assert resolve(value, hints={"k": [tag]}, key="k") == unhex(expected)

    @pytest.mark.parametrize("tag,value,expected", [
        ("int8", 200.0, "d0 c8"),
        ("uint8", -1.0, "cc ff"),
        ("byte", 256.0, "00"),
        ("int16", 70000.0, "d1 11 70"),
        ("int", 3.9, "03"),
        ("int", -3.9, "fd"),
        ("uint", -3.0, "cf ff ff ff ff ff ff ff fd"),
    ])
    def test_values_are_narrowed_without_fit_check(self, tag, value, expected):
        """Test that out-of-range values are truncated and wrapped, not rejected."""
        assert resolve(value, hints={"k": [tag]}, key="k") == unhex(expected)

    def test_hints_cycle_by_position(self):
        """Test that the tag is chosen by position modulo the sequence length."""
        hints = {"": ["int64", "uint64"]}
        assert resolve(1000.0, hints=hints, position=0) == unhex("d1 03 e8")
        assert resolve(1000.0, hints=hints, position=1) == unhex("cd 03 e8")
        assert resolve(1000.0, hints=hints, position=2) == unhex("d1 03 e8")
        assert resolve(1000.0, hints=hints, position=5) == unhex("cd 03 e8")

    def test_hint_allows_fractional_floats(self):
        """Test that a float hint accepts values the default rule rejects."""
        assert resolve(0.25, hints={"rate": ["float64"]}, key="rate") == unhex("cb 3f d0 00 00 00 00 00 00")

    def test_unknown_tag(self):
        """Test that an unknown tag fails with the key and tag."""
        with pytest.raises(UnsupportedTypeHintError) as exc_info:
            resolve(1.0, hints={"Fee": ["int128"]}, key="Fee")
        assert exc_info.value.key == "Fee"
        assert exc_info.value.tag == "int128"
        assert str(exc_info.value) == "Unsupported numeric type hint Fee=int128"

    def test_unknown_tag_only_fails_when_selected(self):
        """Test that an unknown tag at another position is not an error."""
        hints = {"": ["int64", "bogus"]}
        assert resolve(1.0, hints=hints, position=0) == unhex("01")
        with pytest.raises(UnsupportedTypeHintError):
            resolve(1.0, hints=hints, position=1)

    def test_integer_hint_on_non_finite_value(self):
        """Test that NaN and infinities cannot be narrowed to integers."""
        with pytest.raises(UnsupportedNumericValueError):
            resolve(math.nan, hints={"k": ["int64"]}, key="k")
        with pytest.raises(UnsupportedNumericValueError):
            resolve(math.inf, hints={"k": ["uint8"]}, key="k")

    def test_float_hint_on_non_finite_value(self):
        """Test that float hints carry infinities through."""
        assert resolve(math.inf, hints={"k": ["float64"]}, key="k") == unhex("cb 7f f0 00 00 00 00 00 00")

    def test_float_hint_on_huge_int(self):
        """Test that ints beyond double range become infinity."""
        assert resolve(10 ** 400, hints={"k": ["float64"]}, key="k") == unhex("cb 7f f0 00 00 00 00 00 00")


class TestStrictMode:
    """Tests for the optional strict fit check."""

    def test_fitting_values_pass(self):
        """Test that values within range encode as usual."""
        assert resolve(100.0, hints={"k": ["int8"]}, key="k", strict=True) == unhex("64")
        assert resolve(1.1, hints={"k": ["float32"]}, key="k", strict=True)[:1] == unhex("ca")

    def test_integer_overflow(self):
        """Test that out-of-range integers fail in strict mode."""
        with pytest.raises(NumericOverflowError) as exc_info:
            resolve(200.0, hints={"k": ["int8"]}, key="k", strict=True)
        assert exc_info.value.tag == "int8"
        assert exc_info.value.value == 200.0

    def test_negative_unsigned(self):
        """Test that negative values fail for unsigned tags."""
        with pytest.raises(NumericOverflowError):
            resolve(-1.0, hints={"k": ["uint64"]}, key="k", strict=True)

    def test_fraction_truncation(self):
        """Test that fractional values fail for integer tags."""
        with pytest.raises(NumericOverflowError):
            resolve(1.5, hints={"k": ["int64"]}, key="k", strict=True)

    def test_float32_overflow(self):
        """Test that doubles beyond float32 range fail."""
        with pytest.raises(NumericOverflowError):
            resolve(1e300, hints={"k": ["float32"]}, key="k", strict=True)

    def test_huge_int_to_float(self):
        """Test that ints beyond double range fail."""
        with pytest.raises(NumericOverflowError):
            resolve(10 ** 400, hints={"k": ["float64"]}, key="k", strict=True)


class TestHelpers:
    """Tests for module helpers."""

    def test_select_hint(self):
        """Test hint lookup by key and position."""
        resolver = NumericResolver()
        hints = {"": ["int64", "uint64", "float32"]}
        assert resolver.select_hint(ConversionContext("", 4), hints) == "uint64"
        assert resolver.select_hint(ConversionContext("x", 0), hints) is None
        assert resolver.select_hint(ConversionContext("", 0), None) is None
        assert resolver.select_hint(ConversionContext("", 0), {}) is None

    def test_narrow(self):
        """Test two's-complement wrapping."""
        assert narrow(200, True, 8) == -56
        assert narrow(-1, False, 8) == 255
        assert narrow(-1, True, 64) == -1
        assert narrow(2 ** 64, False, 64) == 0

    def test_lossless_int64(self):
        """Test the lossless int64 check."""
        assert lossless_int64(3.0) == 3
        assert lossless_int64(3.5) is None
        assert lossless_int64(2.0 ** 63) is None
        assert lossless_int64(-(2.0 ** 63)) == -(2 ** 63)
        assert lossless_int64(math.nan) is None
