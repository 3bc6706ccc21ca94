"""
TypeConverter Unit Tests

Tests scalar conversion defaults, parsing and registry derivation
"""

from decimal import Decimal, InvalidOperation

import pytest
from xmlproj.core.types import Conversion, TypeConverter, to_text


class TestDefaults:
    """Test empty input defaults"""

    @pytest.mark.parametrize(
        "target, expected",
        [(str, ""), (int, 0), (float, 0.0), (bool, False), (Decimal, Decimal(0))],
    )
    def test_empty_text_yields_default(self, target, expected):
        """Empty text converts to the registered default"""
        converter = TypeConverter()
        assert converter.convert_to(target, "") == expected
        assert converter.default_for(target) == expected


class TestParse:
    """Test parsing well formed literals"""

    @pytest.mark.parametrize(
        "target, data, expected",
        [
            (str, "hello", "hello"),
            (int, "42", 42),
            (int, "-7", -7),
            (float, "2.5", 2.5),
            (bool, "true", True),
            (bool, "TRUE", True),
            (bool, "false", False),
            (bool, "yes", False),
            (Decimal, "10.25", Decimal("10.25")),
        ],
    )
    def test_literal(self, target, data, expected):
        """Literals convert to the expected value"""
        assert TypeConverter().convert_to(target, data) == expected

    def test_invalid_int_raises_value_error(self):
        """Malformed numbers raise from the parse function"""
        with pytest.raises(ValueError):
            TypeConverter().convert_to(int, "forty-two")

    @pytest.mark.parametrize(
        "target, data",
        [
            (int, " 5 "),
            (int, "5\n"),
            (int, "1_000"),
            (float, " 2.5"),
            (float, "1_0.5"),
            (Decimal, "1_000"),
            (Decimal, " 1"),
        ],
    )
    def test_numbers_are_parsed_strictly(self, target, data):
        """Surrounding whitespace and digit underscores are malformed"""
        with pytest.raises(ValueError):
            TypeConverter().convert_to(target, data)

    def test_invalid_decimal_raises(self):
        """Malformed decimals raise InvalidOperation"""
        with pytest.raises(InvalidOperation):
            TypeConverter().convert_to(Decimal, "abc")


class TestRegistry:
    """Test registry membership and derivation"""

    def test_only_registered_types_are_convertible(self):
        """Unregistered and unhashable types are not convertible"""
        converter = TypeConverter()
        assert converter.is_convertible(int)
        assert not converter.is_convertible(bytes)
        assert not converter.is_convertible(list)

    def test_with_conversion_returns_new_registry(self):
        """Deriving a registry leaves the base registry untouched"""
        converter = TypeConverter()
        derived = converter.with_conversion(bytes, lambda s: s.encode(), b"")

        assert derived.is_convertible(bytes)
        assert not converter.is_convertible(bytes)
        assert derived.convert_to(bytes, "ab") == b"ab"
        assert derived.convert_to(bytes, "") == b""

    def test_custom_mapping(self):
        """A registry built from a mapping knows only those types"""
        converter = TypeConverter({int: Conversion(int, -1)})
        assert converter.types == (int,)
        assert converter.convert_to(int, "") == -1


class TestToText:
    """Test text form of written values"""

    def test_bool_uses_xml_spelling(self):
        """Booleans are written as true/false"""
        assert to_text(True) == "true"
        assert to_text(False) == "false"

    def test_none_is_empty(self):
        """None is written as empty text"""
        assert to_text(None) == ""

    def test_other_values_use_str(self):
        """Other values go through str()"""
        assert to_text(42) == "42"
        assert to_text(Decimal("1.50")) == "1.50"
