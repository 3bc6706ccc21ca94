"""
Type conversion

Maps a scalar target type to a parse function and the value returned for empty input.
A TypeConverter is immutable once built; with_conversion() derives a new registry.
"""

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional


@dataclass(frozen=True)
class Conversion:
    """Parse function and empty-input default for one scalar type"""

    parse: Callable[[str], Any]
    default: Any


def _parse_bool(data: str) -> bool:
    return data.lower() == "true"


def _parse_str(data: str) -> str:
    return data


def _strict(parse: Callable[[str], Any]) -> Callable[[str], Any]:
    """Numeric parse refusing the surrounding whitespace and digit underscores Python allows"""

    def strict_parse(data: str) -> Any:
        if data != data.strip() or "_" in data:
            raise ValueError(f"Malformed number: {data!r}")
        return parse(data)

    return strict_parse


DEFAULT_CONVERSIONS: Dict[type, Conversion] = {
    str: Conversion(_parse_str, ""),
    int: Conversion(_strict(int), 0),
    float: Conversion(_strict(float), 0.0),
    bool: Conversion(_parse_bool, False),
    Decimal: Conversion(_strict(Decimal), Decimal(0)),
}


class TypeConverter:
    """
    Scalar type registry

    Only types registered explicitly are convertible; there is no fallback to
    subclasses or constructors of unregistered types.
    """

    def __init__(self, conversions: Optional[Mapping[type, Conversion]] = None):
        if conversions is None:
            conversions = DEFAULT_CONVERSIONS
        self._conversions = MappingProxyType(dict(conversions))

    def is_convertible(self, target_type: Any) -> bool:
        """Whether target_type has a registered conversion"""
        try:
            return target_type in self._conversions
        except TypeError:
            # unhashable typing constructs are never scalars
            return False

    def convert_to(self, target_type: type, data: str) -> Any:
        """
        Convert text to target_type

        Empty text yields the registered default. Parse failures propagate from the
        parse function (ValueError or ArithmeticError for the numeric defaults).

        Raises:
            KeyError: target_type is not registered
        """
        conversion = self._conversions[target_type]
        if data == "":
            return conversion.default
        return conversion.parse(data)

    def default_for(self, target_type: type) -> Any:
        return self._conversions[target_type].default

    def with_conversion(
        self, target_type: type, parse: Callable[[str], Any], default: Any
    ) -> "TypeConverter":
        """Return a new registry that also (or instead) converts target_type"""
        conversions = dict(self._conversions)
        conversions[target_type] = Conversion(parse, default)
        return TypeConverter(conversions)

    @property
    def types(self):
        return tuple(self._conversions)

    def __repr__(self) -> str:
        names = ", ".join(t.__name__ for t in self._conversions)
        return f"TypeConverter({names})"


def to_text(value: Any) -> str:
    """
    Text form of a value written into the tree

    Booleans use the XML spelling, None becomes empty text and everything else
    (projections included, which serialize themselves) goes through str().
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
