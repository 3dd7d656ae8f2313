"""
Text attribute kinds, their value enums and the three-way attribute value.

Every attribute kind is tagged with the formatting level it lives at, which
decides the run granularity used when searching for it. Stores resolve kinds
with a ``match`` statement over :class:`TextAttribute`, so adding a member
shows up everywhere a case is missing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, IntFlag
from typing import Any

from .errors import InvalidArgumentError
from .types import AttributeLevel


class TextAttribute(Enum):
    """Closed set of text attributes a range can be queried for."""

    BACKGROUND_COLOR = ("background_color", AttributeLevel.CHARACTER)
    BULLET_STYLE = ("bullet_style", AttributeLevel.PARAGRAPH)
    CAP_STYLE = ("cap_style", AttributeLevel.CHARACTER)
    FONT_NAME = ("font_name", AttributeLevel.CHARACTER)
    FONT_SIZE = ("font_size", AttributeLevel.CHARACTER)
    FONT_WEIGHT = ("font_weight", AttributeLevel.CHARACTER)
    FOREGROUND_COLOR = ("foreground_color", AttributeLevel.CHARACTER)
    HORIZONTAL_TEXT_ALIGNMENT = ("horizontal_text_alignment", AttributeLevel.PARAGRAPH)
    INDENTATION_FIRST_LINE = ("indentation_first_line", AttributeLevel.PARAGRAPH)
    INDENTATION_LEADING = ("indentation_leading", AttributeLevel.PARAGRAPH)
    INDENTATION_TRAILING = ("indentation_trailing", AttributeLevel.PARAGRAPH)
    IS_HIDDEN = ("is_hidden", AttributeLevel.CHARACTER)
    IS_ITALIC = ("is_italic", AttributeLevel.CHARACTER)
    IS_READ_ONLY = ("is_read_only", AttributeLevel.CHARACTER)
    IS_SUBSCRIPT = ("is_subscript", AttributeLevel.CHARACTER)
    IS_SUPERSCRIPT = ("is_superscript", AttributeLevel.CHARACTER)
    OUTLINE_STYLES = ("outline_styles", AttributeLevel.CHARACTER)
    STRIKETHROUGH_STYLE = ("strikethrough_style", AttributeLevel.CHARACTER)
    TABS = ("tabs", AttributeLevel.PARAGRAPH)
    UNDERLINE_STYLE = ("underline_style", AttributeLevel.CHARACTER)

    def __init__(self, key: str, level: AttributeLevel) -> None:
        self.key = key
        self.level = level

    @classmethod
    def from_name(cls, name: str | TextAttribute) -> TextAttribute:
        """Look up an attribute by key ("font_size") or member name ("FONT_SIZE").

        Raises:
            InvalidArgumentError: If no attribute has that name
        """
        if isinstance(name, cls):
            return name
        key = name.strip().lower().replace("-", "_")
        for attribute in cls:
            if attribute.key == key:
                return attribute
        raise InvalidArgumentError(
            f"Unknown text attribute: {name!r}\n\n"
            f"Valid attributes: {', '.join(a.key for a in cls)}"
        )


class HorizontalTextAlignment(IntEnum):
    LEFT = 0
    CENTERED = 1
    RIGHT = 2
    JUSTIFIED = 3


class TextDecorationLineStyle(IntEnum):
    """Underline and strikethrough styles."""

    OTHER = -1
    NONE = 0
    SINGLE = 1
    WORDS_ONLY = 2
    DOUBLE = 3
    DOT = 4
    DASH = 5
    DASH_DOT = 6
    DASH_DOT_DOT = 7
    WAVY = 8
    THICK_SINGLE = 9
    DOUBLE_WAVY = 11
    THICK_WAVY = 12
    LONG_DASH = 13
    THICK_DASH = 14
    THICK_DASH_DOT = 15
    THICK_DASH_DOT_DOT = 16
    THICK_DOT = 17
    THICK_LONG_DASH = 18


class CapStyle(IntEnum):
    OTHER = -1
    NONE = 0
    SMALL_CAP = 1
    ALL_CAP = 2
    ALL_PETITE_CAPS = 3
    PETITE_CAPS = 4
    UNICASE = 5
    TITLING = 6


class OutlineStyles(IntFlag):
    NONE = 0
    OUTLINE = 1
    SHADOW = 2
    ENGRAVED = 4
    EMBOSSED = 8


class BulletStyle(IntEnum):
    OTHER = -1
    NONE = 0
    HOLLOW_ROUND_BULLET = 1
    FILLED_ROUND_BULLET = 2
    HOLLOW_SQUARE_BULLET = 3
    FILLED_SQUARE_BULLET = 4
    DASH_BULLET = 5


# Standard font weights
FONT_WEIGHT_NORMAL = 400
FONT_WEIGHT_BOLD = 700


# =============================================================================
# Attribute values
# =============================================================================


@dataclass(frozen=True)
class Uniform:
    """The attribute holds one value across the whole queried span."""

    value: Any


class _Sentinel:
    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name

    def __reduce__(self) -> str:
        return self._name


MIXED = _Sentinel("MIXED")
"""The attribute varies across the queried span."""

NOT_SUPPORTED = _Sentinel("NOT_SUPPORTED")
"""The store has no opinion about this attribute."""

AttrValue = Uniform | _Sentinel


def attribute_values_equal(v1: Any, v2: Any) -> bool:
    """Compare two attribute values by content.

    Sequences compare elementwise (recursively, so nested tabs arrays work),
    and enum members compare equal to their plain integer value.
    """
    v1_seq = isinstance(v1, list | tuple)
    v2_seq = isinstance(v2, list | tuple)
    if v1_seq and v2_seq:
        return len(v1) == len(v2) and all(
            attribute_values_equal(a, b) for a, b in zip(v1, v2, strict=True)
        )
    if v1_seq or v2_seq:
        return False
    if isinstance(v1, Enum) and not isinstance(v1, int):
        v1 = v1.value
    if isinstance(v2, Enum) and not isinstance(v2, int):
        v2 = v2.value
    return bool(v1 == v2)


def value_matches(attr_value: AttrValue, target: Any) -> bool:
    """Check whether a store-reported value satisfies a search target."""
    if isinstance(attr_value, Uniform):
        return attribute_values_equal(target, attr_value.value)
    return target is attr_value


def merge_values(values: list[Any]) -> AttrValue:
    """Fold per-run values into one attribute value for a span.

    Args:
        values: One value per formatting run overlapping the span

    Returns:
        Uniform if every run agrees, MIXED otherwise
    """
    if not values:
        return NOT_SUPPORTED
    first = values[0]
    for value in values[1:]:
        if not attribute_values_equal(first, value):
            return MIXED
    return Uniform(first)


# =============================================================================
# Conversions
# =============================================================================


def rgb_to_colorref(hex_color: str) -> int:
    """Convert "RRGGBB" (optionally with a leading #) to a 0x00BBGGRR integer.

    Raises:
        ValueError: If the string is not six hex digits
    """
    value = hex_color.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Expected a 6-digit hex color, got {hex_color!r}")
    red = int(value[0:2], 16)
    green = int(value[2:4], 16)
    blue = int(value[4:6], 16)
    return red | (green << 8) | (blue << 16)


_BOOLEAN_WORDS = {"true": True, "1": True, "yes": True, "false": False, "0": False, "no": False}

_ENUM_TYPES: dict[TextAttribute, type[IntEnum] | type[IntFlag]] = {
    TextAttribute.BULLET_STYLE: BulletStyle,
    TextAttribute.CAP_STYLE: CapStyle,
    TextAttribute.HORIZONTAL_TEXT_ALIGNMENT: HorizontalTextAlignment,
    TextAttribute.OUTLINE_STYLES: OutlineStyles,
    TextAttribute.STRIKETHROUGH_STYLE: TextDecorationLineStyle,
    TextAttribute.UNDERLINE_STYLE: TextDecorationLineStyle,
}


def parse_attribute_value(attribute: TextAttribute, raw: str) -> Any:
    """Parse a textual value (from the command line) into the attribute's value type.

    Args:
        attribute: Attribute the value is meant for
        raw: Text such as "true", "12.5", "#FF0000", "centered" or "36,72"

    Returns:
        A value comparable with what stores report for the attribute

    Raises:
        InvalidArgumentError: If the text cannot be read as that attribute's type
    """
    text = raw.strip()
    try:
        match attribute:
            case (
                TextAttribute.IS_HIDDEN
                | TextAttribute.IS_ITALIC
                | TextAttribute.IS_READ_ONLY
                | TextAttribute.IS_SUBSCRIPT
                | TextAttribute.IS_SUPERSCRIPT
            ):
                return _BOOLEAN_WORDS[text.lower()]
            case (
                TextAttribute.FONT_SIZE
                | TextAttribute.INDENTATION_FIRST_LINE
                | TextAttribute.INDENTATION_LEADING
                | TextAttribute.INDENTATION_TRAILING
            ):
                return float(text)
            case TextAttribute.FONT_WEIGHT:
                lowered = text.lower()
                if lowered == "bold":
                    return FONT_WEIGHT_BOLD
                if lowered == "normal":
                    return FONT_WEIGHT_NORMAL
                return int(text)
            case TextAttribute.BACKGROUND_COLOR | TextAttribute.FOREGROUND_COLOR:
                if text.startswith("#"):
                    return rgb_to_colorref(text)
                return int(text, 0)
            case TextAttribute.TABS:
                if not text:
                    return ()
                return tuple(float(part) for part in text.split(","))
            case TextAttribute.FONT_NAME:
                return text
            case _:
                enum_type = _ENUM_TYPES[attribute]
                if text.lstrip("-").isdigit():
                    return enum_type(int(text))
                return enum_type[text.upper().replace("-", "_")]
    except (KeyError, ValueError) as e:
        raise InvalidArgumentError(
            f"Cannot read {raw!r} as a value for {attribute.key}"
        ) from e
