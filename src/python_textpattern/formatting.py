"""
Run and paragraph formatting read from WordprocessingML property elements.

This module turns <w:rPr> and <w:pPr> elements into small immutable records.
Equal records mean equal formatting, which is how the document store finds
the maximal runs of uniform character and paragraph formatting.
"""

import logging
from dataclasses import dataclass

from lxml import etree

from .attributes import (
    BulletStyle,
    CapStyle,
    HorizontalTextAlignment,
    OutlineStyles,
    TextDecorationLineStyle,
    rgb_to_colorref,
)
from .constants import w as _w

logger = logging.getLogger(__name__)

# Unit conversion utilities

# Points per unit for OOXML universal measures ("12pt", "0.5in")
UNIVERSAL_MEASURES: dict[str, float] = {
    "pt": 1.0,
    "pc": 12.0,
    "pi": 12.0,
    "in": 72.0,
    "cm": 72 / 2.54,
    "mm": 72 / 25.4,
}


def measure_to_points(value: str, units_per_point: int) -> float | None:
    """Convert an OOXML measure attribute to points.

    Plain numbers are in the attribute's native unit (20 for twips, 2 for
    half-points). Universal measures carry one of the UNIVERSAL_MEASURES
    suffixes. Unreadable values are logged and give None.
    """
    suffix = value[-2:]
    try:
        if suffix in UNIVERSAL_MEASURES:
            return float(value[:-2]) * UNIVERSAL_MEASURES[suffix]
        return float(value) / units_per_point
    except ValueError:
        logger.warning("Ignoring unreadable measure %r", value)
        return None


def twips_to_points(value: str) -> float | None:
    """Convert a twips measure to points (1 point = 20 twips)."""
    return measure_to_points(value, 20)


def half_points_to_points(value: str) -> float | None:
    """Convert a half-point measure to points (w:sz uses half-points)."""
    return measure_to_points(value, 2)


def _is_on(elem: etree._Element) -> bool:
    # Presence means on unless w:val explicitly switches it off
    return elem.get(_w("val")) not in ("0", "false", "off")


UNDERLINE_STYLES: dict[str, TextDecorationLineStyle] = {
    "none": TextDecorationLineStyle.NONE,
    "single": TextDecorationLineStyle.SINGLE,
    "words": TextDecorationLineStyle.WORDS_ONLY,
    "double": TextDecorationLineStyle.DOUBLE,
    "dotted": TextDecorationLineStyle.DOT,
    "dash": TextDecorationLineStyle.DASH,
    "dotDash": TextDecorationLineStyle.DASH_DOT,
    "dotDotDash": TextDecorationLineStyle.DASH_DOT_DOT,
    "wave": TextDecorationLineStyle.WAVY,
    "thick": TextDecorationLineStyle.THICK_SINGLE,
    "wavyDouble": TextDecorationLineStyle.DOUBLE_WAVY,
    "wavyHeavy": TextDecorationLineStyle.THICK_WAVY,
    "dashLong": TextDecorationLineStyle.LONG_DASH,
    "dashedHeavy": TextDecorationLineStyle.THICK_DASH,
    "dashDotHeavy": TextDecorationLineStyle.THICK_DASH_DOT,
    "dashDotDotHeavy": TextDecorationLineStyle.THICK_DASH_DOT_DOT,
    "dottedHeavy": TextDecorationLineStyle.THICK_DOT,
    "dashLongHeavy": TextDecorationLineStyle.THICK_LONG_DASH,
}

ALIGNMENTS: dict[str, HorizontalTextAlignment] = {
    "left": HorizontalTextAlignment.LEFT,
    "start": HorizontalTextAlignment.LEFT,
    "center": HorizontalTextAlignment.CENTERED,
    "right": HorizontalTextAlignment.RIGHT,
    "end": HorizontalTextAlignment.RIGHT,
    "both": HorizontalTextAlignment.JUSTIFIED,
    "distribute": HorizontalTextAlignment.JUSTIFIED,
}

# w:highlight names as 0x00BBGGRR
HIGHLIGHT_COLORS: dict[str, int] = {
    "black": 0x000000,
    "blue": 0xFF0000,
    "cyan": 0xFFFF00,
    "green": 0x00FF00,
    "magenta": 0xFF00FF,
    "red": 0x0000FF,
    "yellow": 0x00FFFF,
    "white": 0xFFFFFF,
    "darkBlue": 0x800000,
    "darkCyan": 0x808000,
    "darkGreen": 0x008000,
    "darkMagenta": 0x800080,
    "darkRed": 0x000080,
    "darkYellow": 0x008080,
    "darkGray": 0x808080,
    "lightGray": 0xC0C0C0,
}


def _color(value: str | None) -> int | None:
    if not value or value == "auto":
        return None
    try:
        return rgb_to_colorref(value)
    except ValueError:
        logger.warning("Ignoring unreadable color value %r", value)
        return None


@dataclass(frozen=True)
class RunFormat:
    """Character formatting of one run (None means inherited/default)."""

    bold: bool = False
    italic: bool = False
    underline: TextDecorationLineStyle = TextDecorationLineStyle.NONE
    strikethrough: TextDecorationLineStyle = TextDecorationLineStyle.NONE
    font_name: str | None = None
    font_size: float | None = None
    color: int | None = None
    background: int | None = None
    caps: CapStyle = CapStyle.NONE
    hidden: bool = False
    superscript: bool = False
    subscript: bool = False
    outline: OutlineStyles = OutlineStyles.NONE

    @classmethod
    def extract(cls, rpr: etree._Element | None) -> "RunFormat":
        """Read a <w:rPr> element.

        Args:
            rpr: The <w:rPr> element to extract from (or None)

        Returns:
            The run's formatting record
        """
        if rpr is None:
            return cls()

        values: dict[str, object] = {}

        for name, tag in (("bold", "b"), ("italic", "i"), ("hidden", "vanish")):
            elem = rpr.find(_w(tag))
            if elem is not None:
                values[name] = _is_on(elem)

        u = rpr.find(_w("u"))
        if u is not None:
            val = u.get(_w("val"), "single")
            style = UNDERLINE_STYLES.get(val)
            if style is None:
                logger.warning("Unknown underline style %r", val)
                style = TextDecorationLineStyle.OTHER
            values["underline"] = style

        dstrike = rpr.find(_w("dstrike"))
        strike = rpr.find(_w("strike"))
        if dstrike is not None and _is_on(dstrike):
            values["strikethrough"] = TextDecorationLineStyle.DOUBLE
        elif strike is not None and _is_on(strike):
            values["strikethrough"] = TextDecorationLineStyle.SINGLE

        rfonts = rpr.find(_w("rFonts"))
        if rfonts is not None:
            font_name = rfonts.get(_w("ascii")) or rfonts.get(_w("hAnsi"))
            if font_name:
                values["font_name"] = font_name

        sz = rpr.find(_w("sz"))
        if sz is not None and sz.get(_w("val")):
            font_size = half_points_to_points(sz.get(_w("val")))
            if font_size is not None:
                values["font_size"] = font_size

        color = rpr.find(_w("color"))
        if color is not None:
            values["color"] = _color(color.get(_w("val")))

        shd = rpr.find(_w("shd"))
        highlight = rpr.find(_w("highlight"))
        if shd is not None and _color(shd.get(_w("fill"))) is not None:
            values["background"] = _color(shd.get(_w("fill")))
        elif highlight is not None:
            values["background"] = HIGHLIGHT_COLORS.get(highlight.get(_w("val"), ""))

        caps = rpr.find(_w("caps"))
        small_caps = rpr.find(_w("smallCaps"))
        if caps is not None and _is_on(caps):
            values["caps"] = CapStyle.ALL_CAP
        elif small_caps is not None and _is_on(small_caps):
            values["caps"] = CapStyle.SMALL_CAP

        vert_align = rpr.find(_w("vertAlign"))
        if vert_align is not None:
            val = vert_align.get(_w("val"))
            values["superscript"] = val == "superscript"
            values["subscript"] = val == "subscript"

        outline = OutlineStyles.NONE
        for tag, flag in (
            ("outline", OutlineStyles.OUTLINE),
            ("shadow", OutlineStyles.SHADOW),
            ("imprint", OutlineStyles.ENGRAVED),
            ("emboss", OutlineStyles.EMBOSSED),
        ):
            elem = rpr.find(_w(tag))
            if elem is not None and _is_on(elem):
                outline |= flag
        values["outline"] = outline

        return cls(**values)  # type: ignore[arg-type]


@dataclass(frozen=True)
class ParagraphFormat:
    """Paragraph formatting of one paragraph, lengths in points."""

    alignment: HorizontalTextAlignment = HorizontalTextAlignment.LEFT
    indent_leading: float = 0.0
    indent_trailing: float = 0.0
    indent_first_line: float = 0.0
    tabs: tuple[float, ...] = ()
    bullet: BulletStyle = BulletStyle.NONE

    @classmethod
    def extract(cls, ppr: etree._Element | None) -> "ParagraphFormat":
        """Read a <w:pPr> element.

        Args:
            ppr: The <w:pPr> element to extract from (or None)

        Returns:
            The paragraph's formatting record
        """
        if ppr is None:
            return cls()

        values: dict[str, object] = {}

        jc = ppr.find(_w("jc"))
        if jc is not None and jc.get(_w("val")):
            val = jc.get(_w("val"))
            alignment = ALIGNMENTS.get(val)
            if alignment is None:
                logger.warning("Unknown paragraph alignment %r, using left", val)
                alignment = HorizontalTextAlignment.LEFT
            values["alignment"] = alignment

        ind = ppr.find(_w("ind"))
        if ind is not None:
            for name, raw in (
                ("indent_leading", ind.get(_w("left")) or ind.get(_w("start"))),
                ("indent_trailing", ind.get(_w("right")) or ind.get(_w("end"))),
                ("indent_first_line", ind.get(_w("firstLine"))),
            ):
                points = twips_to_points(raw) if raw else None
                if points is not None:
                    values[name] = points

            hanging = ind.get(_w("hanging"))
            if "indent_first_line" not in values and hanging:
                points = twips_to_points(hanging)
                if points is not None:
                    values["indent_first_line"] = -points

        tabs = ppr.find(_w("tabs"))
        if tabs is not None:
            stops = (
                twips_to_points(tab.get(_w("pos")))
                for tab in tabs.findall(_w("tab"))
                if tab.get(_w("pos")) and tab.get(_w("val")) != "clear"
            )
            values["tabs"] = tuple(sorted(stop for stop in stops if stop is not None))

        # Numbering definitions are not resolved, so any list paragraph
        # reports the generic bullet style.
        num_id = ppr.find(f"{_w('numPr')}/{_w('numId')}")
        if num_id is not None and num_id.get(_w("val"), "0") != "0":
            values["bullet"] = BulletStyle.OTHER

        return cls(**values)  # type: ignore[arg-type]
