"""
Export of text units to JSON, YAML and Markdown.

A document is split into successive ranges of one unit (words, lines,
paragraphs, format runs, ...) by expanding a caret at each unit start, and
the ranges are serialized with their offsets, text and optionally their
screen rectangles.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import yaml

from .types import TextUnit

if TYPE_CHECKING:
    from .provider import TextPatternProvider
    from .range import TextRange


def iter_unit_ranges(provider: TextPatternProvider, unit: TextUnit | str) -> list[TextRange]:
    """Split the whole story into consecutive ranges of ``unit``.

    Args:
        provider: Provider to take ranges from
        unit: Unit to split by

    Returns:
        Non-overlapping ranges covering the story in order
    """
    unit = TextUnit.coerce(unit)
    length = provider.store.length()
    ranges: list[TextRange] = []
    position = 0
    while position < length:
        rng = provider.document_range.with_span(position, position)
        rng.expand_to_enclosing_unit(unit)
        if rng.end <= position:
            break
        # Expansion can reach back before the caret; keep the pieces disjoint
        rng.start = position
        ranges.append(rng)
        position = rng.end
    return ranges


def range_to_dict(rng: TextRange, include_rects: bool = False) -> dict[str, Any]:
    """Convert a range to a JSON-serializable dictionary."""
    result: dict[str, Any] = {
        "start": rng.start,
        "end": rng.end,
        "text": rng.get_text(),
    }
    if include_rects:
        result["rects"] = [list(rect.to_tuple()) for rect in rng.get_bounding_rectangles()]
    return result


def export_units(
    provider: TextPatternProvider, unit: TextUnit | str, include_rects: bool = False
) -> dict[str, Any]:
    """Collect the unit ranges of a story into one dictionary."""
    unit = TextUnit.coerce(unit)
    ranges = [range_to_dict(r, include_rects) for r in iter_unit_ranges(provider, unit)]
    return {
        "unit": unit.value,
        "length": provider.store.length(),
        "count": len(ranges),
        "ranges": ranges,
    }


def export_units_json(
    provider: TextPatternProvider,
    unit: TextUnit | str,
    include_rects: bool = False,
    indent: int = 2,
) -> str:
    """Export the unit ranges of a story as JSON.

    Example:
        >>> print(export_units_json(provider, "word"))
        {
          "unit": "word",
          ...
    """
    return json.dumps(export_units(provider, unit, include_rects), indent=indent, ensure_ascii=False)


def export_units_yaml(
    provider: TextPatternProvider, unit: TextUnit | str, include_rects: bool = False
) -> str:
    """Export the unit ranges of a story as YAML."""
    return yaml.safe_dump(
        export_units(provider, unit, include_rects), sort_keys=False, allow_unicode=True
    )


def _escape_cell(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace("|", "\\|")
        .replace("\n", "\\n")
        .replace("\v", "\\v")
        .replace("\t", "\\t")
    )


def export_units_markdown(provider: TextPatternProvider, unit: TextUnit | str) -> str:
    """Export the unit ranges of a story as a Markdown table."""
    result = export_units(provider, unit)

    lines = [f"# Text Units: {result['unit']}", ""]
    lines.extend(
        [
            f"- **Story length**: {result['length']}",
            f"- **Units**: {result['count']}",
            "",
        ]
    )

    if not result["ranges"]:
        lines.append("*No text found.*")
        return "\n".join(lines)

    lines.append("| # | Start | End | Text |")
    lines.append("|---|-------|-----|------|")
    for index, item in enumerate(result["ranges"], 1):
        lines.append(f"| {index} | {item['start']} | {item['end']} | `{_escape_cell(item['text'])}` |")

    return "\n".join(lines)
