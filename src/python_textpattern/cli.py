"""Command-line interface for python-textpattern.

Inspect how the range engine sees a document: split it into units, search
text and attributes, and compute bounding rectangles. FILE is a .docx file
(attributed store) or any text file (plain store).
"""

from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer

from . import __version__
from .attributes import TextAttribute, Uniform, parse_attribute_value
from .config import settings_from_env
from .errors import TextPatternError
from .export import export_units_json, export_units_markdown, export_units_yaml
from .provider import TextPatternProvider
from .runs import iter_attribute_runs

app = typer.Typer(
    name="textpattern",
    help="Navigate, search and measure document text the way an automation client does.",
    no_args_is_help=True,
)


class OutputFormat(str, Enum):
    json = "json"
    yaml = "yaml"
    markdown = "markdown"


FileArg = Annotated[Path, typer.Argument(help="Path to a .docx or text file")]
SettingsOpt = Annotated[
    Path | None, typer.Option("--settings", "-s", help="YAML or JSON settings file")
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"textpattern version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Navigate, search and measure document text the way an automation client does."""
    pass


def _open(file: Path, settings: Path | None) -> TextPatternProvider:
    return TextPatternProvider.open(file, settings_from_env(settings))


def _format_value(value: Any) -> str:
    if isinstance(value, Uniform):
        inner = value.value
        if isinstance(inner, Enum):
            return inner.name
        return str(inner)
    return repr(value)


@app.command()
def units(
    file: FileArg,
    unit: Annotated[str, typer.Option("--unit", "-u", help="Text unit to split by")] = "word",
    output_format: Annotated[
        OutputFormat, typer.Option("--format", "-f", help="Output format")
    ] = OutputFormat.json,
    rects: Annotated[
        bool, typer.Option("--rects", help="Include bounding rectangles (json/yaml only)")
    ] = False,
    settings: SettingsOpt = None,
) -> None:
    """Split the document into consecutive ranges of one unit."""
    try:
        provider = _open(file, settings)
        match output_format:
            case OutputFormat.json:
                typer.echo(export_units_json(provider, unit, include_rects=rects))
            case OutputFormat.yaml:
                typer.echo(export_units_yaml(provider, unit, include_rects=rects), nl=False)
            case OutputFormat.markdown:
                typer.echo(export_units_markdown(provider, unit))
    except TextPatternError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def find(
    file: FileArg,
    text: Annotated[str, typer.Argument(help="Text to find")],
    backwards: Annotated[
        bool, typer.Option("--backwards", "-b", help="Find the last occurrence")
    ] = False,
    ignore_case: Annotated[
        bool, typer.Option("--ignore-case", "-i", help="Ignore case when matching")
    ] = False,
    settings: SettingsOpt = None,
) -> None:
    """Find text in the document and print the matching range."""
    try:
        provider = _open(file, settings)
        found = provider.document_range.find_text(text, backwards=backwards, ignore_case=ignore_case)
    except TextPatternError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if found is None:
        typer.echo(f"No match for {text!r}", err=True)
        raise typer.Exit(1)
    typer.echo(f"[{found.start}, {found.end}) {found.get_text()!r}")


@app.command()
def attribute(
    file: FileArg,
    name: Annotated[str, typer.Argument(help="Attribute name, e.g. font_weight")],
    value: Annotated[str, typer.Argument(help="Value to look for, e.g. bold or #FF0000")],
    backwards: Annotated[
        bool, typer.Option("--backwards", "-b", help="Search from the end of the document")
    ] = False,
    settings: SettingsOpt = None,
) -> None:
    """Find the first stretch of text where an attribute has a value."""
    try:
        provider = _open(file, settings)
        attr = TextAttribute.from_name(name)
        found = provider.document_range.find_attribute(
            attr, parse_attribute_value(attr, value), backwards=backwards
        )
    except TextPatternError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if found is None:
        typer.echo(f"No text with {attr.key} = {value}", err=True)
        raise typer.Exit(1)
    typer.echo(f"[{found.start}, {found.end}) {found.get_text()!r}")


@app.command()
def runs(
    file: FileArg,
    name: Annotated[str, typer.Argument(help="Attribute name, e.g. is_italic")],
    settings: SettingsOpt = None,
) -> None:
    """List the runs of uniform value of one attribute."""
    try:
        provider = _open(file, settings)
        attribute_runs = iter_attribute_runs(provider.document_range, name)
    except TextPatternError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    for run in attribute_runs:
        typer.echo(f"[{run.start}, {run.end}) {_format_value(run.value)}")


@app.command()
def rects(
    file: FileArg,
    start: Annotated[int, typer.Argument(help="Range start offset")],
    end: Annotated[int, typer.Argument(help="Range end offset")],
    settings: SettingsOpt = None,
) -> None:
    """Print the screen rectangles of a range, one per visible line."""
    try:
        provider = _open(file, settings)
        rng = provider.document_range.with_span(start, end)
        rectangles = rng.get_bounding_rectangles()
    except TextPatternError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not rectangles:
        typer.echo("No visible rectangles")
        return
    for rect in rectangles:
        typer.echo(f"{rect.x:g} {rect.y:g} {rect.width:g} {rect.height:g}")
