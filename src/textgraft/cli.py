"""Command-line interface for textgraft.

Provides commands for inspecting and editing the text of HTML and XML files
from the terminal. Files ending in .html or .htm are read as HTML fragments;
anything else is read as XML whose text lives in --text-tag elements.
"""

from pathlib import Path
from typing import Annotated

import typer
from lxml import etree

from . import TextMap, __version__

app = typer.Typer(
    name="textgraft",
    help="Find and replace text inside HTML and XML trees.",
    no_args_is_help=True,
)

HTML_SUFFIXES = {".html", ".htm"}

TextTagOption = Annotated[
    str, typer.Option("--text-tag", help="Tag of XML elements that carry text (e.g. 'w:t')")
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"textgraft version {__version__}")
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
    """Find and replace text inside HTML and XML trees."""
    pass


def _is_html(file: Path) -> bool:
    return file.suffix.lower() in HTML_SUFFIXES


def load(file: Path, text_tag: str = "w:t") -> TextMap:
    """Load a file into a TextMap."""
    if _is_html(file):
        return TextMap.from_html(file.read_text(encoding="utf-8"))
    return TextMap.from_xml(file, text_tag=text_tag)


def save(text_map: TextMap, file: Path, output: Path) -> None:
    """Write the (modified) tree of text_map to output."""
    if _is_html(file):
        output.write_text(text_map.root.to_html(), encoding="utf-8")
    else:
        text_map.root.getroottree().write(str(output), encoding="UTF-8", xml_declaration=True)


@app.command()
def text(
    file: Annotated[Path, typer.Argument(help="Path to the HTML or XML file")],
    text_tag: TextTagOption = "w:t",
) -> None:
    """Print the visible text of the file."""
    try:
        typer.echo(load(file, text_tag).get_text())
    except (OSError, etree.LxmlError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("map")
def show_map(
    file: Annotated[Path, typer.Argument(help="Path to the HTML or XML file")],
    text_tag: TextTagOption = "w:t",
) -> None:
    """Print every text node as ADDRESS<TAB>TEXT."""
    try:
        text_map = load(file, text_tag)
    except (OSError, etree.LxmlError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    for entry in text_map.mapping:
        typer.echo(f"{entry.address}\t{entry.text!r}")


@app.command()
def find(
    file: Annotated[Path, typer.Argument(help="Path to the HTML or XML file")],
    search: Annotated[str, typer.Argument(help="Text to look for")],
    ignore_case: Annotated[
        bool, typer.Option("--ignore-case", "-i", help="Case-insensitive search")
    ] = False,
    whole_word: Annotated[
        bool, typer.Option("--whole-word", "-w", help="Match whole words only")
    ] = False,
    text_tag: TextTagOption = "w:t",
) -> None:
    """Print the addresses of text nodes containing the search text."""
    try:
        text_map = load(file, text_tag)
    except (OSError, etree.LxmlError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    addresses = text_map.get_addresses_for_text(
        search, case_sensitive=not ignore_case, preserve_word=whole_word
    )
    if not addresses:
        typer.echo(f"No text node contains '{search}'", err=True)
        raise typer.Exit(1)
    for address in addresses:
        typer.echo(f"{address}\t{text_map.get_text_by_address(address)!r}")


@app.command()
def replace(
    file: Annotated[Path, typer.Argument(help="Path to the HTML or XML file")],
    find: Annotated[str, typer.Option("--find", "-f", help="Text to find")],
    replacement: Annotated[str, typer.Option("--replace", "-r", help="Replacement text")],
    at: Annotated[
        str | None, typer.Option("--at", "-a", help="Address of the text node to edit")
    ] = None,
    index: Annotated[
        int, typer.Option("--index", "-n", help="Which occurrence in the node (0-based)")
    ] = 0,
    whole_word: Annotated[
        bool,
        typer.Option("--whole-word/--partial", help="Only replace whole words"),
    ] = True,
    ignore_case: Annotated[
        bool, typer.Option("--ignore-case", "-i", help="Case-insensitive search")
    ] = False,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
    text_tag: TextTagOption = "w:t",
) -> None:
    """Replace one occurrence of text inside a single text node."""
    try:
        text_map = load(file, text_tag)
        text_map.replace_text(
            find,
            replacement,
            at=at,
            preserve_word=whole_word,
            replacement_index=index,
            case_sensitive=not ignore_case,
        )
        output_path = output or file
        save(text_map, file, output_path)
        typer.echo(f"Replaced text and saved to {output_path}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def apply(
    file: Annotated[Path, typer.Argument(help="Path to the HTML or XML file")],
    edits: Annotated[Path, typer.Argument(help="Path to YAML/JSON edits file")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
    text_tag: TextTagOption = "w:t",
) -> None:
    """Apply edits from a YAML or JSON file."""
    try:
        text_map = load(file, text_tag)
        edit_format = "json" if edits.suffix.lower() == ".json" else "yaml"
        results = text_map.apply_edit_file(edits, format=edit_format)
        output_path = output or file
        save(text_map, file, output_path)

        success_count = sum(1 for r in results if r.success)
        fail_count = len(results) - success_count
        typer.echo(f"Applied {success_count} edits ({fail_count} failed), saved to {output_path}")

        if fail_count > 0:
            for r in results:
                if not r.success:
                    typer.echo(f"  Failed: {r.message}", err=True)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
