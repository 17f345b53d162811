"""Command-line interface for python-odt-merge.

Provides commands for inspecting and filling in OpenDocument Text files from the terminal.
"""

from pathlib import Path
from typing import Annotated

import typer
import yaml

from . import OpenDocumentText, __version__
from .columns import expand_columns
from .constants import TEXT_PARAGRAPH
from .matcher import PairingMode

app = typer.Typer(
    name="odt-merge",
    help="Fill in OpenDocument Text templates from the command line.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"odt-merge version {__version__}")
        raise typer.Exit()


def _parse_pairs(pairs: list[str] | None, option: str) -> dict[str, str]:
    """Turn repeated KEY=VALUE options into a dict."""
    parsed: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint=option)
        parsed[key] = value
    return parsed


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
    """Fill in OpenDocument Text templates from the command line."""
    pass


@app.command()
def nodes(
    file: Annotated[
        Path, typer.Argument(help="Path to the .odt file, an unpacked directory or a content.xml")
    ],
    node: Annotated[str, typer.Option("--node", "-n", help="Element name")] = TEXT_PARAGRAPH,
    attr: Annotated[
        list[str] | None,
        typer.Option("--attr", "-a", help="Attribute filter as KEY=VALUE (repeatable)"),
    ] = None,
    nested: Annotated[
        bool, typer.Option("--nested", help="Pair tags by nesting depth")
    ] = False,
) -> None:
    """Print the markup of every matching element."""
    attributes = _parse_pairs(attr, "--attr") or None
    pairing = PairingMode.NESTED if nested else PairingMode.POSITIONAL
    try:
        with OpenDocumentText(file, pairing=pairing) as doc:
            for found in doc.find_nodes(node, attributes):
                typer.echo(found.inner)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def inject(
    file: Annotated[
        Path, typer.Argument(help="Path to the .odt file or an unpacked directory")
    ],
    var: Annotated[
        list[str] | None,
        typer.Option("--var", help="Variable as NAME=VALUE (repeatable)"),
    ] = None,
    vars_file: Annotated[
        Path | None,
        typer.Option("--vars-file", help="YAML or JSON mapping of variables"),
    ] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
    validate: Annotated[
        bool, typer.Option("--validate/--no-validate", help="Check the content before saving")
    ] = True,
) -> None:
    """Set user variables and save the document."""
    variables = _parse_pairs(var, "--var")
    if not variables and vars_file is None:
        typer.echo("Error: Must specify --var or --vars-file", err=True)
        raise typer.Exit(1)

    try:
        if vars_file is not None:
            loaded = yaml.safe_load(vars_file.read_text(encoding="utf-8")) or {}
            if not isinstance(loaded, dict):
                raise ValueError(f"{vars_file} must contain a mapping of variables")
            variables = {**{str(k): str(v) for k, v in loaded.items()}, **variables}

        with OpenDocumentText(file) as doc:
            count = doc.inject_vars(variables)
            output_path = output or file
            doc.save(output_path, validate=validate)
        typer.echo(
            f"Set {len(variables)} variable(s) in {count} element(s), saved to {output_path}"
        )
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def apply(
    file: Annotated[Path, typer.Argument(help="Path to the .odt file")],
    injections: Annotated[Path, typer.Argument(help="Path to YAML/JSON injections file")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Apply injections from a YAML or JSON file."""
    try:
        with OpenDocumentText(file) as doc:
            results = doc.apply_injection_file(injections)
            output_path = output or file
            doc.save(output_path)

        success_count = sum(1 for r in results if r.success)
        fail_count = len(results) - success_count
        typer.echo(
            f"Applied {success_count} injections ({fail_count} failed), saved to {output_path}"
        )

        if fail_count > 0:
            for r in results:
                if not r.success:
                    typer.echo(f"  Failed: {r.message}", err=True)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def columns(
    spec: Annotated[str, typer.Argument(help="Column specification, e.g. A-C or A-BB-E")],
) -> None:
    """Expand a column specification."""
    try:
        typer.echo(" ".join(expand_columns(spec)))
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
