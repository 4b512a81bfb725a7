"""
CLI for docmirror.

Usage:
    docmirror generate src site/api
    docmirror generate src site/api --config docmirror.yaml --log-level DEBUG
    docmirror inspect src/pkg/module.py --json
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from docmirror import __version__
from docmirror.errors import DocError
from docmirror.extractor import extract
from docmirror.generator import generate_for_path
from docmirror.logging import configure_logging, get_logger
from docmirror.pysource import PythonChecker, PythonEnvironment
from docmirror.record import build_record
from docmirror.settings import DocMirrorSettings

app = typer.Typer(
    name="docmirror",
    help="Generate a mirrored tree of documentation pages from source files.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"docmirror {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """docmirror CLI: document a source tree."""


def _load_settings(config: Path | None, **overrides) -> DocMirrorSettings:
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if config is not None:
        return DocMirrorSettings.from_yaml(config, **overrides)
    return DocMirrorSettings(**overrides)


def _checker(settings: DocMirrorSettings) -> PythonChecker:
    return PythonChecker(
        PythonEnvironment(
            include_private=settings.include_private,
            attribute_docstrings=settings.attribute_docstrings,
        )
    )


def _report(error: DocError) -> None:
    logger.error("doc_generation_failed", **error.to_dict())
    err_console.print(f"[bold red]Error[/bold red] ({error.category.value}): {error}")
    if error.cause is not None:
        err_console.print(f"  caused by: {error.cause}")


@app.command()
def generate(
    input_dir: Path = typer.Argument(..., help="Directory of source files to document."),
    output_dir: Path = typer.Argument(..., help="Directory receiving the generated pages."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False, help="YAML settings file."),  # noqa: UP007
    source_suffix: str | None = typer.Option(None, "--source-suffix", help="Suffix of documentable files."),  # noqa: UP007
    output_suffix: str | None = typer.Option(None, "--output-suffix", help="Suffix of generated pages."),  # noqa: UP007
    include_private: bool = typer.Option(False, "--include-private", help="Document _private names."),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help="DEBUG, INFO, WARNING or ERROR."),  # noqa: UP007
    json_logs: bool = typer.Option(False, "--json-logs", help="Force JSON logs (auto-detected by default)."),
) -> None:
    """Generate documentation pages for every source file under INPUT_DIR."""
    settings = _load_settings(
        config,
        source_suffix=source_suffix,
        output_suffix=output_suffix,
        include_private=include_private or None,
        log_level=log_level,
        json_logs=json_logs or None,
    )
    configure_logging(level=settings.log_level, json_format=settings.json_logs)

    try:
        written = generate_for_path(
            _checker(settings),
            input_dir,
            output_dir,
            source_suffix=settings.source_suffix,
            output_suffix=settings.output_suffix,
            skip_patterns=settings.skip_patterns,
        )
    except DocError as e:
        _report(e)
        raise typer.Exit(code=1)

    table = Table(title="Generated pages")
    table.add_column("Page", style="cyan")
    table.add_column("Size", justify="right")
    for path in written:
        table.add_row(str(path), f"{path.stat().st_size:,} bytes")

    console.print(table)
    console.print(f"[bold]{len(written)} page(s) written to {output_dir}[/bold]")


@app.command()
def inspect(
    file_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file to inspect."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False, help="YAML settings file."),  # noqa: UP007
    include_private: bool = typer.Option(False, "--include-private", help="Document _private names."),
    as_json: bool = typer.Option(False, "--json", help="Output the record as JSON."),
) -> None:
    """Show the documentation record extracted from a single file."""
    settings = _load_settings(config, include_private=include_private or None)
    configure_logging(level=settings.log_level, json_format=settings.json_logs)

    try:
        typ, meta = extract(_checker(settings), file_path, module_name=file_path.stem)
    except DocError as e:
        _report(e)
        raise typer.Exit(code=1)

    record = build_record(typ, meta)

    if as_json:
        typer.echo(json.dumps(record.to_dict(), indent=2))
        return

    for title, fields in (("Types", record.types), ("Values", record.values)):
        table = Table(title=f"{file_path.stem}: {title}")
        table.add_column("Name", style="cyan")
        table.add_column("Type")
        table.add_column("Comment")
        for field in fields:
            table.add_row(field.name, field.type, field.comment.splitlines()[0] if field.comment else "")
        console.print(table)


if __name__ == "__main__":
    app()
