"""Stache CLI Entry Point

Render mustache templates from the command line.

Usage:
    stache page.mustache                       # Render with no data
    stache page.mustache -d data.yaml          # Render with YAML data
    stache page.mustache -d a.json -d b.yaml   # a.json shadows b.yaml
    stache page.mustache -l layout.mustache    # Render inside a layout
    stache page.mustache -o page.html          # Write to file
    stache --version                           # Show version
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, List, NoReturn, Optional

import msgspec
import typer
from rich.console import Console
from rich.logging import RichHandler

from stache._version import __version__
from stache.config import load_settings
from stache.exceptions import ParseError, StacheError
from stache.parser import parse_file
from stache.renderer import Renderer

log = logging.getLogger(__name__)

console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the stache CLI.

    Log levels:
    - Normal: Only warnings/errors shown (failed lookups)
    - Verbose (-v): INFO level
    - Debug (STACHE_DEBUG=1): DEBUG level - partial resolution and more
    """
    if os.environ.get("STACHE_DEBUG"):
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=bool(os.environ.get("STACHE_DEBUG")),
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    stache_logger = logging.getLogger("stache")
    stache_logger.setLevel(level)
    stache_logger.handlers = [handler]
    stache_logger.propagate = False


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Print an error to stderr and exit."""
    typer.secho(f"Error: {message}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=exit_code)


def load_data(path: Path) -> Any:
    """Decode a YAML or JSON data file."""
    if not path.exists():
        raise StacheError(f"Data file not found: {path}")

    content = path.read_bytes()
    try:
        if path.suffix.lower() == ".json":
            return msgspec.json.decode(content)
        return msgspec.yaml.decode(content)
    except msgspec.DecodeError as exc:
        raise StacheError(f"Invalid data file {path}: {exc}") from exc


typer_app = typer.Typer(add_completion=False)


@typer_app.command()
def cli(
    template: Optional[Path] = typer.Argument(None, help="Template file to render."),
    data: Optional[List[Path]] = typer.Option(
        None,
        "-d",
        "--data",
        help="YAML or JSON data file. Repeatable; earlier files shadow later ones.",
    ),
    layout: Optional[Path] = typer.Option(
        None, "-l", "--layout", help="Layout template; receives the output as {{{content}}}."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write the result to a file instead of stdout."
    ),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Settings file (YAML)."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging."),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Render a mustache template file with YAML/JSON data."""
    if version:
        typer.echo(f"stache {__version__}")
        raise typer.Exit()

    setup_logging(verbose)

    if template is None:
        exit_with_error("Missing template file.")

    try:
        settings = load_settings(config)
        contexts = [load_data(p) for p in data or []]

        compiled = parse_file(template, settings)
        renderer = Renderer(escape=settings.escape)
        if layout is not None:
            layout_template = parse_file(layout, settings)
            result = renderer.render_in_layout(compiled, layout_template, *contexts)
        else:
            result = renderer.render(compiled, *contexts)
    except (ParseError, StacheError, FileNotFoundError) as exc:
        exit_with_error(str(exc))
    except ValueError as exc:
        # pydantic validation errors from the settings file
        exit_with_error(f"Invalid config: {exc}")

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result, encoding="utf-8")
        log.info("Wrote %s", output)
    else:
        typer.echo(result, nl=False)


def app(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    ``argv`` defaults to ``sys.argv[1:]``.
    """
    typer_app(args=argv)


if __name__ == "__main__":
    app()
