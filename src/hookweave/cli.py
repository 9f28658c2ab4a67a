"""hookweave CLI - typer application entry point."""

from __future__ import annotations

import atexit
import importlib
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from hookweave.config import EngineConfig, load_config
from hookweave.errors import ConfigError, HookweaveError
from hookweave.inspection import inspect_output
from hookweave.observability import close_file_logging, configure_logging, get_logger
from hookweave.story import Story

if TYPE_CHECKING:
    from hookweave.inspection import OutputReport

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="hookweave",
    help="hookweave: inspect enchanted story output.",
    no_args_is_help=True,
)
console = Console()
log = get_logger(__name__)

DEFAULT_STORY = "hookweave.demo:CellarStory"


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    log_dir: Annotated[
        Path | None,
        typer.Option(
            "--log-dir",
            help="Also write every log event to {log_dir}/events.jsonl.",
            envvar="HOOKWEAVE_LOG_DIR",
        ),
    ] = None,
) -> None:
    """hookweave: inspect enchanted story output."""
    configure_logging(verbosity=verbose, log_to_file=log_dir is not None, log_dir=log_dir)
    if log_dir is not None:
        atexit.register(close_file_logging)


def _load_story_class(target: str) -> type[Story]:
    """Resolve ``module:Class`` to a Story subclass.

    Raises:
        typer.Exit: If the target cannot be imported or is not a Story.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        console.print(f"[red]Error:[/red] Target must look like 'module:Class', got {target!r}")
        raise typer.Exit(1)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        console.print(f"[red]Error:[/red] Cannot import {module_name!r}: {e}")
        raise typer.Exit(1) from e

    story_class = getattr(module, attr, None)
    if not isinstance(story_class, type) or not issubclass(story_class, Story):
        console.print(f"[red]Error:[/red] {target!r} is not a Story subclass")
        raise typer.Exit(1)
    return story_class


def _print_report(title: str, report: OutputReport) -> None:
    table = Table(title=title, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind")
    table.add_column("Text")
    table.add_column("Hooks", style="cyan")
    table.add_column("Enchantments", style="magenta")

    for node in report.nodes:
        kind = f"[bold blue]{node.kind}[/bold blue]" if node.clickable else node.kind
        table.add_row(
            str(node.index),
            kind,
            repr(node.text),
            ", ".join(node.hooks),
            ", ".join(node.enchantments),
        )
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from hookweave import __version__

    console.print(f"hookweave v{__version__}")


@app.command()
def inspect(
    target: Annotated[
        str,
        typer.Argument(help="Story class to run, as 'module:Class'."),
    ] = DEFAULT_STORY,
    click: Annotated[
        list[str] | None,
        typer.Option(
            "--click",
            "-c",
            help="Activate the most recent link with this label (repeatable, in order).",
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the output history as JSON."),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Engine config YAML file."),
    ] = None,
) -> None:
    """Run a story, optionally click links, and show the output it produced."""
    try:
        config = load_config(config_path) if config_path else EngineConfig.from_env()
    except (ConfigError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    story = _load_story_class(target)(config)

    try:
        produced = story.begin()
        if not as_json:
            _print_report(f"{target} - start", inspect_output(produced))

        for label in click or []:
            link = story.find_link(label)
            if link is None:
                console.print(f"[red]Error:[/red] No link labelled {label!r}")
                raise typer.Exit(1)
            produced = story.activate_link(link)
            if not as_json:
                _print_report(f"click {label!r}", inspect_output(produced))
    except HookweaveError as e:
        log.error("story_failed", target=target, error=str(e))
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    if as_json:
        console.print_json(inspect_output(story.output).to_json())
