# src/sluice/cli.py
"""sluice Command Line Interface.

Entry point for the sluice CLI tool.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import typer
import yaml
from pydantic import ValidationError

from sluice import __version__
from sluice.contracts.document import load_document
from sluice.contracts.errors import FlowchartError
from sluice.core.config import SluiceSettings, load_settings
from sluice.core.graph import Graph

if TYPE_CHECKING:
    from sluice.plugins.manager import PluginManager

__all__ = [
    "app",
]


def _get_plugin_manager() -> PluginManager:
    """Build a plugin manager with all built-in components registered."""
    from sluice.plugins.manager import PluginManager

    manager = PluginManager()
    manager.register_builtin_components()
    return manager


app = typer.Typer(
    name="sluice",
    help="sluice: asynchronous dataflow graphs.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"sluice version {__version__}")
        raise typer.Exit()


def _load_runtime_settings(settings_path: Path | None) -> SluiceSettings:
    if settings_path is None:
        return SluiceSettings()
    try:
        return load_settings(settings_path)
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings_path}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    settings: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to runtime settings YAML file.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """sluice: asynchronous dataflow graphs."""
    # Configure logging before any subcommand runs
    from sluice.core.logging import configure_logging

    runtime = _load_runtime_settings(settings)
    level = "DEBUG" if verbose else runtime.logging.level
    configure_logging(json_output=json_logs or runtime.logging.json_output, level=level)


def _build_graph(flowchart: Path) -> Graph:
    """Load a definition document and build its graph, exiting on failure."""
    try:
        document = load_document(flowchart)
    except FileNotFoundError:
        typer.echo(f"Error: Flowchart file not found: {flowchart}", err=True)
        raise typer.Exit(1) from None
    except yaml.YAMLError as e:
        typer.echo(f"YAML syntax error in {flowchart}: {e}", err=True)
        raise typer.Exit(1) from None
    except ValueError as e:
        # JSONDecodeError and unsupported extensions
        typer.echo(f"Error reading {flowchart}: {e}", err=True)
        raise typer.Exit(1) from None

    try:
        return Graph.from_definition(_get_plugin_manager(), document)
    except FlowchartError as e:
        typer.echo(f"Flowchart error: {e.code}" + (f" ({e.id})" if e.id is not None else ""), err=True)
        for detail in e.details:
            typer.echo(f"  - {detail.property}: {detail.value!r}", err=True)
        for message in e.errors:
            typer.echo(f"  - {message.message}", err=True)
        raise typer.Exit(1) from None


def _read_input() -> str:
    """Read input text from stdin, prompting when attached to a terminal."""
    if sys.stdin.isatty():
        text: str = typer.prompt("Please enter input text")
        return text.strip()
    return sys.stdin.read().strip()


@app.command()
def run(
    flowchart: Path = typer.Argument(
        ...,
        help="Path to flowchart definition (.json, .yaml or .yml).",
    ),
    input_text: str | None = typer.Option(
        None,
        "--input",
        "-i",
        help="Input text for the entry nodes (read from stdin if omitted).",
    ),
) -> None:
    """Build a flowchart and feed the input text to its entry nodes."""
    graph = _build_graph(flowchart.expanduser())

    text = input_text if input_text is not None else _read_input()

    try:
        asyncio.run(graph.seed(text))
    except Exception as e:
        typer.echo(f"Error running flowchart: {e}", err=True)
        raise typer.Exit(1) from None


@app.command()
def validate(
    flowchart: Path = typer.Argument(
        ...,
        help="Path to flowchart definition (.json, .yaml or .yml).",
    ),
) -> None:
    """Build a flowchart without running it and report its shape."""
    graph = _build_graph(flowchart.expanduser())

    entry_nodes = graph.entry_nodes()
    typer.echo(f"Flowchart valid: {graph.node_count} nodes, {graph.connection_count} connections")
    typer.echo(f"Entry nodes: {', '.join(entry_nodes) if entry_nodes else '(none)'}")


if __name__ == "__main__":
    app()
