"""Command-line interface for Mahoraga.

Usage example:
    mahoraga --help
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from mahoraga import __version__
from mahoraga.config import ConfigError, ConfigStore

error_console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def print_error(message: str) -> None:
    """Print a consistently styled error message to stderr."""
    error_console.print(f"[bold red]Error:[/bold red] {message}")


app = typer.Typer(
    name="mahoraga",
    help="Score and critique LLM prompts in the terminal.",
    add_completion=False,
)


@dataclass
class Options:
    config: Path | None = None

    def store(self) -> ConfigStore:
        return ConfigStore(self.config) if self.config else ConfigStore()


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"mahoraga {__version__}")
        raise typer.Exit()


def configure_logging(log_file: Path | None) -> None:
    """Send debug logs to ``log_file``. Without one, logging stays unconfigured (the TUI owns the terminal)."""
    if log_file is None:
        return
    logging.basicConfig(filename=str(log_file), level=logging.DEBUG, format=LOG_FORMAT)


def launch(options: Options) -> None:
    """Load the configuration and run the TUI until the user quits."""
    from mahoraga.controller import Controller
    from mahoraga.loop import Scheduler
    from mahoraga.tui.app import MahoragaApp

    store = options.store()
    try:
        controller = Controller.create(store)
    except ConfigError as exc:
        print_error(f"Failed to load config: {exc}")
        raise typer.Exit(code=1) from None

    logging.getLogger(__name__).debug("Starting TUI with config %s", store.path)
    MahoragaApp(Scheduler(controller)).run()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Config file to use instead of the default location."),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Write debug logs to this file."),
    ] = None,
    version: Annotated[
        bool,
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Launch the prompt analyzer (same as ``mahoraga summon``)."""
    configure_logging(log_file)
    ctx.obj = Options(config=config)
    if ctx.invoked_subcommand is None:
        launch(ctx.obj)


@app.command(help="Launch the prompt analyzer TUI.")
def summon(ctx: typer.Context) -> None:
    launch(ctx.obj or Options())


@app.command("config-path", help="Print the configuration file path.")
def config_path_cmd(ctx: typer.Context) -> None:
    options = ctx.obj or Options()
    typer.echo(str(options.store().path))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
