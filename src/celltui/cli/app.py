"""Typer CLI application."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table


def create_app() -> typer.Typer:
    """Create and configure the CLI application."""
    app = typer.Typer(
        name="celltui",
        help="Terminal UI toolkit: demo application and diagnostics.",
        no_args_is_help=True,
        rich_markup_mode="rich",
    )
    console = Console()

    @app.callback()
    def main_options(
        log_file: Annotated[Optional[Path], typer.Option("--log-file", help="Write debug logs to this file")] = None,
        log_level: Annotated[str, typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")] = "INFO",
    ) -> None:
        """Options shared by every command."""
        if log_file is not None:
            from celltui.log import configure_logging
            try:
                configure_logging(log_file, log_level)
            except ValueError as exc:
                raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

    @app.command()
    def demo(
        mouse: Annotated[bool, typer.Option("--mouse/--no-mouse", help="Enable mouse reporting")] = True,
        fps: Annotated[Optional[int], typer.Option("--fps", min=0, help="Tick rate (0 disables ticks)")] = None,
    ) -> None:
        """Run the interactive layout showcase."""
        from celltui.cli.demo import DemoApp
        _run(console, DemoApp(), mouse=mouse, fps=fps)

    @app.command()
    def keys(
        mouse: Annotated[bool, typer.Option("--mouse/--no-mouse", help="Report mouse events too")] = True,
    ) -> None:
        """Show decoded input events until q or Ctrl+C."""
        from celltui.cli.demo import KeysApp
        _run(console, KeysApp(), mouse=mouse, fps=0)

    @app.command()
    def info() -> None:
        """Show terminal size and the effective runtime configuration."""
        from celltui.app.config import RuntimeConfig
        from celltui.errors import NotATerminalError
        from celltui.terminal.device import Terminal

        table = Table(title="celltui", show_header=True, header_style="bold cyan")
        table.add_column("Setting")
        table.add_column("Value")

        try:
            term = Terminal()
        except NotATerminalError as exc:
            table.add_row("terminal", f"[yellow]{exc}[/]")
        else:
            size = term.size()
            table.add_row("terminal size", f"{size.width}x{size.height}")

        try:
            config = RuntimeConfig.from_env()
        except ValueError as exc:
            console.print(f"[red]{exc}[/]")
            raise typer.Exit(1)
        for name, value in vars(config).items():
            table.add_row(name, str(value))
        console.print(table)

    return app


def _run(console: Console, application: object, mouse: bool, fps: Optional[int]) -> None:
    from dataclasses import replace

    from celltui.app.config import RuntimeConfig
    from celltui.app.runtime import Runtime
    from celltui.errors import NotATerminalError

    try:
        config = RuntimeConfig.from_env()
    except ValueError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(1)
    config = replace(config, mouse=mouse)
    if fps is not None:
        config = replace(config, fps=fps)

    try:
        Runtime(application, config=config).run()
    except NotATerminalError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(1)
