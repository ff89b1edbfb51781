"""Entry point for the sessionline CLI."""
from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from . import __version__
from .config import ConfigError, SessionLineSettings, load_config
from .runner import CommandError, run_command, run_demo
from .session import Color, SessionController
from .tui.terminal import Terminal, create_console

app = typer.Typer(add_completion=False, rich_markup_mode="rich")
config_app = typer.Typer(help="Inspect the active configuration.")
app.add_typer(config_app, name="config")


def _settings(ctx: typer.Context) -> SessionLineSettings:
    root = ctx.find_root()
    if isinstance(root.obj, SessionLineSettings):
        return root.obj
    return load_config().settings


def _build_controller(settings: SessionLineSettings, console: Console) -> SessionController:
    return SessionController(
        Terminal(console, debug=settings.debug),
        debug=settings.debug,
        interval=settings.interval,
        entity=settings.entity,
    )


def _serialize_settings(settings: SessionLineSettings) -> str:
    return json.dumps(settings.to_dict(), indent=2, ensure_ascii=False)


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file to use.",
    ),
    debug: Optional[bool] = typer.Option(
        None,
        "--debug/--no-debug",
        help="Log each status as its own line instead of animating.",
    ),
    color: Optional[bool] = typer.Option(
        None,
        "--color/--no-color",
        help="Force colored output on or off.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Print the configuration and exit.",
    ),
) -> None:
    """Show an animated status line while long-running work executes."""
    try:
        loaded = load_config(config_path)
    except ConfigError as exc:
        Console(stderr=True).print(f"[bold red]configuration error:[/] {exc}")
        raise typer.Exit(2)

    settings = loaded.settings
    ctx.meta["config_source"] = loaded.source
    updates: dict[str, object] = {}
    if debug is not None:
        updates["debug"] = debug
    if color is not None:
        updates["use_color"] = color
    if updates:
        settings = settings.model_copy(update=updates)
    ctx.obj = settings

    if dry_run:
        console = create_console(settings.use_color)
        console.print(Panel(_serialize_settings(settings), title="configuration"))
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def run(
    ctx: typer.Context,
    command: List[str] = typer.Argument(..., help="Command to run, after `--`."),
    entity: Optional[str] = typer.Option(None, "--entity", "-e", help="Label shown before the status."),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Fixed status text instead of command output."),
    timer: Optional[bool] = typer.Option(None, "--timer/--no-timer", help="Show elapsed seconds."),
) -> None:
    """Run a command under a status line and exit with its exit code."""
    settings = _settings(ctx)
    console = create_console(settings.use_color)
    controller = _build_controller(settings, console)
    if entity:
        controller.update_status(entity=entity)

    try:
        result = asyncio.run(
            run_command(
                command,
                controller,
                status=status,
                timer=settings.timer if timer is None else timer,
            )
        )
    except CommandError:
        raise typer.Exit(127)

    if not result.succeeded:
        for line in result.output:
            controller.terminal.write_line(line, Color.GREY)
    raise typer.Exit(result.returncode)


@app.command()
def demo(
    ctx: typer.Context,
    steps: int = typer.Option(5, "--steps", min=0, max=5, help="Number of simulated steps."),
    delay: float = typer.Option(1.0, "--delay", min=0.0, help="Seconds per step."),
    fail: bool = typer.Option(False, "--fail", help="End the demo with an error."),
) -> None:
    """Simulate a deployment to preview the status line."""
    settings = _settings(ctx)
    console = create_console(settings.use_color)
    controller = _build_controller(settings, console)
    controller.update_status(entity="Demo")
    try:
        asyncio.run(run_demo(controller, steps=steps, delay=delay, timer=settings.timer, fail=fail))
    except RuntimeError:
        raise typer.Exit(1)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Print the resolved configuration and where it came from."""
    settings = _settings(ctx)
    console = create_console(settings.use_color)
    loaded_from = ctx.meta.get("config_source")
    source = str(loaded_from) if loaded_from is not None else "defaults"
    console.print(Panel(_serialize_settings(settings), title="configuration"))
    console.print(f"source: {source}", markup=False)


@app.command()
def version() -> None:
    """Print the installed version."""
    typer.echo(__version__)


def entrypoint() -> None:
    """Typer entrypoint for `sessionline`."""
    app()


if __name__ == "__main__":  # pragma: no cover
    entrypoint()
