"""CLI entry point using Typer."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated

# Suppress verbose logging from libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("anthropic").setLevel(logging.WARNING)

import typer
from rich.console import Console
from rich.table import Table

from termfolio import __version__
from termfolio.config import Config, ConfigError, apply_overrides, load_config, save_config_toml
from termfolio.engine.catalog import CATALOG
from termfolio.engine.classifier import InputMode
from termfolio.engine.output import CommandOutput
from termfolio.engine.session import SessionController, create_session
from termfolio.ui.theme import RICH_THEME

app = typer.Typer(
    name="termfolio",
    help="A portfolio you explore like a terminal.",
    no_args_is_help=False,
)
console = Console(theme=RICH_THEME)

# Subcommand groups
config_app = typer.Typer(help="Inspect and write configuration")
app.add_typer(config_app, name="config")


def version_callback(value: bool) -> None:
    if value:
        console.print(f"termfolio version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            "-d",
            help="Enable debug logging to file",
        ),
    ] = False,
    debug_filter: Annotated[
        str | None,
        typer.Option(
            "--debug-filter",
            help="Filter debug logs: 'ai,api' or '!commands'",
        ),
    ] = None,
    api_url: Annotated[
        str | None,
        typer.Option("--api-url", help="Base URL of the portfolio API"),
    ] = None,
    data_file: Annotated[
        Path | None,
        typer.Option("--data-file", help="Read portfolio data from a local JSON file"),
    ] = None,
    backend: Annotated[
        str | None,
        typer.Option("--backend", "-b", help="AI backend: remote or anthropic"),
    ] = None,
    no_welcome: Annotated[
        bool,
        typer.Option(
            "--no-welcome",
            help="Skip the welcome banner",
        ),
    ] = False,
) -> None:
    """
    termfolio - a portfolio you explore like a terminal.

    Run without arguments to start interactive REPL.
    """
    # Store settings in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["debug_filter"] = debug_filter
    ctx.obj["overrides"] = {
        "api_url": api_url,
        "data_file": data_file,
        "ai_backend": backend,
    }

    if ctx.invoked_subcommand is None:
        # No subcommand - start REPL
        config = _load(ctx)

        from termfolio.ui.repl import run_repl

        run_repl(config, skip_welcome=no_welcome)


def _load(ctx: typer.Context) -> Config:
    """Load config, apply command-line overrides and set up debug logging."""
    obj = ctx.obj or {}

    try:
        config = apply_overrides(load_config(), **obj.get("overrides", {}))
    except ConfigError as e:
        console.print(f"[error]Configuration error:[/error] {e}")
        raise typer.Exit(1)

    # Set up debug logging if enabled via --debug flag
    if obj.get("debug"):
        from termfolio.logging import setup_logging

        log_file = setup_logging(config.logs_dir, debug=True, debug_filter=obj.get("debug_filter"))
        console.print(f"[muted]Debug logging to: {log_file}[/muted]")

    return config


async def _one_shot(controller: SessionController, source, text: str, mode: InputMode | None):
    if not await controller.load_data(source):
        console.print("[error]✗ Could not load portfolio data.[/error]")
    entry = controller.submit_text(text, mode)
    await controller.wait_for_ai()
    return entry


def _run_one_shot(ctx: typer.Context, text: str, mode: InputMode | None = None) -> None:
    from termfolio.ui.render import render_payload

    config = _load(ctx)
    controller, source = create_session(config)

    entry = asyncio.run(_one_shot(controller, source, text, mode))
    if entry is None:
        return

    console.print(render_payload(entry.payload, entry.text))

    if isinstance(entry.payload, CommandOutput) and entry.payload.open_url:
        console.print(f"[muted]↗ Opened {entry.payload.open_url}[/muted]")


@app.command("exec", context_settings={"ignore_unknown_options": True})
def exec_command(
    ctx: typer.Context,
    command: Annotated[
        list[str],
        typer.Argument(help="Command to run, e.g. 'projects --ls'"),
    ],
) -> None:
    """Run a single terminal command and print its output."""
    _run_one_shot(ctx, " ".join(command), InputMode.CLI)


@app.command(context_settings={"ignore_unknown_options": True})
def ask(
    ctx: typer.Context,
    question: Annotated[
        list[str],
        typer.Argument(help="Question for the AI assistant"),
    ],
) -> None:
    """Ask the AI assistant a question about the portfolio."""
    _run_one_shot(ctx, " ".join(question), InputMode.AI)


@app.command()
def catalog() -> None:
    """List every suggested command."""
    table = Table(title="Commands", show_header=True)
    table.add_column("", width=2)
    table.add_column("Command", style="command")
    table.add_column("Description", style="muted")

    for entry in CATALOG:
        table.add_row(entry.icon, entry.command, entry.description)

    console.print(table)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    config = _load(ctx)

    table = Table(title="Configuration", show_header=True)
    table.add_column("Setting", style="label")
    table.add_column("Value")

    table.add_row("api_url", config.api_url)
    table.add_row("data_file", str(config.data_file) if config.data_file else "-")
    table.add_row("ai_backend", config.ai_backend)
    table.add_row("anthropic_api_key", "set" if config.anthropic_api_key else "-")
    table.add_row("model", config.model)
    table.add_row("ai_daily_limit", str(config.ai_daily_limit))
    table.add_row("request_timeout", f"{config.request_timeout:g}s")
    table.add_row("show_welcome", str(config.show_welcome))
    table.add_row("data_dir", str(config.data_dir))
    for name, key in config.keybindings.items():
        table.add_row(f"keybindings.{name}", key)

    console.print(table)


@config_app.command("init")
def config_init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config.toml"),
    ] = False,
) -> None:
    """Write the effective configuration to config.toml."""
    config = _load(ctx)

    if config.config_path.exists() and not force:
        console.print(f"[warning]{config.config_path} already exists.[/warning] Use --force to overwrite.")
        raise typer.Exit(1)

    path = save_config_toml(config)
    console.print(f"[success]Configuration saved to {path}[/success]")


if __name__ == "__main__":
    app()
