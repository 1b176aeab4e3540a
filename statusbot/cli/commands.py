"""CLI commands for Status Bot."""

import asyncio
import sys

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from statusbot import __logo__, __version__

app = typer.Typer(
    name="statusbot",
    help=f"{__logo__} Status Bot - Virtual RC desk statuses from Zulip",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} Status Bot v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True
    ),
):
    """Status Bot - Virtual RC desk statuses from Zulip."""
    pass


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def _load_config_or_exit(required_prefix: str = ""):
    """Load config, printing missing settings and exiting 1 on error."""
    from statusbot.config.loader import load_config
    from statusbot.errors import ConfigError

    config = load_config(validate=False)
    missing = [name for name in config.missing_required() if name.startswith(required_prefix)]
    if missing:
        console.print(f"[red]Error: {ConfigError(missing)}[/red]")
        raise typer.Exit(1)
    return config


# ============================================================================
# Server
# ============================================================================


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int = typer.Option(None, "--port", "-p", help="Port (default from config)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Start the Zulip webhook server."""
    import uvicorn

    from statusbot.server.main import create_app

    config = _load_config_or_exit()
    _configure_logging(verbose)

    host = host or config.server.host
    port = port or config.server.port

    console.print(f"{__logo__} Starting Status Bot on {host}:{port}...")
    console.print(f"[green]✓[/green] Virtual RC: {config.recurse.site}")
    console.print(f"[green]✓[/green] Zulip: {config.zulip.site}")
    if not config.zulip.maintainers:
        console.print("[yellow]Warning: No maintainers configured, feedback is disabled[/yellow]")

    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_level="debug" if verbose else "info",
    )


# ============================================================================
# Debugging
# ============================================================================


@app.command()
def parse(
    line: str = typer.Argument(..., help="Message text, e.g. 'status :crab: busy'"),
):
    """Parse a message the way the bot would, without contacting anything."""
    from statusbot.commands.parser import SetStatus, parse_command

    command = parse_command(line)
    console.print(f"[cyan]{type(command).__name__}[/cyan]")

    if isinstance(command, SetStatus):
        status = command.status
        console.print(f"  emoji:      {status.emoji!r}")
        console.print(f"  text:       {status.text!r}")
        console.print(f"  expires_at: {status.expires_at.isoformat() if status.expires_at else None}")
    else:
        console.print(f"  {command!r}")


@app.command()
def normalize(
    name: str = typer.Argument(..., help="Zulip display name, e.g. 'Ada Lovelace (she/her) (W1'25)'"),
):
    """Show how a Zulip display name is matched against Virtual RC."""
    from statusbot.directory.names import normalize_username

    console.print(repr(normalize_username(name)))


@app.command()
def desks(
    owner: str = typer.Option(None, "--owner", "-o", help="Only show desks whose owner contains this"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Fetch the desk directory once and list owned desks."""
    from statusbot.errors import DirectoryFetchError
    from statusbot.directory.store import IdentityDirectory
    from statusbot.rc.client import RecurseClient

    config = _load_config_or_exit("STATUSBOT_RECURSE__")
    _configure_logging(verbose)

    async def fetch():
        rc = RecurseClient(
            site=config.recurse.site,
            app_id=config.recurse.app_id.get_secret_value(),
            app_secret=config.recurse.app_secret.get_secret_value(),
            bot_id=config.recurse.bot_id,
            timeout=config.request_timeout,
        )
        try:
            directory = IdentityDirectory(rc)
            await directory.refresh()
            return await directory.entries()
        finally:
            await rc.close()

    try:
        entries = asyncio.run(fetch())
    except DirectoryFetchError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if owner:
        entries = {name: loc for name, loc in entries.items() if owner.lower() in name.lower()}

    table = Table(title=f"Virtual RC desks ({len(entries)})")
    table.add_column("Owner", style="cyan")
    table.add_column("Desk", justify="right")
    table.add_column("Position")

    for name, location in sorted(entries.items()):
        table.add_row(name, str(location.desk_id), f"({location.pos.x}, {location.pos.y})")

    console.print(table)


if __name__ == "__main__":
    app()
