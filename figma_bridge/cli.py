"""Click CLI for Figma Bridge.

Commands:
- serve: Run the bridge server
- status: Show bridge health and recent tokens
- show: Resolve a token through a running bridge
- sweep: Remove debug records older than 24 hours
- clean: Delete everything in the export directory
"""

import asyncio
import logging
import sys
import time
from dataclasses import replace
from datetime import timedelta
from pathlib import Path
from typing import Optional, Dict, Any

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from figma_bridge import __version__
from figma_bridge.bridge import sweep_debug_records
from figma_bridge.client import BridgeClient, DEFAULT_BRIDGE_URL
from figma_bridge.config import (
    BridgeConfig,
    DEFAULT_LOG_LEVEL,
    EXPORT_DIR_ENV,
    HOST_ENV,
    LOG_LEVEL_ENV,
    PORT_ENV,
    parse_port,
)
from figma_bridge.diagnostics.logger import setup_logging
from figma_bridge.storage import ExportRepository
from figma_bridge.utils.errors import BridgeClientError, ConfigError

console = Console()
logger = logging.getLogger(__name__)


def run_async(coro):
    """Run async function in sync context."""
    return asyncio.run(coro)


def load_config(
    port: Optional[int] = None,
    host: Optional[str] = None,
    export_dir: Optional[Path] = None,
) -> BridgeConfig:
    """Environment settings with command-line overrides applied."""
    try:
        config = BridgeConfig.from_env()
        if port is not None:
            config = replace(config, port=parse_port(port))
        if host:
            config = replace(config, host=host)
        if export_dir is not None:
            config = replace(config, export_dir=Path(export_dir))
    except ConfigError as e:
        raise click.BadParameter(str(e), param_hint=e.setting)
    return config


def format_size(size: int) -> str:
    return f"{size / 1024:.1f} KB"


export_dir_option = click.option(
    "--export-dir",
    envvar=EXPORT_DIR_ENV,
    type=click.Path(file_okay=False, path_type=Path),
    help=f"Export directory (env: {EXPORT_DIR_ENV}, default: ~/.figma-exports)",
)
url_option = click.option(
    "--url",
    envvar="FIGMA_BRIDGE_URL",
    default=DEFAULT_BRIDGE_URL,
    show_default=True,
    help="Bridge base URL",
)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug logging",
)
@click.option(
    "--log-level",
    envvar=LOG_LEVEL_ENV,
    default=DEFAULT_LOG_LEVEL,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help=f"Log level (env: {LOG_LEVEL_ENV})",
)
@click.pass_context
def cli(ctx, debug: bool, log_level: str):
    """Figma Bridge - local HTTP bridge for Figma exports."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["log_level"] = "DEBUG" if debug else log_level.upper()

    setup_logging(level=ctx.obj["log_level"], debug_http=debug)


@cli.command()
@click.option("--port", envvar=PORT_ENV, type=int, help=f"Port to listen on (env: {PORT_ENV}, default: 8473)")
@click.option("--host", envvar=HOST_ENV, help=f"Bind address (env: {HOST_ENV}, default: 127.0.0.1)")
@export_dir_option
@click.pass_context
def serve(ctx, port: Optional[int], host: Optional[str], export_dir: Optional[Path]):
    """Run the bridge server."""
    from figma_bridge.web.server import run_server

    config = load_config(port=port, host=host, export_dir=export_dir)
    config = replace(config, log_level=ctx.obj["log_level"])

    base = f"http://{config.host}:{config.port}"
    console.print(
        Panel(
            f"Export dir: {config.export_dir}\n"
            f"Health:     {base}/health\n"
            f"Export:     {base}/export\n"
            f"Debug:      {base}/debug/{{TOKEN}}",
            title=f"[bold green]Figma Bridge v{__version__} on {base}[/]",
        )
    )
    run_server(config)


def _print_status(body: Dict[str, Any]) -> None:
    console.print(f"[green]Bridge status:[/] {body.get('status')}")
    console.print(f"  Port: {body.get('port')}")
    console.print(f"  Export dir: {body.get('exportDir')}")
    console.print(f"  Checked: {body.get('timestamp')}")

    logs = body.get("debugLogs") or []
    if logs:
        table = Table(title=f"Recent Tokens ({len(logs)})")
        table.add_column("Token")
        table.add_column("File", style="dim")
        table.add_column("Modified")
        table.add_column("Size", justify="right")
        for log in logs:
            table.add_row(log["token"], log["file"], log["created"], format_size(log["size"]))
        console.print(table)
    else:
        console.print("[yellow]No recent tokens found[/]")

    tokens = body.get("tokens") or []
    if tokens:
        table = Table(title=f"Token Map ({len(tokens)})")
        table.add_column("Token")
        table.add_column("Component")
        table.add_column("Type")
        table.add_column("Visuals")
        table.add_column("Children")
        table.add_column("Expires")
        for entry in tokens:
            expires = entry.get("expires", "")
            table.add_row(
                entry["token"],
                escape(str(entry.get("componentName", "Unknown"))),
                escape(str(entry.get("componentType", "component"))),
                "yes" if entry.get("hasEnhancedVisuals") else "no",
                "yes" if entry.get("hasChildren") else "no",
                f"[red]{expires} (expired)[/]" if entry.get("expired") else expires,
            )
        console.print(table)

    real_time = body.get("realTimeExport")
    if real_time is None:
        console.print("[yellow]Real-time export: unreadable[/]")
    elif not real_time.get("exists"):
        console.print("Real-time export: none")
    else:
        console.print(
            f"Real-time export: token {real_time.get('token')}, "
            f"{real_time.get('componentCount', 0)} component(s), "
            f"{format_size(real_time.get('size', 0))}"
        )


@cli.command()
@url_option
@click.option("--watch", type=float, help="Refresh every N seconds until interrupted")
def status(url: str, watch: Optional[float]):
    """Show bridge health and recent tokens."""

    async def _status() -> bool:
        async with BridgeClient(url) as client:
            try:
                body = await client.health()
            except BridgeClientError as e:
                console.print(f"[red]Bridge server not responding[/] - {escape(str(e))}")
                console.print("Start it with: figma-bridge serve")
                return False
        _print_status(body)
        return True

    if not watch:
        if not run_async(_status()):
            sys.exit(1)
        return

    try:
        while True:
            run_async(_status())
            console.rule()
            time.sleep(watch)
    except KeyboardInterrupt:
        console.print("Stopped monitoring")


@cli.command()
@click.argument("token")
@url_option
def show(token: str, url: str):
    """Resolve TOKEN through a running bridge."""

    async def _show():
        async with BridgeClient(url) as client:
            return await client.debug(token)

    try:
        found, body = run_async(_show())
    except BridgeClientError as e:
        console.print(f"[red]Bridge server not responding[/] - {escape(str(e))}")
        sys.exit(1)

    table = Table(title="Sources")
    table.add_column("Tier")
    table.add_column("Exists")
    table.add_column("Path", style="dim")
    for tier, info in (body.get("sources") or {}).items():
        exists = "[green]yes[/]" if info.get("exists") else "no"
        if info.get("error"):
            exists = f"[red]error: {escape(info['error'])}[/]"
        table.add_row(tier, exists, str(info.get("path")))

    if not found:
        console.print(f"[red]{escape(body.get('error', 'Token not found'))}[/]")
        console.print(table)
        available = body.get("availableTokens") or []
        console.print(f"Export dir: {body.get('exportDir')}")
        if available:
            console.print("Available tokens:")
            for name in available:
                console.print(f"  {name}")
        else:
            console.print("[yellow]Token map is empty[/]")
        sys.exit(1)

    console.print(f"[green]Found[/] {token} in [bold]{body.get('source')}[/]")
    console.print(table)
    data = body.get("data") or {}
    metadata = data.get("metadata")
    if metadata:
        console.print(f"  Component: {metadata.get('componentName')} ({metadata.get('componentType')})")
        console.print(f"  Children: {metadata.get('childrenCount', 0)}")
        console.print(f"  Enhanced visuals: {'yes' if metadata.get('hasEnhancedVisuals') else 'no'}")
    elif "created" in data:
        console.print(f"  Created: {data.get('created')}  Expires: {data.get('expires')}")
    elif "exportedAt" in data:
        console.print(f"  Exported at: {data.get('exportedAt')}")


@cli.command()
@export_dir_option
@click.option("--max-age-hours", type=float, default=24.0, show_default=True, help="Retention window")
def sweep(export_dir: Optional[Path], max_age_hours: float):
    """Remove debug records older than the retention window."""
    config = load_config(export_dir=export_dir)
    repository = ExportRepository(config.export_dir)

    result = sweep_debug_records(repository.debug_records, max_age=timedelta(hours=max_age_hours))
    for token in result.removed:
        console.print(f"  Cleaned: {token}")
    for error in result.errors:
        console.print(f"  [red]{escape(error)}[/]")
    console.print(f"[green]Sweep complete:[/] {result.summary}")
    if result.errors:
        sys.exit(1)


@cli.command()
@export_dir_option
@click.option("--yes", is_flag=True, help="Delete without asking")
def clean(export_dir: Optional[Path], yes: bool):
    """Delete every file in the export directory."""
    config = load_config(export_dir=export_dir)
    directory = config.export_dir

    if not directory.exists():
        console.print(f"Export directory does not exist: {directory}")
        console.print("[green]No cleanup needed[/]")
        return

    files = sorted(p for p in directory.iterdir() if p.is_file())
    if not files:
        console.print(f"[green]Export directory is already empty:[/] {directory}")
        return

    console.print(f"Found {len(files)} files in {directory}:")
    for path in files:
        console.print(f"  {path.name} ({format_size(path.stat().st_size)})")

    if not yes and not click.confirm("Delete all files?", default=False):
        console.print("Cleanup cancelled")
        return

    failed = 0
    for path in files:
        try:
            path.unlink()
            console.print(f"  Deleted: {path.name}")
        except OSError as e:
            failed += 1
            console.print(f"  [red]Failed to delete {path.name}: {escape(str(e))}[/]")

    if failed:
        raise click.ClickException(f"{failed} file(s) could not be deleted")
    console.print("[green]Storage cleanup completed[/]")


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
