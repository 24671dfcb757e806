"""CLI commands for mediaproxy."""

from __future__ import annotations

import click
from fastapi.routing import APIRoute
from rich.console import Console
from rich.table import Table

from mediaproxy.config import Settings
from mediaproxy.providers.registry import ProviderRegistry
from mediaproxy.server import configure_logging, create_app, run

console = Console()


@click.group()
@click.option("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
@click.pass_context
def main(ctx: click.Context, log_level: str | None) -> None:
    """mediaproxy - Media search and generation API proxy."""
    ctx.ensure_object(dict)
    settings = Settings()
    if log_level:
        settings.log_level = log_level
    ctx.obj["settings"] = settings


@main.command()
@click.option("--host", default=None, help="Bind address (default: HOST)")
@click.option("--port", "-p", type=int, default=None, help="Port (default: PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None, reload: bool) -> None:
    """Run the HTTP server."""
    settings: Settings = ctx.obj["settings"]
    if host:
        settings.host = host
    if port:
        settings.port = port

    configure_logging(settings.log_level, console=console)
    console.print(f"[bold]Media proxy[/bold] on http://{settings.host}:{settings.port}")
    console.print(f"[dim]Health check: http://{settings.host}:{settings.port}/api/health[/dim]")
    run(settings, reload=reload)


@main.command()
@click.pass_context
def providers(ctx: click.Context) -> None:
    """List search providers and whether their keys are configured."""
    settings: Settings = ctx.obj["settings"]
    registry = ProviderRegistry(settings)

    table = Table(title="Search Providers")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Route", style="dim")
    table.add_column("Kind")
    table.add_column("Key")

    for info in registry.describe():
        if info["keyEnv"] is None:
            key_status = "[dim]not required[/dim]"
        elif info["configured"]:
            key_status = f"[green]{info['keyEnv']} set[/green]"
        else:
            key_status = f"[red]{info['keyEnv']} missing[/red]"
        table.add_row(info["id"], info["name"], f"/api{info['route']}", info["kind"], key_status)

    console.print(table)


@main.command()
@click.pass_context
def routes(ctx: click.Context) -> None:
    """List every HTTP route."""
    app = create_app(ctx.obj["settings"])

    table = Table(title="Routes")
    table.add_column("Method", style="cyan")
    table.add_column("Path")
    table.add_column("Description", style="dim")

    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue
        summary = (route.endpoint.__doc__ or "").strip().splitlines()
        for method in sorted(route.methods):
            table.add_row(method, route.path, summary[0] if summary else "")

    console.print(table)


if __name__ == "__main__":
    main()
