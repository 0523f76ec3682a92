"""CLI entry point for sandboxfs."""

import asyncio
import logging

import typer
from rich.table import Table

from sandboxfs import __version__
from sandboxfs.cli.constants import ExitCodes
from sandboxfs.cli.utils import get_console, parse_tool_arguments, setup_logging
from sandboxfs.config import ServerConfig
from sandboxfs.exceptions import ConfigurationError, ToolExecutionError, ToolNotFoundError
from sandboxfs.fs.operations import supports_permissions
from sandboxfs.server import build_registry, run_server

app = typer.Typer(help="sandboxfs - File management server confined to one root directory")

console = get_console()
err_console = get_console(stderr=True)

logger = logging.getLogger(__name__)


def _load_config(ctx: typer.Context) -> ServerConfig:
    """Load and validate configuration, exiting on error."""
    root = (ctx.obj or {}).get("root")
    try:
        config = ServerConfig.from_env(root=root)
        config.validate()
    except ConfigurationError as e:
        err_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(ExitCodes.GENERAL_ERROR) from e
    setup_logging(config.log_level)
    return config


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    root: str = typer.Option(
        None, "--root", "-r", help="Sandbox root (overrides SANDBOXFS_ROOT)"
    ),
    check: bool = typer.Option(False, "--check", help="Show configuration and exit"),
    version_flag: bool = typer.Option(False, "--version", help="Show version"),
) -> None:
    """sandboxfs - File management server confined to one root directory.

    \b
    Examples:
        sandboxfs                                   # Serve over stdio (same as 'serve')
        sandboxfs --root ~/projects serve           # Serve a specific root
        sandboxfs --check                           # Show configuration
        sandboxfs tools                             # List available tools
        sandboxfs call find_files -a pattern='*.py'
        sandboxfs call read_file '{"path": "api/README.md"}'
    """
    ctx.obj = {"root": root}

    if version_flag:
        console.print(f"sandboxfs version {__version__}")
        raise typer.Exit()

    if check:
        config = _load_config(ctx)
        show_configuration(config)
        raise typer.Exit()

    # If a subcommand was invoked (e.g., 'sandboxfs tools'), let it run
    if ctx.invoked_subcommand is not None:
        return

    _serve(_load_config(ctx))


@app.command()
def serve(ctx: typer.Context) -> None:
    """Serve the file tools over MCP stdio."""
    _serve(_load_config(ctx))


def _serve(config: ServerConfig) -> None:
    try:
        run_server(config)
    except KeyboardInterrupt:
        # stdout belongs to the transport
        err_console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(ExitCodes.INTERRUPTED) from None


@app.command()
def tools(ctx: typer.Context) -> None:
    """List the available tools."""
    config = _load_config(ctx)
    registry = build_registry(config)

    table = Table(title="Tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Arguments")
    table.add_column("Description")
    for spec in registry.list_tools():
        schema = spec.input_schema()
        required = set(schema.get("required", []))
        arguments = ", ".join(
            name if name in required else f"[{name}]" for name in schema.get("properties", {})
        )
        table.add_row(spec.name, arguments, spec.description)
    console.print(table)


@app.command()
def call(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Tool name, e.g. read_file"),
    arguments_json: str = typer.Argument(None, help="Arguments as a JSON object"),
    arg: list[str] = typer.Option(None, "--arg", "-a", help="Argument as key=value (repeatable)"),
) -> None:
    """Invoke one tool and print its result."""
    try:
        arguments = parse_tool_arguments(arguments_json, arg)
    except ValueError as e:
        err_console.print(f"[red]Invalid arguments:[/red] {e}")
        raise typer.Exit(ExitCodes.USAGE_ERROR) from e

    config = _load_config(ctx)
    registry = build_registry(config)
    try:
        text = asyncio.run(registry.call_text(name, arguments))
    except ToolNotFoundError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(ExitCodes.USAGE_ERROR) from e
    except ToolExecutionError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(ExitCodes.GENERAL_ERROR) from e

    # Raw output so file contents are not reflowed
    typer.echo(text)


def show_configuration(config: ServerConfig) -> None:
    """Show current configuration."""
    console.print(f"[bold]sandboxfs[/bold] {__version__}")
    console.print(f"  Root:               {config.root}")
    console.print(f"  Server name:        {config.server_name}")
    console.print(f"  Log level:          {config.log_level}")
    console.print(f"  Chunk size:         {config.chunk_size} bytes")
    permissions = "[green]yes[/green]" if supports_permissions() else "[yellow]no[/yellow]"
    console.print(f"  change_permissions: {permissions}")
