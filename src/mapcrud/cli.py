"""
mapcrud command line.

Commands:
- serve: Run the API with uvicorn
- openapi: Dump the generated OpenAPI document
- shapes: List documented shapes and any fields without a documentation type
"""

from __future__ import annotations

import json
import platform
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from mapcrud._version import get_version

app = typer.Typer(
    help="mapcrud - metadata-driven CRUD API",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"mapcrud {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version information",
    ),
) -> None:
    """mapcrud CLI main callback for global options."""


# =============================================================================
# Commands
# =============================================================================


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Host to bind (env: MAPCRUD_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (env: MAPCRUD_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level (env: MAPCRUD_LOG_LEVEL)"
    ),
    log_file: bool | None = typer.Option(
        None,
        "--log-file/--no-log-file",
        help="Write JSONL logs (env: MAPCRUD_FILE_LOGGING)",
    ),
) -> None:
    """
    Run the API server.

    Flags override MAPCRUD_* environment variables.

    Examples:
        mapcrud serve                      # 127.0.0.1:3000
        mapcrud serve --port 8080 --reload
    """
    from mapcrud.runtime.server import ServerConfig, run_app

    try:
        config = ServerConfig.from_env(
            host=host,
            port=port,
            reload=reload or None,
            log_level=log_level.upper() if log_level else None,
            enable_file_logging=log_file,
        )
    except ValueError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=1)

    run_app(config)


@app.command()
def openapi(
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file (default: stdout)",
    ),
) -> None:
    """
    Dump the OpenAPI document of the API.

    Examples:
        mapcrud openapi                  # Print to stdout
        mapcrud openapi -o openapi.json  # Save to file
    """
    from mapcrud.runtime.server import ServerConfig, create_app

    document = create_app(ServerConfig(log_level="WARNING")).openapi()
    content = json.dumps(document, indent=2, default=str)

    if output:
        output.write_text(content + "\n", encoding="utf-8")
        typer.echo(f"OpenAPI document written to {output}")
    else:
        typer.echo(content)


@app.command()
def shapes(
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    List documented shapes, their fields and any untyped fields.

    Examples:
        mapcrud shapes           # One table per shape
        mapcrud shapes --json    # Machine-readable listing
    """
    from mapcrud.resources import documented_shapes
    from mapcrud.runtime.metadata import MetadataKind, get_field_metadata, get_untyped_fields

    listing: list[dict[str, Any]] = []
    for shape in documented_shapes():
        response_fields = get_field_metadata(shape, MetadataKind.RESPONSE)
        kind = MetadataKind.RESPONSE if response_fields else MetadataKind.INPUT
        fields = response_fields or get_field_metadata(shape, MetadataKind.INPUT)
        listing.append(
            {
                "shape": shape.__name__,
                "kind": kind.value,
                "fields": [
                    {
                        "name": name,
                        "type": meta.documentation.get("type"),
                        "required": meta.required,
                    }
                    for name, meta in fields.items()
                ],
                "untyped": get_untyped_fields(shape),
            }
        )

    if as_json:
        console.print_json(json.dumps(listing))
        return

    for entry in listing:
        table = Table(title=f"{entry['shape']} ({entry['kind']})")
        table.add_column("Field")
        table.add_column("Type")
        table.add_column("Required")
        for field in entry["fields"]:
            table.add_row(
                field["name"],
                field["type"] or "[yellow]untyped[/yellow]",
                "yes" if field["required"] else "[dim]no[/dim]",
            )
        console.print(table)

    untyped_total = sum(len(entry["untyped"]) for entry in listing)
    if untyped_total:
        console.print(f"[yellow]{untyped_total} field(s) without a documentation type[/yellow]")


# =============================================================================
# Main Entry Point
# =============================================================================


def main() -> None:
    app(standalone_mode=True)


if __name__ == "__main__":
    main()
