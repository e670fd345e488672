"""fzf-nav CLI main entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from fzf_nav.cli._helpers import CLIState, execute_command, get_state, output_result
from fzf_nav.cli.commands.maintenance import cleanup, show_config
from fzf_nav.cli.commands.picker import change_to_dir, change_to_file
from fzf_nav.config import NavConfig

app = typer.Typer(
    name="fzf-nav",
    help="Shell navigation history with ranked queries for fuzzy pickers",
    no_args_is_help=True,
)

LimitArgument = Annotated[
    str | None,
    typer.Argument(help="Maximum number of rows (positive integer)", show_default=False),
]


@app.callback()
def main_callback(
    ctx: typer.Context,
    db_path: Annotated[
        Path | None,
        typer.Option("--db-path", help="Path to the history database (default: ~/.fzf.db)"),
    ] = None,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable colored output")] = False,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Enable debug logging")] = False,
) -> None:
    """Record and query directory visits and file opens."""
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING, stream=sys.stderr)
    config = NavConfig.load().with_overrides(db_path=db_path, no_color=no_color)
    ctx.obj = CLIState(config=config, json_output=json_output)


@app.command("recent-dirs")
def recent_dirs(ctx: typer.Context, limit: LimitArgument = None) -> None:
    """Show recent directory visits, newest first (default: 50)."""
    state = get_state(ctx)
    output_result(execute_command(state, "recent-dirs", limit), state)


@app.command("recent-files")
def recent_files(ctx: typer.Context, limit: LimitArgument = None) -> None:
    """Show recent file opens, newest first (default: 50)."""
    state = get_state(ctx)
    output_result(execute_command(state, "recent-files", limit), state)


@app.command("popular-dirs")
def popular_dirs(ctx: typer.Context, limit: LimitArgument = None) -> None:
    """Show the most visited directories as COUNT<TAB>PATH (default: 50)."""
    state = get_state(ctx)
    output_result(execute_command(state, "popular-dirs", limit), state)


@app.command("file-stats")
def file_stats(ctx: typer.Context) -> None:
    """Show file opens per category as CATEGORY<TAB>COUNT."""
    state = get_state(ctx)
    output_result(execute_command(state, "file-stats"), state)


@app.command()
def search(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Case-insensitive substring to look for")],
    limit: Annotated[
        str | None,
        typer.Option("--limit", "-n", help="Maximum number of paths (default: 100)"),
    ] = None,
) -> None:
    """Search directory and file history for paths containing QUERY.

    Examples:
        fzf-nav search src
        fzf-nav search .PDF --limit 10
    """
    state = get_state(ctx)
    output_result(execute_command(state, "search", query, limit=limit), state)


@app.command("record-dir")
def record_dir(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Directory that was entered")],
) -> None:
    """Record a directory visit (called from a cd hook)."""
    state = get_state(ctx)
    output_result(execute_command(state, "record-dir", path), state)


@app.command("record-file")
def record_file(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File that was opened")],
    action: Annotated[
        str, typer.Option("--action", "-a", help="How the file was opened")
    ] = "open",
) -> None:
    """Record a file open (called from an opener hook)."""
    state = get_state(ctx)
    output_result(execute_command(state, "record-file", path, action=action), state)


app.command("change-to-dir")(change_to_dir)
app.command("change-to-file")(change_to_file)
app.command("cleanup")(cleanup)
app.command("config")(show_config)


@app.command()
def version() -> None:
    """Show version information."""
    from fzf_nav import __version__

    typer.echo(f"fzf-nav v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
