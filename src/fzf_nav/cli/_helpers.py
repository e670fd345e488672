"""Shared CLI helpers for configuration, store access, and output formatting."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable, Coroutine
from dataclasses import dataclass
from typing import Any, NoReturn, TypeVar

import typer
from rich.console import Console

from fzf_nav.config import NavConfig
from fzf_nav.core.errors import InvalidArgumentError, NavError, StoreError
from fzf_nav.core.events import CategoryCount, PathCount
from fzf_nav.engine.facade import CommandResult, QueryFacade, Row, format_row
from fzf_nav.storage.sqlite_store import SQLiteHistoryStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

EXIT_STORE_ERROR = 1
EXIT_INVALID_ARGUMENT = 2


@dataclass(frozen=True)
class CLIState:
    """Per-invocation options collected by the root callback."""

    config: NavConfig
    json_output: bool = False


def get_state(ctx: typer.Context) -> CLIState:
    """State set by the root callback, or defaults when invoked bare."""
    state = ctx.obj
    if isinstance(state, CLIState):
        return state
    return CLIState(config=NavConfig.load())


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run one async CLI operation to completion.

    Yields once after the operation so callbacks from aiosqlite's worker
    thread are drained before ``asyncio.run()`` closes the loop.
    """

    async def _drained() -> T:
        try:
            return await coro
        finally:
            await asyncio.sleep(0)

    return asyncio.run(_drained())


async def with_store(
    config: NavConfig,
    operation: Callable[[SQLiteHistoryStore], Awaitable[T]],
) -> T:
    """Open the configured store, run one operation, and close it."""
    async with SQLiteHistoryStore.from_config(config) as store:
        return await operation(store)


def execute_command(
    state: CLIState,
    command: str,
    argument: str | None = None,
    **kwargs: Any,
) -> CommandResult:
    """Run a facade command, exiting with a message on failure."""

    async def _run(store: SQLiteHistoryStore) -> CommandResult:
        facade = QueryFacade(store, state.config)
        return await facade.execute(command, argument, **kwargs)

    try:
        return run_async(with_store(state.config, _run))
    except NavError as e:
        fail(e, state)


def fail(error: NavError, state: CLIState) -> NoReturn:
    """Report an error on stderr and exit non-zero."""
    color = state.config.color
    typer.secho(f"Error: {error}", err=True, fg=typer.colors.RED if color else None)
    if isinstance(error, StoreError):
        typer.secho(
            f"Database: {error.db_path or state.config.db_path}",
            err=True,
            fg=typer.colors.BRIGHT_BLACK if color else None,
        )
        raise typer.Exit(EXIT_STORE_ERROR)
    if isinstance(error, InvalidArgumentError):
        raise typer.Exit(EXIT_INVALID_ARGUMENT)
    raise typer.Exit(EXIT_STORE_ERROR)


def style_row(row: Row, color: bool) -> str:
    """Format a row as one line, coloring only the non-path column."""
    if not color:
        return format_row(row)
    if isinstance(row, PathCount):
        return f"{typer.style(str(row.count), fg=typer.colors.CYAN)}\t{row.path}"
    if isinstance(row, CategoryCount):
        label = typer.style(row.category.value, fg=typer.colors.GREEN)
        return f"{label}\t{typer.style(str(row.count), fg=typer.colors.CYAN)}"
    return format_row(row)


def output_json(data: Any, color: bool) -> None:
    """Pretty JSON, highlighted with rich when writing to a terminal."""
    text = json.dumps(data, indent=2, default=str)
    if color and sys.stdout.isatty():
        Console().print_json(text)
    else:
        typer.echo(text)


def output_result(result: CommandResult, state: CLIState) -> None:
    """Write a command result as picker lines or as JSON."""
    if state.json_output:
        output_json(result.to_data(), state.config.color)
        return
    if result.spec.writes:
        return
    for row in result.rows:
        typer.echo(style_row(row, state.config.color))
