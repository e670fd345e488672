"""Interactive directory and file selection through an external fuzzy picker.

Recent history is piped one path per line into the picker (``fzf`` by
default). The chosen path is printed on stdout so a shell function can
``cd`` into it or hand it to an opener.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Annotated

import typer

from fzf_nav.cli._helpers import CLIState, fail, get_state, run_async, with_store
from fzf_nav.core.errors import NavError, PickerError
from fzf_nav.engine.facade import parse_limit
from fzf_nav.engine.ranking import RankingEngine
from fzf_nav.storage.sqlite_store import SQLiteHistoryStore

logger = logging.getLogger(__name__)


def unique_paths(paths: Iterable[str]) -> list[str]:
    """Drop exact-duplicate paths, keeping the first occurrence.

    Paths are compared as strings; no canonicalization is applied.
    """
    seen: set[str] = set()
    result: list[str] = []
    for path in paths:
        if path not in seen:
            seen.add(path)
            result.append(path)
    return result


def run_picker(candidates: Sequence[str], command: Sequence[str]) -> str | None:
    """Pipe candidates into the picker and return the selected line.

    Returns None when the user cancels or nothing is selected.

    Raises:
        PickerError: If the picker executable cannot be started
    """
    try:
        result = subprocess.run(
            list(command),
            input="\n".join(candidates) + "\n",
            stdout=subprocess.PIPE,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise PickerError(f"Picker not found: {command[0]}") from e
    except OSError as e:
        raise PickerError(f"Could not start picker {command[0]}: {e}") from e

    if result.returncode != 0:
        logger.debug("Picker exited with status %d", result.returncode)
        return None
    selected = result.stdout.strip()
    return selected or None


def _load_candidates(state: CLIState, limit: str | None, files: bool) -> list[str]:
    count = parse_limit(limit, state.config.limits.picker)

    async def _recent(store: SQLiteHistoryStore) -> list[str]:
        engine = RankingEngine(store)
        if files:
            return [event.path for event in await engine.recent_files(count)]
        return [event.path for event in await engine.recent_dirs(count)]

    return unique_paths(run_async(with_store(state.config, _recent)))


def _pick(ctx: typer.Context, limit: str | None, files: bool) -> None:
    state = get_state(ctx)
    noun = "files" if files else "directories"
    try:
        candidates = _load_candidates(state, limit, files)
        if not candidates:
            typer.echo(f"No recent {noun} found in history", err=True)
            return
        selected = run_picker(candidates, state.config.picker_command)
    except NavError as e:
        fail(e, state)

    if selected is None:
        raise typer.Exit(1)

    target = Path(selected)
    still_valid = target.is_file() if files else target.is_dir()
    if not still_valid:
        kind = "file" if files else "directory"
        typer.echo(f"Selected {kind} no longer exists: {selected}", err=True)
        raise typer.Exit(1)

    typer.echo(selected)


def change_to_dir(
    ctx: typer.Context,
    limit: Annotated[
        str | None,
        typer.Argument(help="How many recent visits to offer", show_default=False),
    ] = None,
) -> None:
    """Pick a recently visited directory and print it.

    Examples:
        cd "$(fzf-nav change-to-dir)"
        fzf-nav change-to-dir 200
    """
    _pick(ctx, limit, files=False)


def change_to_file(
    ctx: typer.Context,
    limit: Annotated[
        str | None,
        typer.Argument(help="How many recent opens to offer", show_default=False),
    ] = None,
) -> None:
    """Pick a recently opened file and print it.

    Examples:
        xdg-open "$(fzf-nav change-to-file)"
    """
    _pick(ctx, limit, files=True)
