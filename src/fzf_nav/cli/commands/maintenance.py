"""History cleanup and configuration inspection commands."""

from __future__ import annotations

import typer

from fzf_nav.cli._helpers import fail, get_state, output_json, run_async, with_store
from fzf_nav.core.errors import NavError
from fzf_nav.storage.sqlite_store import SQLiteHistoryStore


def cleanup(ctx: typer.Context) -> None:
    """Remove history entries whose paths no longer exist on disk."""
    state = get_state(ctx)

    async def _prune(store: SQLiteHistoryStore) -> dict[str, int]:
        return await store.prune_missing()

    try:
        removed = run_async(with_store(state.config, _prune))
    except NavError as e:
        fail(e, state)

    if state.json_output:
        output_json(removed, state.config.color)
        return

    message = (
        f"Removed {removed['directory_history']} directory entries "
        f"and {removed['file_history']} file entries"
    )
    typer.secho(message, fg=typer.colors.GREEN if state.config.color else None)


def show_config(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    state = get_state(ctx)
    output_json(state.config.to_dict(), state.config.color)
