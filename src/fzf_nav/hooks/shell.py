"""Shell hook writer: record directory visits and file opens.

Called from a shell ``chpwd``/``PROMPT_COMMAND`` hook after every ``cd``
and from the file-opener function after every open. Must never block or
fail the shell command that triggered it: errors are reported on stderr
and the process always exits 0.

Usage:
    fzf-nav-hook dir "$PWD"
    fzf-nav-hook file ~/docs/report.pdf --action view

Or line-oriented on stdin, one record per line:
    dir<TAB>/home/me/src
    file<TAB>edit<TAB>/home/me/notes.md
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from fzf_nav.config import NavConfig
from fzf_nav.core.errors import NavError
from fzf_nav.storage.sqlite_store import SQLiteHistoryStore

logger = logging.getLogger(__name__)

DEFAULT_ACTION = "open"


@dataclass(frozen=True)
class HookRecord:
    """One parsed hook event."""

    kind: str
    path: str
    action: str = DEFAULT_ACTION


def parse_line(line: str) -> HookRecord | None:
    """Parse a ``dir<TAB>PATH`` or ``file<TAB>ACTION<TAB>PATH`` line.

    The path is always the last field so it may itself contain tabs.
    Returns None for blank or malformed lines.
    """
    line = line.rstrip("\r\n")
    if not line.strip():
        return None
    kind, _, rest = line.partition("\t")
    if kind == "dir" and rest:
        return HookRecord(kind="dir", path=rest)
    if kind == "file":
        action, sep, path = rest.partition("\t")
        if sep and action and path:
            return HookRecord(kind="file", path=path, action=action)
    logger.warning("Ignoring malformed hook line: %r", line)
    return None


async def record_all(store: SQLiteHistoryStore, records: Iterable[HookRecord]) -> tuple[int, int]:
    """Record each event independently.

    A failed write is reported and skipped, never retried here.

    Returns:
        (recorded, failed) counts
    """
    recorded = 0
    failed = 0
    for record in records:
        try:
            if record.kind == "dir":
                await store.record_directory_visit(record.path)
            else:
                await store.record_file_open(record.path, record.action)
            recorded += 1
        except NavError as e:
            failed += 1
            logger.warning("Failed to record %s %s: %s", record.kind, record.path, e)
    return recorded, failed


async def capture(config: NavConfig, records: list[HookRecord]) -> tuple[int, int]:
    """Open the configured store and record the given events."""
    if not records:
        return 0, 0
    async with SQLiteHistoryStore.from_config(config) as store:
        return await record_all(store, records)


def main(argv: list[str] | None = None) -> None:
    """Entry point for shell hooks."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="fzf-nav-hook",
        description="Record a directory visit or file open in fzf-nav history",
    )
    parser.add_argument("kind", nargs="?", choices=("dir", "file"), help="Event type")
    parser.add_argument("path", nargs="?", help="Directory entered or file opened")
    parser.add_argument("--action", "-a", default=DEFAULT_ACTION, help="How the file was opened")
    parser.add_argument("--db-path", help="Path to the history database")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)
    else:
        logging.basicConfig(level=logging.WARNING, stream=sys.stderr)

    if args.kind and not args.path:
        print(f"[fzf-nav] {args.kind} requires a path", file=sys.stderr)  # noqa: T201
        sys.exit(0)

    if args.kind:
        records = [HookRecord(kind=args.kind, path=args.path, action=args.action)]
    else:
        records = [r for r in (parse_line(line) for line in sys.stdin) if r is not None]

    try:
        config = NavConfig.load().with_overrides(
            db_path=Path(args.db_path) if args.db_path else None
        )
        _recorded, failed = asyncio.run(capture(config, records))
    except Exception as exc:
        print(f"[fzf-nav] History not recorded: {exc}", file=sys.stderr)  # noqa: T201
        sys.exit(0)  # Never block shell navigation

    if failed:
        print(f"[fzf-nav] {failed} history event(s) not recorded", file=sys.stderr)  # noqa: T201
    sys.exit(0)


if __name__ == "__main__":
    main()
