#!/usr/bin/env python3
"""Run the proximity engine from the command line.

Prints one line per tick. With ``--store`` the caches (observer location,
last position, last alert time) persist across runs in a JSON file.

Examples::

    python scripts/watch.py --iterations 3
    python scripts/watch.py --profile background --store ~/.cache/isswatch.json
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from isswatch import EngineSnapshot, JsonFileStore, MemoryStore, ProximityEngine, WatchConfig  # noqa: E402
from isswatch.exceptions import IssWatchConfigError  # noqa: E402


def _print_snapshot(snapshot: EngineSnapshot) -> None:
    observer = snapshot.observer.format() if snapshot.observer else "unknown"
    obj = snapshot.object.format() if snapshot.object else "—"
    alert = "  ALERT" if snapshot.alert and snapshot.alert.should_alert else ""
    print(f"you={observer}  iss={obj}  {snapshot.describe()}  [{snapshot.connection.value}]{alert}", flush=True)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Watch for ISS passes near your location.")
    parser.add_argument("--profile", choices=("foreground", "background"), default=None)
    parser.add_argument("--interval", type=float, default=None, help="Seconds between ticks")
    parser.add_argument("--iterations", type=int, default=None, help="Stop after N ticks")
    parser.add_argument("--store", type=Path, default=None, help="JSON file for persistent cache")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


async def _main(args: argparse.Namespace) -> int:
    try:
        config = WatchConfig.from_env(profile=args.profile)
    except IssWatchConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    store = JsonFileStore(args.store.expanduser()) if args.store else MemoryStore()
    async with ProximityEngine(config, store=store, on_snapshot=_print_snapshot) as engine:
        await engine.run(args.interval, iterations=args.iterations)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_main(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
