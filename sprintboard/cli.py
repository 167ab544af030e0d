"""CLI entry point for board maintenance against a snapshot directory.

Usage:
  python -m sprintboard status   [--data-dir DIR] [--config FILE]
  python -m sprintboard tick     [--data-dir DIR] [--now ISO] [--watch]
  python -m sprintboard migrate  [--data-dir DIR]
  python -m sprintboard velocity [--data-dir DIR]
  python -m sprintboard new-sprint NAME [--start ISO]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

from sprintboard.workflow.exceptions import ValidationError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sprint board CLI")
    parser.add_argument("--data-dir", default=".board", help="Snapshot directory")
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("status", help="Show board summary")

    tick_parser = subparsers.add_parser("tick", help="Advance sprint states")
    tick_parser.add_argument("--now", default=None, help="ISO timestamp to use as now")
    tick_parser.add_argument(
        "--watch", action="store_true", help="Keep ticking at the configured interval"
    )

    subparsers.add_parser("migrate", help="Run the one-time work item migration")
    subparsers.add_parser("velocity", help="Show points completed per sprint")

    sprint_parser = subparsers.add_parser("new-sprint", help="Plan a sprint of the default length")
    sprint_parser.add_argument("name", help="Sprint name")
    sprint_parser.add_argument("--start", default=None, help="ISO start timestamp")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "status": _status_command,
        "tick": _tick_command,
        "migrate": _migrate_command,
        "velocity": _velocity_command,
        "new-sprint": _new_sprint_command,
    }
    try:
        asyncio.run(commands[args.command](args))
    except (KeyError, ValueError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _open(args):
    from sprintboard.adapters.snapshot import SnapshotAdapter
    from sprintboard.config import load_config
    from sprintboard.storage.snapshot import SnapshotStore

    config = load_config(Path(args.config) if args.config else None)
    store = SnapshotStore(
        Path(args.data_dir),
        namespace=config.storage_namespace,
        version=config.storage_version,
    )
    return SnapshotAdapter(store), config


async def _status_command(args) -> None:
    from sprintboard.analytics import assignee_workload

    backend, config = _open(args)
    summary = await backend.get_status_summary()
    print(f"Items: {summary['total_items']} ({summary['progress_pct']}% done)")
    for status, count in sorted(summary["items_by_status"].items()):
        print(f"  {status}: {count}")
    print(f"Sprints: {summary['total_sprints']}")
    for state, count in sorted(summary["sprints_by_state"].items()):
        print(f"  {state}: {count}")
    for epic in await backend.list_epics():
        if epic.epic.status.value == "deleted":
            continue
        print(
            f"  [{epic.ice_score:>5}] {epic.epic.name}: "
            f"{epic.percent_done_weighted:.0f}% "
            f"({epic.open_items_count}/{epic.total_items_count} open)"
        )

    items = await backend.list_work_items()
    users = list({u.id: u for item in items for u in item.assignees}.values())
    for row in assignee_workload(items, users, config.wip_limit):
        if row.wip_breached:
            print(f"WIP limit exceeded: {row.assignee.name} ({row.in_progress} in progress)")


async def _tick_command(args) -> None:
    backend, config = _open(args)
    now = datetime.fromisoformat(args.now) if args.now else None
    while True:
        changed = await backend.tick(now)
        for sprint in changed:
            print(f"Sprint {sprint.number} ({sprint.name}): {sprint.state.value}")
        if not args.watch:
            if not changed:
                print("No sprint changed state.")
            return
        await asyncio.sleep(config.tick_interval_seconds)


async def _migrate_command(args) -> None:
    backend, _ = _open(args)
    if backend.migrated:
        print(f"Migrated {len(backend.work_items)} work item(s).")
    else:
        print("Nothing to migrate.")


async def _velocity_command(args) -> None:
    from sprintboard.analytics import velocity

    backend, _ = _open(args)
    sprints = [s for s in await backend.list_sprints() if s.state.value != "deleted"]
    report = velocity(await backend.list_work_items(), sprints)
    for label, points in zip(report.labels, report.data):
        print(f"  {label}: {points:g}")
    print(f"Average: {report.average:.1f}")


async def _new_sprint_command(args) -> None:
    from dataclasses import replace

    from sprintboard.config import make_sprint_draft

    backend, config = _open(args)
    start = datetime.fromisoformat(args.start) if args.start else None
    draft = replace(make_sprint_draft(config, now=start), name=args.name)
    sprint = await backend.save_sprint(draft)
    print(
        f"Sprint {sprint.number} ({sprint.name}): {sprint.state.value} "
        f"{sprint.start_at:%Y-%m-%d} to {sprint.end_at:%Y-%m-%d}"
    )
