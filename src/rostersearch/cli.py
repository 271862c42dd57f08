"""CLI entry point for RosterSearch.

Operates on a YAML roster file holding ``courses`` and ``students`` lists,
which stands in for the persistent store.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

import yaml

from rostersearch.adapters.base.exceptions import SearchServiceError
from rostersearch.config.settings import Settings
from rostersearch.core.manager import StudentSearchManager
from rostersearch.models.query import SearchFilters
from rostersearch.models.student import InstructorPrivilege
from rostersearch.observability.logging import setup_logging
from rostersearch.store import InMemoryStudentStore


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = _load_settings(args)
    setup_logging(settings.observability)

    try:
        exit_code = asyncio.run(args.handler(args, settings))
    except SearchServiceError as e:
        print(f"Error: search service failed: {e}", file=sys.stderr)
        sys.exit(2)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rostersearch",
        description="RosterSearch — Visibility-aware student search",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--backend",
        type=str,
        choices=["solr", "memory"],
        default=None,
        help="Index backend (overrides config)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"RosterSearch {_get_version()}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    index_cmd = sub.add_parser("index", help="Index every student in a roster file")
    index_cmd.add_argument("roster", type=Path, help="YAML roster file")
    index_cmd.set_defaults(handler=_cmd_index)

    search_cmd = sub.add_parser("search", help="Search students, one JSON record per line")
    search_cmd.add_argument("roster", type=Path, help="YAML roster file")
    search_cmd.add_argument("query", type=str, help="Free-text query, or REGISTERED / UNREGISTERED")
    search_cmd.add_argument(
        "--instructors",
        type=Path,
        default=None,
        help="YAML list of instructor privileges; omit for an unrestricted search",
    )
    search_cmd.add_argument("--course", default=None, help="Course id filter")
    search_cmd.add_argument("--section", default=None, help="Section filter")
    search_cmd.add_argument("--team", default=None, help="Team filter")
    search_cmd.add_argument("--registration", default=None, help="REGISTERED or UNREGISTERED")
    search_cmd.set_defaults(handler=_cmd_search)

    health_cmd = sub.add_parser("health", help="Check the index backend")
    health_cmd.set_defaults(handler=_cmd_health)

    reset_cmd = sub.add_parser("reset", help="Delete every student document (needs index.reset_allowed)")
    reset_cmd.set_defaults(handler=_cmd_reset)

    return parser


def _load_settings(args: argparse.Namespace) -> Settings:
    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    # Apply CLI overrides
    if args.backend:
        settings.index.backend = args.backend
    if args.log_level:
        settings.observability.log_level = args.log_level
    return settings


def _read_yaml(path: Path) -> Any:
    with open(path) as f:
        return yaml.safe_load(f)


def _load_store(path: Path) -> InMemoryStudentStore:
    return InMemoryStudentStore.from_roster(_read_yaml(path) or {})


async def _cmd_index(args: argparse.Namespace, settings: Settings) -> int:
    if settings.index.backend == "memory":
        print(
            "Error: the memory backend keeps nothing between runs; "
            "'search' indexes the roster itself",
            file=sys.stderr,
        )
        return 1

    store = _load_store(args.roster)
    manager = await StudentSearchManager.from_settings(settings, store)
    try:
        count = await manager.index_students(store.students)
    finally:
        await manager.shutdown()
    print(f"Indexed {count} students", file=sys.stderr)
    return 0


async def _cmd_search(args: argparse.Namespace, settings: Settings) -> int:
    store = _load_store(args.roster)
    instructors = None
    if args.instructors:
        instructors = [InstructorPrivilege.model_validate(i) for i in _read_yaml(args.instructors) or []]

    filters = SearchFilters(
        course_id=args.course,
        section=args.section,
        team=args.team,
        registration_status=args.registration,
    )

    manager = await StudentSearchManager.from_settings(settings, store)
    try:
        # A fresh in-memory index is empty; fill it from the roster
        if manager.adapter.name == "memory":
            await manager.index_students(store.students)
        students = await manager.search(args.query, instructors, filters)
    finally:
        await manager.shutdown()

    for student in students:
        print(student.model_dump_json())
    return 0


async def _cmd_health(args: argparse.Namespace, settings: Settings) -> int:
    manager = await StudentSearchManager.from_settings(settings, InMemoryStudentStore())
    try:
        health = await manager.health_check()
    finally:
        await manager.shutdown()
    print(health.model_dump_json())
    return 0 if health.status == "healthy" else 1


async def _cmd_reset(args: argparse.Namespace, settings: Settings) -> int:
    manager = await StudentSearchManager.from_settings(settings, InMemoryStudentStore())
    try:
        await manager.reset_collection()
    finally:
        await manager.shutdown()
    print(f"Reset collection '{manager.collection}'", file=sys.stderr)
    return 0


def _get_version() -> str:
    """Get the package version."""
    from rostersearch import __version__

    return __version__


if __name__ == "__main__":
    main()
