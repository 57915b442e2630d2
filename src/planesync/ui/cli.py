# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import timedelta
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any, cast

from dotenv import load_dotenv

from planesync.app import (
    declare_entity,
    list_entities,
    request_deletion,
    sync_entity,
)
from planesync.config import configure_logging
from planesync.domain.model import PROGRAMMED_CONDITION_TYPE, EntityKind, ObjectKey

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from planesync.domain.model import AnyEntity

log = logging.getLogger(__name__)


def _parse_kind(value: str) -> EntityKind:
    normalized = value.strip().replace("-", "").replace("_", "").lower()
    for kind in EntityKind:
        if kind.value.lower() == normalized:
            return kind
    choices = ", ".join(kind.value for kind in EntityKind)
    raise argparse.ArgumentTypeError(f"unknown kind {value!r} (choose from {choices})")


def _parse_key(value: str) -> ObjectKey:
    try:
        return ObjectKey.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _parse_seconds(value: str) -> timedelta:
    try:
        seconds = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number of seconds: {value!r}") from exc
    if seconds < 0:
        raise argparse.ArgumentTypeError("sync period must be non-negative")
    return timedelta(seconds=seconds)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mirror declared entities to the remote API")
    subparsers = parser.add_subparsers(dest="command", required=True)

    status = subparsers.add_parser("status", help="List stored entities and their status")
    status.add_argument("--kind", type=_parse_kind, help="Only list entities of this kind")

    sync = subparsers.add_parser("sync", help="Run one remote operation for an entity")
    sync.add_argument("kind", type=_parse_kind, help="Entity kind, e.g. Service")
    sync.add_argument("key", type=_parse_key, help="NAMESPACE/NAME of the entity")
    sync.add_argument(
        "--sync-period",
        type=_parse_seconds,
        help="Seconds an entity stays fresh after a successful operation (defaults to config)",
    )
    sync.add_argument(
        "--timeout",
        type=float,
        help="Per-request timeout in seconds passed to the remote adapter",
    )

    apply = subparsers.add_parser("apply", help="Store entities declared in a JSON file")
    apply.add_argument("path", type=Path, help="JSON file holding one entity or a list of them")

    delete = subparsers.add_parser("delete", help="Mark an entity for deletion")
    delete.add_argument("kind", type=_parse_kind, help="Entity kind, e.g. Service")
    delete.add_argument("key", type=_parse_key, help="NAMESPACE/NAME of the entity")

    return parser.parse_args(list(argv))


def _load_documents(path: Path) -> list[dict[str, Any]]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc
    if isinstance(payload, dict):
        return [cast(dict[str, Any], payload)]
    if isinstance(payload, list):
        return [cast(dict[str, Any], item) for item in cast(list[object], payload)]
    raise ValueError(f"{path} must hold an object or a list of objects")


def _format_entity(entity: AnyEntity) -> str:
    condition = entity.conditions.get(PROGRAMMED_CONDITION_TYPE)
    programmed = (
        f"{condition.status} ({condition.reason})" if condition is not None else "Unknown"
    )
    deleting = " deleting" if entity.metadata.deletion_requested else ""
    return (
        f"{entity.kind:<14} {entity.key!s:<32} remote_id={entity.remote_id or '-'} "
        f"programmed={programmed} generation={entity.generation}{deleting}"
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        if parsed_args.command == "status":
            for entity in list_entities(parsed_args.kind):
                print(_format_entity(entity))
        elif parsed_args.command == "sync":
            result = sync_entity(
                parsed_args.kind,
                parsed_args.key,
                sync_period=parsed_args.sync_period,
                timeout=parsed_args.timeout,
            )
            if result.removed:
                print(f"{result.kind} {result.key} deleted")
            elif result.skipped:
                seconds = result.requeue_after.total_seconds()
                print(f"{result.kind} {result.key} is up to date; requeue after {seconds:.0f}s")
            else:
                print(f"{result.kind} {result.key} {result.operation}d (remote id {result.remote_id})")
        elif parsed_args.command == "apply":
            for document in _load_documents(parsed_args.path):
                entity = declare_entity(document)
                print(f"{entity.kind} {entity.key} declared (generation {entity.generation})")
        elif parsed_args.command == "delete":
            entity = request_deletion(parsed_args.kind, parsed_args.key)
            print(f"{entity.kind} {entity.key} marked for deletion")
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
