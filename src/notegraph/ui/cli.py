# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from notegraph.app import ingest_note, result_to_document, search_entity
from notegraph.config import configure_logging
from notegraph.domain.model import EntityKind, entity_to_document
from notegraph.domain.reconciliation import ResolvedEntityResolution

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

SEARCHABLE_KINDS = (EntityKind.OFFICE, EntityKind.PROJECT, EntityKind.REGULATION)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ingest notes into the notegraph store")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log per-field detail",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Process one free-text note")
    ingest.add_argument("text", nargs="?", help="Note text")
    ingest.add_argument("--file", type=Path, help="Read the note from a file")
    ingest.add_argument("--stdin", action="store_true", help="Read the note from stdin")
    ingest.add_argument(
        "--no-web-search",
        dest="web_search",
        action="store_false",
        default=None,
        help="Skip the web search for office locations",
    )
    ingest.add_argument(
        "--store",
        choices=("sql", "memory"),
        default="sql",
        help="Document store to write to (default: %(default)s)",
    )
    ingest.add_argument("--json", action="store_true", help="Print the result as JSON")

    search = subparsers.add_parser("search", help="Look up a stored entity by name")
    search.add_argument("kind", choices=[kind.value for kind in SEARCHABLE_KINDS])
    search.add_argument("name", help="Name to resolve")
    search.add_argument(
        "--store",
        choices=("sql", "memory"),
        default="sql",
        help="Document store to read from (default: %(default)s)",
    )
    search.add_argument("--json", action="store_true", help="Print the match as JSON")

    return parser.parse_args(list(argv))


def _read_note(args: argparse.Namespace) -> str:
    sources = [args.text is not None, args.file is not None, bool(args.stdin)]
    if sum(sources) != 1:
        raise ValueError("Provide exactly one of TEXT, --file or --stdin")
    if args.file is not None:
        try:
            text = args.file.read_text(encoding="utf-8")
        except OSError as exc:
            raise ValueError(f"Cannot read {args.file}: {exc}") from exc
    elif args.stdin:
        text = sys.stdin.read()
    else:
        text = args.text
    if not text.strip():
        raise ValueError("The note is empty")
    return text


def _run_ingest(args: argparse.Namespace, text: str) -> int:
    result = ingest_note(text, web_search=args.web_search, store_kind=args.store)
    if args.json:
        print(json.dumps(result_to_document(result), indent=2, default=str))
    else:
        print(result.summary)
    return 0 if result.success else 1


def _run_search(args: argparse.Namespace) -> int:
    resolution = search_entity(args.kind, args.name, store_kind=args.store)
    if not isinstance(resolution, ResolvedEntityResolution):
        if args.json:
            print(json.dumps({"status": str(resolution.status), "reason": resolution.reason}))
        else:
            print(f"No {args.kind} matches {args.name!r}")
        return 0

    if args.json:
        payload = {
            "status": str(resolution.status),
            "matchKind": str(resolution.match_kind),
            "confidence": resolution.confidence,
            "entity": entity_to_document(resolution.target),
        }
        print(json.dumps(payload, indent=2, default=str))
    else:
        print(
            f"{resolution.target.display_name} ({resolution.target.id}) "
            f"{resolution.match_kind} match, confidence {resolution.confidence:.2f}"
        )
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(verbose=parsed_args.verbose, force=True)
        text = _read_note(parsed_args) if parsed_args.command == "ingest" else ""
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "ingest":
            status = _run_ingest(parsed_args, text)
        elif parsed_args.command == "search":
            status = _run_search(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)

    if status:
        sys.exit(status)


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
