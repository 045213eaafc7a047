from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from codetally.adapters.leetcode import StaticCaptureContext
from codetally.app import (
    AppContext,
    build_app_context,
    capture_submission,
    current_stats,
    link_repository,
    logout,
    run_sync,
    save_credentials,
    unlink_repository,
)
from codetally.config import ConfigurationError, configure_logging
from codetally.domain.errors import CodeTallyError
from codetally.messages import MessageRouter

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from codetally.domain.model import StatsSnapshot

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Count LeetCode solutions in a GitHub repository")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("sync", help="Recount solutions from the linked repository")
    subparsers.add_parser("stats", help="Show the current counts")
    subparsers.add_parser("status", help="Show the outcome of the last sync")

    login = subparsers.add_parser("login", help="Store GitHub credentials")
    login.add_argument("--username", type=str, required=True, help="GitHub username")
    login.add_argument("--token", type=str, required=True, help="GitHub access token")

    link = subparsers.add_parser("link", help="Link the repository holding solutions")
    link.add_argument(
        "repository",
        type=str,
        help="owner/name, a github.com URL, or a bare name owned by the logged-in user",
    )

    subparsers.add_parser("unlink", help="Forget the linked repository")
    subparsers.add_parser("logout", help="Forget credentials, repository and counts")

    capture = subparsers.add_parser("capture", help="Capture one graded submission")
    capture.add_argument("reference", type=str, help="Submission URL or numeric id")
    capture.add_argument(
        "--html",
        type=Path,
        help="Saved submission page used when the structured result is unavailable",
    )
    capture.add_argument(
        "--push",
        action="store_true",
        help="Publish an accepted solution to the linked repository",
    )

    message = subparsers.add_parser("message", help="Dispatch a raw JSON protocol message")
    message.add_argument("payload", type=str, help='e.g. \'{"type": "request-current-stats"}\'')

    return parser.parse_args(list(argv))


def _utcnow() -> datetime:
    return datetime.now(UTC)


def format_relative_time(
    value: datetime | None,
    *,
    now_provider: Callable[[], datetime] = _utcnow,
) -> str:
    """Render ``value`` the way the status line shows it ("5 minutes ago")."""

    if value is None:
        return "never"
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    minutes = int((now_provider() - value).total_seconds() // 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    return value.astimezone(UTC).strftime("%Y-%m-%d %H:%M UTC")


def _format_stats(snapshot: StatsSnapshot) -> str:
    counts = snapshot.counts
    state = "counting" if not snapshot.is_counting_complete else "settled"
    return (
        f"easy={counts.easy} medium={counts.medium} hard={counts.hard}"
        f" total={counts.total} ({state})"
    )


def _format_status(context: AppContext) -> str:
    status = context.store.load_status()
    if status.in_progress:
        return "Sync in progress"
    if status.last_run_at is None:
        return "No sync has run yet"
    return (
        f"Last sync {status.last_outcome.value}: {status.last_message}"
        f" ({format_relative_time(status.last_run_at)})"
    )


def _run_command(parsed_args: argparse.Namespace, context: AppContext) -> int:
    command = parsed_args.command
    if command == "sync":
        result = asyncio.run(run_sync(context))
        print(result.message)
        return 0 if result.success else 1
    if command == "stats":
        print(_format_stats(current_stats(context)))
    elif command == "status":
        print(_format_status(context))
    elif command == "login":
        save_credentials(context, username=parsed_args.username, token=parsed_args.token)
    elif command == "link":
        print(f"Linked {link_repository(context, parsed_args.repository).html_url}")
    elif command == "unlink":
        unlink_repository(context)
    elif command == "logout":
        logout(context)
    elif command == "capture":
        capture_context = StaticCaptureContext.from_reference(
            parsed_args.reference, html_path=parsed_args.html
        )
        result = asyncio.run(capture_submission(context, capture_context, publish=parsed_args.push))
        record = result.record
        print(
            f"{record.status.value}: problem={record.canonical_id} runtime={record.runtime_display}"
            f" memory={record.memory_display} tier={result.tier or '-'}"
        )
        if result.published_path:
            print(f"Published {result.published_path}")
    elif command == "message":
        response = asyncio.run(MessageRouter(context).dispatch(json.loads(parsed_args.payload)))
        print(json.dumps(response, indent=2, default=str))
    else:
        raise ValueError(f"Unsupported command: {command}")
    return 0


def main(
    argv: Sequence[str] | None = None,
    *,
    context_factory: Callable[[], AppContext] = build_app_context,
) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        exit_code = _run_command(parsed_args, context_factory())
    except (CodeTallyError, ConfigurationError, ValueError) as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)
    if exit_code:
        sys.exit(exit_code)


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
