"""Command line entry point that replays a platform event through the listener."""
import argparse
import json
import sys
from pathlib import Path

from importflow.core.config import load_settings
from importflow.core.errors import ImportFlowError
from importflow.core.logging import configure_logging
from importflow.handlers import build_listener, event_from_payload
from importflow.platform.client import PlatformClient


def build_parser() -> argparse.ArgumentParser:
    """Create a small argument parser for the CLI entry point."""

    parser = argparse.ArgumentParser(description="Dispatch an import platform event to the listener")
    parser.add_argument(
        "--event",
        type=Path,
        required=True,
        help="JSON file with the event's topic, context, and payload",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        help="Optional env file with PLATFORM_API_KEY and other settings",
    )
    parser.add_argument(
        "--log-level",
        help="Override LOG_LEVEL for this run",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for replaying an event from the command line."""

    args = build_parser().parse_args(argv)
    try:
        configure_logging(args.log_level)
        settings = load_settings(args.env_file)
        client = PlatformClient.from_settings(settings)
        raw = json.loads(args.event.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        print(f"Could not start: {exc}", file=sys.stderr)
        return 1
    event = event_from_payload(raw, client)

    listener = build_listener(client, settings)
    try:
        handled = listener.dispatch(event)
    except ImportFlowError as exc:
        print(f"Event {event.topic} failed: {exc}", file=sys.stderr)
        return 1
    print(f"Dispatched {event.topic} to {handled} handler(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
