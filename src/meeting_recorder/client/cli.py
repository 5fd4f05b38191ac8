#!/usr/bin/env python3
"""
Terminal client for the meeting recorder relay.

Usage:
    meeting-recorder join https://zoom.us/j/123456789   # Send a bot and follow it
    meeting-recorder watch <bot_id>                     # Follow an existing bot
    meeting-recorder recordings <bot_id>                # List recordings once

The relay must be running (python main.py). Point the client at it with
--relay-url or RELAY_URL.
"""

import argparse
import asyncio
import sys

from dotenv import load_dotenv

from meeting_recorder.errors import RelayRequestError
from meeting_recorder.models import Recording

from .relay_client import RelayClient
from .session import PollingSession, SessionView


def format_recording(recording: Recording) -> str:
    """One display line for a recording."""
    line = f"  🎥 {recording.id}  status: {recording.status or 'unknown'}"
    if recording.duration_minutes is not None:
        line += f"  duration: {recording.duration_minutes} minutes"
    if recording.download_url:
        line += f"\n     ⬇️  {recording.download_url}"
    return line


class ViewPrinter:
    """Prints the parts of a SessionView that changed since the last update."""

    def __init__(self) -> None:
        self._status = ""
        self._error: str | None = None
        self._recording_ids: list[str] = []

    def __call__(self, view: SessionView) -> None:
        if view.status_text and view.status_text != self._status:
            self._status = view.status_text
            print(f"🔵 {view.status_text}", flush=True)

        if view.error and view.error != self._error:
            print(f"❌ {view.error}", flush=True)
        self._error = view.error

        ids = [r.id for r in view.recordings]
        if ids and ids != self._recording_ids:
            self._recording_ids = ids
            print(f"📼 Recordings ({len(ids)}):", flush=True)
            for recording in view.recordings:
                print(format_recording(recording), flush=True)


def _session(client: RelayClient, args: argparse.Namespace) -> PollingSession:
    return PollingSession(client, interval=args.interval, on_change=ViewPrinter())


async def _join(client: RelayClient, args: argparse.Namespace) -> int:
    session = _session(client, args)
    bot_id = await session.join(args.meeting_url)
    if not bot_id:
        return 1
    print(f"🤖 Bot ID: {bot_id}", flush=True)
    return await _follow(session)


async def _watch(client: RelayClient, args: argparse.Namespace) -> int:
    session = _session(client, args)
    session.start(args.bot_id)
    return await _follow(session)


async def _follow(session: PollingSession) -> int:
    try:
        await session.wait()
    finally:
        session.stop()

    if session.view.completed:
        print("✅ Done", flush=True)
        return 0
    return 1 if session.view.error else 0


def _recordings(client: RelayClient, args: argparse.Namespace) -> int:
    try:
        raw = client.get_recordings(args.bot_id)
    except RelayRequestError as e:
        print(f"❌ {e.message}")
        return 1

    if not raw:
        print("📭 No recordings found")
        return 0
    for item in raw:
        print(format_recording(Recording.from_dict(item)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meeting-recorder",
        description="Send a recording bot into a meeting and follow it",
    )
    parser.add_argument("--relay-url", help="Relay API base URL (default: RELAY_URL)")
    parser.add_argument(
        "--interval", type=float, default=5.0, help="Seconds between status checks"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    join = sub.add_parser("join", help="Create a bot and follow it until recordings are ready")
    join.add_argument("meeting_url", help="Meeting URL (Zoom, Meet, Teams)")

    watch = sub.add_parser("watch", help="Follow an existing bot")
    watch.add_argument("bot_id")

    recordings = sub.add_parser("recordings", help="List a bot's recordings")
    recordings.add_argument("bot_id")

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    client = RelayClient(base_url=args.relay_url)

    try:
        if args.command == "join":
            return asyncio.run(_join(client, args))
        if args.command == "watch":
            return asyncio.run(_watch(client, args))
        return _recordings(client, args)
    except KeyboardInterrupt:
        print("\n🛑 Stopped")
        return 130


if __name__ == "__main__":
    sys.exit(main())
