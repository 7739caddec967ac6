"""
CLI subcommand implementations for music-replay.

Subcommands::

    music-replay replay --developer-token D --user-token U [--max-items N] [--json]
    music-replay recent --developer-token D --user-token U [--max-items N] [--json]

Both tokens fall back to APPLE_MUSIC_DEVELOPER_TOKEN / APPLE_MUSIC_USER_TOKEN.
The CLI has no browser, so it always runs the static MusicKit SDK with a
music user token obtained elsewhere.
"""

import argparse
import json
import logging
import sys
from dataclasses import replace

from dotenv import load_dotenv

from contracts.v1.schemas import ErrorContract, OperationResult, ReplaySummary, TrackRecord
from core.errors import ReplayError
from replay_platform.facade import ReplayFacade, create_default_facade
from replay_platform.runtime.config import load_settings, resolve_developer_token

logger = logging.getLogger(__name__)

LOG_LEVELS = ("debug", "info", "warning", "error")


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{raw}'")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def _format_duration(duration_ms: int) -> str:
    if duration_ms <= 0:
        return "--:--"
    minutes, seconds = divmod(duration_ms // 1000, 60)
    return f"{minutes}:{seconds:02d}"


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def print_replay_summary(summary: ReplaySummary):
    """Print the top artists, albums and songs."""
    print("\n" + "=" * 60)
    print(f"REPLAY {summary.year}" if summary.year else "REPLAY")
    print("=" * 60)

    print("\n  Top artists:")
    for artist in summary.top_artists:
        genres = f" ({', '.join(artist.genres)})" if artist.genres else ""
        print(f"    {artist.rank:>2}. {artist.name}{genres}")
    if not summary.top_artists:
        print("    (none)")

    print("\n  Top albums:")
    for album in summary.top_albums:
        plays = f" — {album.play_count} plays" if album.play_count else ""
        print(f"    {album.rank:>2}. {album.title} by {album.artist_name}{plays}")
    if not summary.top_albums:
        print("    (none)")

    print("\n  Top songs:")
    for song in summary.top_songs:
        plays = f" — {song.play_count} plays" if song.play_count else ""
        print(f"    {song.rank:>2}. {song.title} by {song.artist_name}{plays}")
    if not summary.top_songs:
        print("    (none)")


def print_recent_tracks(tracks: list[TrackRecord]):
    """Print recently played tracks, newest first."""
    print("\n" + "=" * 60)
    print(f"RECENTLY PLAYED ({len(tracks)})")
    print("=" * 60)
    for track in tracks:
        print(
            f"  {track.rank:>2}. {track.title} — {track.artist_name}"
            f" [{track.album_name}] {_format_duration(track.duration_ms)}"
        )
    if not tracks:
        print("  (none)")


def _print_json(payload: dict):
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _exit_with_error(facade: ReplayFacade, error: ReplayError, as_json: bool):
    if as_json:
        _print_json(
            OperationResult(
                ok=False,
                session=facade.session_contract(),
                error=ErrorContract(**error.to_dict()),
            ).model_dump()
        )
    else:
        print(f"Error [{error.category}]: {error.message}", file=sys.stderr)
    sys.exit(1)


# ---------------------------------------------------------------------------
# Session setup
# ---------------------------------------------------------------------------

def build_facade(args) -> ReplayFacade:
    """Build a static-SDK facade from settings plus command-line tokens."""
    settings = load_settings()
    settings = replace(
        settings,
        sdk="static",
        music_user_token=args.user_token or settings.music_user_token,
    )
    return create_default_facade(settings)


async def connect(facade: ReplayFacade, args):
    """Load, configure and authorize, in that order."""
    await facade.load_sdk()
    await facade.configure_music_kit(resolve_developer_token(args.developer_token))
    outcome = await facade.authorize()
    logger.info("Authorized (%s).", outcome.resolution.value)


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------

async def cmd_replay(args):
    """Fetch and print the Replay summary plus recent tracks."""
    facade = build_facade(args)
    try:
        await connect(facade, args)
        data = await facade.get_replay_data(max_items=args.max_items)
    except ReplayError as e:
        _exit_with_error(facade, e, args.json)

    if args.json:
        _print_json(data.model_dump())
        return
    print_replay_summary(data.summary)
    print_recent_tracks(data.recent_tracks)
    if data.meta.truncated:
        print(f"\n  (stopped at {len(data.recent_tracks)} tracks)")


async def cmd_recent(args):
    """Fetch and print recently played tracks."""
    facade = build_facade(args)
    try:
        await connect(facade, args)
        data = await facade.get_recent_tracks(max_items=args.max_items)
    except ReplayError as e:
        _exit_with_error(facade, e, args.json)

    if args.json:
        _print_json(data.model_dump())
        return
    print_recent_tracks(data.tracks)
    print(f"\n  {data.meta.requests_made} request(s)")


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--developer-token", help="Developer token (or set APPLE_MUSIC_DEVELOPER_TOKEN)")
    parser.add_argument("--user-token", help="Music user token (or set APPLE_MUSIC_USER_TOKEN)")
    parser.add_argument(
        "--max-items", type=_positive_int, default=None,
        help="Cap on recently played tracks (default: REPLAY_RECENT_MAX_ITEMS or 50)",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="music-replay",
        description="Apple Music Replay summary and listening history",
    )
    parser.add_argument(
        "--log-level", choices=LOG_LEVELS, default="warning",
        help="Logging verbosity (default: warning)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_replay = subparsers.add_parser("replay", help="Show the Replay summary and recent tracks")
    _add_common_arguments(p_replay)

    p_recent = subparsers.add_parser("recent", help="Show recently played tracks")
    _add_common_arguments(p_recent)

    return parser


async def main(argv=None):
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    load_dotenv()

    try:
        if args.command == 'replay':
            await cmd_replay(args)
        elif args.command == 'recent':
            await cmd_recent(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
