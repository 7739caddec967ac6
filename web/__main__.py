"""
Serve the music-replay web API.

Usage:
    python -m web [--host HOST] [--port PORT] [--sdk bridge|static]

Host and port default to ``REPLAY_WEB_HOST`` / ``REPLAY_WEB_PORT``.
"""

import argparse
import os

import uvicorn
from dotenv import load_dotenv

from replay_platform.runtime.config import SDK_ENV_VAR, web_bind_address
from replay_platform.runtime.musickit import SUPPORTED_SDKS


def build_parser() -> argparse.ArgumentParser:
    host, port = web_bind_address()
    parser = argparse.ArgumentParser(description="Serve the music-replay web API")
    parser.add_argument("--host", default=host, help=f"Interface to bind (default: {host})")
    parser.add_argument("--port", type=int, default=port, help=f"Port to bind (default: {port})")
    parser.add_argument(
        "--sdk", choices=SUPPORTED_SDKS,
        help=f"MusicKit implementation; overrides {SDK_ENV_VAR}",
    )
    parser.add_argument(
        "--log-level", default="info",
        choices=["critical", "error", "warning", "info", "debug"],
    )
    return parser


def main(argv=None):
    load_dotenv()
    args = build_parser().parse_args(argv)

    # The shared facade reads its settings when web.app is first imported.
    if args.sdk:
        os.environ[SDK_ENV_VAR] = args.sdk

    uvicorn.run("web.app:app", host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
