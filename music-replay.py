#!/usr/bin/env python3
"""
music-replay — command line

Prints a user's Apple Music Replay summary and recently played tracks.

Usage:
    python music-replay.py replay --developer-token D --user-token U
    python music-replay.py recent --max-items 20 --json

This file is a thin wrapper around the cli/ package.
"""

import asyncio
from cli.commands import main

if __name__ == "__main__":
    asyncio.run(main())
