#!/usr/bin/env python3
"""
music-replay — Web UI

Starts the local API that a MusicKit JS page talks to for configure,
authorize and data fetches. See web/routes.py for the endpoints.

Usage:
    python music-replay-web.py [--host HOST] [--port PORT] [--sdk bridge|static]
"""

from web.__main__ import main

if __name__ == "__main__":
    main()
