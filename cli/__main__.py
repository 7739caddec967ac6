"""
Entry point for running music-replay as a module.

Usage:
    python -m cli replay --developer-token D --user-token U
    python -m cli recent --max-items 20 --json
"""

import asyncio
from .commands import main

if __name__ == "__main__":
    asyncio.run(main())
