"""
FastAPI application setup for the music-replay web UI.
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

# Load .env file (if present) before the routes build their facade from os.environ
load_dotenv()

from replay_platform.runtime.musickit import BridgeMusicKit  # noqa: E402

from . import __version__ as WEB_VERSION  # noqa: E402
from . import routes  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The bridge becomes ready when the page reports ``musickitloaded``;
    # any other SDK can load straight away.
    if not isinstance(routes.facade.sdk_adapter.sdk, BridgeMusicKit):
        await routes.facade.load_sdk()
    yield


# App
app = FastAPI(
    title="music-replay",
    description="Apple Music Replay summary and listening history",
    version=WEB_VERSION,
    lifespan=lifespan,
)

# Include API routes
app.include_router(routes.router)


@app.get("/health")
async def health():
    """Liveness check."""
    return {"status": "ok", "version": WEB_VERSION}
