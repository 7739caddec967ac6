"""
REST API routes for the music-replay web UI.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from contracts.v1.schemas import OperationResult
from core.errors import (
    AuthorizationCategory,
    AuthorizationError,
    ConfigurationError,
    FetchError,
    SessionStateError,
)
from replay_platform.facade import create_default_facade
from replay_platform.runtime.config import resolve_developer_token
from replay_platform.runtime.musickit import BridgeMusicKit, MusicKitError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# Single shared facade (single-user local tool)
facade = create_default_facade()


# --- Request models ---

class ConfigureRequest(BaseModel):
    developer_token: Optional[str] = None


class MusicKitLoadedRequest(BaseModel):
    error_code: Optional[str] = None
    message: str = ""


class MusicKitAuthorizationRequest(BaseModel):
    music_user_token: Optional[str] = None
    error_code: Optional[str] = None
    message: str = ""


# --- Helpers ---

_AUTHORIZATION_STATUS = {
    AuthorizationCategory.ACCESS_DENIED: 403,
    AuthorizationCategory.NOT_CONFIGURED: 409,
}


def _to_http_exception(e: Exception) -> HTTPException:
    """Map the replay error taxonomy onto HTTP statuses."""
    headers = None
    if isinstance(e, ConfigurationError):
        status, detail = 400, e.to_dict()
    elif isinstance(e, AuthorizationError):
        status = _AUTHORIZATION_STATUS.get(e.authorization_category, 401)
        detail = e.to_dict()
    elif isinstance(e, FetchError):
        status = 429 if e.status_code == 429 else 502
        detail = {**e.to_dict(), "status_code": e.status_code}
        if e.retry_after is not None:
            headers = {"Retry-After": f"{e.retry_after:g}"}
    elif isinstance(e, SessionStateError):
        status, detail = 409, {"message": str(e), "category": "session"}
    else:
        status, detail = 500, {"message": str(e), "category": "internal"}
    return HTTPException(status_code=status, detail=detail, headers=headers)


def _operation_result(resolution: Optional[str] = None) -> dict:
    return OperationResult(
        ok=True,
        session=facade.session_contract(),
        resolution=resolution,
    ).model_dump()


def _bridge() -> BridgeMusicKit:
    sdk = facade.sdk_adapter.sdk
    if not isinstance(sdk, BridgeMusicKit):
        raise HTTPException(
            status_code=409,
            detail={
                "message": "The browser MusicKit bridge is not enabled (set MUSICKIT_SDK=bridge).",
                "category": "bridge_disabled",
            },
        )
    return sdk


# --- Session ---

@router.get("/session")
async def get_session():
    """Return the credential-free session snapshot and authorization phase."""
    return facade.session_contract().model_dump()


@router.post("/configure")
async def configure(req: ConfigureRequest):
    """Configure MusicKit with the given (or environment) developer token."""
    token = resolve_developer_token(req.developer_token)
    try:
        await facade.configure_music_kit(token)
    except (ConfigurationError, SessionStateError) as e:
        raise _to_http_exception(e) from e
    return _operation_result()


@router.post("/authorize")
async def authorize():
    """Run the consent exchange; waits for the browser when bridged."""
    try:
        outcome = await facade.authorize()
    except (AuthorizationError, SessionStateError) as e:
        raise _to_http_exception(e) from e
    return _operation_result(outcome.resolution.value)


# --- Data ---

@router.get("/replay")
async def get_replay(max_items: Optional[int] = Query(None, ge=1)):
    """Return the Replay summary together with recently played tracks."""
    try:
        data = await facade.get_replay_data(max_items=max_items)
    except (FetchError, SessionStateError) as e:
        raise _to_http_exception(e) from e
    return data.model_dump()


@router.get("/recent-tracks")
async def get_recent_tracks(max_items: Optional[int] = Query(None, ge=1)):
    """Return recently played tracks, newest first."""
    try:
        data = await facade.get_recent_tracks(max_items=max_items)
    except (FetchError, SessionStateError) as e:
        raise _to_http_exception(e) from e
    return data.model_dump()


# --- Browser bridge ---

@router.post("/musickit/loaded")
async def musickit_loaded(req: MusicKitLoadedRequest):
    """Receive the page's ``musickitloaded`` event (or its load failure)."""
    bridge = _bridge()
    if req.error_code:
        bridge.notify_load_failed(req.error_code, req.message)
    else:
        bridge.notify_loaded()
    try:
        await facade.load_sdk()
    except ConfigurationError as e:
        raise _to_http_exception(e) from e
    return _operation_result()


@router.post("/musickit/authorization")
async def musickit_authorization(req: MusicKitAuthorizationRequest):
    """Receive the page's authorize result: a token, an error code, or both."""
    bridge = _bridge()
    if not req.music_user_token and not req.error_code:
        raise HTTPException(
            status_code=400,
            detail={
                "message": "Provide music_user_token or error_code.",
                "category": "invalid_request",
            },
        )
    try:
        bridge.deliver_authorization(
            music_user_token=req.music_user_token,
            error_code=req.error_code,
            message=req.message,
        )
    except MusicKitError as e:
        raise HTTPException(
            status_code=409,
            detail={"message": e.message, "category": AuthorizationCategory.NOT_CONFIGURED.value},
        ) from e
    return {"accepted": True}
