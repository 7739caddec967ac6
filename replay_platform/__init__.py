"""Platform layer: session ownership, MusicKit access and Apple Music fetches."""

__version__ = "1.0.0"

from .authorization import AuthorizationOrchestrator
from .catalog_client import AppleMusicClient
from .facade import ReplayFacade, create_default_facade
from .sdk_adapter import MusicKitAdapter, authorization_category
from .session_state_machine import (
    SessionState,
    check_invariants,
    is_monotonic,
    require_authorized,
)

__all__ = [
    "__version__",
    "AppleMusicClient",
    "AuthorizationOrchestrator",
    "MusicKitAdapter",
    "ReplayFacade",
    "SessionState",
    "authorization_category",
    "check_invariants",
    "create_default_facade",
    "is_monotonic",
    "require_authorized",
]
