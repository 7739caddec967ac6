"""
Abstract base classes for the MusicKit SDK abstraction layer.

Concrete SDKs implement ``MusicKitSdk`` (load / configure / get-instance) and
``MusicKitInstance`` (authorize / music user token). Errors are reported as
``MusicKitError`` carrying the SDK's error code, mirroring MusicKit JS
``MKError`` codes.
"""

from abc import ABC, abstractmethod
from typing import Optional


# MKError codes relevant to configuration and authorization.
ACCESS_DENIED = "ACCESS_DENIED"
AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
NETWORK_ERROR = "NETWORK_ERROR"
STOREFRONT_ERROR = "STOREFRONT_ERROR"
TOKEN_EXPIRED = "TOKEN_EXPIRED"
UNAUTHORIZED_ERROR = "UNAUTHORIZED_ERROR"
UNKNOWN_ERROR = "UNKNOWN_ERROR"
USER_INTERACTION_REQUIRED = "USER_INTERACTION_REQUIRED"


class MusicKitError(Exception):
    """Error raised by a MusicKit SDK call."""

    def __init__(self, code: str, message: str = ""):
        self.code = (code or UNKNOWN_ERROR).upper()
        self.message = message or self.code
        super().__init__(f"{self.code}: {self.message}")


class MusicKitInstance(ABC):
    """A configured MusicKit instance.

    ``music_user_token`` is the synchronous token field;
    ``read_music_user_token`` is the optional async read. Both form the
    side channel used to detect a completed consent exchange.
    """

    def __init__(self, developer_token: str, app: dict[str, str]):
        self.developer_token = developer_token
        self.app = dict(app)

    @property
    @abstractmethod
    def music_user_token(self) -> Optional[str]:
        """Current music user token, or ``None`` before consent."""

    @abstractmethod
    async def authorize(self) -> str:
        """Run the consent exchange and return the music user token.

        Raises:
            MusicKitError: If the SDK reports a failure.
        """

    async def read_music_user_token(self) -> Optional[str]:
        return self.music_user_token


class MusicKitSdk(ABC):
    """Provider of MusicKit instances."""

    @abstractmethod
    async def load(self) -> None:
        """Resolve once the SDK library has loaded.

        Raises:
            MusicKitError: If the SDK failed to load.
        """

    @abstractmethod
    async def configure(self, developer_token: str, app: dict[str, str]) -> MusicKitInstance:
        """Configure the SDK and return the shared instance.

        Raises:
            MusicKitError: If the developer token is rejected.
        """

    @abstractmethod
    def get_instance(self) -> Optional[MusicKitInstance]:
        """Return the configured instance, or ``None`` before configure."""
