"""
Exceptions raised while talking to Yahoo.

Resolution failures are split by phase (GUID lookup, profile lookup) and by
cause (transport, provider-reported error, unparseable body) so the host can
tell them apart without inspecting messages.
"""

from enum import Enum
from typing import Optional


class ResolutionErrorKind(str, Enum):
    """Where and why a profile resolution failed."""

    GUID_FETCH_TRANSPORT = "guid_fetch_transport"
    GUID_FETCH_PROVIDER = "guid_fetch_provider"
    GUID_PARSE = "guid_parse"
    PROFILE_FETCH_TRANSPORT = "profile_fetch_transport"
    PROFILE_FETCH_PROVIDER = "profile_fetch_provider"
    PROFILE_PARSE = "profile_parse"


class YahooOAuth2Error(Exception):
    """Base exception for the Yahoo strategy."""

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self):
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message or ""


class ResolutionError(YahooOAuth2Error):
    """Raised when an access token cannot be turned into a profile."""

    kind: ResolutionErrorKind


class GuidFetchTransportError(ResolutionError):
    """The GUID request failed without a response body."""

    kind = ResolutionErrorKind.GUID_FETCH_TRANSPORT


class GuidFetchProviderError(ResolutionError):
    """The GUID endpoint answered with an error response."""

    kind = ResolutionErrorKind.GUID_FETCH_PROVIDER


class GuidParseError(ResolutionError):
    """The GUID response was not JSON or had no ``guid.value``."""

    kind = ResolutionErrorKind.GUID_PARSE


class ProfileFetchTransportError(ResolutionError):
    """The profile request failed without a response body."""

    kind = ResolutionErrorKind.PROFILE_FETCH_TRANSPORT


class ProfileFetchProviderError(ResolutionError):
    """The profile endpoint answered with an error response."""

    kind = ResolutionErrorKind.PROFILE_FETCH_PROVIDER


class ProfileParseError(ResolutionError):
    """The profile response was not a JSON object."""

    kind = ResolutionErrorKind.PROFILE_PARSE


class TokenExchangeError(YahooOAuth2Error):
    """Raised when an authorization code cannot be exchanged for a token."""


class OAuth2TransportError(YahooOAuth2Error):
    """
    Raised by an OAuth2 client when an authenticated request fails.

    ``data`` holds the raw response body when the server answered with a
    non-2xx status, and is ``None`` when no response was received at all.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        data: Optional[str] = None,
    ):
        super().__init__(message, status_code)
        self.data = data
