"""
Yahoo profile resolution.

Yahoo does not return the user id with the access token. Resolving a profile
takes two requests made one after the other:

1. ``GET /v1/me/guid`` returns ``{"guid": {"value": "<guid>"}}``
2. ``GET /v1/user/<guid>/profile`` returns the profile document

Any failure ends the resolution; no partial profile is returned.
"""

import json
import logging
from typing import Any, Optional

from .config import StrategyConfig
from .errors import (
    GuidFetchProviderError,
    GuidFetchTransportError,
    GuidParseError,
    OAuth2TransportError,
    ProfileFetchProviderError,
    ProfileFetchTransportError,
    ProfileParseError,
)
from .oauth2_client import OAuth2Client
from .profile import NormalizedProfile, build_profile

logger = logging.getLogger(__name__)


def _load_json(text: Optional[str]) -> Any:
    """Decode a JSON body, returning None if it cannot be decoded."""
    if text is None:
        return None
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return None


def _provider_error(data: Optional[str]) -> Optional[Any]:
    """Return the ``error`` member of a JSON error body, if there is one."""
    payload = _load_json(data)
    if isinstance(payload, dict) and payload.get("error"):
        return payload["error"]
    return None


def _error_field(error: Any, name: str) -> Optional[str]:
    if isinstance(error, dict):
        value = error.get(name)
        return str(value) if value else None
    return None


class ProfileResolver:
    """Resolve a Yahoo access token into a NormalizedProfile."""

    def __init__(self, config: StrategyConfig, client: OAuth2Client):
        """
        Initialize the resolver.

        Args:
            config: Strategy configuration (endpoint URLs)
            client: OAuth2 client performing the authenticated requests
        """
        self.config = config
        self.client = client

    async def resolve_profile(self, access_token: str) -> NormalizedProfile:
        """
        Fetch the user's GUID, then the profile for that GUID.

        Args:
            access_token: Yahoo access token

        Returns:
            NormalizedProfile whose id is the resolved GUID

        Raises:
            ResolutionError: A subclass identifying the failed phase and cause
        """
        guid = await self._fetch_guid(access_token)
        return await self._fetch_profile(access_token, guid)

    async def _fetch_guid(self, access_token: str) -> str:
        logger.debug(f"Requesting Yahoo GUID from {self.config.user_guid_url}")
        try:
            body = await self.client.get(self.config.user_guid_url, access_token)
        except OAuth2TransportError as e:
            if e.data is None:
                logger.warning(f"Yahoo GUID request failed: {e}")
                raise GuidFetchTransportError(
                    f"Failed to get user GUID: {e.message}" if e.message
                    else "Failed to get user GUID",
                    e.status_code,
                )

            error = _provider_error(e.data)
            if error is not None:
                detail = _error_field(error, "detail")
                logger.warning(
                    f"Yahoo rejected GUID request (HTTP {e.status_code}): {detail}"
                )
                raise GuidFetchProviderError(
                    f"Failed to get user GUID: {detail}" if detail
                    else "Failed to get user GUID",
                    e.status_code,
                )

            logger.warning(f"Yahoo GUID request failed with unrecognized body (HTTP {e.status_code})")
            raise GuidFetchProviderError("Failed to get user GUID")

        payload = _load_json(body)
        try:
            guid = payload["guid"]["value"]
        except (KeyError, TypeError):
            guid = None

        # Numeric GUIDs are used as text in the profile URL
        if isinstance(guid, int) and not isinstance(guid, bool):
            guid = str(guid)

        if not isinstance(guid, str) or not guid:
            logger.warning("Yahoo GUID response could not be parsed")
            raise GuidParseError("Failed to parse GUID response")

        return guid

    async def _fetch_profile(self, access_token: str, guid: str) -> NormalizedProfile:
        url = self.config.profile_url_for(guid)
        logger.debug(f"Requesting Yahoo profile for GUID {guid}")
        try:
            body = await self.client.get(url, access_token)
        except OAuth2TransportError as e:
            if e.data is None:
                logger.warning(f"Yahoo profile request failed: {e}")
                raise ProfileFetchTransportError(
                    f"Failed to fetch user profile: {e.message}" if e.message
                    else "Failed to fetch user profile",
                    e.status_code,
                )

            description = _error_field(_provider_error(e.data), "description")
            if description:
                logger.warning(
                    f"Yahoo rejected profile request (HTTP {e.status_code}): {description}"
                )
                raise ProfileFetchProviderError(description, e.status_code)

            logger.warning(f"Yahoo profile request failed (HTTP {e.status_code})")
            raise ProfileFetchProviderError("Failed to fetch user profile")

        parsed = _load_json(body)
        if not isinstance(parsed, dict):
            logger.warning(f"Yahoo profile response for GUID {guid} could not be parsed")
            raise ProfileParseError("Failed to parse user profile")

        profile = build_profile(guid, body, parsed)
        logger.debug(f"Resolved Yahoo profile for GUID {guid}")
        return profile
