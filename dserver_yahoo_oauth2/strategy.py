"""
Yahoo authentication strategy.

The strategy ties together the OAuth2 client, the profile resolver and the
host's ``verify`` callback. The host hands it either an authorization code
(``authenticate``) or an access token it already holds
(``authenticate_token``) and receives the user its ``verify`` callback
returned.

Example:

    def verify(access_token, refresh_token, profile):
        user = User.query.filter_by(yahoo_guid=profile.id).first()
        return user or False

    strategy = YahooStrategy(StrategyConfig.from_env(), verify)
    result = await strategy.authenticate(code)
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .config import StrategyConfig
from .errors import TokenExchangeError
from .oauth2_client import HttpxOAuth2Client
from .profile import PROVIDER_NAME, NormalizedProfile
from .resolver import ProfileResolver

logger = logging.getLogger(__name__)

# verify(access_token, refresh_token, profile) -> user, or False
VerifyCallback = Callable[[str, Optional[str], Optional[NormalizedProfile]], Any]


@dataclass(frozen=True)
class AuthenticationResult:
    """Outcome of a strategy run. ``user`` is False on a soft failure."""

    user: Any
    profile: Optional[NormalizedProfile]

    @property
    def success(self) -> bool:
        return self.user is not False and self.user is not None


class YahooStrategy:
    """Authenticate users against Yahoo using OAuth 2.0."""

    name = PROVIDER_NAME

    def __init__(
        self,
        config: StrategyConfig,
        verify: VerifyCallback,
        client: Optional[HttpxOAuth2Client] = None,
    ):
        """
        Initialize the strategy.

        Args:
            config: Strategy configuration
            verify: Host callback mapping a profile to a user
            client: OAuth2 client (defaults to HttpxOAuth2Client)
        """
        if verify is None:
            raise TypeError("YahooStrategy requires a verify callback")

        self.config = config
        self.verify = verify
        self.client = client if client is not None else HttpxOAuth2Client(config)
        self.client.use_authorization_header_for_get(True)
        self.resolver = ProfileResolver(config, self.client)

    def authorization_url(self, state: Optional[str] = None) -> str:
        """Return the Yahoo URL the user should be redirected to."""
        url, _ = self.client.create_authorization_url(state=state)
        return url

    async def user_profile(self, access_token: str) -> NormalizedProfile:
        """Resolve the Yahoo profile belonging to an access token."""
        return await self.resolver.resolve_profile(access_token)

    async def authenticate(self, code: str) -> AuthenticationResult:
        """
        Complete the flow for an authorization code.

        Raises:
            TokenExchangeError: If the code cannot be exchanged
            ResolutionError: If the profile cannot be resolved
        """
        token = await self.client.fetch_token(code)
        access_token = token.get("access_token")
        if not access_token:
            raise TokenExchangeError("No access token in response")

        return await self.authenticate_token(access_token, token.get("refresh_token"))

    async def authenticate_token(
        self,
        access_token: str,
        refresh_token: Optional[str] = None,
    ) -> AuthenticationResult:
        """
        Resolve the profile for an access token and pass it to ``verify``.

        Exceptions raised by ``verify`` propagate unchanged.
        """
        profile = None
        if not self.config.skip_user_profile:
            profile = await self.user_profile(access_token)

        user = self.verify(access_token, refresh_token, profile)
        if inspect.isawaitable(user):
            user = await user

        result = AuthenticationResult(user=user, profile=profile)
        if result.success:
            logger.info(f"Yahoo user {profile.id if profile else '<unknown>'} authenticated")
        else:
            logger.info("Yahoo authentication rejected by verify callback")
        return result
