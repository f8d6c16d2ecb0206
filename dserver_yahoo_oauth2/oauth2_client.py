"""
OAuth2 client used by the Yahoo strategy.

The strategy only needs an object with an async ``get(url, access_token)``;
``HttpxOAuth2Client`` is the default implementation. It uses authlib for the
authorization redirect and the code exchange, and plain httpx for the
authenticated resource requests.
"""

import logging
from typing import Optional, Protocol, Tuple

import httpx
from authlib.integrations.base_client import OAuthError
from authlib.integrations.httpx_client import AsyncOAuth2Client

from .config import StrategyConfig
from .errors import OAuth2TransportError, TokenExchangeError

logger = logging.getLogger(__name__)

TOKEN_REQUEST_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/x-www-form-urlencoded;charset=UTF-8",
}


class OAuth2Client(Protocol):
    """What the profile resolver needs from an OAuth2 client."""

    async def get(self, url: str, access_token: str) -> str:
        """
        Perform an authenticated GET and return the response body.

        Raises:
            OAuth2TransportError: On a non-2xx response (``data`` set to the
                body) or when no response was received (``data`` is None)
        """
        ...


class HttpxOAuth2Client:
    """OAuth2 client for Yahoo built on authlib and httpx."""

    def __init__(
        self,
        config: StrategyConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize the client.

        Args:
            config: Strategy configuration
            transport: Optional httpx transport (used by tests)
            timeout: Per-request timeout in seconds
        """
        self.config = config
        self._transport = transport
        self._timeout = timeout
        self._use_authorization_header_for_get = False

    def use_authorization_header_for_get(self, enabled: bool):
        """Send the access token as a Bearer header instead of a query parameter."""
        self._use_authorization_header_for_get = enabled

    def _oauth2_session(self) -> AsyncOAuth2Client:
        # Credentials travel in the precomputed Basic header, not the body
        return AsyncOAuth2Client(
            client_id=self.config.client_id,
            client_secret=self.config.client_secret,
            token_endpoint_auth_method="none",
            redirect_uri=self.config.callback_url,
            scope=self.config.scope,
            transport=self._transport,
            timeout=self._timeout,
        )

    def create_authorization_url(self, state: Optional[str] = None) -> Tuple[str, str]:
        """
        Build the URL the browser is redirected to for authorization.

        Returns:
            Tuple of (authorization URL, state)
        """
        session = self._oauth2_session()
        return session.create_authorization_url(
            self.config.authorization_url,
            state=state,
        )

    async def fetch_token(self, code: str) -> dict:
        """
        Exchange an authorization code for an access token.

        Args:
            code: Authorization code received on the callback

        Returns:
            Token response (``access_token``, ``refresh_token``, ...)

        Raises:
            TokenExchangeError: If the token endpoint rejects the exchange
        """
        headers = dict(TOKEN_REQUEST_HEADERS)
        headers["Authorization"] = self.config.basic_auth_header

        async with self._oauth2_session() as session:
            try:
                token = await session.fetch_token(
                    self.config.token_url,
                    code=code,
                    headers=headers,
                )
            except OAuthError as e:
                logger.error(f"Yahoo token exchange failed: {e.error} - {e.description}")
                raise TokenExchangeError(
                    f"Failed to obtain access token: {e.description or e.error}"
                )
            except httpx.HTTPStatusError as e:
                logger.error(f"Yahoo token exchange failed: {e}")
                raise TokenExchangeError(
                    "Failed to obtain access token", e.response.status_code
                )
            except (httpx.RequestError, ValueError) as e:
                logger.error(f"Error during Yahoo token exchange: {e}")
                raise TokenExchangeError("Failed to obtain access token")

        logger.debug("Exchanged Yahoo authorization code for token")
        return dict(token)

    async def get(self, url: str, access_token: str) -> str:
        """Perform an authenticated GET. See ``OAuth2Client.get``."""
        headers = {}
        request_url = httpx.URL(url)
        if self._use_authorization_header_for_get:
            headers["Authorization"] = f"Bearer {access_token}"
        else:
            # Merged, so the endpoint's own query (format=json) is kept
            request_url = request_url.copy_merge_params({"access_token": access_token})

        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.get(
                    request_url,
                    headers=headers,
                    timeout=self._timeout,
                )
            except httpx.RequestError as e:
                logger.warning(f"Network error requesting {url}: {e}")
                raise OAuth2TransportError(f"Network error: {e}")

        if not response.is_success:
            logger.debug(f"GET {url} returned HTTP {response.status_code}")
            raise OAuth2TransportError(
                f"HTTP {response.status_code}",
                status_code=response.status_code,
                data=response.text or None,
            )

        return response.text
