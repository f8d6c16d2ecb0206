"""
Configuration management for the Yahoo OAuth2 strategy.

This module handles loading the Yahoo endpoint URLs and client credentials
and derives the values that stay fixed for the lifetime of the strategy.
"""

import base64
import os
from dataclasses import dataclass, field
from typing import Optional


# Yahoo OAuth2 endpoints
YAHOO_AUTHORIZATION_URL = "https://api.login.yahoo.com/oauth2/request_auth"
YAHOO_TOKEN_URL = "https://api.login.yahoo.com/oauth2/get_token"
YAHOO_USER_GUID_URL = "https://social.yahooapis.com/v1/me/guid?format=json"
YAHOO_USER_PROFILE_URL = (
    "https://social.yahooapis.com/v1/user/:xoauthYahooGuid/profile?format=json"
)

# Placeholder in the profile URL replaced by the resolved GUID
GUID_PLACEHOLDER = ":xoauthYahooGuid"


def basic_auth_header(client_id: str, client_secret: str) -> str:
    """Build the HTTP Basic ``Authorization`` value for the token endpoint."""
    credentials = f"{client_id}:{client_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


@dataclass(frozen=True)
class StrategyConfig:
    """Yahoo strategy configuration.

    Empty URLs fall back to the Yahoo defaults. Instances are frozen so a
    single config can be shared by any number of concurrent resolutions.
    """

    client_id: str = ""
    client_secret: str = ""
    callback_url: str = ""

    authorization_url: str = YAHOO_AUTHORIZATION_URL
    token_url: str = YAHOO_TOKEN_URL
    user_profile_url: str = YAHOO_USER_PROFILE_URL
    user_guid_url: str = YAHOO_USER_GUID_URL

    scope: Optional[str] = None
    skip_user_profile: bool = False

    basic_auth_header: str = field(init=False, repr=False)

    def __post_init__(self):
        defaults = {
            "authorization_url": YAHOO_AUTHORIZATION_URL,
            "token_url": YAHOO_TOKEN_URL,
            "user_profile_url": YAHOO_USER_PROFILE_URL,
            "user_guid_url": YAHOO_USER_GUID_URL,
        }
        for name, default in defaults.items():
            if not getattr(self, name):
                object.__setattr__(self, name, default)

        object.__setattr__(
            self,
            "basic_auth_header",
            basic_auth_header(self.client_id, self.client_secret),
        )

    def profile_url_for(self, guid: str) -> str:
        """Return the profile endpoint URL for a resolved GUID."""
        return self.user_profile_url.replace(GUID_PLACEHOLDER, guid)

    @classmethod
    def from_env(cls) -> "StrategyConfig":
        """Create configuration from environment variables."""
        base_url = os.environ.get("YAHOO_BASE_URL", "http://localhost:5000")

        return cls(
            client_id=os.environ.get("YAHOO_CLIENT_ID", ""),
            client_secret=os.environ.get("YAHOO_CLIENT_SECRET", ""),
            callback_url=os.environ.get(
                "YAHOO_CALLBACK_URL",
                f"{base_url}/auth/yahoo/callback"
            ),
            authorization_url=os.environ.get("YAHOO_AUTHORIZATION_URL", ""),
            token_url=os.environ.get("YAHOO_TOKEN_URL", ""),
            user_profile_url=os.environ.get("YAHOO_USER_PROFILE_URL", ""),
            user_guid_url=os.environ.get("YAHOO_USER_GUID_URL", ""),
            scope=os.environ.get("YAHOO_SCOPE") or None,
            skip_user_profile=os.environ.get(
                "YAHOO_SKIP_USER_PROFILE", "false"
            ).lower() == "true",
        )


@dataclass
class PluginConfig:
    """Overall plugin configuration."""

    strategy: StrategyConfig = field(default_factory=StrategyConfig.from_env)

    # Base URL for constructing callback URLs
    base_url: str = "http://localhost:5000"

    # Where the browser is sent when Yahoo reports an authorization error
    login_error_redirect: str = "/login?error=auth_failed"

    @classmethod
    def from_env(cls) -> "PluginConfig":
        """Create configuration from environment variables."""
        return cls(
            strategy=StrategyConfig.from_env(),
            base_url=os.environ.get("YAHOO_BASE_URL", "http://localhost:5000"),
            login_error_redirect=os.environ.get(
                "YAHOO_LOGIN_ERROR_REDIRECT", "/login?error=auth_failed"
            ),
        )
