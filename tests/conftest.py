"""
Pytest fixtures for dserver-yahoo-oauth2 tests.

Provides:
- Strategy configuration with test credentials
- Fake OAuth2 clients answering the GUID and profile endpoints
- A Flask app with the plugin and blueprint registered
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from flask import Flask

from dserver_yahoo_oauth2.config import StrategyConfig
from dserver_yahoo_oauth2.errors import OAuth2TransportError


GUID_URL = "https://social.yahooapis.com/v1/me/guid?format=json"
PROFILE_URL_G1 = "https://social.yahooapis.com/v1/user/G1/profile?format=json"

PROFILE_DOC = {
    "id": "profile-endpoint-id",
    "givenName": "Ada",
    "familyName": "Lovelace",
    "emails": [
        {"handle": "ada@yahoo.com", "primary": True},
        {"handle": "ada@example.com", "type": "HOME"},
    ],
    "image": {"imageUrl": "https://s.yimg.com/ada.jpg"},
}


def guid_body(guid="G1"):
    return json.dumps({"guid": {"value": guid}})


def make_client(responses):
    """
    Build a fake OAuth2 client.

    ``responses`` maps URL to a body string, or to an exception to raise.
    """
    async def get(url, access_token):
        result = responses[url]
        if isinstance(result, Exception):
            raise result
        return result

    client = MagicMock()
    client.get = AsyncMock(side_effect=get)
    client.fetch_token = AsyncMock(
        return_value={"access_token": "at-1", "refresh_token": "rt-1"}
    )
    client.create_authorization_url = MagicMock(
        return_value=("https://api.login.yahoo.com/oauth2/request_auth?x=1", "s")
    )
    return client


def transport_error(status_code=None, data=None):
    return OAuth2TransportError(f"HTTP {status_code}", status_code=status_code, data=data)


@pytest.fixture
def strategy_config():
    """Configuration with test credentials and Yahoo default URLs."""
    return StrategyConfig(
        client_id="client-abc",
        client_secret="secret-xyz",
        callback_url="https://app.example.com/auth/yahoo/callback",
    )


@pytest.fixture
def happy_client():
    """Client for which both endpoints succeed for GUID G1."""
    return make_client({
        GUID_URL: guid_body("G1"),
        PROFILE_URL_G1: json.dumps(PROFILE_DOC),
    })


@pytest.fixture
def yahoo_env(monkeypatch):
    """Environment for PluginConfig.from_env()."""
    monkeypatch.setenv("YAHOO_CLIENT_ID", "client-abc")
    monkeypatch.setenv("YAHOO_CLIENT_SECRET", "secret-xyz")
    monkeypatch.setenv("YAHOO_BASE_URL", "https://app.example.com")
    for name in (
        "YAHOO_CALLBACK_URL",
        "YAHOO_AUTHORIZATION_URL",
        "YAHOO_TOKEN_URL",
        "YAHOO_USER_PROFILE_URL",
        "YAHOO_USER_GUID_URL",
        "YAHOO_SCOPE",
        "YAHOO_SKIP_USER_PROFILE",
        "YAHOO_LOGIN_ERROR_REDIRECT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def app(yahoo_env):
    """Flask app with the plugin initialized and blueprint registered."""
    from dserver_yahoo_oauth2.plugin import YahooOAuth2StrategyPlugin

    flask_app = Flask(__name__)
    flask_app.config["TESTING"] = True

    plugin = YahooOAuth2StrategyPlugin(flask_app)
    flask_app.register_blueprint(plugin.get_blueprint())
    return flask_app
