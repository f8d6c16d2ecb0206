import dataclasses
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import GUID_URL, make_client, transport_error
from dserver_yahoo_oauth2.errors import GuidFetchProviderError, TokenExchangeError
from dserver_yahoo_oauth2.profile import NormalizedProfile
from dserver_yahoo_oauth2.strategy import YahooStrategy


def test_strategy_enables_authorization_header(strategy_config, happy_client):
    strategy = YahooStrategy(strategy_config, MagicMock(), client=happy_client)

    assert strategy.name == "yahoo"
    happy_client.use_authorization_header_for_get.assert_called_once_with(True)


def test_strategy_requires_verify(strategy_config):
    with pytest.raises(TypeError):
        YahooStrategy(strategy_config, None)


def test_authorization_url(strategy_config, happy_client):
    strategy = YahooStrategy(strategy_config, MagicMock(), client=happy_client)

    url = strategy.authorization_url(state="s")

    assert url.startswith("https://api.login.yahoo.com/oauth2/request_auth")
    happy_client.create_authorization_url.assert_called_once_with(state="s")


@pytest.mark.asyncio
async def test_authenticate_token_passes_profile_to_verify(strategy_config, happy_client):
    verify = MagicMock(return_value={"username": "ada"})
    strategy = YahooStrategy(strategy_config, verify, client=happy_client)

    result = await strategy.authenticate_token("at-1", "rt-1")

    assert result.success
    assert result.user == {"username": "ada"}
    access_token, refresh_token, profile = verify.call_args.args
    assert (access_token, refresh_token) == ("at-1", "rt-1")
    assert isinstance(profile, NormalizedProfile)
    assert profile.id == "G1"
    assert result.profile is profile


@pytest.mark.asyncio
async def test_async_verify_is_awaited(strategy_config, happy_client):
    verify = AsyncMock(return_value="user-1")
    strategy = YahooStrategy(strategy_config, verify, client=happy_client)

    result = await strategy.authenticate_token("at-1")

    assert result.user == "user-1"
    verify.assert_awaited_once()


@pytest.mark.asyncio
async def test_verify_false_is_soft_failure(strategy_config, happy_client):
    strategy = YahooStrategy(strategy_config, lambda *args: False, client=happy_client)

    result = await strategy.authenticate_token("at-1")

    assert result.user is False
    assert not result.success
    assert result.profile.id == "G1"


@pytest.mark.asyncio
async def test_verify_exception_propagates(strategy_config, happy_client):
    def verify(access_token, refresh_token, profile):
        raise LookupError("database unavailable")

    strategy = YahooStrategy(strategy_config, verify, client=happy_client)

    with pytest.raises(LookupError):
        await strategy.authenticate_token("at-1")


@pytest.mark.asyncio
async def test_resolution_error_skips_verify(strategy_config):
    client = make_client({
        GUID_URL: transport_error(401, json.dumps({"error": {"detail": "bad token"}})),
    })
    verify = MagicMock()
    strategy = YahooStrategy(strategy_config, verify, client=client)

    with pytest.raises(GuidFetchProviderError):
        await strategy.authenticate_token("at-1")

    verify.assert_not_called()


@pytest.mark.asyncio
async def test_skip_user_profile(strategy_config, happy_client):
    config = dataclasses.replace(strategy_config, skip_user_profile=True)
    verify = MagicMock(return_value="user-1")
    strategy = YahooStrategy(config, verify, client=happy_client)

    result = await strategy.authenticate_token("at-1")

    assert result.user == "user-1"
    assert result.profile is None
    verify.assert_called_once_with("at-1", None, None)
    happy_client.get.assert_not_awaited()


@pytest.mark.asyncio
async def test_authenticate_exchanges_code(strategy_config, happy_client):
    verify = MagicMock(return_value="user-1")
    strategy = YahooStrategy(strategy_config, verify, client=happy_client)

    result = await strategy.authenticate("code-1")

    happy_client.fetch_token.assert_awaited_once_with("code-1")
    assert result.user == "user-1"
    assert verify.call_args.args[:2] == ("at-1", "rt-1")


@pytest.mark.asyncio
async def test_authenticate_without_access_token(strategy_config, happy_client):
    happy_client.fetch_token.return_value = {"token_type": "bearer"}
    strategy = YahooStrategy(strategy_config, MagicMock(), client=happy_client)

    with pytest.raises(TokenExchangeError):
        await strategy.authenticate("code-1")

    happy_client.get.assert_not_awaited()
