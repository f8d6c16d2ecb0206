"""
Flask blueprint for Yahoo authentication.

This blueprint provides the following endpoints:
- GET /auth/yahoo/login - Redirect to Yahoo for authorization
- GET /auth/yahoo/callback - Exchange the code and resolve the user
- GET /auth/yahoo/info - Describe the configured strategy
"""

import logging

from flask import current_app, jsonify, redirect, request, url_for
from flask_smorest import Blueprint

from .config import PluginConfig
from .errors import ResolutionError, TokenExchangeError
from .strategy import YahooStrategy

logger = logging.getLogger(__name__)

EXTENSION_KEY = "yahoo_oauth2"

yahoo_bp = Blueprint(
    "yahoo_auth",
    __name__,
    url_prefix="/auth/yahoo",
    description="Yahoo OAuth2 authentication endpoints"
)


def _extension_state() -> dict:
    """Return what the plugin registered on the current app."""
    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError:
        raise RuntimeError(
            "Yahoo strategy not initialized; call YahooOAuth2StrategyPlugin.init_app"
        )


def get_strategy() -> YahooStrategy:
    """Return the strategy registered by the plugin."""
    return _extension_state()["strategy"]


def get_config() -> PluginConfig:
    """Return the plugin configuration registered by the plugin."""
    return _extension_state()["config"]


@yahoo_bp.route("/login")
def login():
    """
    Redirect the user to Yahoo for authorization.

    Query Parameters:
        state: Opaque value passed through to the callback (optional)
    """
    strategy = get_strategy()

    if not strategy.config.client_id:
        return jsonify({
            "error": "Yahoo OAuth2 not configured",
            "message": "YAHOO_CLIENT_ID is not set"
        }), 500

    authorization_url = strategy.authorization_url(state=request.args.get("state"))
    logger.info("Initiating Yahoo login, redirecting to provider")
    return redirect(authorization_url)


@yahoo_bp.route("/callback")
async def callback():
    """
    Yahoo callback endpoint.

    Exchanges the authorization code, resolves the Yahoo profile and hands it
    to the host's verify callback.
    """
    error = request.args.get("error")
    if error:
        error_description = request.args.get("error_description", "Unknown error")
        logger.error(f"Yahoo authorization error: {error} - {error_description}")
        return redirect(get_config().login_error_redirect)

    code = request.args.get("code")
    if not code:
        logger.error("No authorization code received")
        return jsonify({"error": "Missing authorization code"}), 400

    strategy = get_strategy()
    try:
        result = await strategy.authenticate(code)
    except TokenExchangeError as e:
        logger.error(f"Yahoo token exchange failed: {e}")
        return jsonify({
            "error": "token_exchange_failed",
            "message": e.message,
        }), 502
    except ResolutionError as e:
        logger.error(f"Yahoo profile resolution failed: {e}")
        return jsonify({
            "error": e.kind.value,
            "message": e.message,
            "status_code": e.status_code,
        }), 502

    if not result.success:
        return jsonify({"error": "Authentication rejected"}), 401

    return jsonify({
        "user": result.user,
        "profile": result.profile.to_dict() if result.profile else None,
    })


@yahoo_bp.route("/info")
def auth_info():
    """
    Return information about the configured strategy.

    This endpoint can be used by the frontend to display login options.
    """
    strategy = get_strategy()

    return jsonify({
        "provider": strategy.name,
        "login_url": url_for("yahoo_auth.login", _external=True),
        "configured": bool(strategy.config.client_id and strategy.config.client_secret),
    })
