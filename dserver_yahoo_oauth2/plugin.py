"""
dserver plugin registration for the Yahoo OAuth2 strategy.

This module provides the plugin class that integrates with dservercore's
plugin discovery system via the ExtensionABC interface.
"""

import logging

from flask import Flask

from .blueprint import EXTENSION_KEY, yahoo_bp
from .config import PluginConfig
from .strategy import VerifyCallback, YahooStrategy

logger = logging.getLogger(__name__)


def _default_verify(access_token, refresh_token, profile):
    """Accept every resolved profile, returning it as the user."""
    return profile.to_dict() if profile is not None else False


class YahooOAuth2StrategyPlugin:
    """
    Yahoo OAuth2 strategy plugin for dserver.

    Authenticates users against Yahoo and hands the normalized profile to
    the host's verify callback.

    Implements the dservercore ExtensionABC interface.
    """

    def __init__(self, app: Flask = None, verify: VerifyCallback = None):
        """
        Initialize the plugin.

        Args:
            app: Flask application instance (optional, can call init_app later)
            verify: Callback mapping (access_token, refresh_token, profile) to
                a user or False. Defaults to accepting every profile.
        """
        self.app = app
        self.verify = verify or _default_verify
        self.config: PluginConfig = None
        self.strategy: YahooStrategy = None

        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask, *args, **kwargs):
        """
        Initialize the plugin with a Flask application.

        This is called by dservercore's app factory.

        Args:
            app: Flask application instance
        """
        self.app = app

        # Load configuration
        self.config = PluginConfig.from_env()
        self.strategy = YahooStrategy(self.config.strategy, self.verify)

        app.extensions[EXTENSION_KEY] = {
            "config": self.config,
            "strategy": self.strategy,
        }

        logger.info("Yahoo OAuth2 strategy plugin initialized")
        if self.config.strategy.client_id:
            logger.info(f"Callback URL: {self.config.strategy.callback_url}")
        else:
            logger.warning("Yahoo OAuth2 not fully configured - YAHOO_CLIENT_ID not set")

    def get_blueprint(self):
        """
        Return the Flask blueprint for this extension.

        Required by dservercore ExtensionABC.
        """
        return yahoo_bp

    def register_dataset(self, dataset_info):
        """
        Register a dataset (no-op for auth plugin).

        Required by dservercore PluginABC but not used for authentication.
        """
        pass

    def get_config(self):
        """
        Return plugin configuration dictionary.

        Required by dservercore PluginABC.
        """
        return {}

    def get_config_secrets_to_obfuscate(self):
        """Return config keys that should not be exposed."""
        return ["YAHOO_CLIENT_SECRET"]

    @staticmethod
    def get_name() -> str:
        """Return the plugin name."""
        return "yahoo-oauth2-strategy"

    @staticmethod
    def get_version() -> str:
        """Return the plugin version."""
        from . import __version__
        return __version__

    @staticmethod
    def get_description() -> str:
        """Return the plugin description."""
        return "Yahoo OAuth 2.0 authentication strategy for dserver"
