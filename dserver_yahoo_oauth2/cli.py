"""
Flask CLI commands for the Yahoo OAuth2 strategy.

These commands help with setup and debugging of the Yahoo integration.
"""

import asyncio
import json

import click
import httpx
from flask.cli import with_appcontext

from .config import GUID_PLACEHOLDER, PluginConfig, StrategyConfig
from .errors import ResolutionError
from .oauth2_client import HttpxOAuth2Client
from .resolver import ProfileResolver


@click.group("yahoo")
def yahoo_cli():
    """Yahoo OAuth2 strategy management commands."""
    pass


@yahoo_cli.command("show-config")
@with_appcontext
def show_config():
    """Display current Yahoo OAuth2 configuration."""
    config = PluginConfig.from_env()
    strategy = config.strategy

    click.echo("=== Yahoo OAuth2 Configuration ===")
    click.echo(f"Authorization URL: {strategy.authorization_url}")
    click.echo(f"Token URL: {strategy.token_url}")
    click.echo(f"User GUID URL: {strategy.user_guid_url}")
    click.echo(f"User Profile URL: {strategy.user_profile_url}")
    click.echo(f"Callback URL: {strategy.callback_url}")
    click.echo(f"Scope: {strategy.scope or 'Not configured'}")
    click.echo(f"Client ID: {strategy.client_id[:8] + '...' if strategy.client_id else 'Not configured'}")
    click.echo(f"Client Secret: {'Configured' if strategy.client_secret else 'Not configured'}")
    click.echo(f"Skip User Profile: {strategy.skip_user_profile}")
    click.echo(f"Login Error Redirect: {config.login_error_redirect}")


@yahoo_cli.command("validate-config")
@with_appcontext
def validate_config():
    """Validate the current configuration."""
    strategy = StrategyConfig.from_env()
    errors = []
    warnings = []

    if not strategy.client_id:
        errors.append("YAHOO_CLIENT_ID not configured")
    if not strategy.client_secret:
        errors.append("YAHOO_CLIENT_SECRET not configured")
    if GUID_PLACEHOLDER not in strategy.user_profile_url:
        errors.append(f"YAHOO_USER_PROFILE_URL has no {GUID_PLACEHOLDER} placeholder")

    if not strategy.callback_url.startswith("https://"):
        warnings.append("Callback URL is not HTTPS (Yahoo rejects it outside development)")

    # Output results
    if warnings:
        click.echo("=== Warnings ===")
        for warning in warnings:
            click.echo(f"  ! {warning}")

    if errors:
        click.echo("\n=== Errors ===")
        for error in errors:
            click.echo(f"  x {error}")
        click.echo(f"\nConfiguration validation failed with {len(errors)} error(s)")
        return

    click.echo("\n[OK] Configuration is valid!")


@yahoo_cli.command("test-connection")
@with_appcontext
def test_connection():
    """Test connectivity to the Yahoo endpoints."""
    strategy = StrategyConfig.from_env()

    click.echo("=== Testing Yahoo Connectivity ===\n")

    endpoints = [
        ("Authorization URL", "HEAD", strategy.authorization_url),
        ("Token URL", "POST", strategy.token_url),
        ("User GUID URL", "GET", strategy.user_guid_url),
    ]

    with httpx.Client() as client:
        for label, method, url in endpoints:
            # Any HTTP response (even an error status) means the host is reachable
            try:
                client.request(method, url, follow_redirects=True, timeout=10)
                click.echo(f"[OK] {label} reachable: {url}")
            except httpx.HTTPError as e:
                click.echo(f"[FAIL] {label}: {e}")


@yahoo_cli.command("resolve-profile")
@click.option("--access-token", required=True, help="Yahoo access token")
def resolve_profile(access_token):
    """Resolve and print the normalized profile for an access token."""
    config = StrategyConfig.from_env()
    client = HttpxOAuth2Client(config)
    client.use_authorization_header_for_get(True)
    resolver = ProfileResolver(config, client)

    try:
        profile = asyncio.run(resolver.resolve_profile(access_token))
    except ResolutionError as e:
        click.echo(f"Error ({e.kind.value}): {e}", err=True)
        raise SystemExit(1)

    click.echo(json.dumps(profile.to_dict(), indent=2))
