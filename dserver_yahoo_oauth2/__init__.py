"""
dserver-yahoo-oauth2

A Yahoo OAuth 2.0 authentication strategy plugin for dserver.

Yahoo does not identify the user in its token response. After the
authorization code exchange this plugin:
- Looks up the user's GUID at the Yahoo GUID endpoint
- Fetches the Yahoo profile for that GUID
- Normalizes it into a provider-agnostic profile
- Hands the profile to the host's verify callback
"""

__version__ = "0.1.0"

from .errors import ResolutionError, ResolutionErrorKind
from .plugin import YahooOAuth2StrategyPlugin
from .profile import NormalizedProfile
from .resolver import ProfileResolver
from .strategy import YahooStrategy
from .blueprint import yahoo_bp

__all__ = [
    "YahooOAuth2StrategyPlugin",
    "YahooStrategy",
    "ProfileResolver",
    "NormalizedProfile",
    "ResolutionError",
    "ResolutionErrorKind",
    "yahoo_bp",
    "__version__",
]
