"""
Normalized user profile.

Yahoo's profile document is mapped onto the provider-agnostic shape hosts
use for user lookup (provider, id, displayName, name, emails, photos).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

PROVIDER_NAME = "yahoo"


@dataclass(frozen=True)
class ProfileName:
    given_name: str = ""
    family_name: str = ""


@dataclass(frozen=True)
class ProfileEmail:
    value: str
    type: str = "unknown"


@dataclass(frozen=True)
class ProfilePhoto:
    value: str = ""


@dataclass(frozen=True)
class NormalizedProfile:
    """User profile resolved from a Yahoo access token."""

    id: str
    display_name: str
    name: ProfileName
    emails: Tuple[ProfileEmail, ...] = ()
    photos: Tuple[ProfilePhoto, ...] = (ProfilePhoto(),)
    raw: str = ""
    parsed: Dict[str, Any] = field(default_factory=dict, compare=False)
    provider: str = PROVIDER_NAME

    def to_dict(self) -> dict:
        """Return the profile in the camelCase layout used by OAuth hosts."""
        return {
            "provider": self.provider,
            "id": self.id,
            "displayName": self.display_name,
            "name": {
                "familyName": self.name.family_name,
                "givenName": self.name.given_name,
            },
            "emails": [{"value": e.value, "type": e.type} for e in self.emails],
            "photos": [{"value": p.value} for p in self.photos],
            "_raw": self.raw,
            "_json": self.parsed,
        }


def _text(value: Any) -> str:
    """Render a provider field as text; missing or falsy values become ""."""
    return str(value) if value else ""


def _email_type(email: dict) -> str:
    if email.get("primary"):
        return "account"
    return _text(email.get("type")) or "unknown"


def _image_url(image: Optional[dict]) -> str:
    if not isinstance(image, dict):
        return ""
    return _text(image.get("imageUrl"))


def build_profile(guid: str, raw: str, parsed: Dict[str, Any]) -> NormalizedProfile:
    """
    Map a decoded Yahoo profile onto a NormalizedProfile.

    ``parsed["id"]`` is overwritten with ``guid``; the GUID endpoint is the
    authority for the user id.

    Args:
        guid: GUID resolved from the GUID endpoint
        raw: Profile response body as received
        parsed: Decoded profile response body

    Returns:
        NormalizedProfile
    """
    parsed["id"] = guid

    given_name = _text(parsed.get("givenName"))
    family_name = _text(parsed.get("familyName"))

    raw_emails = parsed.get("emails")
    if not isinstance(raw_emails, list):
        raw_emails = []

    emails = tuple(
        ProfileEmail(value=_text(email.get("handle")), type=_email_type(email))
        for email in raw_emails
        if isinstance(email, dict)
    )

    return NormalizedProfile(
        id=guid,
        display_name=" ".join([given_name, family_name]),
        name=ProfileName(given_name=given_name, family_name=family_name),
        emails=emails,
        photos=(ProfilePhoto(value=_image_url(parsed.get("image"))),),
        raw=raw,
        parsed=parsed,
    )
