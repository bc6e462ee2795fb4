"""
Sponsorship records exchanged with the sponsors wall renderer.

Records are read from and written back to the sponsorkit JSON cache format, which uses camelCase
keys. Unknown keys are preserved so a round trip through this app never drops data.
"""

from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic.alias_generators import to_camel


class SponsorType(StrEnum):
    """Kind of account behind a sponsorship."""

    User = "User"
    Organization = "Organization"


class PrivacyLevel(StrEnum):
    """Whether the sponsor allows their identity to be shown."""

    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class Sponsor(_CamelModel):
    """Sponsor identity plus the avatar representations filled in by the resolver."""

    type: SponsorType = SponsorType.User
    login: str = ""
    name: str = ""
    avatar_url: str = ""
    link_url: str | None = None

    # Resolved avatar set
    avatar_buffer: str | None = None
    avatar_url_high_res: str | None = None
    avatar_url_medium_res: str | None = None
    avatar_url_low_res: str | None = None

    @property
    def display_name(self) -> str:
        """Return the login, falling back to the display name."""
        return self.login or self.name

    @property
    def is_organization(self) -> bool:
        """Return ``True`` for organization accounts."""
        return self.type == SponsorType.Organization


class Sponsorship(_CamelModel):
    """A sponsor together with its privacy and tier metadata."""

    sponsor: Sponsor
    privacy_level: PrivacyLevel | None = None
    monthly_dollars: float | None = None
    is_one_time: bool | None = None
    created_at: str | None = None

    @property
    def is_private(self) -> bool:
        """Return ``True`` when the sponsor opted out of exposing their identity."""
        return self.privacy_level == PrivacyLevel.PRIVATE


_SPONSORSHIPS = TypeAdapter(list[Sponsorship])


def load_sponsorships(raw: str | bytes) -> list[Sponsorship]:
    """Parse a JSON array of sponsorships in the camelCase cache format."""
    return _SPONSORSHIPS.validate_json(raw)


def dump_sponsorships(ships: Iterable[Sponsorship]) -> bytes:
    """Serialize *ships* back to the camelCase cache format, omitting fields never set."""
    return _SPONSORSHIPS.dump_json(list(ships), by_alias=True, exclude_unset=True, indent=2)
