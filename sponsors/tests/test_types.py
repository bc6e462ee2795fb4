"""Tests for the sponsorship data model and its JSON (de)serialization."""

import json

import pytest
from pydantic import ValidationError

from sponsors.types import (
    PrivacyLevel,
    Sponsor,
    Sponsorship,
    SponsorType,
    dump_sponsorships,
    load_sponsorships,
)


RAW = json.dumps(
    [
        {
            "sponsor": {
                "type": "Organization",
                "login": "acme",
                "name": "ACME Corp",
                "avatarUrl": "https://avatars.example.com/acme.png",
                "linkUrl": "https://acme.example.com",
                "websiteUrl": "https://acme.example.com/about",
            },
            "privacyLevel": "PUBLIC",
            "monthlyDollars": 100,
            "isOneTime": False,
            "createdAt": "2024-01-01T00:00:00Z",
            "provider": "github",
        },
        {
            "sponsor": {"login": "", "name": "Jane", "avatarUrl": "https://a.example.com/jane"},
            "privacyLevel": "PRIVATE",
        },
    ],
)


class TestLoadSponsorships:
    """Verify parsing of the camelCase cache format."""

    def test_fields_are_mapped(self) -> None:
        """Map camelCase keys onto snake_case attributes."""
        org, private = load_sponsorships(RAW)
        assert org.sponsor.type is SponsorType.Organization
        assert org.sponsor.avatar_url == "https://avatars.example.com/acme.png"
        assert org.sponsor.link_url == "https://acme.example.com"
        assert org.privacy_level is PrivacyLevel.PUBLIC
        assert org.monthly_dollars == 100  # noqa: PLR2004
        assert org.is_one_time is False
        assert private.is_private
        assert not org.is_private

    def test_defaults(self) -> None:
        """Default to a public user sponsor without resolved avatars."""
        (ship,) = load_sponsorships('[{"sponsor": {"login": "x"}}]')
        assert ship.sponsor.type is SponsorType.User
        assert ship.privacy_level is None
        assert not ship.is_private
        assert ship.sponsor.avatar_buffer is None

    def test_unknown_privacy_level_rejected(self) -> None:
        """Reject privacy levels outside PUBLIC / PRIVATE."""
        with pytest.raises(ValidationError):
            load_sponsorships('[{"sponsor": {"login": "x"}, "privacyLevel": "SECRET"}]')

    def test_missing_sponsor_rejected(self) -> None:
        """Require the nested sponsor record."""
        with pytest.raises(ValidationError):
            load_sponsorships('[{"privacyLevel": "PUBLIC"}]')


class TestDumpSponsorships:
    """Verify serialization back to the cache format."""

    def test_round_trip_preserves_unknown_keys(self) -> None:
        """Keep keys this app does not model."""
        dumped = json.loads(dump_sponsorships(load_sponsorships(RAW)))
        assert dumped[0]["provider"] == "github"
        assert dumped[0]["sponsor"]["websiteUrl"] == "https://acme.example.com/about"

    def test_resolved_fields_use_camel_case(self) -> None:
        """Write resolved avatars under their camelCase names and omit unset ones."""
        ship = Sponsorship(sponsor=Sponsor(login="x", avatar_url="https://a.example.com/x"))
        ship.sponsor.avatar_buffer = "AAAA"
        ship.sponsor.avatar_url_high_res = "data:image/png;base64,AAAA"

        (sponsor,) = [entry["sponsor"] for entry in json.loads(dump_sponsorships([ship]))]
        assert sponsor["avatarBuffer"] == "AAAA"
        assert sponsor["avatarUrlHighRes"] == "data:image/png;base64,AAAA"
        assert "avatarUrlLowRes" not in sponsor
        assert "avatar_url" not in sponsor

    def test_round_trip_keeps_explicit_nulls(self) -> None:
        """Write back nulls that were present in the input."""
        raw = json.dumps(
            [{"sponsor": {"login": "x", "linkUrl": None}, "expireAt": None, "monthlyDollars": 5}],
        )
        (entry,) = json.loads(dump_sponsorships(load_sponsorships(raw)))
        assert "linkUrl" in entry["sponsor"]
        assert entry["sponsor"]["linkUrl"] is None
        assert "expireAt" in entry
        assert entry["expireAt"] is None
        assert "privacyLevel" not in entry


class TestSponsor:
    """Verify the sponsor convenience properties."""

    @pytest.mark.parametrize(
        ("login", "name", "expected"),
        [("octocat", "The Octocat", "octocat"), ("", "The Octocat", "The Octocat"), ("", "", "")],
    )
    def test_display_name(self, login: str, name: str, expected: str) -> None:
        """Prefer the login and fall back to the name."""
        assert Sponsor(login=login, name=name).display_name == expected

    def test_is_organization(self) -> None:
        """Only the Organization type counts as an organization."""
        assert Sponsor(type="Organization").is_organization
        assert not Sponsor(type="User").is_organization
