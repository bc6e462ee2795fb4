"""Shared test fixtures for the sponsors app."""

import base64
from collections.abc import Callable
from io import BytesIO
from typing import Any

import pytest
from PIL import Image

from sponsors.management.commands._avatars.images import PNG_DATA_URI_PREFIX
from sponsors.types import Sponsor, Sponsorship


type PngFactory = Callable[..., bytes]
type ShipFactory = Callable[..., Sponsorship]


def decode_data_uri(uri: str) -> Image.Image:
    """Decode a PNG data URI produced by the resolver into a loaded Pillow image."""
    assert uri.startswith(PNG_DATA_URI_PREFIX)
    img = Image.open(BytesIO(base64.b64decode(uri.removeprefix(PNG_DATA_URI_PREFIX))))
    img.load()
    return img


@pytest.fixture()
def make_png() -> PngFactory:
    """Return a factory for solid-color PNG bytes."""

    def _make(
        width: int = 64,
        height: int = 64,
        color: tuple[int, int, int, int] = (200, 30, 30, 255),
    ) -> bytes:
        buf = BytesIO()
        Image.new("RGBA", (width, height), color).save(buf, format="PNG")
        return buf.getvalue()

    return _make


@pytest.fixture()
def avatar_png(make_png: PngFactory) -> bytes:
    """Return an opaque red square avatar."""
    return make_png()


@pytest.fixture()
def fallback_png(make_png: PngFactory) -> bytes:
    """Return an opaque grey square used as the fallback avatar."""
    return make_png(color=(128, 128, 128, 255))


@pytest.fixture()
def make_ship() -> ShipFactory:
    """Return a factory for sponsorships with sensible defaults."""

    def _make(
        login: str = "octocat",
        avatar_url: str = "https://avatars.example.com/octocat.png",
        sponsor_type: str = "User",
        privacy_level: str | None = "PUBLIC",
        **sponsor_fields: Any,
    ) -> Sponsorship:
        return Sponsorship(
            sponsor=Sponsor(
                login=login,
                avatar_url=avatar_url,
                type=sponsor_type,
                **sponsor_fields,
            ),
            privacy_level=privacy_level,
        )

    return _make
