"""Shared enums, protocols, and the fallback-avatar source variants for the avatar resolver."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Protocol


class VerbosityLevel(Enum):
    """Django management-command verbosity levels (mirrors the built-in ``--verbosity`` flag)."""

    MINIMAL = 0
    NORMAL = 1
    DETAILED = 2
    DEBUG = 3


class LogFn(Protocol):
    """
    Callback signature accepted by :meth:`ResolveContext.log`.

    Matches :meth:`LoggingMixin._log`.
    """

    def __call__(
        self,
        message: str,
        verbosity: VerbosityLevel,
        min_level: VerbosityLevel,
        style: str | None = None,
    ) -> None: ...


class ErrorLogger(Protocol):
    """Minimal logger collaborator used by the resolver (a structlog logger satisfies it)."""

    def error(self, event: str, *args: Any, **kw: Any) -> Any: ...


# ---------------------------------------------------------------------------
# Fallback avatar source
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NoFallback:
    """No fallback image is configured."""


@dataclass(frozen=True)
class FallbackUrl:
    """Fallback image downloaded once per batch from *url*."""

    url: str


@dataclass(frozen=True)
class FallbackBytes:
    """Fallback image supplied as raw encoded bytes."""

    data: bytes


type FallbackAvatar = NoFallback | FallbackUrl | FallbackBytes


def fallback_from_value(value: str | bytes | Path | None) -> FallbackAvatar:
    """
    Normalize a setting or command-line value into a :data:`FallbackAvatar`.

    ``None`` and ``""`` disable the fallback, raw bytes are used as-is, ``http(s)`` URLs are
    downloaded at resolution time, and anything else is read as a local image file.

    Raises
    ------
    FileNotFoundError
        If a local path is given that does not exist.

    """
    if value is None or value in {"", b""}:
        return NoFallback()
    if isinstance(value, bytes):
        return FallbackBytes(value)
    if isinstance(value, str) and value.startswith(("http://", "https://")):
        return FallbackUrl(value)
    path = Path(value)
    if not path.is_file():
        msg = f"Fallback avatar file not found: {path}"
        raise FileNotFoundError(msg)
    return FallbackBytes(path.read_bytes())
