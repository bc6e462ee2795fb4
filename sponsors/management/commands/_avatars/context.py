"""Typed resolve context - Parameter Object for the sponsor avatar commands."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Self

from django.conf import settings

from sponsors.management.commands._avatars.types import (
    FallbackAvatar,
    LogFn,
    NoFallback,
    VerbosityLevel,
    fallback_from_value,
)


@dataclass(frozen=True)
class ResolveContext:
    """
    Immutable, typed context shared across a ``resolve_sponsor_avatars`` run.

    Provides a convenience :meth:`log` that eliminates the need to pass *verbosity* on every call.
    """

    verbosity: VerbosityLevel
    log_fn: LogFn
    input_path: Path
    output_path: Path
    fallback: FallbackAvatar = field(default_factory=NoFallback)
    timeout: float = 5.0
    dry_run: bool = False

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------

    def log(
        self,
        message: str,
        min_level: VerbosityLevel,
        style: str | None = None,
    ) -> None:
        """
        Emit *message* when ``self.verbosity >= min_level``.

        Delegates to the :attr:`log_fn` callback supplied at construction.
        """
        self.log_fn(message, self.verbosity, min_level, style)

    @classmethod
    def from_options(cls, options: dict[str, Any], *, log_fn: LogFn) -> Self:
        """
        Construct from Django's parsed ``options`` dict (as passed to ``handle()``).

        Missing options fall back to ``SPONSORS_FALLBACK_AVATAR`` and ``SPONSORS_AVATAR_TIMEOUT``.
        """
        input_path = Path(options["input"])
        fallback_value = options.get("fallback_avatar")
        if fallback_value is None:
            fallback_value = settings.SPONSORS_FALLBACK_AVATAR
        timeout = options.get("timeout")
        if timeout is None:
            timeout = settings.SPONSORS_AVATAR_TIMEOUT
        return cls(
            verbosity=VerbosityLevel(min(options.get("verbosity", 1), VerbosityLevel.DEBUG.value)),
            log_fn=log_fn,
            input_path=input_path,
            output_path=Path(options.get("output") or input_path),
            fallback=fallback_from_value(fallback_value),
            timeout=timeout,
            dry_run=options.get("dry_run", False),
        )
