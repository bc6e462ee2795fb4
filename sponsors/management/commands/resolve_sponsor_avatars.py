"""Management command that embeds rounded sponsor avatars into a sponsorships JSON file."""

import traceback
from typing import Any

import httpx
from django.core.management.base import BaseCommand, CommandError, CommandParser
from PIL import Image
from pydantic import ValidationError

from sponsors.management.commands._avatars.avatars import resolve_avatars_sync
from sponsors.management.commands._avatars.context import ResolveContext
from sponsors.management.commands._avatars.mixins import LoggingMixin
from sponsors.management.commands._avatars.types import NoFallback, VerbosityLevel
from sponsors.types import Sponsorship, dump_sponsorships, load_sponsorships


class Command(LoggingMixin, BaseCommand):
    """Fetch sponsor avatars and store base64 / data-URI variants on each sponsorship."""

    help = "Resolve sponsor avatars into rounded multi-resolution data URIs"

    def add_arguments(self, parser: CommandParser) -> None:
        """Add command line arguments."""
        parser.add_argument(
            "input",
            type=str,
            help="JSON file with the list of sponsorships (camelCase sponsorkit format)",
        )
        parser.add_argument(
            "--output",
            type=str,
            default=None,
            help="Where to write the resolved sponsorships (defaults to overwriting the input)",
        )
        parser.add_argument(
            "--fallback-avatar",
            type=str,
            default=None,
            help="URL or local file of the image used for private or unreachable sponsors "
            "(defaults to SPONSORS_FALLBACK_AVATAR)",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            default=None,
            help="Per-request download timeout in seconds (defaults to SPONSORS_AVATAR_TIMEOUT)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Resolve avatars without writing the output file",
        )

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: ARG002
        """Execute the command to resolve sponsor avatars."""
        try:
            ctx = ResolveContext.from_options(options, log_fn=self._log)
        except OSError as exc:
            msg = f"Cannot read fallback avatar: {exc!s}"
            raise CommandError(msg) from exc

        ships = self._load(ctx)
        if ctx.dry_run:
            ctx.log(
                "DRY RUN: The output file will not be written",
                VerbosityLevel.NORMAL,
                "WARNING",
            )
        if isinstance(ctx.fallback, NoFallback):
            ctx.log(
                "No fallback avatar configured; private sponsors will have no avatar",
                VerbosityLevel.DETAILED,
                "WARNING",
            )

        ctx.log(f"Resolving avatars for {len(ships)} sponsors...", VerbosityLevel.NORMAL)
        try:
            resolve_avatars_sync(ships, ctx.fallback, timeout=ctx.timeout)
        except (httpx.HTTPError, httpx.InvalidURL, OSError, Image.DecompressionBombError) as exc:
            ctx.log(f"Failed to resolve avatars: {exc!s}", VerbosityLevel.MINIMAL, "ERROR")
            if ctx.verbosity.value >= VerbosityLevel.DEBUG.value:
                self.stderr.write(traceback.format_exc())
            msg = "Avatar resolution failed"
            raise CommandError(msg) from exc

        resolved = sum(1 for ship in ships if ship.sponsor.avatar_buffer is not None)
        ctx.log(
            f"Resolved {resolved}/{len(ships)} sponsor avatars",
            VerbosityLevel.NORMAL,
            "SUCCESS",
        )

        if not ctx.dry_run:
            try:
                ctx.output_path.write_bytes(dump_sponsorships(ships))
            except OSError as exc:
                msg = f"Cannot write sponsorships file {ctx.output_path}: {exc!s}"
                raise CommandError(msg) from exc
            ctx.log(f"Wrote {ctx.output_path}", VerbosityLevel.DETAILED)

    @staticmethod
    def _load(ctx: ResolveContext) -> list[Sponsorship]:
        """Read and validate the sponsorships file; map failures to :class:`CommandError`."""
        try:
            return load_sponsorships(ctx.input_path.read_bytes())
        except FileNotFoundError as exc:
            msg = f"Sponsorships file not found: {ctx.input_path}"
            raise CommandError(msg) from exc
        except OSError as exc:
            msg = f"Cannot read sponsorships file {ctx.input_path}: {exc!s}"
            raise CommandError(msg) from exc
        except ValidationError as exc:
            msg = f"Invalid sponsorships file {ctx.input_path}: {exc.error_count()} error(s)"
            ctx.log(str(exc), VerbosityLevel.DETAILED, "ERROR")
            raise CommandError(msg) from exc
