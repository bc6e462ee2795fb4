"""Management command for rasterizing a rendered sponsors SVG to PNG."""

from pathlib import Path
from typing import Any

from django.core.management.base import BaseCommand, CommandError, CommandParser

from sponsors.management.commands._avatars.images import SVG_DENSITY, svg_to_png


class Command(BaseCommand):
    """Convert an SVG file (e.g. a sponsors wall) into a PNG image."""

    help = f"Rasterize an SVG file to PNG at {SVG_DENSITY} DPI"

    def add_arguments(self, parser: CommandParser) -> None:
        """Add command line arguments."""
        parser.add_argument("input", type=str, help="SVG file to rasterize")
        parser.add_argument("output", type=str, help="Destination PNG file")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: ARG002
        """Execute the command to convert the SVG file."""
        source = Path(options["input"])
        target = Path(options["output"])

        try:
            svg = source.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            msg = f"SVG file not found: {source}"
            raise CommandError(msg) from exc
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read SVG file {source}: {exc!s}"
            raise CommandError(msg) from exc

        # Malformed markup surfaces as ParseError (a SyntaxError) or ValueError
        try:
            png = svg_to_png(svg)
        except (OSError, SyntaxError, ValueError) as exc:
            msg = f"Failed to rasterize {source}: {exc!s}"
            raise CommandError(msg) from exc

        try:
            target.write_bytes(png)
        except OSError as exc:
            msg = f"Cannot write PNG file {target}: {exc!s}"
            raise CommandError(msg) from exc
        self.stdout.write(self.style.SUCCESS(f"Wrote {target}"))
