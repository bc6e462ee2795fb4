"""Command mixins that compose with :class:`~django.core.management.base.BaseCommand`."""

from django.core.management.base import OutputWrapper
from django.core.management.color import Style

from sponsors.management.commands._avatars.types import VerbosityLevel


class LoggingMixin:
    """
    Verbosity-aware logging for ``BaseCommand`` subclasses.

    Relies on ``stdout``, ``stderr``, and ``style`` attributes provided by
    :class:`~django.core.management.base.BaseCommand`.
    """

    stdout: OutputWrapper
    stderr: OutputWrapper
    style: Style

    def _log(
        self,
        message: str,
        verbosity: VerbosityLevel,
        min_level: VerbosityLevel,
        style: str | None = None,
    ) -> None:
        """
        Write *message* to stdout/stderr when *verbosity* >= *min_level*.

        Parameters
        ----------
        message:
            Text to log.
        verbosity:
            Current command verbosity (from ``ResolveContext``).
        min_level:
            Minimum level at which the message is emitted.
        style:
            Optional Django style name (``"SUCCESS"``, ``"WARNING"``,
            ``"ERROR"``).  ``"ERROR"`` directs output to *stderr*.

        """
        if verbosity.value < min_level.value:
            return
        if style == "SUCCESS":
            self.stdout.write(self.style.SUCCESS(message))
        elif style == "WARNING":
            self.stdout.write(self.style.WARNING(message))
        elif style == "ERROR":
            self.stderr.write(self.style.ERROR(message))
        else:
            self.stdout.write(message)
