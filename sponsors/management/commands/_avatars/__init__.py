"""
Private helpers for the sponsor avatar management commands.

* **avatars** - async batch resolution: fallback handling, downloads, per-sponsor variants.
* **context** - ``ResolveContext`` frozen dataclass (typed Parameter Object).
* **images** - rounding transform, SVG rasterization, and base64 / data-URI encoding.
* **mixins** - ``LoggingMixin`` for the Command classes.
* **types** - ``VerbosityLevel``, logger protocols, and the fallback-avatar source variants.
"""
