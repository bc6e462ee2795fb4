"""Defines the configuration for the Sponsors app."""

from django.apps import AppConfig


class SponsorsConfig(AppConfig):
    """Configuration class for the Sponsors app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "sponsors"
