"""Django settings for sponsorkit project."""

from pathlib import Path

import environ
import structlog


# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# Django-environ
# Take environment variables from .env file
env = environ.Env()
environ.Env.read_env(BASE_DIR / ".env")

# --------------------------------------------------------------------------------------------------
# GENERAL
# --------------------------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = env.bool("DJANGO_DEBUG", False)

# http://en.wikipedia.org/wiki/List_of_tz_zones_by_name
TIME_ZONE = env("TIME_ZONE", default="UTC")
# https://docs.djangoproject.com/en/dev/ref/settings/#use-tz
USE_TZ = True


# --------------------------------------------------------------------------------------------------
# APPS
# --------------------------------------------------------------------------------------------------
DJANGO_APPS = [
    "django.contrib.contenttypes",
]
LOCAL_APPS = [
    "sponsors",
]
# https://docs.djangoproject.com/en/dev/ref/settings/#installed-apps
INSTALLED_APPS = LOCAL_APPS + DJANGO_APPS


# --------------------------------------------------------------------------------------------------
# SECURITY
# --------------------------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env("DJANGO_SECRET_KEY", default="sponsorkit-insecure-development-key")


# --------------------------------------------------------------------------------------------------
# LOGGING
# --------------------------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#logging
# https://docs.djangoproject.com/en/dev/topics/logging

# Ensure log directory exists
log_dir = Path(env("LOG_DIR", default=BASE_DIR / "logs"))
log_dir.mkdir(parents=True, exist_ok=True)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "colored_console": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processor": structlog.dev.ConsoleRenderer(colors=True),
        },
        "json_formatter": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processor": structlog.processors.JSONRenderer(),
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "colored_console",
        },
        "json_file": {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "filename": log_dir / "sponsorkit.log",
            "formatter": "json_formatter",
            "when": "midnight",
            "backupCount": 30,
        },
        "error_file": {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "filename": log_dir / "error.log",
            "formatter": "json_formatter",
            "when": "midnight",
            "backupCount": 90,
            "level": "ERROR",
        },
    },
    "root": {
        "handlers": ["console", "json_file"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {
            "handlers": ["console", "json_file"],
            "level": "WARNING",
            "propagate": False,
        },
        "sponsors": {
            "level": env("LOG_LEVEL", default="INFO"),
            "handlers": ["console", "json_file", "error_file"],
            "propagate": False,
        },
    },
}

# Structlog configuration
processors = []

# Add CallsiteParameterAdder in debug mode
if DEBUG:
    processors.append(
        # Add source code location information (file, function, line) where the log was called
        structlog.processors.CallsiteParameterAdder(
            parameters=(
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ),
        ),
    )

processors.extend(
    [
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
)

structlog.configure(
    processors=processors,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

# --------------------------------------------------------------------------------------------------
# Sponsor avatars
# --------------------------------------------------------------------------------------------------
# Image used for private sponsors and as a substitute for avatars that cannot be fetched.
# Either an http(s) URL or a path to a local image file; empty disables the fallback.
SPONSORS_FALLBACK_AVATAR = env("SPONSORS_FALLBACK_AVATAR", default="")
# Per-request timeout in seconds for avatar downloads (httpx's own default is 5 seconds)
SPONSORS_AVATAR_TIMEOUT = env.float("SPONSORS_AVATAR_TIMEOUT", default=5.0)
