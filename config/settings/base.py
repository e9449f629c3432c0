"""
Base settings to build other settings files upon.
"""

from pathlib import Path

import environ

BASE_DIR = Path(__file__).resolve(strict=True).parent.parent.parent
# pricevalidator/
APPS_DIR = BASE_DIR / "pricevalidator"
env = environ.Env()

READ_DOT_ENV_FILE = env.bool("DJANGO_READ_DOT_ENV_FILE", default=False)
if READ_DOT_ENV_FILE:
    # OS environment variables take precedence over variables from .env
    env.read_env(str(BASE_DIR / ".env"))

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = env.bool("DJANGO_DEBUG", False)
# https://docs.djangoproject.com/en/dev/ref/settings/#time-zone
TIME_ZONE = "UTC"
# https://docs.djangoproject.com/en/dev/ref/settings/#language-code
LANGUAGE_CODE = "en-us"
# https://docs.djangoproject.com/en/dev/ref/settings/#use-tz
USE_TZ = True

# DATABASES
# ------------------------------------------------------------------------------
# Nothing in the validation pipeline is persisted; the database only backs
# Django's contenttypes/auth machinery that DRF expects to be importable.
DATABASES = {
    "default": env.db(
        "DATABASE_URL",
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
    ),
}
# https://docs.djangoproject.com/en/stable/ref/settings/#std:setting-DEFAULT_AUTO_FIELD
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# URLS
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#root-urlconf
ROOT_URLCONF = "config.urls"
# https://docs.djangoproject.com/en/dev/ref/settings/#wsgi-application
WSGI_APPLICATION = "config.wsgi.application"

# APPS
# ------------------------------------------------------------------------------
DJANGO_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
]
THIRD_PARTY_APPS = [
    "rest_framework",
]
LOCAL_APPS = [
    "pricevalidator.validations",
]
# https://docs.djangoproject.com/en/dev/ref/settings/#installed-apps
INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

# MIDDLEWARE
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#middleware
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# LOGGING
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#logging
# The validator's free-text report is written to the
# "pricevalidator.validations" logger at INFO, so that logger must stay
# visible on the console.
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(levelname)s %(asctime)s %(module)s %(message)s",
        },
        "plain": {
            "format": "%(message)s",
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {"level": "INFO", "handlers": ["console"]},
    "loggers": {
        "pricevalidator.validations": {
            "level": env("PRICEVALIDATOR_LOG_LEVEL", default="INFO"),
            "handlers": ["console"],
            "propagate": False,
        },
    },
}

# django-rest-framework
# -------------------------------------------------------------------------------
# The validation endpoint is unauthenticated; deployments put it behind their
# own gateway.
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "UNAUTHENTICATED_USER": None,
}

# VALIDATOR CONTAINER
# ------------------------------------------------------------------------------
# Image reference looked up in the local Docker runtime. Only its identifier is
# discovered; building and pulling the image is managed elsewhere.
VALIDATOR_IMAGE = env("VALIDATOR_IMAGE", default="validator:latest")
# Overrides for DockerValidatorRunner constructor arguments.
VALIDATOR_RUNNER_OPTIONS = {}
VALIDATOR_DOCKER_BINARY = env("VALIDATOR_DOCKER_BINARY", default="docker")
VALIDATOR_TIMEOUT_SECONDS = env.int("VALIDATOR_TIMEOUT_SECONDS", default=3600)

# SCHEMA REPOSITORY
# ------------------------------------------------------------------------------
SCHEMA_REPO_URL = env(
    "SCHEMA_REPO_URL",
    default="https://github.com/CMSgov/price-transparency-guide.git",
)
SCHEMA_REPO_FOLDER = env("SCHEMA_REPO_FOLDER", default=str(BASE_DIR / "schema-repo"))
SCHEMA_REPO_BRANCH = env("SCHEMA_REPO_BRANCH", default="master")
SCHEMA_REPO_TIMEOUT_SECONDS = env.int("SCHEMA_REPO_TIMEOUT_SECONDS", default=600)

# REMOTE DATA FILES
# ------------------------------------------------------------------------------
DOWNLOAD_TIMEOUT_SECONDS = env.int("DOWNLOAD_TIMEOUT_SECONDS", default=300)
# Downloads larger than this ask the operator for confirmation first.
DOWNLOAD_CONFIRM_BYTES = env.int("DOWNLOAD_CONFIRM_BYTES", default=1024**3)
# Upper bound on entries validated from one archive in a single session.
ARCHIVE_MAX_ITERATIONS = env.int("ARCHIVE_MAX_ITERATIONS", default=100)
