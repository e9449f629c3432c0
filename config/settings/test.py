"""
With these settings, tests run faster.
"""

from .base import *  # noqa: F403
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="INgnwuvH37jf6eck2HmmKz8ISsZbDCj8v5YbhI9PXxzOCuBTS7Ns4Y4gZGGFTfDQ",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#test-runner
TEST_RUNNER = "django.test.runner.DiscoverRunner"
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "127.0.0.1", "testserver"]

# DATABASES
# ------------------------------------------------------------------------------
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    },
}

# Your stuff...
# ------------------------------------------------------------------------------

# Tests never talk to a real Docker daemon, git remote or web server; keep the
# deadlines short so a missing mock fails quickly instead of hanging.
VALIDATOR_TIMEOUT_SECONDS = 30
DOWNLOAD_TIMEOUT_SECONDS = 5
SCHEMA_REPO_TIMEOUT_SECONDS = 30
ARCHIVE_MAX_ITERATIONS = 10

# LOGGING
# ------------------------------------------------------------------------------
# Let every record propagate to the root logger so pytest's caplog sees the
# validator report and pipeline warnings.
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {"class": "logging.StreamHandler"},
    },
    "root": {"level": "DEBUG", "handlers": ["console"]},
}
