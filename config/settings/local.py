from .base import *  # noqa: F403
from .base import LOGGING
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = True
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="r3Q0yqk7W1mZbV9xN2cH5tLpA8sD4fGjK6uE0oIyT7wXzC1vB3nM5qRlS9dFhJ2a",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]  # noqa: S104

# CACHES
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#caches
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "",
    },
}

# Logging
# ------------------------------------------------------------------------------
# Local runs are interactive: print the validator report without decoration
# and show the container command that was run.
LOGGING["handlers"]["console"]["formatter"] = "plain"
LOGGING["loggers"]["pricevalidator.validations"]["level"] = "DEBUG"
