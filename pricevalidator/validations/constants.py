from __future__ import annotations

from django.db.models import TextChoices
from django.utils.translation import gettext_lazy as _


class SchemaTarget(TextChoices):
    """
    Named schema variants ("targets") published in the schema repository.

    The value is both the directory name under ``schemas/`` and the
    ``-s`` argument handed to the validator container.
    """

    IN_NETWORK_RATES = "in-network-rates", _("In-network rates")
    ALLOWED_AMOUNTS = "allowed-amounts", _("Allowed amounts")
    PROVIDER_REFERENCE = "provider-reference", _("Provider reference")
    TABLE_OF_CONTENTS = "table-of-contents", _("Table of contents")


DEFAULT_TARGET = SchemaTarget.IN_NETWORK_RATES


class ContainerFailureKind(TextChoices):
    """Why a validator container run did not produce a passing result."""

    VALIDATOR_NOT_FOUND = "validator_not_found", _("Validator image not found")
    PROCESS_FAILED = "process_failed", _("Validator process failed")
    TIMEOUT = "timeout", _("Validator timed out")
    ERROR = "error", _("Unexpected error")


# Fixed mount points inside the validator container.
CONTAINER_SCHEMA_ROOT = "/schema/"
CONTAINER_DATA_ROOT = "/data/"
CONTAINER_OUTPUT_ROOT = "/output/"

# Artifacts the validator may leave in its output directory.
OUTPUT_TEXT_FILENAME = "output.txt"
LOCATIONS_FILENAME = "locations.json"

# Pipeline failure messages surfaced to CLI and API callers.
MSG_DATA_FILE_NOT_FOUND = "Data file not found"
MSG_INVALID_JSON = "Invalid JSON input"
MSG_VERSION_NOT_FOUND = "Schema version not found in input"
MSG_NO_SCHEMA = "No schema available"
MSG_INVALID_SCHEMA_PATH = "Invalid schema path"
MSG_INVALID_URL = "Invalid URL"
MSG_JSON_PROCESSING_FAILED = "Failed to process JSON input"
MSG_NO_ENTRY_VALIDATED = "No archive entry was validated"
