"""
Exceptions raised by the validation collaborators.

The orchestrator catches these at its boundary and turns them into a
PipelineFailure, so none of them reach CLI or API callers.
"""

from __future__ import annotations


class PriceValidatorError(Exception):
    """Base class for errors raised while preparing a validation."""


class SchemaRepositoryError(PriceValidatorError):
    """The schema repository could not be cloned, updated or checked out."""


class SchemaVersionNotFoundError(PriceValidatorError):
    """No schema version could be read from the data being validated."""


class DownloadError(PriceValidatorError):
    """A remote data file could not be fetched or unpacked."""
