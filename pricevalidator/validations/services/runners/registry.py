"""
Process-wide validator runner.

Usage:
    from pricevalidator.validations.services.runners import get_validator_runner

    runner = get_validator_runner()
    result = runner.run_container(
        schema_path="schema-repo/schemas/in-network-rates/in-network-rates.json",
        schema_name="in-network-rates",
        data_path="data/in-network.json",
    )
"""

from __future__ import annotations

import logging
from functools import lru_cache

from django.conf import settings

from pricevalidator.validations.services.runners.docker import DockerValidatorRunner

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_validator_runner() -> DockerValidatorRunner:
    """
    Get the shared validator runner.

    The instance is cached, so the validator identity it discovers is looked
    up once and reused by every run in the process. VALIDATOR_RUNNER_OPTIONS
    overrides the runner's constructor arguments.
    """
    options = getattr(settings, "VALIDATOR_RUNNER_OPTIONS", {})
    runner = DockerValidatorRunner(**options)
    logger.info("Initializing validator runner for image %s", runner.image)
    return runner


def clear_runner_cache() -> None:
    """
    Clear the cached runner instance.

    Useful for testing or when settings change at runtime.
    """
    get_validator_runner.cache_clear()
