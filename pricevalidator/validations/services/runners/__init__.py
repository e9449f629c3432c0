"""
Validator runner abstraction for executing the containerized validator.

Usage:
    from pricevalidator.validations.services.runners import get_validator_runner

    runner = get_validator_runner()
    result = runner.run_container(schema_path, "in-network-rates", data_path)
    if result.passed:
        ...
"""

from pricevalidator.validations.services.runners.base import ContainerResult
from pricevalidator.validations.services.runners.base import Locations
from pricevalidator.validations.services.runners.base import ValidatorRunner
from pricevalidator.validations.services.runners.registry import clear_runner_cache
from pricevalidator.validations.services.runners.registry import get_validator_runner

__all__ = [
    "ContainerResult",
    "Locations",
    "ValidatorRunner",
    "clear_runner_cache",
    "get_validator_runner",
]
