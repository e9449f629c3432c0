import pytest

from pricevalidator.core import exit_status
from pricevalidator.validations.services.runners import clear_runner_cache


@pytest.fixture(autouse=True)
def _reset_process_state():
    """Each test starts with a clean exit status and no cached runner."""
    exit_status.reset()
    clear_runner_cache()
    yield
    exit_status.reset()
    clear_runner_cache()
