"""Tests for the process-wide validator runner."""

from pricevalidator.validations.services.runners import clear_runner_cache
from pricevalidator.validations.services.runners import get_validator_runner
from pricevalidator.validations.services.runners.docker import DockerValidatorRunner


class TestGetValidatorRunner:
    def test_builds_docker_runner_from_settings(self, settings):
        settings.VALIDATOR_IMAGE = "validator:2.0"
        settings.VALIDATOR_RUNNER_OPTIONS = {}

        runner = get_validator_runner()

        assert isinstance(runner, DockerValidatorRunner)
        assert runner.image == "validator:2.0"
        assert runner.get_runner_type() == "docker"

    def test_identity_is_shared_between_calls(self):
        first = get_validator_runner()
        second = get_validator_runner()

        assert first is second
        assert first.identity is second.identity

    def test_runner_options_are_passed(self, settings):
        settings.VALIDATOR_RUNNER_OPTIONS = {
            "image": "custom-validator:1.2",
            "timeout_seconds": 5,
        }

        runner = get_validator_runner()

        assert runner.image == "custom-validator:1.2"
        assert runner.identity.image == "custom-validator:1.2"
        assert runner.timeout_seconds == 5

    def test_clear_runner_cache(self):
        first = get_validator_runner()

        clear_runner_cache()

        assert get_validator_runner() is not first
