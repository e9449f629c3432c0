"""Tests for the validate, validate_url and update_schemas commands."""

from io import StringIO
from unittest.mock import patch

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase

from pricevalidator.core import exit_status
from pricevalidator.validations.constants import MSG_DATA_FILE_NOT_FOUND
from pricevalidator.validations.constants import ContainerFailureKind
from pricevalidator.validations.exceptions import SchemaRepositoryError
from pricevalidator.validations.services.orchestrator import PipelineFailure
from pricevalidator.validations.services.runners.base import ContainerResult

COMMANDS = "pricevalidator.validations.management.commands"


class ValidateCommandTests(SimpleTestCase):
    """Tests for the validate management command."""

    def run_command(self, outcome, *args, **options):
        stdout = StringIO()
        with patch(f"{COMMANDS}.validate.ValidationOrchestrator") as mock_class:
            mock_class.return_value.validate.return_value = outcome
            call_command("validate", *args, stdout=stdout, **options)
        return mock_class.return_value, stdout.getvalue()

    def test_passing_validation(self):
        orchestrator, output = self.run_command(
            ContainerResult.success(),
            "data/in-network.json",
        )

        self.assertIn("Validation passed.", output)
        source, options = orchestrator.validate.call_args.args
        self.assertEqual(str(source.path), "data/in-network.json")
        self.assertEqual(options.target, "in-network-rates")
        self.assertIsNone(options.schema_version)
        self.assertFalse(options.strict)
        self.assertIsNone(options.output_path)

    def test_options_are_forwarded(self):
        orchestrator, _ = self.run_command(
            ContainerResult.success(),
            "data/allowed-amounts.json",
            "--schema-version",
            "1.1.0",
            "-t",
            "allowed-amounts",
            "--strict",
            "-o",
            "report.txt",
        )

        _, options = orchestrator.validate.call_args.args
        self.assertEqual(options.schema_version, "1.1.0")
        self.assertEqual(options.target, "allowed-amounts")
        self.assertTrue(options.strict)
        self.assertEqual(options.output_path, "report.txt")

    def test_unknown_target_is_rejected(self):
        with self.assertRaises(CommandError):
            self.run_command(
                ContainerResult.success(),
                "data/in-network.json",
                "-t",
                "not-a-schema",
            )

    def test_pipeline_failure_exits_nonzero(self):
        with self.assertRaises(CommandError) as ctx:
            self.run_command(
                PipelineFailure(message=MSG_DATA_FILE_NOT_FOUND),
                "missing.json",
            )

        self.assertEqual(str(ctx.exception), MSG_DATA_FILE_NOT_FOUND)
        self.assertEqual(ctx.exception.returncode, 1)

    def test_failed_validation_exits_nonzero(self):
        exit_status.mark_failed()

        with self.assertRaises(CommandError) as ctx:
            self.run_command(
                ContainerResult.failure(ContainerFailureKind.PROCESS_FAILED),
                "data/in-network.json",
            )

        self.assertEqual(ctx.exception.returncode, 1)

    def test_failure_text_is_printed(self):
        stdout = StringIO()
        outcome = ContainerResult(passed=False, text="Failed to process JSON input")

        with (
            patch(f"{COMMANDS}.validate.ValidationOrchestrator") as mock_class,
            self.assertRaises(CommandError),
        ):
            mock_class.return_value.validate.return_value = outcome
            call_command("validate", "data/in-network.json", stdout=stdout)

        self.assertIn("Failed to process JSON input", stdout.getvalue())


class ValidateUrlCommandTests(SimpleTestCase):
    """Tests for the validate_url management command."""

    def test_schema_version_is_required(self):
        with self.assertRaises(CommandError):
            call_command("validate_url", "https://example.com/in-network.json")

    def test_validates_url(self):
        stdout = StringIO()

        with patch(f"{COMMANDS}.validate_url.ValidationOrchestrator") as mock_class:
            mock_class.return_value.validate_from_url.return_value = (
                ContainerResult.success()
            )
            call_command(
                "validate_url",
                "https://example.com/in-network.json",
                "--schema-version",
                "1.0.0",
                "-y",
                stdout=stdout,
            )

        url, options = mock_class.return_value.validate_from_url.call_args.args
        self.assertEqual(url, "https://example.com/in-network.json")
        self.assertEqual(options.schema_version, "1.0.0")
        self.assertTrue(options.yes_all)
        self.assertIn("Validation passed.", stdout.getvalue())


class TestUpdateSchemasCommand:
    def test_update(self):
        stdout = StringIO()

        with patch(f"{COMMANDS}.update_schemas.SchemaManager") as mock_class:
            mock_class.return_value.available_versions.return_value = [
                "1.0.0",
                "1.1.0",
            ]
            call_command("update_schemas", stdout=stdout)

        mock_class.return_value.update.assert_called_once()
        assert "2 version(s) available" in stdout.getvalue()

    def test_update_failure(self):
        with patch(f"{COMMANDS}.update_schemas.SchemaManager") as mock_class:
            mock_class.return_value.update.side_effect = SchemaRepositoryError(
                "git pull failed",
            )
            with pytest.raises(CommandError, match="git pull failed"):
                call_command("update_schemas", stdout=StringIO())
