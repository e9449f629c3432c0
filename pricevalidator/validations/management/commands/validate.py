"""
Management command to validate a local data file.

Usage:
    python manage.py validate data/in-network.json
    python manage.py validate data/in-network.json --schema-version 1.0.0
    python manage.py validate data/provider-reference.json -t provider-reference --strict
    python manage.py validate data/in-network.json -o report.txt

The schema version is read from the data file unless --schema-version is
given; when both are present and disagree, --schema-version wins.
The command exits non-zero when the data could not be validated or the
validator reported failure.
"""

from __future__ import annotations

from django.core.management.base import BaseCommand
from django.core.management.base import CommandError

from pricevalidator.core import exit_status
from pricevalidator.validations.management.commands._options import add_validation_arguments
from pricevalidator.validations.services.orchestrator import PipelineFailure
from pricevalidator.validations.services.orchestrator import ValidationInput
from pricevalidator.validations.services.orchestrator import ValidationOptions
from pricevalidator.validations.services.orchestrator import ValidationOrchestrator
from pricevalidator.validations.services.prompts import OperatorPrompter


class Command(BaseCommand):
    """Validate a price transparency data file against its schema."""

    help = "Validate a local data file using the containerized validator."

    def add_arguments(self, parser):
        """Add command-line arguments."""
        parser.add_argument("data_file", help="Path to the data file to validate")
        add_validation_arguments(parser)

    def handle(self, *args, **options):
        """Execute the validation."""
        orchestrator = ValidationOrchestrator(
            prompter=OperatorPrompter(stdout=self.stdout),
        )
        outcome = orchestrator.validate(
            ValidationInput.from_file(options["data_file"]),
            ValidationOptions(
                target=options["target"],
                schema_version=options["schema_version"],
                strict=options["strict"],
                output_path=options["out"],
            ),
        )
        report_outcome(self, outcome)


def report_outcome(command: BaseCommand, outcome) -> None:
    """Print the outcome and turn failures into a non-zero exit status."""
    if isinstance(outcome, PipelineFailure):
        raise CommandError(outcome.message, returncode=1)

    if outcome.passed:
        command.stdout.write(command.style.SUCCESS("Validation passed."))
    else:
        command.stdout.write(command.style.ERROR("Validation failed."))
        if outcome.text:
            command.stdout.write(outcome.text)

    if exit_status.has_failed() or not outcome.passed:
        raise CommandError(
            "Validation did not pass.",
            returncode=exit_status.exit_code() or 1,
        )
