"""
Management command to validate a remote data file.

Usage:
    python manage.py validate_url https://example.com/in-network.json --schema-version 1.0.0
    python manage.py validate_url https://example.com/files.zip --schema-version 1.0.0 -y

The file is downloaded to a temporary directory. Gzip-compressed files are
unpacked; for zip archives with several JSON files you are asked which file
to validate, and whether to validate another one afterwards.

Options:
    --yes-all: Download large files without asking for confirmation
"""

from __future__ import annotations

from django.core.management.base import BaseCommand

from pricevalidator.validations.management.commands._options import add_validation_arguments
from pricevalidator.validations.management.commands.validate import report_outcome
from pricevalidator.validations.services.orchestrator import ValidationOptions
from pricevalidator.validations.services.orchestrator import ValidationOrchestrator
from pricevalidator.validations.services.prompts import OperatorPrompter


class Command(BaseCommand):
    """Download a price transparency data file and validate it."""

    help = "Validate a data file available at a URL using the containerized validator."

    def add_arguments(self, parser):
        """Add command-line arguments."""
        parser.add_argument("data_url", help="URL of the data file to validate")
        add_validation_arguments(parser, version_required=True)
        parser.add_argument(
            "-y",
            "--yes-all",
            dest="yes_all",
            action="store_true",
            help="Automatically respond yes to confirmation prompts",
        )

    def handle(self, *args, **options):
        """Execute the validation."""
        orchestrator = ValidationOrchestrator(
            prompter=OperatorPrompter(stdout=self.stdout),
        )
        outcome = orchestrator.validate_from_url(
            options["data_url"],
            ValidationOptions(
                target=options["target"],
                schema_version=options["schema_version"],
                strict=options["strict"],
                output_path=options["out"],
                yes_all=options["yes_all"],
            ),
        )
        report_outcome(self, outcome)
