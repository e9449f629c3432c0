"""
Management command to fetch or update the schema repository.

Usage:
    python manage.py update_schemas

Clones SCHEMA_REPO_URL into SCHEMA_REPO_FOLDER on first use; afterwards
checks out SCHEMA_REPO_BRANCH and pulls new commits and tags.
"""

from __future__ import annotations

from django.core.management.base import BaseCommand
from django.core.management.base import CommandError

from pricevalidator.validations.exceptions import SchemaRepositoryError
from pricevalidator.validations.services.schemas import SchemaManager


class Command(BaseCommand):
    """Clone or update the schema repository."""

    help = "Retrieve the latest schemas from the schema repository."

    def handle(self, *args, **options):
        """Execute the update."""
        schema_manager = SchemaManager()
        self.stdout.write("Updating schema repository...")
        try:
            schema_manager.update()
            versions = schema_manager.available_versions()
        except SchemaRepositoryError as e:
            msg = f"Failed to update schemas: {e}"
            raise CommandError(msg) from e

        self.stdout.write(
            self.style.SUCCESS(
                f"Schemas are up to date ({len(versions)} version(s) available).",
            ),
        )
