"""Arguments shared by the validate and validate_url commands."""

from __future__ import annotations

from pricevalidator.validations.constants import DEFAULT_TARGET
from pricevalidator.validations.constants import SchemaTarget


def add_validation_arguments(parser, *, version_required: bool = False) -> None:
    parser.add_argument(
        "--schema-version",
        dest="schema_version",
        required=version_required,
        help=(
            "Schema version to validate against"
            if version_required
            else "Schema version to validate against (default: read from the data file)"
        ),
    )
    parser.add_argument(
        "-t",
        "--target",
        choices=SchemaTarget.values,
        default=DEFAULT_TARGET.value,
        help=f"Name of schema to use (default: {DEFAULT_TARGET.value})",
    )
    parser.add_argument(
        "-s",
        "--strict",
        action="store_true",
        help="Forbid properties the schema does not declare",
    )
    parser.add_argument(
        "-o",
        "--out",
        dest="out",
        default=None,
        help="Output path for the validator report (default: print to the log)",
    )
