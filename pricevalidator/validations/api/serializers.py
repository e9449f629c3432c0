from __future__ import annotations

from rest_framework import serializers

from pricevalidator.validations.constants import DEFAULT_TARGET
from pricevalidator.validations.constants import SchemaTarget


class ValidateRequestSerializer(serializers.Serializer):
    """Body of a POST to the validate endpoint."""

    json = serializers.JSONField(
        help_text="The JSON document to validate.",
    )
    target = serializers.ChoiceField(
        choices=SchemaTarget.choices,
        default=DEFAULT_TARGET.value,
        required=False,
    )
    schema_version = serializers.CharField(
        required=False,
        allow_null=True,
        default=None,
        help_text="Schema version; read from the document when omitted.",
    )
    strict = serializers.BooleanField(required=False, default=False)
