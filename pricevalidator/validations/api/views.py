"""
API endpoint for validating an inline JSON document.

The request body carries the document itself under "json"; it is validated
with the same pipeline as the ``validate`` management command, except that
the payload is written to a temporary file for the validator instead of being
read from disk.

URL: POST /api/validate/
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from pricevalidator.validations.api.serializers import ValidateRequestSerializer
from pricevalidator.validations.services.orchestrator import ValidationInput
from pricevalidator.validations.services.orchestrator import ValidationOptions
from pricevalidator.validations.services.orchestrator import ValidationOrchestrator

logger = logging.getLogger(__name__)


class ValidateView(APIView):
    """
    Validate a JSON document against its price transparency schema.

    Request body (JSON):
        {
            "json": {"version": "1.0.0", ...},
            "target": "in-network-rates",   // optional
            "schema_version": "1.0.0",      // optional
            "strict": false                 // optional
        }

    Returns:
        200 OK: {"success": true, "result": <outcome>} for every pipeline
            outcome, including a failed validation. The outcome is either
            {"pass": ..., ...} from the validator or
            {"success": false, "message": ...} when it could not run.
        400 Bad Request: Malformed request body
        500 Internal Server Error: Unexpected error
    """

    orchestrator_class = ValidationOrchestrator

    def post(self, request):
        serializer = ValidateRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"success": False, "errors": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        data = serializer.validated_data

        try:
            outcome = self.orchestrator_class().validate(
                ValidationInput.from_json(data["json"]),
                ValidationOptions(
                    target=data["target"],
                    schema_version=data["schema_version"],
                    strict=data["strict"],
                ),
            )
        except Exception as exc:
            logger.exception("Failed to validate JSON document")
            return Response(
                {"success": False, "error": str(exc)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(
            {"success": True, "result": outcome.to_dict()},
            status=status.HTTP_200_OK,
        )
