"""Tests for the JSON validation endpoint."""

from unittest.mock import MagicMock
from unittest.mock import patch

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from pricevalidator.validations.api.views import ValidateView
from pricevalidator.validations.constants import MSG_VERSION_NOT_FOUND
from pricevalidator.validations.services.orchestrator import PipelineFailure
from pricevalidator.validations.services.runners.base import ContainerResult
from pricevalidator.validations.services.runners.base import Locations


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def orchestrator():
    orchestrator = MagicMock()
    orchestrator.validate.return_value = ContainerResult.success()
    with patch.object(
        ValidateView,
        "orchestrator_class",
        MagicMock(return_value=orchestrator),
    ):
        yield orchestrator


class TestValidateView:
    url = "/api/validate/"

    def test_url_name(self):
        assert reverse("api:validate") == self.url

    def test_valid_document(self, api_client, orchestrator):
        response = api_client.post(
            self.url,
            {"json": {"version": "1.0.0", "in_network": []}},
            format="json",
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "result": {"pass": True}}
        source, options = orchestrator.validate.call_args.args
        assert source.payload == {"version": "1.0.0", "in_network": []}
        assert options.target == "in-network-rates"
        assert options.schema_version is None
        assert options.strict is False

    def test_options(self, api_client, orchestrator):
        api_client.post(
            self.url,
            {
                "json": {"version": "1.0.0"},
                "target": "provider-reference",
                "schema_version": "1.1.0",
                "strict": True,
            },
            format="json",
        )

        _, options = orchestrator.validate.call_args.args
        assert options.target == "provider-reference"
        assert options.schema_version == "1.1.0"
        assert options.strict is True

    def test_failed_validation_with_locations(self, api_client, orchestrator):
        orchestrator.validate.return_value = ContainerResult(
            passed=False,
            locations=Locations(inNetwork=["/in_network/3"]),
        )

        response = api_client.post(self.url, {"json": {}}, format="json")

        assert response.status_code == 200
        assert response.json()["result"] == {
            "pass": False,
            "locations": {"inNetwork": ["/in_network/3"]},
        }

    def test_pipeline_failure(self, api_client, orchestrator):
        orchestrator.validate.return_value = PipelineFailure(
            message=MSG_VERSION_NOT_FOUND,
        )

        response = api_client.post(self.url, {"json": {}}, format="json")

        assert response.status_code == 200
        assert response.json()["result"] == {
            "success": False,
            "message": "Schema version not found in input",
        }

    def test_missing_document(self, api_client, orchestrator):
        response = api_client.post(self.url, {"target": "allowed-amounts"}, format="json")

        assert response.status_code == 400
        assert "json" in response.json()["errors"]
        orchestrator.validate.assert_not_called()

    def test_unknown_target(self, api_client, orchestrator):
        response = api_client.post(
            self.url,
            {"json": {}, "target": "everything"},
            format="json",
        )

        assert response.status_code == 400
        orchestrator.validate.assert_not_called()

    def test_unexpected_error(self, api_client, orchestrator):
        orchestrator.validate.side_effect = RuntimeError("boom")

        response = api_client.post(self.url, {"json": {}}, format="json")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "boom"}

    def test_get_not_allowed(self, api_client, orchestrator):
        response = api_client.get(self.url)

        assert response.status_code == 405
