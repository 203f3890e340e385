#
# Copyright 2026 Red Hat, Inc.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
#
"""Tests for the privilege search view."""

import json
from unittest.mock import patch

from django.test import SimpleTestCase
from django.test.utils import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from privilege.model import DiagnosticCode, ResultFormat
from privilege.serializer import parse_results
from privilege.view import WARNINGS_HEADER
from tests.privilege.fake_source import FakeRbacSource, binding, read_fixture, unavailable_source


@override_settings(PRIVILEGE_NAMESPACE="", PRIVILEGE_MAX_WORKERS=1)
class PrivilegeSearchViewTests(SimpleTestCase):
    """Test the privilege search endpoint."""

    def setUp(self):
        """Set up a client and an in-memory cluster."""
        super().setUp()
        self.client = APIClient()
        self.url = reverse("privilege-search")
        self.source = FakeRbacSource().import_manifest("import-rolebinding.json").import_manifest("import-role.json")
        patcher = patch("privilege.view.default_source", return_value=self.source)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_url(self):
        """The endpoint lives under the versioned API prefix."""
        self.assertEqual(self.url, "/api/v0.1/privilege/search/")

    def test_post_json(self):
        """A JSON search returns the JSON rendering."""
        response = self.client.post(self.url, {"subjects": ["developer"], "format": "json"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response["Content-Type"], "application/json")
        self.assertEqual(response.content, read_fixture("dev-roles-res.json"))
        self.assertEqual(response[WARNINGS_HEADER], "0")

    def test_post_yaml(self):
        """A YAML search returns the YAML rendering."""
        response = self.client.post(self.url, {"subjects": ["developer"], "format": "YAML"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response["Content-Type"], "application/x-yaml")
        self.assertEqual(response.content, read_fixture("dev-roles-res.yaml"))

    def test_get_with_json_body(self):
        """A GET request may carry the search in its body."""
        response = self.client.generic(
            "GET",
            self.url,
            data=json.dumps({"subjects": ["deve*"]}),
            content_type="application/json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        results = parse_results(response.content, ResultFormat.JSON)
        self.assertEqual([result.subject for result in results], ["deve*"])
        self.assertEqual(results[0].roles[0]["metadata"]["name"], "editor")

    def test_get_with_query_params(self):
        """A GET request may carry the search in its query string."""
        response = self.client.get(self.url, {"subjects": ["developer", "unknown"], "format": "yml"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response["Content-Type"], "application/x-yaml")
        results = parse_results(response.content, ResultFormat.YAML)
        self.assertEqual([result.subject for result in results], ["developer", "unknown"])
        self.assertIsNone(results[1].roles)

    def test_exact_match_mode(self):
        """Exact matching is selected through the payload."""
        response = self.client.post(self.url, {"subjects": ["deve*"], "match_mode": "exact"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(parse_results(response.content, ResultFormat.JSON)[0].roles)

    def test_namespace_from_payload_or_settings(self):
        """The payload namespace wins over the configured one."""
        self.client.post(self.url, {"subjects": [], "namespace": "team-a"}, format="json")
        with self.settings(PRIVILEGE_NAMESPACE="team-b"):
            self.client.post(self.url, {"subjects": []}, format="json")
        self.client.post(self.url, {"subjects": []}, format="json")

        listed = [call[1] for call in self.source.calls if call[0] == "list_bindings"]
        self.assertEqual(listed, ["team-a", "team-b", None])

    def test_warnings_header(self):
        """Absorbed problems are counted in a response header."""
        self.source.bindings.append(binding("stale", "missing", "developer"))

        with self.assertLogs("privilege.view", level="WARNING") as logs:
            response = self.client.post(self.url, {"subjects": ["developer", "("]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response[WARNINGS_HEADER], "2")
        self.assertEqual(len(logs.records), 2)
        logged = [record.args for record in logs.records]
        self.assertEqual(
            [item["code"] for item in logged], [DiagnosticCode.INVALID_PATTERN, DiagnosticCode.GRANT_NOT_FOUND]
        )
        self.assertEqual(logged[0]["subject"], "(")
        self.assertIn("missing", logged[1]["message"])

    def test_missing_subjects(self):
        """A search without subjects is rejected."""
        response = self.client.post(self.url, {"format": "json"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["errors"][0]["source"], "subjects")
        self.assertEqual(response.json()["errors"][0]["status"], "400")

    def test_invalid_match_mode(self):
        """An unknown match mode is rejected."""
        response = self.client.post(self.url, {"subjects": [], "match_mode": "glob"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["errors"][0]["source"], "match_mode")

    def test_source_unavailable(self):
        """A listing failure is a server error without a partial body."""
        with patch("privilege.view.default_source", return_value=unavailable_source()):
            response = self.client.post(self.url, {"subjects": ["developer"]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        errors = response.json()["errors"]
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0]["status"], "500")
        self.assertIn("Unable to list role bindings", errors[0]["detail"])
        self.assertNotIn(WARNINGS_HEADER, response)

    def test_search_is_counted(self):
        """Searches are exported as metrics."""
        self.client.post(self.url, {"subjects": ["developer"]}, format="json")

        response = self.client.get("/metrics")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        content = response.content.decode("utf-8")
        self.assertIn('privilege_query_total{format="json",outcome="success"}', content)
