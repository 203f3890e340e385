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
"""Test the ECSCustomFormatter."""
import json
import logging

from django.test import RequestFactory, SimpleTestCase

from kubeguard.ECSCustom import ECSCustomFormatter


class TestECSCustomFormatter(SimpleTestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.formatter = ECSCustomFormatter()

    def format(self, log_record):
        """Helper to format a log record and parse the resulting JSON."""
        formatted_json_string = self.formatter.format(log_record)
        try:
            return json.loads(formatted_json_string)
        except json.JSONDecodeError:
            self.fail(f"Formatted log output is not valid JSON: {formatted_json_string}")

    def log_record(self, request=None, **extra):
        """Helper to create a LogRecord, optionally with a request attached."""
        log_record = logging.LogRecord(
            name="django.request",
            level=logging.WARNING,
            pathname="dummy_module.py",
            lineno=0,
            msg="Bad Request: /api/v0.1/privilege/search/",
            args=(),
            exc_info=None,
        )
        if request is not None:
            log_record.request = request
        for key, value in extra.items():
            setattr(log_record, key, value)
        return log_record

    def test_formatting_without_request(self):
        log_output = self.format(self.log_record())

        self.assertNotIn("http", log_output)
        self.assertEqual(log_output["message"], "Bad Request: /api/v0.1/privilege/search/")

    def test_formatting_request_without_content_length(self):
        # GET won't normally have content-length header
        request = self.factory.get("/api/v0.1/privilege/search/")
        self.assertIsNone(request.headers.get("Content-Length"))

        log_output = self.format(self.log_record(request))

        self.assertEqual(log_output["http"]["request"]["body"]["bytes"], 0)
        self.assertEqual(log_output["http"]["request"]["method"], "GET")
        self.assertEqual(log_output["url"]["path"], "/api/v0.1/privilege/search/")
        self.assertNotIn("request", log_output)

    def test_formatting_request_with_status_code(self):
        request = self.factory.post(
            "/api/v0.1/privilege/search/", data='{"subjects": []}', content_type="application/json"
        )

        log_output = self.format(self.log_record(request, status_code=400))

        self.assertEqual(log_output["http"]["request"]["body"]["bytes"], len('{"subjects": []}'))
        self.assertEqual(log_output["http"]["response"]["status_code"], 400)
        self.assertNotIn("status_code", log_output)
