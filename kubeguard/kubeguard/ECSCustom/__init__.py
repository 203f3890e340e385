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
"""ECS log formatter aware of Django requests."""
from urllib.parse import urlparse

from django.http import HttpRequest
from ecs_logging import StdlibFormatter

# Fields added by Django loggers that are not part of ECS 1.6.
NON_ECS_FIELDS = ("request", "status_code", "server_time")


class ECSCustomFormatter(StdlibFormatter):
    """Format records as ECS JSON, describing any attached request with http and url fields."""

    def format_to_ecs(self, record):
        """Convert a log record to an ECS document."""
        request = getattr(record, "request", None)
        status_code = getattr(record, "status_code", None)
        if request is not None:
            # Requests are not JSON serializable.
            record.request = None

        result = super().format_to_ecs(record)

        if isinstance(request, HttpRequest):
            result.update(self.request_fields(request, status_code))
        for field in NON_ECS_FIELDS:
            result.pop(field, None)
        return result

    @staticmethod
    def request_fields(request: HttpRequest, status_code=None) -> dict:
        """Return the ECS url and http fields for a request."""
        parsed_url = urlparse(request.build_absolute_uri())
        body_bytes = request.headers.get("Content-Length") or "0"

        http = {"request": {"body": {"bytes": int(body_bytes)}, "method": request.method}}
        if status_code is not None:
            http["response"] = {"status_code": status_code}
        return {
            "url": {"path": parsed_url.path, "domain": parsed_url.hostname, "port": parsed_url.port},
            "http": http,
        }
