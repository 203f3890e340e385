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
"""Custom kube-guard Middleware."""
import logging
import uuid

from django.utils.deprecation import MiddlewareMixin
from prometheus_client import Counter

from api.common import REQUEST_ID_HEADER

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name
req_counter = Counter(
    "kubeguard_req_total",
    "Tracks a count of requests to kube-guard by view and resulting status.",
    ["method", "view", "status"],
)


class RequestLoggingMiddleware(MiddlewareMixin):
    """Tag each request with an id and log its outcome."""

    def process_request(self, request):  # pylint: disable=no-self-use
        """Assign the request id, reusing the one supplied by the caller if any.

        Args:
            request (object): The request object
        """
        request.req_id = request.META.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

    @staticmethod
    def log_request(request, response):
        """Log a handled request.

        Args:
            request (object): The request object
            response (object): The response object
        """
        query_string = ""
        if request.META.get("QUERY_STRING"):
            query_string = "?{}".format(request.META.get("QUERY_STRING"))

        log_object = {
            "method": request.method,
            "path": request.path + query_string,
            "status": response.status_code,
            "request_id": getattr(request, "req_id", None),
        }
        logger.info(log_object)

    def process_response(self, request, response):  # pylint: disable=no-self-use
        """Count and log the response.

        Args:
            request (object): The request object
            response (object): The response object
        """
        resolver_match = getattr(request, "resolver_match", None)
        req_counter.labels(
            method=request.method,
            view=resolver_match.url_name if resolver_match else None,
            status=response.status_code,
        ).inc()

        req_id = getattr(request, "req_id", None)
        if req_id:
            response["X-Request-Id"] = req_id
        RequestLoggingMiddleware.log_request(request, response)
        return response
