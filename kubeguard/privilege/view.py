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
"""View for privilege searches."""
import functools
import logging

from django.conf import settings
from django.http import HttpResponse
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from .serializer import PrivilegeSearchSerializer
from .service import Query
from .source import RbacSource, kubernetes_source

logger = logging.getLogger(__name__)

WARNINGS_HEADER = "X-Privilege-Warnings"
QUERY_PARAM_FIELDS = ("format", "match_mode", "namespace")


@functools.lru_cache(maxsize=1)
def default_source() -> RbacSource:
    """Return the RBAC source for the configured cluster, created on first use."""
    return kubernetes_source()


class PrivilegeSearchView(APIView):
    """Find the roles and cluster roles bound to a list of subjects."""

    """
    @api {get} /api/v0.1/privilege/search/   Search subject privileges
    @apiName searchPrivileges
    @apiGroup Privilege
    @apiVersion 0.1.0
    @apiDescription Find the roles bound to each subject. Subjects are regular
        expressions unless match_mode is "exact".

    @apiParam (Request Body) {String[]} subjects Subjects or subject patterns
    @apiParam (Request Body) {String} [format] "yaml"/"yml" for YAML, JSON otherwise
    @apiParam (Request Body) {String} [match_mode] "regex" (default) or "exact"
    @apiParam (Request Body) {String} [namespace] Namespace to search, all when omitted

    @apiSuccessExample {json} Success-Response:
        HTTP/1.1 200 OK
        [
            {
                "subject": "developer",
                "roles": [{"metadata": {"name": "editor", "namespace": "default"}, "rules": []}],
                "clusterroles": null
            }
        ]
    """

    permission_classes = (AllowAny,)
    serializer_class = PrivilegeSearchSerializer

    def get_source(self) -> RbacSource:
        """Return the RBAC source searched by this view."""
        return default_source()

    def get(self, request):
        """Search using the request body, or the query string when there is no body."""
        payload = request.data if request.data else self._payload_from_query_params(request.query_params)
        return self.search(request, payload)

    def post(self, request):
        """Search using the request body."""
        return self.search(request, request.data)

    @staticmethod
    def _payload_from_query_params(query_params):
        payload = {key: query_params.get(key) for key in QUERY_PARAM_FIELDS if key in query_params}
        if "subjects" in query_params:
            payload["subjects"] = query_params.getlist("subjects")
        return payload

    def search(self, request, payload):
        """Run a privilege search and return the serialized results."""
        serializer = self.serializer_class(data=payload)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        logger.info("Privilege search requested: %s", data)

        query = Query(
            source=self.get_source(),
            subjects=data["subjects"],
            result_format=data["format"],
            match_mode=data["match_mode"],
            namespace=data["namespace"] or settings.PRIVILEGE_NAMESPACE or None,
            max_workers=settings.PRIVILEGE_MAX_WORKERS,
        )
        outcome = query.execute()
        content = query.render(outcome)

        for diagnostic in outcome.diagnostics:
            logger.warning("Privilege search diagnostic: %s", diagnostic.to_dict())

        response = HttpResponse(content, content_type=query.content_type, status=status.HTTP_200_OK)
        response[WARNINGS_HEADER] = str(len(outcome.diagnostics))
        return response
