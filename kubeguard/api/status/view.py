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
"""View for server status."""

from rest_framework.decorators import api_view, permission_classes, renderer_classes
from rest_framework.permissions import AllowAny
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response

from api.status.model import Status
from api.status.serializer import StatusSerializer


@api_view(["GET"])
@permission_classes((AllowAny,))
@renderer_classes([JSONRenderer])
def status(request):
    """Provide the server status information.

    @api {GET} /api/v0.1/status/ Request server status
    @apiName GetStatus
    @apiGroup Status
    @apiVersion 0.1.0
    @apiDescription Request server status.

    @apiSuccess {String} api_version The version of the API.
    @apiSuccess {String} commit The commit hash of the code base.
    @apiSuccess {String} python_version The version of python.
    @apiSuccess {String} kubernetes_client_version The version of the Kubernetes client.
    """
    serializer = StatusSerializer(Status())
    return Response(serializer.data)
