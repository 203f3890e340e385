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
"""Common exception handler class."""
import copy
import logging

from privilege.exceptions import InvalidQueryError, PrivilegeError
from rest_framework import status
from rest_framework.views import Response, exception_handler

logger = logging.getLogger(__name__)


def _generate_errors_from_list(data, **kwargs):
    """Create error objects based on the exception."""
    errors = []
    status_code = kwargs.get("status_code", 0)
    source = kwargs.get("source")
    for value in data:
        if isinstance(value, str):
            new_error = {"detail": value, "source": source, "status": status_code}
            errors.append(new_error)
        elif isinstance(value, list):
            errors += _generate_errors_from_list(value, **kwargs)
        elif isinstance(value, dict):
            errors += _generate_errors_from_dict(value, **kwargs)
    return errors


def _generate_errors_from_dict(data, **kwargs):
    """Create error objects based on the exception."""
    errors = []
    status_code = kwargs.get("status_code", 0)
    source = kwargs.get("source")
    for key, value in data.items():
        source_val = "{}.{}".format(source, key) if source else key
        if isinstance(value, str):
            new_error = {"detail": value, "source": source_val, "status": status_code}
            errors.append(new_error)
        elif isinstance(value, list):
            kwargs["source"] = source_val
            errors += _generate_errors_from_list(value, **kwargs)
        elif isinstance(value, dict):
            kwargs["source"] = source_val
            errors += _generate_errors_from_dict(value, **kwargs)
    return errors


def _privilege_error_response(exc: PrivilegeError, context) -> Response:
    """Build the response for a privilege search failure."""
    if isinstance(exc, InvalidQueryError):
        http_status = status.HTTP_400_BAD_REQUEST
        source = exc.field
    else:
        http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
        view = context.get("view")
        source = type(view).__name__ if view else None
        logger.error("Privilege search failed: %s", exc)
    return Response(
        {"errors": [{"detail": str(exc), "source": source, "status": str(http_status)}]},
        status=http_status,
    )


def custom_exception_handler(exc, context):
    """Create custom response for exceptions."""
    response = exception_handler(exc, context)

    if response is not None:
        errors = []
        data = copy.deepcopy(response.data)
        if isinstance(data, dict):
            errors += _generate_errors_from_dict(data, **{"status_code": str(response.status_code)})
        elif isinstance(data, list):
            errors += _generate_errors_from_list(data, **{"status_code": str(response.status_code)})
        response.data = {"errors": errors}
    elif isinstance(exc, PrivilegeError):
        response = _privilege_error_response(exc, context)

    return response
