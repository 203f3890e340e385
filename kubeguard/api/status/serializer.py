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
"""Serializer to capture server status."""

from rest_framework import serializers


class StatusSerializer(serializers.Serializer):
    """Serializer for the Status model."""

    api_version = serializers.CharField()
    commit = serializers.CharField(allow_null=True)
    python_version = serializers.CharField()
    kubernetes_client_version = serializers.CharField()
