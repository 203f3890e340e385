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
"""Serializers for privilege search requests and results."""
import json
from typing import Iterable

import yaml
from rest_framework import serializers

from .exceptions import SerializationError
from .model import MatchMode, Result, ResultFormat

JSON_INDENT = 2


class BlockDumper(yaml.SafeDumper):
    """Safe dumper that writes a grant shared by several results in full each time."""

    def ignore_aliases(self, data):
        return True


class PrivilegeSearchSerializer(serializers.Serializer):
    """Validate the payload of a privilege search request."""

    subjects = serializers.ListField(
        child=serializers.CharField(allow_blank=True, trim_whitespace=False),
        allow_empty=True,
    )
    format = serializers.CharField(required=False, allow_blank=True, default="")
    match_mode = serializers.ChoiceField(choices=MatchMode.values(), required=False, default=MatchMode.REGEX.value)
    namespace = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


def render_results(results: Iterable[Result], result_format: ResultFormat) -> bytes:
    """Render search results.

    JSON output is indented by two spaces. YAML output is a block style
    document without anchors or aliases, so a grant shared by several results
    is written out in each of them. Both keep the subject, roles, clusterroles
    key order and write missing role lists as null.

    Raises:
        SerializationError: If the encoder fails
    """
    data = [result.to_dict() for result in results]
    try:
        if result_format == ResultFormat.YAML:
            return yaml.dump(
                data, Dumper=BlockDumper, sort_keys=False, default_flow_style=False, allow_unicode=True
            ).encode("utf-8")
        return json.dumps(data, indent=JSON_INDENT).encode("utf-8")
    except (TypeError, ValueError, yaml.YAMLError) as e:
        raise SerializationError(str(result_format), str(e)) from e


def parse_results(content: bytes | str, result_format: ResultFormat) -> list[Result]:
    """Decode rendered search results back into result records.

    Raises:
        SerializationError: If the content is not a rendered result list
    """
    try:
        if result_format == ResultFormat.YAML:
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)
    except (ValueError, yaml.YAMLError) as e:
        raise SerializationError(str(result_format), str(e)) from e

    if not isinstance(data, list) or not all(isinstance(item, dict) and "subject" in item for item in data):
        raise SerializationError(str(result_format), "content is not a list of results")
    return [Result.from_dict(item) for item in data]
