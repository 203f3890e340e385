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
"""Privilege search: which roles and cluster roles are bound to a set of subjects.

Subjects are matched against the subjects of every role binding and cluster
role binding, by regular expression or by exact name. The entry point is
privilege.service.Query.
"""

from privilege.exceptions import (
    InvalidQueryError,
    PrivilegeError,
    SerializationError,
    SourceUnavailableError,
)
from privilege.model import MatchMode, Result, ResultFormat

__all__ = [
    "InvalidQueryError",
    "MatchMode",
    "PrivilegeError",
    "Result",
    "ResultFormat",
    "SerializationError",
    "SourceUnavailableError",
]
