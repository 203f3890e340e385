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
"""Domain exceptions for privilege search operations."""

__all__ = [
    "PrivilegeError",
    "InvalidQueryError",
    "SourceUnavailableError",
    "GrantLookupError",
    "GrantNotFoundError",
    "InvalidPatternError",
    "SerializationError",
]


class PrivilegeError(Exception):
    """Base exception for privilege search errors."""

    pass


class InvalidQueryError(PrivilegeError):
    """Raised when a query is configured with missing or invalid fields."""

    def __init__(self, field: str, reason: str):
        """Initialize with the offending field."""
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid query field '{field}': {reason}")


class SourceUnavailableError(PrivilegeError):
    """Raised when the role bindings of a cluster cannot be listed."""

    def __init__(self, scope: str, reason: str):
        """Initialize with the listed scope and the underlying failure."""
        self.scope = scope
        self.reason = reason
        super().__init__(f"Unable to list role bindings in {scope}: {reason}")


class GrantLookupError(PrivilegeError):
    """Raised when a role or cluster role cannot be fetched."""

    def __init__(self, kind: str, name: str, namespace: str | None = None, reason: str = ""):
        """Initialize with the grant reference."""
        self.kind = kind
        self.name = name
        self.namespace = namespace
        self.reason = reason
        location = f"{namespace}/{name}" if namespace else name
        message = f"Unable to fetch {kind} '{location}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class GrantNotFoundError(GrantLookupError):
    """Raised when the referenced role or cluster role does not exist."""

    def __init__(self, kind: str, name: str, namespace: str | None = None):
        """Initialize with the missing grant reference."""
        super().__init__(kind, name, namespace, reason="not found")


class InvalidPatternError(PrivilegeError):
    """Raised when a subject pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        """Initialize with the pattern and the compiler message."""
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid subject pattern '{pattern}': {reason}")


class SerializationError(PrivilegeError):
    """Raised when search results cannot be rendered."""

    def __init__(self, result_format: str, reason: str):
        """Initialize with the format that failed."""
        self.result_format = result_format
        self.reason = reason
        super().__init__(f"Unable to render results as {result_format}: {reason}")
