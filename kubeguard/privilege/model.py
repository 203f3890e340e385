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
"""Value types for privilege searches."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Optional

ROLE_BINDING = "RoleBinding"
CLUSTER_ROLE_BINDING = "ClusterRoleBinding"


class GrantKind(StrEnum):
    """Kinds of grant a binding may reference."""

    ROLE = "Role"
    CLUSTER_ROLE = "ClusterRole"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a value is a supported grant kind."""
        return value in cls._value2member_map_


class MatchMode(StrEnum):
    """How a requested subject is compared with binding subject names."""

    REGEX = "regex"
    EXACT = "exact"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a value is a valid match mode."""
        return value in cls._value2member_map_

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all valid match modes."""
        return list(cls._value2member_map_.keys())


class ResultFormat(StrEnum):
    """Output encodings for search results."""

    JSON = "json"
    YAML = "yaml"

    @classmethod
    def from_selector(cls, selector: Optional[str]) -> "ResultFormat":
        """Resolve a caller supplied format selector.

        Matching is case-insensitive. "yaml" and "yml" select YAML, anything
        else (including an empty selector) selects JSON.
        """
        if selector and selector.lower() in ("yaml", "yml"):
            return cls.YAML
        return cls.JSON

    @property
    def content_type(self) -> str:
        """Return the HTTP content type for the format."""
        if self is ResultFormat.YAML:
            return "application/x-yaml"
        return "application/json"


class DiagnosticCode(StrEnum):
    """Codes for problems that are reported without failing a search."""

    INVALID_PATTERN = "invalid_pattern"
    GRANT_NOT_FOUND = "grant_not_found"
    GRANT_LOOKUP_FAILED = "grant_lookup_failed"
    UNSUPPORTED_ROLE_REF = "unsupported_role_ref"


@dataclass(frozen=True)
class Subject:
    """A user, group or service account listed on a binding."""

    kind: str
    name: str
    namespace: Optional[str] = None


@dataclass(frozen=True)
class RoleRef:
    """Reference from a binding to the grant it confers."""

    kind: str
    name: str


@dataclass(frozen=True)
class BindingRecord:
    """A role binding or cluster role binding."""

    kind: str
    name: str
    role_ref: RoleRef
    subjects: tuple[Subject, ...] = ()
    namespace: Optional[str] = None

    @property
    def grant_key(self) -> tuple[str, Optional[str], str]:
        """Identify the referenced grant.

        Cluster roles are cluster scoped, so the binding namespace is dropped
        for them.
        """
        if self.role_ref.kind == GrantKind.ROLE:
            return (self.role_ref.kind, self.namespace, self.role_ref.name)
        return (self.role_ref.kind, None, self.role_ref.name)


@dataclass
class Hit:
    """Grants matched by one subject pattern during a search."""

    roles: list[dict[str, Any]] = field(default_factory=list)
    cluster_roles: list[dict[str, Any]] = field(default_factory=list)

    def add(self, kind: str, grant: dict[str, Any]) -> None:
        """Append a grant to the list for its kind."""
        if kind == GrantKind.ROLE:
            self.roles.append(grant)
        else:
            self.cluster_roles.append(grant)


@dataclass
class Result:
    """The grants found for one requested subject.

    A list is None when nothing of that kind matched, which is rendered as an
    explicit null rather than an empty list.
    """

    subject: str
    roles: Optional[list[dict[str, Any]]] = None
    cluster_roles: Optional[list[dict[str, Any]]] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the serializable form, keys in output order."""
        return {
            "subject": self.subject,
            "roles": self.roles,
            "clusterroles": self.cluster_roles,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Result":
        """Build a result from its serialized form."""
        return cls(
            subject=data["subject"],
            roles=data.get("roles"),
            cluster_roles=data.get("clusterroles"),
        )


@dataclass(frozen=True)
class Diagnostic:
    """A problem that was absorbed during a search."""

    code: DiagnosticCode
    message: str
    subject: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the serializable form."""
        return {"code": str(self.code), "message": self.message, "subject": self.subject}


@dataclass
class QueryOutcome:
    """Ordered search results plus the diagnostics gathered while building them."""

    results: list[Result]
    diagnostics: list[Diagnostic] = field(default_factory=list)
