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
"""Service layer resolving which roles are bound to a set of subjects."""
from __future__ import annotations

import concurrent.futures
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence

from prometheus_client import Counter

from .exceptions import (
    GrantLookupError,
    GrantNotFoundError,
    InvalidPatternError,
    InvalidQueryError,
    SourceUnavailableError,
)
from .model import (
    BindingRecord,
    Diagnostic,
    DiagnosticCode,
    GrantKind,
    Hit,
    MatchMode,
    QueryOutcome,
    Result,
    ResultFormat,
)
from .serializer import render_results
from .source import RbacSource, describe_scope

logger = logging.getLogger(__name__)

privilege_query_total = Counter(
    "privilege_query_total",
    "Number of privilege searches and whether they completed",
    ["format", "outcome"],
)
privilege_diagnostic_total = Counter(
    "privilege_diagnostic_total",
    "Number of problems absorbed during privilege searches",
    ["code"],
)

GrantKey = tuple[str, Optional[str], str]


def distinct(subjects: Iterable[str]) -> list[str]:
    """Drop repeated subjects, keeping the first occurrence of each."""
    return list(dict.fromkeys(subjects))


def compile_matcher(pattern: str, match_mode: str) -> Callable[[str], bool]:
    """Return a predicate testing binding subject names against a pattern.

    Regex patterns are searched anywhere in the name, so "deve*" matches
    "developer".

    Raises:
        InvalidPatternError: If the pattern is not a valid regular expression
    """
    if match_mode == MatchMode.EXACT:
        return lambda name: name == pattern
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e
    return lambda name: compiled.search(name) is not None


def fetch_grant(source: RbacSource, key: GrantKey) -> dict[str, Any]:
    """Fetch the grant identified by a binding's grant key."""
    kind, namespace, name = key
    if kind == GrantKind.ROLE:
        return source.get_role(namespace, name)
    return source.get_cluster_role(name)


def resolve_grants(
    source: RbacSource, keys: Sequence[GrantKey], diagnostics: list[Diagnostic], max_workers: int = 1
) -> dict[GrantKey, dict[str, Any]]:
    """Fetch each distinct grant once, skipping the ones that cannot be resolved."""
    grants = {}
    if max_workers > 1 and len(keys) > 1:
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {key: executor.submit(fetch_grant, source, key) for key in keys}
            for key, future in futures.items():
                try:
                    grants[key] = future.result()
                except GrantLookupError as e:
                    _record_lookup_failure(e, diagnostics)
        return grants

    for key in keys:
        try:
            grants[key] = fetch_grant(source, key)
        except GrantLookupError as e:
            _record_lookup_failure(e, diagnostics)
    return grants


def _record_lookup_failure(error: GrantLookupError, diagnostics: list[Diagnostic]):
    if isinstance(error, GrantNotFoundError):
        code = DiagnosticCode.GRANT_NOT_FOUND
    else:
        code = DiagnosticCode.GRANT_LOOKUP_FAILED
    logger.warning("Skipping binding contribution: %s", error)
    diagnostics.append(Diagnostic(code=code, message=str(error)))


def collect_role_hits(
    source: RbacSource,
    bindings: Iterable[BindingRecord],
    subjects: Sequence[str],
    diagnostics: list[Diagnostic],
    match_mode: str = MatchMode.REGEX,
    max_workers: int = 1,
) -> dict[str, Hit]:
    """Match binding subjects against the requested subjects and gather the bound grants.

    Args:
        source: Resolves the roles and cluster roles referenced by bindings
        bindings: The bindings to scan, in the order hits accumulate
        subjects: Requested subject patterns
        diagnostics: Receives the problems absorbed along the way
        match_mode: Either "regex" or "exact"
        max_workers: Number of concurrent grant lookups

    Returns:
        A mapping from pattern to its hit, only for patterns that matched
    """
    matchers = []
    for pattern in distinct(subjects):
        try:
            matchers.append((pattern, compile_matcher(pattern, match_mode)))
        except InvalidPatternError as e:
            logger.warning("Treating pattern as a non-match: %s", e)
            diagnostics.append(Diagnostic(code=DiagnosticCode.INVALID_PATTERN, message=str(e), subject=pattern))

    matches: list[tuple[str, BindingRecord]] = []
    for binding in bindings:
        supported = GrantKind.is_valid(binding.role_ref.kind)
        for subject in binding.subjects:
            for pattern, matches_name in matchers:
                if not matches_name(subject.name):
                    continue
                if supported:
                    matches.append((pattern, binding))
                    continue
                diagnostics.append(
                    Diagnostic(
                        code=DiagnosticCode.UNSUPPORTED_ROLE_REF,
                        message=f"{binding.kind} '{binding.name}' references unsupported kind "
                        f"'{binding.role_ref.kind}'",
                        subject=pattern,
                    )
                )

    keys = list(dict.fromkeys(binding.grant_key for _, binding in matches))
    grants = resolve_grants(source, keys, diagnostics, max_workers)

    hits: dict[str, Hit] = {}
    for pattern, binding in matches:
        grant = grants.get(binding.grant_key)
        if grant is None:
            continue
        hits.setdefault(pattern, Hit()).add(binding.role_ref.kind, grant)
    return hits


def calculate_results(hits: dict[str, Hit], subjects: Iterable[str]) -> list[Result]:
    """Produce one result per distinct subject, sorted by subject."""
    results = []
    for subject in sorted(set(subjects)):
        hit = hits.get(subject)
        if hit is None:
            results.append(Result(subject=subject))
            continue
        results.append(
            Result(
                subject=subject,
                roles=hit.roles or None,
                cluster_roles=hit.cluster_roles or None,
            )
        )
    return results


@dataclass(frozen=True)
class Query:
    """A search for the roles bound to a set of subjects.

    All fields are validated when the query is created. A query holds no
    state between executions and may be run any number of times.
    """

    source: RbacSource
    subjects: Sequence[str]
    result_format: Optional[str] = ResultFormat.JSON
    match_mode: str = MatchMode.REGEX
    namespace: Optional[str] = None
    max_workers: int = 1

    def __post_init__(self):
        """Validate the configuration."""
        if self.source is None:
            raise InvalidQueryError("source", "a role binding source is required")
        if self.subjects is None or isinstance(self.subjects, str):
            raise InvalidQueryError("subjects", "a list of subjects is required")
        subjects = tuple(self.subjects)
        if not all(isinstance(subject, str) for subject in subjects):
            raise InvalidQueryError("subjects", "subjects must be strings")
        object.__setattr__(self, "subjects", subjects)
        if not MatchMode.is_valid(self.match_mode):
            raise InvalidQueryError("match_mode", f"valid options are {', '.join(MatchMode.values())}")
        if self.max_workers < 1:
            raise InvalidQueryError("max_workers", "must be at least 1")

    @property
    def output_format(self) -> ResultFormat:
        """Return the resolved output format."""
        return ResultFormat.from_selector(self.result_format)

    @property
    def content_type(self) -> str:
        """Return the content type of the serialized output."""
        return self.output_format.content_type

    def execute(self) -> QueryOutcome:
        """Run the search and return the ordered results with any diagnostics.

        Raises:
            SourceUnavailableError: If the role bindings cannot be listed
        """
        try:
            bindings = self.source.list_bindings(self.namespace)
        except SourceUnavailableError:
            privilege_query_total.labels(format=str(self.output_format), outcome="unavailable").inc()
            raise
        logger.info(
            "Searching %d binding(s) in %s for %d subject(s).",
            len(bindings),
            describe_scope(self.namespace),
            len(self.subjects),
        )

        diagnostics: list[Diagnostic] = []
        hits = collect_role_hits(
            self.source,
            bindings,
            self.subjects,
            diagnostics,
            match_mode=self.match_mode,
            max_workers=self.max_workers,
        )
        for diagnostic in diagnostics:
            privilege_diagnostic_total.labels(code=str(diagnostic.code)).inc()
        return QueryOutcome(results=calculate_results(hits, self.subjects), diagnostics=diagnostics)

    def do(self) -> bytes:
        """Run the search and serialize the results in the configured format.

        Raises:
            SourceUnavailableError: If the role bindings cannot be listed
            SerializationError: If the results cannot be rendered
        """
        return self.render(self.execute())

    def render(self, outcome: QueryOutcome) -> bytes:
        """Serialize the results of an execution in the configured format."""
        result_format = self.output_format
        try:
            content = render_results(outcome.results, result_format)
        except Exception:
            privilege_query_total.labels(format=str(result_format), outcome="error").inc()
            raise
        privilege_query_total.labels(format=str(result_format), outcome="success").inc()
        return content
