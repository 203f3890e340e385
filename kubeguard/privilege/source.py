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
"""Role binding sources backed by the Kubernetes RBAC API."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from django.conf import settings
from kubernetes import client, config
from kubernetes.client import ApiException
from urllib3.exceptions import HTTPError

from .exceptions import GrantLookupError, GrantNotFoundError, SourceUnavailableError
from .model import CLUSTER_ROLE_BINDING, ROLE_BINDING, BindingRecord, GrantKind, RoleRef, Subject

logger = logging.getLogger(__name__)

ALL_NAMESPACES = "all namespaces"


def describe_scope(namespace: Optional[str]) -> str:
    """Return a readable name for a binding scope."""
    return f"namespace {namespace}" if namespace else ALL_NAMESPACES


class RbacSource(ABC):
    """Supplies role bindings and resolves the roles they reference.

    Implementations are only read from, so one instance may be shared by
    concurrent searches as long as its own client is thread safe.
    """

    @abstractmethod
    def list_bindings(self, namespace: Optional[str] = None) -> list[BindingRecord]:
        """List role bindings in a namespace (all namespaces when None) and all cluster role bindings.

        Raises:
            SourceUnavailableError: If the bindings cannot be listed
        """

    @abstractmethod
    def get_role(self, namespace: Optional[str], name: str) -> dict[str, Any]:
        """Fetch a namespaced role.

        Raises:
            GrantNotFoundError: If the role does not exist
            GrantLookupError: If the role cannot be fetched
        """

    @abstractmethod
    def get_cluster_role(self, name: str) -> dict[str, Any]:
        """Fetch a cluster role.

        Raises:
            GrantNotFoundError: If the cluster role does not exist
            GrantLookupError: If the cluster role cannot be fetched
        """


def binding_from_k8s(obj, kind: str) -> BindingRecord:
    """Convert a V1RoleBinding or V1ClusterRoleBinding into a binding record."""
    subjects = tuple(
        Subject(kind=subject.kind, name=subject.name, namespace=subject.namespace) for subject in obj.subjects or []
    )
    return BindingRecord(
        kind=kind,
        name=obj.metadata.name,
        namespace=obj.metadata.namespace if kind == ROLE_BINDING else None,
        role_ref=RoleRef(kind=obj.role_ref.kind, name=obj.role_ref.name),
        subjects=subjects,
    )


class KubernetesRbacSource(RbacSource):
    """RBAC source that reads from a cluster through the Kubernetes API."""

    def __init__(self, rbac_api: client.RbacAuthorizationV1Api, request_timeout: Optional[float] = None):
        """Initialize with an RBAC API client.

        Args:
            rbac_api: The client used for all reads
            request_timeout: Seconds to wait for each API call, None waits indefinitely
        """
        self.rbac_api = rbac_api
        self.request_timeout = request_timeout

    def _call(self, method, *args):
        if self.request_timeout:
            return method(*args, _request_timeout=self.request_timeout)
        return method(*args)

    def list_bindings(self, namespace: Optional[str] = None) -> list[BindingRecord]:
        """List role bindings and cluster role bindings."""
        scope = describe_scope(namespace)
        try:
            if namespace:
                role_bindings = self._call(self.rbac_api.list_namespaced_role_binding, namespace)
            else:
                role_bindings = self._call(self.rbac_api.list_role_binding_for_all_namespaces)
            cluster_role_bindings = self._call(self.rbac_api.list_cluster_role_binding)
        except ApiException as e:
            raise SourceUnavailableError(scope, f"{e.status} {e.reason}") from e
        except (HTTPError, OSError) as e:
            raise SourceUnavailableError(scope, str(e)) from e

        bindings = [binding_from_k8s(item, ROLE_BINDING) for item in role_bindings.items or []]
        bindings += [binding_from_k8s(item, CLUSTER_ROLE_BINDING) for item in cluster_role_bindings.items or []]
        logger.debug("Listed %d binding(s) in %s.", len(bindings), scope)
        return bindings

    def get_role(self, namespace: Optional[str], name: str) -> dict[str, Any]:
        """Fetch a role from the binding's namespace."""
        try:
            role = self._call(self.rbac_api.read_namespaced_role, name, namespace)
        except ApiException as e:
            if e.status == 404:
                raise GrantNotFoundError(GrantKind.ROLE, name, namespace) from e
            raise GrantLookupError(GrantKind.ROLE, name, namespace, f"{e.status} {e.reason}") from e
        except (HTTPError, OSError) as e:
            raise GrantLookupError(GrantKind.ROLE, name, namespace, str(e)) from e
        return self.rbac_api.api_client.sanitize_for_serialization(role)

    def get_cluster_role(self, name: str) -> dict[str, Any]:
        """Fetch a cluster role."""
        try:
            cluster_role = self._call(self.rbac_api.read_cluster_role, name)
        except ApiException as e:
            if e.status == 404:
                raise GrantNotFoundError(GrantKind.CLUSTER_ROLE, name) from e
            raise GrantLookupError(GrantKind.CLUSTER_ROLE, name, reason=f"{e.status} {e.reason}") from e
        except (HTTPError, OSError) as e:
            raise GrantLookupError(GrantKind.CLUSTER_ROLE, name, reason=str(e)) from e
        return self.rbac_api.api_client.sanitize_for_serialization(cluster_role)


def load_client_configuration() -> client.Configuration:
    """Build a Kubernetes client configuration from the Django settings.

    In-cluster service account credentials are used when KUBERNETES_IN_CLUSTER
    is set, otherwise the kubeconfig file at KUBECONFIG.

    Raises:
        SourceUnavailableError: If no usable configuration can be loaded
    """
    configuration = client.Configuration()
    try:
        if settings.KUBERNETES_IN_CLUSTER:
            logger.info("Loading in-cluster Kubernetes configuration.")
            config.load_incluster_config(client_configuration=configuration)
        else:
            logger.info("Loading Kubernetes configuration from %s.", settings.KUBECONFIG)
            config.load_kube_config(
                config_file=settings.KUBECONFIG,
                context=settings.KUBERNETES_CONTEXT or None,
                client_configuration=configuration,
                persist_config=False,
            )
    except (config.ConfigException, OSError) as e:
        raise SourceUnavailableError("cluster configuration", str(e)) from e
    return configuration


def kubernetes_source() -> KubernetesRbacSource:
    """Create an RBAC source for the cluster configured in the Django settings."""
    api_client = client.ApiClient(load_client_configuration())
    return KubernetesRbacSource(
        client.RbacAuthorizationV1Api(api_client),
        request_timeout=settings.KUBERNETES_REQUEST_TIMEOUT,
    )
