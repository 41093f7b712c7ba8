"""Kubernetes client wrapper used by the reconciliation core.

Wraps the kubernetes dynamic client and translates API failures into the
fleet_reconcile error taxonomy: 404 becomes NotFoundError, every other API or
transport failure becomes TransientIOError. Nothing here retries.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from kubernetes import client as k8s_client  # type: ignore[import-untyped]
from kubernetes import config as k8s_config  # type: ignore[import-untyped]
from kubernetes.client import ApiException  # type: ignore[import-untyped]
from kubernetes.config.config_exception import ConfigException  # type: ignore[import-untyped]
from kubernetes.dynamic import DynamicClient  # type: ignore[import-untyped]
from kubernetes.dynamic.exceptions import ResourceNotFoundError  # type: ignore[import-untyped]
from urllib3.exceptions import HTTPError

from fleet_reconcile.config import AuthMode, FleetReconcileConfig, get_config
from fleet_reconcile.utils.errors import ConfigurationError, NotFoundError, TransientIOError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CRDDefinition:
    """Definition of a custom resource type served by the API server."""

    group: str
    version: str
    plural: str
    kind: str

    @property
    def api_version(self) -> str:
        """Full API version string (group/version)."""
        return f"{self.group}/{self.version}" if self.group else self.version


@contextmanager
def api_errors(
    operation: str,
    kind: str,
    name: str | None = None,
    namespace: str | None = None,
) -> Iterator[None]:
    """Translate kubernetes client failures raised inside the block."""
    try:
        yield
    except ApiException as e:
        if e.status == 404:
            raise NotFoundError(kind, name, namespace, operation=operation) from e
        raise TransientIOError(
            f"Kubernetes API call failed with status {e.status}: {e.reason}",
            status=e.status,
            operation=operation,
            kind=kind,
            name=name,
        ) from e
    except HTTPError as e:
        raise TransientIOError(
            f"Kubernetes API unreachable: {e}",
            operation=operation,
            kind=kind,
            name=name,
        ) from e


class K8sClient:
    """Thin wrapper over the kubernetes dynamic and core clients."""

    def __init__(self, config_obj: FleetReconcileConfig | None = None) -> None:
        self._config = config_obj or get_config()
        self._api_client: Any = None
        self._core_v1: Any = None
        self._dynamic_client: Any = None
        self._crd_cache: dict[str, Any] = {}

    def connect(self) -> None:
        """Load credentials and build the API clients.

        Raises:
            ConfigurationError: If no usable cluster configuration is found.
        """
        try:
            self._load_config()
        except ConfigException as e:
            raise ConfigurationError(f"Unable to load cluster configuration: {e}") from e

        self._api_client = k8s_client.ApiClient()
        self._core_v1 = k8s_client.CoreV1Api(self._api_client)
        with api_errors("connect", "APIDiscovery"):
            self._dynamic_client = DynamicClient(self._api_client)
        logger.info("Connected to management cluster")

    def _load_config(self) -> None:
        mode = self._config.auth_mode
        if mode == AuthMode.IN_CLUSTER:
            k8s_config.load_incluster_config()
            return
        if mode == AuthMode.KUBECONFIG:
            k8s_config.load_kube_config(
                config_file=str(self._config.effective_kubeconfig_path),
                context=self._config.kubeconfig_context,
            )
            return
        try:
            k8s_config.load_incluster_config()
            logger.debug("Using in-cluster configuration")
        except ConfigException:
            k8s_config.load_kube_config(
                config_file=str(self._config.effective_kubeconfig_path),
                context=self._config.kubeconfig_context,
            )
            logger.debug(f"Using kubeconfig {self._config.effective_kubeconfig_path}")

    def disconnect(self) -> None:
        """Drop the API clients."""
        if self._api_client is not None:
            self._api_client.close()
        self._api_client = None
        self._core_v1 = None
        self._dynamic_client = None
        self._crd_cache.clear()

    @property
    def is_connected(self) -> bool:
        return self._dynamic_client is not None

    @property
    def core_v1(self) -> Any:
        """Core v1 API.

        Raises:
            RuntimeError: If the client is not connected.
        """
        if self._core_v1 is None:
            raise RuntimeError("K8s client not connected")
        return self._core_v1

    @property
    def dynamic_client(self) -> Any:
        if self._dynamic_client is None:
            raise RuntimeError("K8s client not connected")
        return self._dynamic_client

    # --- CRD resource operations ---

    def get_resource(self, crd: CRDDefinition) -> Any:
        """Return the dynamic resource handle for a CRD.

        Raises:
            ConfigurationError: If the API server does not serve the CRD.
            TransientIOError: If discovery fails on the API or transport.
        """
        cache_key = f"{crd.api_version}/{crd.plural}"
        if cache_key not in self._crd_cache:
            try:
                with api_errors("discover", crd.kind):
                    self._crd_cache[cache_key] = self.dynamic_client.resources.get(
                        api_version=crd.api_version, kind=crd.kind
                    )
            except ResourceNotFoundError as e:
                raise ConfigurationError(
                    f"{crd.kind} ({crd.api_version}) is not served by the API server",
                    kind=crd.kind,
                ) from e
        return self._crd_cache[cache_key]

    def get(self, crd: CRDDefinition, name: str, namespace: str | None = None) -> Any:
        """Get a single resource by name."""
        resource = self.get_resource(crd)
        with api_errors("get", crd.kind, name, namespace):
            return resource.get(name=name, namespace=namespace)

    def list_resources(
        self,
        crd: CRDDefinition,
        namespace: str | None = None,
        label_selector: str | None = None,
    ) -> list[Any]:
        """List resources, optionally scoped to a namespace and label selector."""
        resource = self.get_resource(crd)
        with api_errors("list", crd.kind, namespace=namespace):
            result = resource.get(namespace=namespace, label_selector=label_selector)
        return list(result.items or [])

    # --- Secret operations ---

    def get_secret(self, name: str, namespace: str) -> Any:
        """Read a Secret."""
        with api_errors("get", "Secret", name, namespace):
            return self.core_v1.read_namespaced_secret(name=name, namespace=namespace)
