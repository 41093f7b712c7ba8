"""Wiring of the reconciliation components for one management cluster."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fleet_reconcile.clients.base import K8sClient
from fleet_reconcile.config import FleetReconcileConfig, get_config
from fleet_reconcile.domains.capi.client import CAPIClient
from fleet_reconcile.domains.capi.crds import CAPICRDs
from fleet_reconcile.domains.convergence.checker import ConvergenceChecker
from fleet_reconcile.domains.credentials.resolver import UserCredentials, resolve_user_credentials
from fleet_reconcile.domains.identity.tracker import ResourceIdentityTracker
from fleet_reconcile.domains.projection.collector import ClusterObjectCollector
from fleet_reconcile.domains.projection.projector import ObjectGraphProjector, ProjectionKind
from fleet_reconcile.domains.projection.rules import RedactionRule
from fleet_reconcile.domains.topology.aggregator import NodePoolAggregator
from fleet_reconcile.utils.errors import ConfigurationError

if TYPE_CHECKING:
    from fleet_reconcile.clients.directory import ResourceDirectory
    from fleet_reconcile.domains.identity.models import RenameCheck, ResourceKind, ResourceMap
    from fleet_reconcile.domains.topology.models import ClusterTopologySnapshot
    from fleet_reconcile.models.common import ObjectReference

logger = logging.getLogger(__name__)


class FleetReconciler:
    """Entry point used by the surrounding control loop.

    Holds no per-cluster state: each call reads fresh from the API server and
    the infrastructure directory, and the only mutable input is the
    ResourceMap the caller passes in.
    """

    def __init__(
        self,
        config: FleetReconcileConfig | None = None,
        k8s: K8sClient | None = None,
        directory: ResourceDirectory | None = None,
    ) -> None:
        self._config = config or get_config()
        logging.getLogger("fleet_reconcile").setLevel(self._config.log_level.value)

        self._k8s = k8s or K8sClient(self._config)
        self._directory = directory
        self._capi = CAPIClient(self._k8s)
        self._aggregator = NodePoolAggregator(self._capi)
        self._convergence = ConvergenceChecker(self._capi)
        self._collector = ClusterObjectCollector(self._capi)
        self._projector = ObjectGraphProjector(RedactionRule.from_config(self._config))

    @property
    def config(self) -> FleetReconcileConfig:
        return self._config

    @property
    def k8s(self) -> K8sClient:
        return self._k8s

    @property
    def projector(self) -> ObjectGraphProjector:
        return self._projector

    def connect(self) -> None:
        """Validate configuration and connect to the management cluster.

        Raises:
            ConfigurationError: If the configuration is unusable.
        """
        try:
            warnings = self._config.validate_auth_config()
        except ValueError as e:
            raise ConfigurationError(f"Configuration error: {e}") from e
        for warning in warnings:
            logger.warning(warning)
        self._k8s.connect()

    def missing_crds(self) -> list[str]:
        """Return the kinds of required CRDs the API server does not serve.

        Raises:
            TransientIOError: If discovery itself fails.
        """
        missing = []
        for crd in CAPICRDs.all_crds():
            try:
                self._k8s.get_resource(crd)
            except ConfigurationError:
                missing.append(crd.kind)
        return missing

    # --- Identity ---

    def identity_tracker(self, resource_map: ResourceMap) -> ResourceIdentityTracker:
        """Return a tracker bound to one cluster's ResourceMap."""
        return ResourceIdentityTracker(resource_map)

    def detect_rename(
        self,
        resource_map: ResourceMap,
        kind: ResourceKind | str,
        org: str,
        spec_name: str,
        status_name: str | None = None,
    ) -> RenameCheck:
        """Run rename detection against the configured directory.

        Raises:
            ConfigurationError: If no directory was supplied.
        """
        if self._directory is None:
            raise ConfigurationError("No infrastructure directory configured")
        tracker = self.identity_tracker(resource_map)
        return tracker.detect_rename(kind, org, spec_name, status_name, self._directory)

    # --- Topology and convergence ---

    def topology(self, cluster_name: str, namespace: str) -> ClusterTopologySnapshot:
        return self._aggregator.aggregate_cluster(cluster_name, namespace)

    def has_reached_target_version(
        self, cluster_name: str, namespace: str, target_version: str
    ) -> bool:
        return self._convergence.has_cluster_reached_target_version(
            cluster_name, namespace, target_version
        )

    # --- Projections ---

    def capi_yaml(self, cluster_name: str, namespace: str) -> str:
        """Desired configuration of the cluster's objects as one YAML stream."""
        documents = self._collector.collect(cluster_name, namespace)
        return self._projector.project_all(documents, ProjectionKind.SPEC)

    def capi_status_yaml(self, cluster_name: str, namespace: str) -> str:
        """Observed state of the cluster's objects as one YAML stream."""
        documents = self._collector.collect(cluster_name, namespace)
        return self._projector.project_all(documents, ProjectionKind.STATUS)

    # --- Credentials ---

    def resolve_credentials(
        self, declared: UserCredentials, secret_ref: ObjectReference | None = None
    ) -> UserCredentials:
        return resolve_user_credentials(self._k8s, declared, secret_ref)
