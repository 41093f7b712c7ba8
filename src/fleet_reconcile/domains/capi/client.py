"""Cluster API client operations wrapping K8sClient."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fleet_reconcile.domains.capi.crds import CAPICRDs
from fleet_reconcile.domains.capi.models import Machine, NodeGroup, NodeGroupKind
from fleet_reconcile.utils.labels import CAPILabels

if TYPE_CHECKING:
    from fleet_reconcile.clients.base import K8sClient
    from fleet_reconcile.models.common import ObjectReference

logger = logging.getLogger(__name__)


class CAPIClient:
    """Client for Cluster API objects of a workload cluster."""

    def __init__(self, k8s: K8sClient) -> None:
        """Initialize with a K8sClient instance."""
        self._k8s = k8s

    # -------------------------------------------------------------------------
    # Cluster Operations
    # -------------------------------------------------------------------------

    def get_cluster(self, name: str, namespace: str) -> Any:
        """Get the CAPI Cluster object."""
        return self._k8s.get(CAPICRDs.CLUSTER, name, namespace=namespace)

    def get_vcd_cluster(self, name: str, namespace: str) -> Any:
        """Get a VCDCluster object."""
        return self._k8s.get(CAPICRDs.VCD_CLUSTER, name, namespace=namespace)

    def list_crs_bindings(self, namespace: str) -> list[Any]:
        """List the ClusterResourceSetBindings in the cluster's namespace."""
        return self._k8s.list_resources(
            CAPICRDs.CLUSTER_RESOURCE_SET_BINDING, namespace=namespace
        )

    # -------------------------------------------------------------------------
    # Node Group Operations
    # -------------------------------------------------------------------------

    def list_machine_deployments(self, cluster_name: str, namespace: str) -> list[Any]:
        """List the MachineDeployments of a cluster."""
        return self._k8s.list_resources(
            CAPICRDs.MACHINE_DEPLOYMENT,
            namespace=namespace,
            label_selector=CAPILabels.cluster_selector(cluster_name),
        )

    def list_control_planes(self, cluster_name: str, namespace: str) -> list[Any]:
        """List the KubeadmControlPlanes of a cluster."""
        return self._k8s.list_resources(
            CAPICRDs.KUBEADM_CONTROL_PLANE,
            namespace=namespace,
            label_selector=CAPILabels.cluster_selector(cluster_name),
        )

    def list_worker_groups(self, cluster_name: str, namespace: str) -> list[NodeGroup]:
        """List worker node groups in API listing order."""
        return [
            NodeGroup.from_machine_deployment(md)
            for md in self.list_machine_deployments(cluster_name, namespace)
        ]

    def list_control_plane_groups(self, cluster_name: str, namespace: str) -> list[NodeGroup]:
        """List control-plane node groups in API listing order."""
        return [
            NodeGroup.from_control_plane(kcp, cluster_name)
            for kcp in self.list_control_planes(cluster_name, namespace)
        ]

    # -------------------------------------------------------------------------
    # Template Operations
    # -------------------------------------------------------------------------

    def get_machine_template(self, ref: ObjectReference) -> Any:
        """Get the VCDMachineTemplate an infrastructureRef points to."""
        return self._k8s.get(CAPICRDs.VCD_MACHINE_TEMPLATE, ref.name, namespace=ref.namespace)

    def get_config_template(self, ref: ObjectReference) -> Any:
        """Get the KubeadmConfigTemplate a bootstrap configRef points to."""
        return self._k8s.get(CAPICRDs.KUBEADM_CONFIG_TEMPLATE, ref.name, namespace=ref.namespace)

    # -------------------------------------------------------------------------
    # Machine Operations
    # -------------------------------------------------------------------------

    def list_instances(self, group: NodeGroup) -> list[Machine]:
        """List the machines that belong to a node group.

        Worker machines are selected by the deployment-name label. Control
        plane machines carry no such label, so the cluster's machines are
        filtered by their KubeadmControlPlane owner reference.
        """
        if group.kind == NodeGroupKind.WORKER:
            resources = self._k8s.list_resources(
                CAPICRDs.MACHINE,
                namespace=group.namespace,
                label_selector=CAPILabels.deployment_selector(group.name),
            )
            return [Machine.from_resource(r) for r in resources]

        resources = self._k8s.list_resources(
            CAPICRDs.MACHINE,
            namespace=group.namespace,
            label_selector=CAPILabels.cluster_selector(group.cluster_name),
        )
        machines = [Machine.from_resource(r) for r in resources]
        owned = [m for m in machines if m.is_owned_by(group.kind.value, group.name)]
        logger.debug(
            f"{len(owned)} of {len(machines)} machines in cluster {group.cluster_name} "
            f"belong to control plane {group.name}"
        )
        return owned
