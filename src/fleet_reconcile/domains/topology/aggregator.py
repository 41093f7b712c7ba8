"""Aggregation of control-plane and worker node groups into node pools."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from fleet_reconcile.domains.capi.models import MachineTemplate, NodeGroup
from fleet_reconcile.domains.topology.models import ClusterTopologySnapshot, NodePool
from fleet_reconcile.utils.errors import ConfigurationError, FleetReconcileError

if TYPE_CHECKING:
    from fleet_reconcile.domains.capi.client import CAPIClient

logger = logging.getLogger(__name__)


class NodePoolAggregator:
    """Builds ClusterTopologySnapshot objects from node group sources."""

    def __init__(self, capi: CAPIClient) -> None:
        self._capi = capi

    def aggregate_cluster(self, cluster_name: str, namespace: str) -> ClusterTopologySnapshot:
        """Aggregate every node group of a cluster.

        Worker groups come first, followed by control-plane groups, each in
        API listing order.
        """
        groups = [
            *self._capi.list_worker_groups(cluster_name, namespace),
            *self._capi.list_control_plane_groups(cluster_name, namespace),
        ]
        return self.aggregate(groups)

    def aggregate(self, groups: Sequence[NodeGroup]) -> ClusterTopologySnapshot:
        """Build one NodePool per group, preserving group order.

        Raises:
            NotFoundError: If a group's machine template does not exist.
            ConfigurationError: If two groups share a name.
        """
        pools: list[NodePool] = []
        seen: set[str] = set()

        for group in groups:
            pool = self._node_pool(group)
            if pool.name in seen:
                raise ConfigurationError(
                    f"Duplicate node pool name '{pool.name}'",
                    operation="aggregate_node_pools",
                    kind=group.kind.value,
                    name=pool.name,
                )
            seen.add(pool.name)
            pools.append(pool)

        logger.debug(f"Aggregated {len(pools)} node pools")
        return ClusterTopologySnapshot(node_pools=tuple(pools))

    def _node_pool(self, group: NodeGroup) -> NodePool:
        try:
            template = MachineTemplate.from_resource(
                self._capi.get_machine_template(group.template_ref)
            )
            machines = self._capi.list_instances(group)
        except FleetReconcileError as e:
            raise e.with_context(
                operation="aggregate_node_pools", kind=group.kind.value, name=group.name
            )

        return NodePool(
            name=group.name,
            sizing_policy=template.sizing_policy,
            placement_policy=template.placement_policy,
            nvidia_gpu_enabled=template.nvidia_gpu_enabled,
            storage_profile=template.storage_profile,
            disk_size_mb=template.disk_size_mb,
            desired_replicas=group.replicas or 0,
            available_replicas=group.ready_replicas,
            node_status={m.name: m.phase for m in machines},
        )
