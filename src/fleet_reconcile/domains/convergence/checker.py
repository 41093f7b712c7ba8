"""Kubernetes version convergence across a cluster's node groups."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from fleet_reconcile.utils.errors import FleetReconcileError

if TYPE_CHECKING:
    from fleet_reconcile.domains.capi.client import CAPIClient
    from fleet_reconcile.domains.capi.models import NodeGroup

logger = logging.getLogger(__name__)


class ConvergenceChecker:
    """Decides whether a version rollout has completed."""

    def __init__(self, capi: CAPIClient) -> None:
        self._capi = capi

    def has_cluster_reached_target_version(
        self, cluster_name: str, namespace: str, target_version: str
    ) -> bool:
        """Check every control-plane group, then every worker group, of a cluster."""
        groups = [
            *self._capi.list_control_plane_groups(cluster_name, namespace),
            *self._capi.list_worker_groups(cluster_name, namespace),
        ]
        return self.has_reached_target_version(groups, target_version)

    def has_reached_target_version(
        self, groups: Sequence[NodeGroup], target_version: str
    ) -> bool:
        """Check that no machine declares a version other than the target.

        Machines without a declared version do not block convergence. The
        scan stops at the first mismatch; later groups are not listed.
        """
        for group in groups:
            try:
                machines = self._capi.list_instances(group)
            except FleetReconcileError as e:
                raise e.with_context(
                    operation="check_version_convergence",
                    kind=group.kind.value,
                    name=group.name,
                )
            for machine in machines:
                if machine.version is not None and machine.version != target_version:
                    logger.debug(
                        f"Machine {machine.name} in {group.name} is at {machine.version}, "
                        f"waiting for {target_version}"
                    )
                    return False
        return True
