"""Collection of the Kubernetes objects that describe one workload cluster."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from fleet_reconcile.domains.capi.models import NodeGroup
from fleet_reconcile.domains.projection.projector import RETAINED_OBJECT_META_KEYS
from fleet_reconcile.models.common import ObjectReference
from fleet_reconcile.utils.errors import FleetReconcileError, MalformedDocumentError

if TYPE_CHECKING:
    from fleet_reconcile.domains.capi.client import CAPIClient

logger = logging.getLogger(__name__)


def to_document(resource: Any) -> dict[str, Any]:
    """Convert an API object to a plain document.

    Raises:
        MalformedDocumentError: If the object has no dictionary form.
    """
    if isinstance(resource, Mapping):
        return dict(resource)
    to_dict = getattr(resource, "to_dict", None)
    if callable(to_dict):
        data = to_dict()
        if isinstance(data, Mapping):
            return dict(data)
    raise MalformedDocumentError(f"Cannot convert {type(resource).__name__} to a document")


class ClusterObjectCollector:
    """Gathers the objects that make up a cluster's declarative definition."""

    def __init__(self, capi: CAPIClient) -> None:
        self._capi = capi

    def collect(self, cluster_name: str, namespace: str) -> list[dict[str, Any]]:
        """Return the cluster's objects as documents, in a fixed order.

        Order: Cluster, VCDCluster, VCDMachineTemplates, KubeadmConfigTemplates,
        KubeadmControlPlanes, MachineDeployments. Templates referenced more
        than once are fetched once, in first-seen order (control planes
        before machine deployments). Each document keeps only the name and
        namespace of its metadata, so server-assigned fields such as uid,
        resourceVersion and managedFields never reach a projection.
        """
        try:
            return self._collect(cluster_name, namespace)
        except FleetReconcileError as e:
            raise e.with_context(operation="collect_cluster_objects", name=cluster_name)

    def _collect(self, cluster_name: str, namespace: str) -> list[dict[str, Any]]:
        cluster = self._capi.get_cluster(cluster_name, namespace)
        spec = getattr(cluster, "spec", {}) or {}
        infrastructure_ref = spec.get("infrastructureRef") or {}
        vcd_cluster_name = infrastructure_ref.get("name") or cluster_name
        vcd_cluster = self._capi.get_vcd_cluster(vcd_cluster_name, namespace)

        control_planes = self._capi.list_control_planes(cluster_name, namespace)
        deployments = self._capi.list_machine_deployments(cluster_name, namespace)
        control_plane_groups = [
            NodeGroup.from_control_plane(r, cluster_name) for r in control_planes
        ]
        worker_groups = [NodeGroup.from_machine_deployment(r) for r in deployments]

        machine_template_refs = _unique_refs(
            g.template_ref for g in [*control_plane_groups, *worker_groups]
        )
        config_template_refs = _unique_refs(
            g.config_ref for g in worker_groups if g.config_ref is not None
        )

        machine_templates = [self._capi.get_machine_template(ref) for ref in machine_template_refs]
        config_templates = [self._capi.get_config_template(ref) for ref in config_template_refs]

        objects = [
            cluster,
            vcd_cluster,
            *machine_templates,
            *config_templates,
            *control_planes,
            *deployments,
        ]
        logger.debug(f"Collected {len(objects)} objects for cluster {namespace}/{cluster_name}")
        return [_identity_metadata(to_document(obj)) for obj in objects]


def _identity_metadata(document: dict[str, Any]) -> dict[str, Any]:
    metadata = document.get("metadata")
    if isinstance(metadata, Mapping):
        document["metadata"] = {
            k: metadata[k] for k in RETAINED_OBJECT_META_KEYS if k in metadata
        }
    return document


def _unique_refs(refs: Iterable[ObjectReference]) -> list[ObjectReference]:
    seen: set[tuple[str | None, str]] = set()
    unique: list[ObjectReference] = []
    for ref in refs:
        key = (ref.namespace, ref.name)
        if key not in seen:
            seen.add(key)
            unique.append(ref)
    return unique
