"""Pydantic models for Cluster API node groups, machines and templates."""

from __future__ import annotations

from enum import Enum
from typing import Any

from kubernetes.utils import parse_quantity  # type: ignore[import-untyped]
from pydantic import BaseModel, Field

from fleet_reconcile.models.common import ObjectReference, OwnerReference
from fleet_reconcile.utils.errors import ConfigurationError
from fleet_reconcile.utils.labels import CAPILabels

MIB = 1024 * 1024


class NodeGroupKind(str, Enum):
    """Sources of node groups."""

    CONTROL_PLANE = "KubeadmControlPlane"
    WORKER = "MachineDeployment"


class NodeGroup(BaseModel):
    """A control-plane or worker group of machines."""

    kind: NodeGroupKind = Field(..., description="Group source kind")
    name: str = Field(..., description="Group name")
    namespace: str = Field(..., description="Group namespace")
    cluster_name: str = Field(..., description="Owning cluster name")
    replicas: int | None = Field(None, description="Declared replica count, None when unset")
    ready_replicas: int = Field(0, description="Ready replica count reported in status")
    template_ref: ObjectReference = Field(..., description="Machine template reference")
    config_ref: ObjectReference | None = Field(
        None, description="Bootstrap config template reference (worker groups only)"
    )

    @classmethod
    def from_machine_deployment(cls, resource: Any) -> NodeGroup:
        """Create from a MachineDeployment resource."""
        metadata = resource.metadata
        spec = getattr(resource, "spec", {}) or {}
        status = getattr(resource, "status", {}) or {}
        labels = metadata.labels or {}

        machine_spec = spec.get("template", {}).get("spec", {})
        config_ref = machine_spec.get("bootstrap", {}).get("configRef")

        return cls(
            kind=NodeGroupKind.WORKER,
            name=metadata.name,
            namespace=metadata.namespace,
            cluster_name=spec.get("clusterName") or labels.get(CAPILabels.CLUSTER_NAME, ""),
            replicas=spec.get("replicas"),
            ready_replicas=status.get("readyReplicas") or 0,
            template_ref=ObjectReference.from_k8s_ref(
                machine_spec.get("infrastructureRef", {}), metadata.namespace
            ),
            config_ref=(
                ObjectReference.from_k8s_ref(config_ref, metadata.namespace) if config_ref else None
            ),
        )

    @classmethod
    def from_control_plane(cls, resource: Any, cluster_name: str) -> NodeGroup:
        """Create from a KubeadmControlPlane resource."""
        metadata = resource.metadata
        spec = getattr(resource, "spec", {}) or {}
        status = getattr(resource, "status", {}) or {}

        infrastructure_ref = spec.get("machineTemplate", {}).get("infrastructureRef", {})

        return cls(
            kind=NodeGroupKind.CONTROL_PLANE,
            name=metadata.name,
            namespace=metadata.namespace,
            cluster_name=cluster_name,
            replicas=spec.get("replicas"),
            ready_replicas=status.get("readyReplicas") or 0,
            template_ref=ObjectReference.from_k8s_ref(infrastructure_ref, metadata.namespace),
        )


class Machine(BaseModel):
    """A Cluster API Machine backing one node."""

    name: str = Field(..., description="Machine name")
    namespace: str | None = Field(None, description="Machine namespace")
    phase: str = Field("", description="Lifecycle phase, empty when not yet reported")
    version: str | None = Field(None, description="Declared Kubernetes version")
    owner_references: list[OwnerReference] = Field(default_factory=list)

    def is_owned_by(self, kind: str, name: str) -> bool:
        """Check for an owner reference of the given kind and name."""
        return any(ref.kind == kind and ref.name == name for ref in self.owner_references)

    @classmethod
    def from_resource(cls, resource: Any) -> Machine:
        """Create from a Machine resource."""
        metadata = resource.metadata
        spec = getattr(resource, "spec", {}) or {}
        status = getattr(resource, "status", {}) or {}
        owner_refs = getattr(metadata, "ownerReferences", None) or []

        return cls(
            name=metadata.name,
            namespace=getattr(metadata, "namespace", None),
            phase=status.get("phase") or "",
            version=spec.get("version"),
            owner_references=[OwnerReference.from_k8s_owner_ref(r) for r in owner_refs],
        )


class MachineTemplate(BaseModel):
    """Sizing and placement attributes of a VCDMachineTemplate."""

    name: str = Field(..., description="Template name")
    sizing_policy: str = Field("", description="Compute sizing policy")
    placement_policy: str = Field("", description="Placement policy")
    nvidia_gpu_enabled: bool = Field(False, description="Whether NVIDIA GPUs are attached")
    storage_profile: str = Field("", description="Storage profile")
    disk_size_mb: int = Field(0, description="Disk size in MiB")

    @classmethod
    def from_resource(cls, resource: Any) -> MachineTemplate:
        """Create from a VCDMachineTemplate resource.

        Raises:
            ConfigurationError: If the disk size is not a valid quantity.
        """
        metadata = resource.metadata
        spec = getattr(resource, "spec", {}) or {}
        machine_spec = spec.get("template", {}).get("spec", {})

        return cls(
            name=metadata.name,
            sizing_policy=machine_spec.get("sizingPolicy") or "",
            placement_policy=machine_spec.get("placementPolicy") or "",
            nvidia_gpu_enabled=bool(machine_spec.get("enableNvidiaGPU", False)),
            storage_profile=machine_spec.get("storageProfile") or "",
            disk_size_mb=_disk_size_mb(machine_spec.get("diskSize"), metadata.name),
        )


def _disk_size_mb(value: Any, template_name: str) -> int:
    """Convert a Kubernetes quantity to whole MiB."""
    if value is None or value == "":
        return 0
    try:
        size_bytes = parse_quantity(value)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid diskSize '{value}': {e}",
            kind="VCDMachineTemplate",
            name=template_name,
        ) from e
    return int(size_bytes // MIB)
