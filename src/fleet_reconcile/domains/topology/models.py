"""Pydantic models for the aggregated cluster topology."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NodePool(BaseModel):
    """A named group of machines sharing one machine template."""

    name: str = Field(..., description="Pool name, unique within a snapshot")
    sizing_policy: str = Field("", description="Compute sizing policy")
    placement_policy: str = Field("", description="Placement policy")
    nvidia_gpu_enabled: bool = Field(False, description="Whether NVIDIA GPUs are attached")
    storage_profile: str = Field("", description="Storage profile")
    disk_size_mb: int = Field(0, description="Disk size in MiB")
    desired_replicas: int = Field(0, description="Declared replica count")
    available_replicas: int = Field(0, description="Ready replica count")
    node_status: dict[str, str] = Field(
        default_factory=dict, description="Machine name to lifecycle phase"
    )

    def to_record(self) -> dict[str, Any]:
        """Render the node pool entry of the cluster's external record."""
        return {
            "name": self.name,
            "sizingPolicy": self.sizing_policy,
            "placementPolicy": self.placement_policy,
            "nvidiaGpuEnabled": self.nvidia_gpu_enabled,
            "storageProfile": self.storage_profile,
            "diskSizeMb": self.disk_size_mb,
            "desiredReplicas": self.desired_replicas,
            "availableReplicas": self.available_replicas,
            "nodeStatus": dict(self.node_status),
        }


class ClusterTopologySnapshot(BaseModel):
    """Ordered node pools of a cluster at one point in time.

    Snapshots are replaced wholesale on every aggregation.
    """

    model_config = ConfigDict(frozen=True)

    node_pools: tuple[NodePool, ...] = Field(default=(), description="Pools in group order")

    def __len__(self) -> int:
        return len(self.node_pools)

    @property
    def names(self) -> list[str]:
        return [pool.name for pool in self.node_pools]

    def get(self, name: str) -> NodePool | None:
        """Return the pool with this name, if any."""
        return next((pool for pool in self.node_pools if pool.name == name), None)

    def to_record(self) -> list[dict[str, Any]]:
        return [pool.to_record() for pool in self.node_pools]
