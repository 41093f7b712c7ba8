"""Shared pytest fixtures for fleet_reconcile tests."""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

from fleet_reconcile.config import FleetReconcileConfig
from fleet_reconcile.domains.capi.client import CAPIClient


class FakeResource:
    """Wraps a dict so it reads like a kubernetes ResourceInstance.

    Attributes and ``get`` return nested dicts wrapped the same way; missing
    attributes are None, as with dynamic client objects.
    """

    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return _wrap(self._data.get(name))

    def __getitem__(self, key: str) -> Any:
        return _wrap(self._data[key])

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Any:
        return iter(self._data)

    def __bool__(self) -> bool:
        return bool(self._data)

    def __repr__(self) -> str:
        return f"FakeResource({self._data!r})"

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._data:
            return _wrap(self._data[key])
        return default

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)


def _wrap(value: Any) -> Any:
    if isinstance(value, dict):
        return FakeResource(value)
    if isinstance(value, list):
        return [_wrap(v) for v in value]
    return value


def _make_resource(
    kind: str,
    name: str,
    namespace: str = "clusters",
    api_version: str = "cluster.x-k8s.io/v1beta1",
    spec: dict[str, Any] | None = None,
    status: dict[str, Any] | None = None,
    labels: dict[str, str] | None = None,
    annotations: dict[str, str] | None = None,
    owner_references: list[dict[str, Any]] | None = None,
    **fields: Any,
) -> FakeResource:
    metadata: dict[str, Any] = {"name": name, "namespace": namespace}
    if labels is not None:
        metadata["labels"] = labels
    if annotations is not None:
        metadata["annotations"] = annotations
    if owner_references is not None:
        metadata["ownerReferences"] = owner_references
    data: dict[str, Any] = {"apiVersion": api_version, "kind": kind, "metadata": metadata}
    if spec is not None:
        data["spec"] = spec
    if status is not None:
        data["status"] = status
    data.update(fields)
    return FakeResource(data)


@pytest.fixture
def make_resource() -> Callable[..., FakeResource]:
    """Factory for attribute-accessible Kubernetes resources."""
    return _make_resource


@pytest.fixture
def make_machine() -> Callable[..., FakeResource]:
    """Factory for Machine resources."""

    def factory(
        name: str,
        phase: str | None = "Running",
        version: str | None = "v1.27.5",
        cluster: str = "prod",
        deployment: str | None = None,
        control_plane: str | None = None,
    ) -> FakeResource:
        labels = {"cluster.x-k8s.io/cluster-name": cluster}
        if deployment:
            labels["cluster.x-k8s.io/deployment-name"] = deployment
        owners = []
        if control_plane:
            owners.append(
                {
                    "apiVersion": "controlplane.cluster.x-k8s.io/v1beta1",
                    "kind": "KubeadmControlPlane",
                    "name": control_plane,
                    "uid": f"{control_plane}-uid",
                    "controller": True,
                }
            )
        spec: dict[str, Any] = {"clusterName": cluster}
        if version is not None:
            spec["version"] = version
        status = {"phase": phase} if phase is not None else {}
        return _make_resource(
            "Machine",
            name,
            spec=spec,
            status=status,
            labels=labels,
            owner_references=owners,
        )

    return factory


@pytest.fixture
def make_machine_deployment() -> Callable[..., FakeResource]:
    """Factory for MachineDeployment resources."""

    def factory(
        name: str,
        replicas: int | None = 3,
        ready_replicas: int | None = 3,
        template: str = "worker-template",
        config_template: str = "worker-bootstrap",
        cluster: str = "prod",
    ) -> FakeResource:
        spec: dict[str, Any] = {
            "clusterName": cluster,
            "template": {
                "spec": {
                    "clusterName": cluster,
                    "bootstrap": {
                        "configRef": {
                            "apiVersion": "bootstrap.cluster.x-k8s.io/v1beta1",
                            "kind": "KubeadmConfigTemplate",
                            "name": config_template,
                        }
                    },
                    "infrastructureRef": {
                        "apiVersion": "infrastructure.cluster.x-k8s.io/v1beta3",
                        "kind": "VCDMachineTemplate",
                        "name": template,
                    },
                }
            },
        }
        if replicas is not None:
            spec["replicas"] = replicas
        status = {"readyReplicas": ready_replicas} if ready_replicas is not None else {}
        return _make_resource(
            "MachineDeployment",
            name,
            spec=spec,
            status=status,
            labels={"cluster.x-k8s.io/cluster-name": cluster},
        )

    return factory


@pytest.fixture
def make_control_plane() -> Callable[..., FakeResource]:
    """Factory for KubeadmControlPlane resources."""

    def factory(
        name: str,
        replicas: int | None = 1,
        ready_replicas: int | None = 1,
        template: str = "control-plane-template",
        version: str = "v1.27.5",
        cluster: str = "prod",
    ) -> FakeResource:
        spec: dict[str, Any] = {
            "version": version,
            "machineTemplate": {
                "infrastructureRef": {
                    "apiVersion": "infrastructure.cluster.x-k8s.io/v1beta3",
                    "kind": "VCDMachineTemplate",
                    "name": template,
                    "namespace": "clusters",
                }
            },
        }
        if replicas is not None:
            spec["replicas"] = replicas
        status = {"readyReplicas": ready_replicas} if ready_replicas is not None else {}
        return _make_resource(
            "KubeadmControlPlane",
            name,
            api_version="controlplane.cluster.x-k8s.io/v1beta1",
            spec=spec,
            status=status,
            labels={"cluster.x-k8s.io/cluster-name": cluster},
        )

    return factory


@pytest.fixture
def make_machine_template() -> Callable[..., FakeResource]:
    """Factory for VCDMachineTemplate resources."""

    def factory(
        name: str,
        sizing_policy: str = "TKG medium",
        placement_policy: str = "",
        gpu: bool = False,
        storage_profile: str = "Gold",
        disk_size: str | int | None = "20Gi",
    ) -> FakeResource:
        machine_spec: dict[str, Any] = {
            "catalog": "tkg",
            "template": "ubuntu-2004-kube-v1.27.5",
            "sizingPolicy": sizing_policy,
            "placementPolicy": placement_policy,
            "enableNvidiaGPU": gpu,
            "storageProfile": storage_profile,
        }
        if disk_size is not None:
            machine_spec["diskSize"] = disk_size
        return _make_resource(
            "VCDMachineTemplate",
            name,
            api_version="infrastructure.cluster.x-k8s.io/v1beta3",
            spec={"template": {"spec": machine_spec}},
        )

    return factory


@pytest.fixture
def mock_k8s() -> MagicMock:
    """Create a mock K8sClient."""
    return MagicMock()


@pytest.fixture
def capi(mock_k8s: MagicMock) -> CAPIClient:
    """Create a CAPIClient with mocked K8sClient."""
    return CAPIClient(mock_k8s)


@pytest.fixture
def config() -> FleetReconcileConfig:
    """Configuration that ignores the environment's .env file."""
    return FleetReconcileConfig(_env_file=None)  # type: ignore[call-arg]
