"""Tests for NodePoolAggregator."""

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from fleet_reconcile.domains.capi.models import Machine, NodeGroup
from fleet_reconcile.domains.topology.aggregator import NodePoolAggregator
from fleet_reconcile.domains.topology.models import ClusterTopologySnapshot, NodePool
from fleet_reconcile.utils.errors import ConfigurationError, NotFoundError


class TestNodePoolAggregator:
    """Test node pool aggregation with a mocked CAPIClient."""

    @pytest.fixture
    def mock_capi(self, make_machine_template) -> MagicMock:
        """CAPIClient returning a template named after each reference."""
        mock = MagicMock()
        mock.get_machine_template.side_effect = lambda ref: make_machine_template(
            ref.name, sizing_policy=f"{ref.name}-sizing"
        )
        return mock

    @pytest.fixture
    def aggregator(self, mock_capi: MagicMock) -> NodePoolAggregator:
        """Aggregator over mock_capi."""
        return NodePoolAggregator(mock_capi)

    @pytest.fixture
    def control_plane(self, make_control_plane) -> NodeGroup:
        """Control plane with one ready replica."""
        return NodeGroup.from_control_plane(
            make_control_plane("prod-cp", replicas=1, ready_replicas=1, template="cp-tpl"),
            "prod",
        )

    @pytest.fixture
    def workers(self, make_machine_deployment) -> NodeGroup:
        """Worker group with three desired and two ready replicas."""
        return NodeGroup.from_machine_deployment(
            make_machine_deployment("workers", replicas=3, ready_replicas=2, template="w-tpl")
        )

    def test_control_plane_and_worker(
        self,
        aggregator: NodePoolAggregator,
        mock_capi: MagicMock,
        control_plane: NodeGroup,
        workers: NodeGroup,
    ) -> None:
        """Test one pool per group with counts and machine phases."""
        mock_capi.list_instances.side_effect = lambda group: {
            "prod-cp": [Machine(name="prod-cp-1", phase="Running")],
            "workers": [
                Machine(name="workers-1", phase="Running"),
                Machine(name="workers-2", phase="Running"),
                Machine(name="workers-3", phase="Provisioning"),
            ],
        }[group.name]

        snapshot = aggregator.aggregate([control_plane, workers])

        assert len(snapshot) == 2
        assert snapshot.names == ["prod-cp", "workers"]

        cp_pool = snapshot.get("prod-cp")
        assert cp_pool is not None
        assert cp_pool.desired_replicas == 1
        assert cp_pool.available_replicas == 1
        assert cp_pool.sizing_policy == "cp-tpl-sizing"
        assert cp_pool.disk_size_mb == 20480
        assert cp_pool.node_status == {"prod-cp-1": "Running"}

        worker_pool = snapshot.get("workers")
        assert worker_pool is not None
        assert worker_pool.desired_replicas == 3
        assert worker_pool.available_replicas == 2
        assert worker_pool.sizing_policy == "w-tpl-sizing"
        assert worker_pool.node_status == {
            "workers-1": "Running",
            "workers-2": "Running",
            "workers-3": "Provisioning",
        }
        assert not set(cp_pool.node_status) & set(worker_pool.node_status)

    def test_unset_replicas_count_as_zero(
        self, aggregator: NodePoolAggregator, mock_capi: MagicMock, make_machine_deployment
    ) -> None:
        """Test an unset replica count becomes zero desired replicas."""
        mock_capi.list_instances.return_value = []
        group = NodeGroup.from_machine_deployment(
            make_machine_deployment("idle", replicas=None, ready_replicas=None)
        )

        snapshot = aggregator.aggregate([group])

        pool = snapshot.node_pools[0]
        assert pool.desired_replicas == 0
        assert pool.available_replicas == 0
        assert pool.node_status == {}

    def test_duplicate_names_rejected(
        self,
        aggregator: NodePoolAggregator,
        mock_capi: MagicMock,
        make_machine_deployment,
    ) -> None:
        """Test two groups with the same name are a configuration error."""
        mock_capi.list_instances.return_value = []
        groups = [
            NodeGroup.from_machine_deployment(make_machine_deployment("workers")),
            NodeGroup.from_machine_deployment(make_machine_deployment("workers")),
        ]

        with pytest.raises(ConfigurationError) as exc_info:
            aggregator.aggregate(groups)

        assert exc_info.value.operation == "aggregate_node_pools"
        assert exc_info.value.name == "workers"

    def test_missing_template_aborts(
        self,
        aggregator: NodePoolAggregator,
        mock_capi: MagicMock,
        control_plane: NodeGroup,
        workers: NodeGroup,
    ) -> None:
        """Test a missing machine template aborts aggregation with context."""
        mock_capi.get_machine_template.side_effect = NotFoundError(
            "VCDMachineTemplate", "w-tpl", "clusters"
        )

        with pytest.raises(NotFoundError) as exc_info:
            aggregator.aggregate([workers, control_plane])

        assert exc_info.value.operation == "aggregate_node_pools"
        assert exc_info.value.kind == "VCDMachineTemplate"
        assert exc_info.value.name == "w-tpl"
        mock_capi.list_instances.assert_not_called()

    def test_aggregate_cluster_orders_workers_first(
        self,
        aggregator: NodePoolAggregator,
        mock_capi: MagicMock,
        control_plane: NodeGroup,
        workers: NodeGroup,
    ) -> None:
        """Test worker groups precede control-plane groups."""
        mock_capi.list_worker_groups.return_value = [workers]
        mock_capi.list_control_plane_groups.return_value = [control_plane]
        mock_capi.list_instances.return_value = []

        snapshot = aggregator.aggregate_cluster("prod", "clusters")

        assert snapshot.names == ["workers", "prod-cp"]
        mock_capi.list_worker_groups.assert_called_once_with("prod", "clusters")
        mock_capi.list_control_plane_groups.assert_called_once_with("prod", "clusters")

    def test_empty_cluster(self, aggregator: NodePoolAggregator) -> None:
        """Test no groups give an empty snapshot."""
        snapshot = aggregator.aggregate([])

        assert len(snapshot) == 0
        assert snapshot.to_record() == []


class TestClusterTopologySnapshot:
    """Test snapshot rendering."""

    def test_snapshot_is_frozen(self) -> None:
        """Test snapshots cannot be modified after creation."""
        snapshot = ClusterTopologySnapshot()

        with pytest.raises(ValidationError):
            snapshot.node_pools = ()

    def test_to_record(self) -> None:
        """Test the external record keys."""
        pool = NodePool(
            name="workers",
            sizing_policy="TKG small",
            disk_size_mb=20480,
            desired_replicas=2,
            available_replicas=1,
            node_status={"workers-1": "Running"},
        )

        assert pool.to_record() == {
            "name": "workers",
            "sizingPolicy": "TKG small",
            "placementPolicy": "",
            "nvidiaGpuEnabled": False,
            "storageProfile": "",
            "diskSizeMb": 20480,
            "desiredReplicas": 2,
            "availableReplicas": 1,
            "nodeStatus": {"workers-1": "Running"},
        }
