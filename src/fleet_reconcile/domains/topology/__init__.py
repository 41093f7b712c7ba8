"""Cluster topology aggregation."""

from fleet_reconcile.domains.topology.aggregator import NodePoolAggregator
from fleet_reconcile.domains.topology.models import ClusterTopologySnapshot, NodePool

__all__ = ["ClusterTopologySnapshot", "NodePool", "NodePoolAggregator"]
