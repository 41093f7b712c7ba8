"""Cluster API object access."""

from fleet_reconcile.domains.capi.client import CAPIClient
from fleet_reconcile.domains.capi.crds import CAPICRDs
from fleet_reconcile.domains.capi.models import Machine, MachineTemplate, NodeGroup, NodeGroupKind

__all__ = [
    "CAPIClient",
    "CAPICRDs",
    "Machine",
    "MachineTemplate",
    "NodeGroup",
    "NodeGroupKind",
]
