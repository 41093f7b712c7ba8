"""Clients for the management cluster and the infrastructure directory."""

from fleet_reconcile.clients.base import CRDDefinition, K8sClient
from fleet_reconcile.clients.directory import ResourceDirectory

__all__ = ["CRDDefinition", "K8sClient", "ResourceDirectory"]
