"""Shared data models."""

from fleet_reconcile.models.common import ObjectReference, OwnerReference
from fleet_reconcile.models.document import DocumentNode, NodeKind

__all__ = ["DocumentNode", "NodeKind", "ObjectReference", "OwnerReference"]
