"""Utility functions and helpers for fleet reconciliation."""

from fleet_reconcile.utils.annotations import ClusterAnnotations, get_tkg_version
from fleet_reconcile.utils.errors import (
    ConfigurationError,
    FleetReconcileError,
    MalformedDocumentError,
    NotFoundError,
    TransientIOError,
    UnimplementedError,
)
from fleet_reconcile.utils.labels import CAPILabels

__all__ = [
    # Errors
    "FleetReconcileError",
    "NotFoundError",
    "MalformedDocumentError",
    "ConfigurationError",
    "TransientIOError",
    "UnimplementedError",
    # Labels and annotations
    "CAPILabels",
    "ClusterAnnotations",
    "get_tkg_version",
]
