"""Spec and status projections of cluster objects."""

from fleet_reconcile.domains.projection.collector import ClusterObjectCollector, to_document
from fleet_reconcile.domains.projection.projector import (
    DOCUMENT_SEPARATOR,
    ObjectGraphProjector,
    ProjectionKind,
    serialize,
)
from fleet_reconcile.domains.projection.rules import RedactionRule

__all__ = [
    "DOCUMENT_SEPARATOR",
    "ClusterObjectCollector",
    "ObjectGraphProjector",
    "ProjectionKind",
    "RedactionRule",
    "serialize",
    "to_document",
]
