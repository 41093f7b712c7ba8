"""Annotation keys read from cluster objects."""

from typing import Any


class ClusterAnnotations:
    """Annotations set on CAPI Cluster objects."""

    TKG_VERSION = "TKGVERSION"


def get_tkg_version(cluster: Any) -> str:
    """Return the TKG version annotation of a Cluster, or an empty string."""
    annotations = cluster.metadata.annotations or {}
    return annotations.get(ClusterAnnotations.TKG_VERSION, "")
