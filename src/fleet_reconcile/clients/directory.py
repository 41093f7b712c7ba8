"""Contract of the infrastructure directory collaborator.

The directory answers lookups of Cloud Director resources (orgs, OVDCs,
catalogs) by immutable ID or by display name. Implementations raise
NotFoundError when the resource is gone and TransientIOError for any other
failure; they must not cache across calls.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from fleet_reconcile.domains.identity.models import LiveResource, ResourceKind


@runtime_checkable
class ResourceDirectory(Protocol):
    """Lookup of live infrastructure resources."""

    def get_resource_by_id(
        self, kind: ResourceKind, resource_id: str, org: str
    ) -> LiveResource: ...

    def get_resource_by_name(self, kind: ResourceKind, name: str, org: str) -> LiveResource: ...
