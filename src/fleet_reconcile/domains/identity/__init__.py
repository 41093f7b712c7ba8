"""Identity tracking of externally managed infrastructure resources."""

from fleet_reconcile.domains.identity.models import (
    LiveResource,
    RenameCheck,
    ResourceKind,
    ResourceMap,
    TrackedResource,
)
from fleet_reconcile.domains.identity.tracker import ResourceIdentityTracker

__all__ = [
    "LiveResource",
    "RenameCheck",
    "ResourceIdentityTracker",
    "ResourceKind",
    "ResourceMap",
    "TrackedResource",
]
