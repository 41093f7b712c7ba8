"""Identity tracking of externally managed infrastructure resources.

Cloud Director resources are addressed by immutable IDs, but cluster specs
refer to them by display name, which an administrator can change out of band.
ResourceIdentityTracker keeps the ID to name mapping of one cluster and detects
when the live name no longer matches the declared one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fleet_reconcile.domains.identity.models import (
    RenameCheck,
    ResourceKind,
    ResourceMap,
    TrackedResource,
)
from fleet_reconcile.utils.errors import FleetReconcileError, NotFoundError, UnimplementedError

if TYPE_CHECKING:
    from fleet_reconcile.clients.directory import ResourceDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KindHandlers:
    """Entry operations for one resource kind. Each returns a fresh list."""

    insert: Callable[[list[TrackedResource], TrackedResource], list[TrackedResource]]
    update: Callable[[list[TrackedResource], str, str], list[TrackedResource]]
    remove: Callable[[list[TrackedResource], str], list[TrackedResource]]


def _insert(entries: list[TrackedResource], resource: TrackedResource) -> list[TrackedResource]:
    return [*entries, resource]


def _update(entries: list[TrackedResource], resource_id: str, name: str) -> list[TrackedResource]:
    return [e.model_copy(update={"name": name}) if e.id == resource_id else e for e in entries]


def _remove(entries: list[TrackedResource], resource_id: str) -> list[TrackedResource]:
    return [e for e in entries if e.id != resource_id]


LIST_HANDLERS = KindHandlers(insert=_insert, update=_update, remove=_remove)

# Kinds mapped to None are known but not wired yet.
KIND_HANDLERS: dict[ResourceKind, KindHandlers | None] = {
    ResourceKind.OVDC: LIST_HANDLERS,
    ResourceKind.ORG: None,
    ResourceKind.CATALOG: None,
}


class ResourceIdentityTracker:
    """Maintains the ResourceMap of a single cluster."""

    def __init__(self, resource_map: ResourceMap) -> None:
        self._map = resource_map

    @property
    def resource_map(self) -> ResourceMap:
        return self._map

    def _handlers(
        self, kind: ResourceKind | str, operation: str
    ) -> tuple[ResourceKind, KindHandlers]:
        parsed = ResourceKind.parse(kind)
        handlers = KIND_HANDLERS.get(parsed)
        if handlers is None:
            raise UnimplementedError(
                f"{operation} is not implemented for resource type {parsed.value}",
                operation=operation,
                kind=parsed.value,
            )
        return parsed, handlers

    def find(self, kind: ResourceKind | str, resource_id: str) -> str | None:
        """Return the tracked name for an ID, or None when untracked."""
        parsed, _ = self._handlers(kind, "find")
        for entry in self._map.entries(parsed):
            if entry.id == resource_id:
                return entry.name
        return None

    def find_id(self, kind: ResourceKind | str, name: str) -> str | None:
        """Return the ID of the last tracked entry with this name."""
        parsed, _ = self._handlers(kind, "find")
        found = None
        for entry in self._map.entries(parsed):
            if entry.name == name:
                found = entry.id
        return found

    def upsert(self, kind: ResourceKind | str, resource_id: str, name: str) -> None:
        """Insert the ID, or update its name if it changed."""
        parsed, handlers = self._handlers(kind, "upsert")
        entries = self._map.entries(parsed)
        current = next((e for e in entries if e.id == resource_id), None)
        if current is None:
            resource = TrackedResource(kind=parsed, id=resource_id, name=name)
            self._map.resources[parsed] = handlers.insert(entries, resource)
            logger.debug(f"Tracking {parsed.value} {resource_id} as '{name}'")
        elif current.name != name:
            self._map.resources[parsed] = handlers.update(entries, resource_id, name)
            logger.info(f"{parsed.value} {resource_id} renamed from '{current.name}' to '{name}'")

    def remove(self, kind: ResourceKind | str, resource_id: str) -> None:
        """Stop tracking an ID. Removing an untracked ID is a no-op."""
        parsed, handlers = self._handlers(kind, "remove")
        entries = self._map.entries(parsed)
        if any(e.id == resource_id for e in entries):
            self._map.resources[parsed] = handlers.remove(entries, resource_id)
            logger.debug(f"Stopped tracking {parsed.value} {resource_id}")

    def detect_rename(
        self,
        kind: ResourceKind | str,
        org: str,
        spec_name: str,
        status_name: str | None,
        directory: ResourceDirectory,
    ) -> RenameCheck:
        """Check whether the declared resource was renamed in the infrastructure.

        Resolution order:
        1. The ID tracked under the last-known status name is looked up by ID.
           If the directory no longer has it, the stale entry is removed and
           NotFoundError is re-raised for the caller to decide on re-adoption.
        2. Without a tracked ID the resource is looked up by the status name.
           A hit counts as renamed so the caller records the ID mapping on its
           next update; ``adopted`` tells the two cases apart.
        3. Otherwise renamed means the live name differs from ``spec_name``.

        Args:
            kind: Resource type tag.
            org: Organization scoping the lookup.
            spec_name: Name declared in the cluster spec.
            status_name: Last-known name from the cluster status; falls back
                to ``spec_name`` when empty.
            directory: Live infrastructure lookup.

        Returns:
            RenameCheck with the live resource.
        """
        parsed, _ = self._handlers(kind, "detect_rename")
        last_known = status_name or spec_name
        resource_id = self.find_id(parsed, last_known)

        if resource_id is None:
            try:
                live = directory.get_resource_by_name(parsed, last_known, org)
            except FleetReconcileError as e:
                raise e.with_context(operation="detect_rename", kind=parsed.value, name=last_known)
            logger.info(
                f"Adopting {parsed.value} '{last_known}' with ID {live.id}; no tracked ID found"
            )
            return RenameCheck(renamed=True, resource=live, adopted=True)

        try:
            live = directory.get_resource_by_id(parsed, resource_id, org)
        except NotFoundError as e:
            logger.warning(
                f"{parsed.value} {resource_id} ('{last_known}') no longer exists; "
                f"removing it from the resource map"
            )
            self.remove(parsed, resource_id)
            raise e.with_context(
                operation="detect_rename",
                kind=parsed.value,
                resource_id=resource_id,
                name=last_known,
            )
        except FleetReconcileError as e:
            raise e.with_context(
                operation="detect_rename",
                kind=parsed.value,
                resource_id=resource_id,
                name=last_known,
            )

        return RenameCheck(renamed=live.name != spec_name, resource=live)
