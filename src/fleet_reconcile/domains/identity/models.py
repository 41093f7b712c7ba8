"""Pydantic models for tracked infrastructure resource identity."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from fleet_reconcile.utils.errors import ConfigurationError


class ResourceKind(str, Enum):
    """Kinds of externally managed infrastructure resources."""

    ORG = "org"
    OVDC = "ovdc"
    CATALOG = "catalog"

    @classmethod
    def parse(cls, value: ResourceKind | str) -> ResourceKind:
        """Coerce a type tag into a ResourceKind.

        Raises:
            ConfigurationError: If the tag names no known kind.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(
                f"Unsupported infrastructure resource type: {value}", kind=str(value)
            ) from None


class TrackedResource(BaseModel):
    """Immutable ID and last-known display name of an external resource."""

    kind: ResourceKind = Field(..., description="Resource type tag")
    id: str = Field(..., min_length=1, description="Immutable external identifier")
    name: str = Field(..., description="Mutable display name")


class LiveResource(BaseModel):
    """A resource as currently reported by the infrastructure directory."""

    kind: ResourceKind = Field(..., description="Resource type tag")
    id: str = Field(..., description="Immutable external identifier")
    name: str = Field(..., description="Current display name")


class ResourceMap(BaseModel):
    """Tracked resources of one cluster, grouped by kind.

    Owned by the cluster's status record and mutated only through
    ResourceIdentityTracker.
    """

    resources: dict[ResourceKind, list[TrackedResource]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_entries(self) -> ResourceMap:
        for kind, entries in self.resources.items():
            seen: set[str] = set()
            for entry in entries:
                if entry.kind != kind:
                    raise ConfigurationError(
                        f"{entry.kind.value} entry {entry.id} is listed under {kind.value}",
                        kind=kind.value,
                        resource_id=entry.id,
                    )
                if entry.id in seen:
                    raise ConfigurationError(
                        f"Duplicate {kind.value} ID {entry.id}",
                        kind=kind.value,
                        resource_id=entry.id,
                    )
                seen.add(entry.id)
        return self

    def entries(self, kind: ResourceKind) -> list[TrackedResource]:
        """Tracked resources of a kind, in insertion order."""
        return list(self.resources.get(kind, []))

    def to_record(self) -> dict[str, list[dict[str, str]]]:
        """Render the status record shape, e.g. {"ovdcs": [{"id": ..., "name": ...}]}."""
        return {
            f"{kind.value}s": [{"id": r.id, "name": r.name} for r in entries]
            for kind, entries in self.resources.items()
        }


@dataclass(frozen=True)
class RenameCheck:
    """Outcome of comparing a tracked resource with its live counterpart."""

    renamed: bool
    resource: LiveResource
    adopted: bool = False
    """True when no ID was tracked and the resource was found by name."""

    @property
    def new_name(self) -> str:
        return self.resource.name
