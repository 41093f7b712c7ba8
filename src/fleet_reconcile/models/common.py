"""Common Pydantic models shared across Cluster API resources."""

from typing import Any

from pydantic import BaseModel, Field


class ObjectReference(BaseModel):
    """Reference to a Kubernetes object."""

    name: str = Field(..., description="Object name")
    namespace: str | None = Field(None, description="Object namespace")
    kind: str | None = Field(None, description="Object kind")
    api_version: str | None = Field(None, description="API version")

    @classmethod
    def from_k8s_ref(cls, ref: Any, default_namespace: str | None = None) -> "ObjectReference":
        """Create from an objectReference field.

        A reference without a namespace points into ``default_namespace``.
        """
        return cls(
            name=ref.get("name"),
            namespace=ref.get("namespace") or default_namespace,
            kind=ref.get("kind"),
            api_version=ref.get("apiVersion"),
        )


class OwnerReference(BaseModel):
    """Kubernetes owner reference."""

    api_version: str | None = None
    kind: str
    name: str
    uid: str | None = None
    controller: bool = False

    @classmethod
    def from_k8s_owner_ref(cls, ref: Any) -> "OwnerReference":
        """Create from a metadata.ownerReferences entry."""
        return cls(
            api_version=ref.get("apiVersion"),
            kind=ref.get("kind"),
            name=ref.get("name"),
            uid=ref.get("uid"),
            controller=bool(ref.get("controller", False)),
        )
