"""Error taxonomy for fleet reconciliation.

Every error can carry the context of the resource being acted upon and the
operation in progress, so callers can log or surface it without re-deriving it.
"""

from __future__ import annotations

from typing import Any


class FleetReconcileError(Exception):
    """Base exception for fleet reconciliation errors."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        kind: str | None = None,
        resource_id: str | None = None,
        name: str | None = None,
    ) -> None:
        self.message = message
        self.operation = operation
        self.kind = kind
        self.resource_id = resource_id
        self.name = name
        super().__init__(message)

    @property
    def context(self) -> dict[str, Any]:
        """Return the populated context fields."""
        fields = {
            "operation": self.operation,
            "kind": self.kind,
            "id": self.resource_id,
            "name": self.name,
        }
        return {k: v for k, v in fields.items() if v is not None}

    def with_context(
        self,
        *,
        operation: str | None = None,
        kind: str | None = None,
        resource_id: str | None = None,
        name: str | None = None,
    ) -> FleetReconcileError:
        """Fill in missing context and return the same exception.

        Context set closer to the failure is kept; only empty fields are filled.
        """
        self.operation = self.operation or operation
        self.kind = self.kind or kind
        self.resource_id = self.resource_id or resource_id
        self.name = self.name or name
        return self

    def __str__(self) -> str:
        context = self.context
        if not context:
            return self.message
        rendered = ", ".join(f"{k}={v}" for k, v in context.items())
        return f"{self.message} [{rendered}]"


class NotFoundError(FleetReconcileError):
    """A referenced external resource or template is gone."""

    def __init__(
        self,
        kind: str,
        name: str | None = None,
        namespace: str | None = None,
        *,
        resource_id: str | None = None,
        operation: str | None = None,
    ) -> None:
        self.namespace = namespace
        target = name if name is not None else resource_id
        message = f"{kind} '{target}' not found"
        if namespace:
            message += f" in namespace '{namespace}'"
        super().__init__(
            message,
            operation=operation,
            kind=kind,
            resource_id=resource_id,
            name=name,
        )


class MalformedDocumentError(FleetReconcileError):
    """A document does not have the expected nested shape."""


class ConfigurationError(FleetReconcileError):
    """Non-retryable configuration problem that must reach the operator."""


class TransientIOError(FleetReconcileError):
    """A collaborator call failed (network, authorization, server error)."""

    def __init__(self, message: str, *, status: int | None = None, **context: Any) -> None:
        self.status = status
        super().__init__(message, **context)


class UnimplementedError(FleetReconcileError):
    """The operation is registered but not wired for this resource kind."""
