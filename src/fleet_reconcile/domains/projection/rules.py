"""Redaction rules applied before documents are projected."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fleet_reconcile.config import DEFAULT_REDACTED_FIELDS, DEFAULT_REDACTION_SENTINEL
from fleet_reconcile.models.document import DocumentNode

if TYPE_CHECKING:
    from fleet_reconcile.config import FleetReconcileConfig


@dataclass(frozen=True)
class RedactionRule:
    """Field paths whose values are replaced by a sentinel string."""

    paths: tuple[tuple[str, ...], ...]
    sentinel: str = DEFAULT_REDACTION_SENTINEL

    @classmethod
    def from_dotted(
        cls, paths: Iterable[str], sentinel: str = DEFAULT_REDACTION_SENTINEL
    ) -> RedactionRule:
        """Build from dotted paths such as ``spec.userContext.password``."""
        return cls(
            paths=tuple(tuple(p.split(".")) for p in paths if p),
            sentinel=sentinel,
        )

    @classmethod
    def credentials(cls) -> RedactionRule:
        """The username, password and refresh token of the user context."""
        return cls.from_dotted(DEFAULT_REDACTED_FIELDS)

    @classmethod
    def from_config(cls, config: FleetReconcileConfig) -> RedactionRule:
        return cls.from_dotted(config.redacted_fields, sentinel=config.redaction_sentinel)

    def apply(self, node: DocumentNode) -> DocumentNode:
        """Return ``node`` with every present path overwritten.

        Paths that are absent, or that cross a non-mapping value, are skipped.
        """
        for path in self.paths:
            node = self._overwrite(node, path)
        return node

    def _overwrite(self, node: DocumentNode, path: tuple[str, ...]) -> DocumentNode:
        if not node.is_mapping:
            return node
        head, rest = path[0], path[1:]
        child = node.get(head)
        if child is None:
            return node
        if not rest:
            return node.with_entry(head, DocumentNode.string(self.sentinel))
        replaced = self._overwrite(child, rest)
        if replaced is child:
            return node
        return node.with_entry(head, replaced)
