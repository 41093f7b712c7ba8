"""Tagged-variant tree for generic nested documents.

A DocumentNode is one of null, bool, number, string, sequence or mapping.
Accessors check the variant and raise MalformedDocumentError on a mismatch, so
shape problems surface as a single, catchable error. Nodes are never modified
in place: every transformation returns a new node.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from fleet_reconcile.utils.errors import MalformedDocumentError


class NodeKind(str, Enum):
    """Variants of a DocumentNode."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


@dataclass(frozen=True, eq=True)
class DocumentNode:
    """One node of a generic document tree."""

    kind: NodeKind
    value: Any = field(default=None)

    __hash__ = None  # type: ignore[assignment]

    # --- Construction ---

    @classmethod
    def null(cls) -> DocumentNode:
        return cls(NodeKind.NULL)

    @classmethod
    def boolean(cls, value: bool) -> DocumentNode:
        return cls(NodeKind.BOOL, value)

    @classmethod
    def number(cls, value: int | float) -> DocumentNode:
        return cls(NodeKind.NUMBER, value)

    @classmethod
    def string(cls, value: str) -> DocumentNode:
        return cls(NodeKind.STRING, value)

    @classmethod
    def sequence(cls, items: Iterable[DocumentNode]) -> DocumentNode:
        return cls(NodeKind.SEQUENCE, tuple(items))

    @classmethod
    def mapping(cls, entries: Mapping[str, DocumentNode]) -> DocumentNode:
        return cls(NodeKind.MAPPING, dict(entries))

    @classmethod
    def from_python(cls, obj: Any) -> DocumentNode:
        """Build a tree from plain Python data.

        Raises:
            MalformedDocumentError: On non-string mapping keys or values that
                are not JSON-like.
        """
        if isinstance(obj, DocumentNode):
            return obj
        if obj is None:
            return cls.null()
        # bool is checked before number because it subclasses int
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, (int, float)):
            return cls.number(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, Mapping):
            entries: dict[str, DocumentNode] = {}
            for key, value in obj.items():
                if not isinstance(key, str):
                    raise MalformedDocumentError(f"Mapping key {key!r} is not a string")
                entries[key] = cls.from_python(value)
            return cls.mapping(entries)
        if isinstance(obj, (list, tuple)):
            return cls.sequence(cls.from_python(item) for item in obj)
        raise MalformedDocumentError(f"Unsupported document value of type {type(obj).__name__}")

    def to_python(self) -> Any:
        """Convert back to plain Python data (fresh containers)."""
        if self.kind == NodeKind.MAPPING:
            return {k: v.to_python() for k, v in self.value.items()}
        if self.kind == NodeKind.SEQUENCE:
            return [item.to_python() for item in self.value]
        return self.value

    # --- Accessors ---

    @property
    def is_mapping(self) -> bool:
        return self.kind == NodeKind.MAPPING

    def _expect(self, kind: NodeKind) -> Any:
        if self.kind != kind:
            raise MalformedDocumentError(f"Expected {kind.value}, found {self.kind.value}")
        return self.value

    def as_mapping(self) -> dict[str, DocumentNode]:
        """Return a copy of the mapping entries."""
        return dict(self._expect(NodeKind.MAPPING))

    def as_sequence(self) -> tuple[DocumentNode, ...]:
        return self._expect(NodeKind.SEQUENCE)  # type: ignore[no-any-return]

    def as_string(self) -> str:
        return self._expect(NodeKind.STRING)  # type: ignore[no-any-return]

    def as_bool(self) -> bool:
        return self._expect(NodeKind.BOOL)  # type: ignore[no-any-return]

    def as_number(self) -> int | float:
        return self._expect(NodeKind.NUMBER)  # type: ignore[no-any-return]

    def get(self, key: str) -> DocumentNode | None:
        """Return a mapping entry, or None when absent."""
        return self._expect(NodeKind.MAPPING).get(key)  # type: ignore[no-any-return]

    def __contains__(self, key: str) -> bool:
        return self.is_mapping and key in self.value

    # --- Transformations ---

    def with_entry(self, key: str, node: DocumentNode) -> DocumentNode:
        """Return a mapping with ``key`` set to ``node``."""
        entries = self.as_mapping()
        entries[key] = node
        return DocumentNode.mapping(entries)

    def without(self, key: str) -> DocumentNode:
        """Return a mapping without ``key``."""
        entries = self.as_mapping()
        entries.pop(key, None)
        return DocumentNode.mapping(entries)

    def merged(self, other: DocumentNode) -> DocumentNode:
        """Return a mapping with ``other``'s entries laid over this one's."""
        entries = self.as_mapping()
        entries.update(other.as_mapping())
        return DocumentNode.mapping(entries)
