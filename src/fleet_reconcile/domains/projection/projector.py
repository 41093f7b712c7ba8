"""Spec and status projections of cluster object documents.

A projection turns a cluster-related object into the YAML text stored in the
cluster's durable external record. The spec projection keeps the desired
configuration (no ``status``); the status projection keeps the observed state
(no ``spec``). Credentials are redacted and legacy metadata shapes are
normalized in both.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any

import yaml

from fleet_reconcile.domains.projection.rules import RedactionRule
from fleet_reconcile.models.document import DocumentNode
from fleet_reconcile.utils.errors import FleetReconcileError, MalformedDocumentError

logger = logging.getLogger(__name__)

SPEC_KEY = "spec"
STATUS_KEY = "status"
METADATA_KEY = "metadata"
# Legacy shapes produced by serializers that flatten embedded structs.
TYPE_META_KEY = "typemeta"
OBJECT_META_KEY = "objectmeta"
RETAINED_OBJECT_META_KEYS = ("name", "namespace")

DOCUMENT_SEPARATOR = "---\n"

GenericDocument = DocumentNode | Mapping[str, Any]


class ProjectionKind(str, Enum):
    """Which half of a document a projection keeps."""

    SPEC = "spec"
    STATUS = "status"


class ObjectGraphProjector:
    """Pure projections of generic documents to YAML text."""

    def __init__(self, redaction: RedactionRule | None = None) -> None:
        self._redaction = redaction or RedactionRule.credentials()

    @property
    def redaction(self) -> RedactionRule:
        return self._redaction

    def redact(self, document: GenericDocument) -> DocumentNode:
        """Return a redacted copy; the input is left untouched."""
        return self._redaction.apply(DocumentNode.from_python(document))

    def normalize_metadata(self, document: GenericDocument) -> DocumentNode:
        """Fold legacy ``typemeta`` and ``objectmeta`` sub-documents.

        ``typemeta`` entries move to the top level, overriding existing keys.
        ``objectmeta`` is reduced to name and namespace and stored as
        ``metadata``.

        Raises:
            MalformedDocumentError: If the document or either sub-document is
                not a mapping.
        """
        node = DocumentNode.from_python(document)
        if not node.is_mapping:
            raise MalformedDocumentError(
                f"Document root must be a mapping, found {node.kind.value}"
            )

        type_meta = node.get(TYPE_META_KEY)
        if type_meta is not None:
            if not type_meta.is_mapping:
                raise MalformedDocumentError(
                    f"'{TYPE_META_KEY}' must be a mapping, found {type_meta.kind.value}"
                )
            node = node.merged(type_meta).without(TYPE_META_KEY)

        object_meta = node.get(OBJECT_META_KEY)
        if object_meta is not None:
            if not object_meta.is_mapping:
                raise MalformedDocumentError(
                    f"'{OBJECT_META_KEY}' must be a mapping, found {object_meta.kind.value}"
                )
            retained = {
                k: v for k, v in object_meta.as_mapping().items() if k in RETAINED_OBJECT_META_KEYS
            }
            node = node.with_entry(METADATA_KEY, DocumentNode.mapping(retained)).without(
                OBJECT_META_KEY
            )

        return node

    def spec_projection(self, document: GenericDocument) -> str:
        """Desired configuration of a document as YAML, without ``status``."""
        return self._project(document, drop=STATUS_KEY)

    def status_projection(self, document: GenericDocument) -> str:
        """Observed state of a document as YAML, without ``spec``."""
        return self._project(document, drop=SPEC_KEY)

    def project_all(
        self, documents: Sequence[GenericDocument], projection: ProjectionKind | str
    ) -> str:
        """Project every document in order and join them as a YAML stream.

        Raises:
            MalformedDocumentError: If any document is malformed. Nothing is
                returned for the documents projected before it.
        """
        kind = ProjectionKind(projection)
        project = self._projection(kind)
        rendered: list[str] = []
        for index, document in enumerate(documents):
            try:
                rendered.append(project(document))
            except FleetReconcileError as e:
                raise e.with_context(
                    operation=f"{kind.value}_projection",
                    kind=_document_kind(document),
                    name=_document_name(document) or f"document[{index}]",
                )
        logger.debug(f"Projected {len(rendered)} documents ({kind.value})")
        return DOCUMENT_SEPARATOR.join(rendered)

    def _projection(self, projection: ProjectionKind) -> Callable[[GenericDocument], str]:
        if projection == ProjectionKind.SPEC:
            return self.spec_projection
        return self.status_projection

    def _project(self, document: GenericDocument, drop: str) -> str:
        node = self.redact(document)
        if not node.is_mapping:
            raise MalformedDocumentError(
                f"Document root must be a mapping, found {node.kind.value}"
            )
        node = self.normalize_metadata(node.without(drop))
        return serialize(node)


def serialize(node: DocumentNode) -> str:
    """Render a document as a YAML block mapping with sorted keys."""
    return yaml.safe_dump(
        node.to_python(),
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
    )


def _document_kind(document: GenericDocument) -> str | None:
    data = document.to_python() if isinstance(document, DocumentNode) else document
    if not isinstance(data, Mapping):
        return None
    kind = data.get("kind")
    if kind is None and isinstance(data.get(TYPE_META_KEY), Mapping):
        kind = data[TYPE_META_KEY].get("kind")
    return kind if isinstance(kind, str) else None


def _document_name(document: GenericDocument) -> str | None:
    data = document.to_python() if isinstance(document, DocumentNode) else document
    if not isinstance(data, Mapping):
        return None
    for key in (METADATA_KEY, OBJECT_META_KEY):
        meta = data.get(key)
        if isinstance(meta, Mapping) and isinstance(meta.get("name"), str):
            return meta["name"]  # type: ignore[no-any-return]
    return None
