"""
In-memory label store.

Keeps documents in insertion order per collection. Used for tests, demos
and applications that seed their labels at startup.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, TypeVar
from uuid import uuid4

from ..errors import NotFoundError
from ..models import LabeledModel
from .base import row_to_entity, writable_attributes

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=LabeledModel)


def _in_scope(document: Mapping[str, Any], scope: Mapping[str, Any]) -> bool:
    return all(document.get(name) == value for name, value in scope.items())


def _ordered(documents: list[dict[str, Any]], ordering_field: str | None) -> list[dict[str, Any]]:
    if ordering_field is None:
        return documents
    # rows missing the ordering field sort last
    return sorted(
        documents,
        key=lambda doc: (doc.get(ordering_field) is None, doc.get(ordering_field)),
    )


class InMemoryLabelStore:
    """
    Label store backed by plain dictionaries.

    Each collection is a list of documents; every document carries the
    entity's fields plus ``_key`` and ``created_at``.
    """

    def __init__(self) -> None:
        self._collections: dict[str, list[dict[str, Any]]] = {}

        # Number of find/find_first/find_all calls, for cache diagnostics
        self.query_count = 0

    def _documents(self, collection: str) -> list[dict[str, Any]]:
        return self._collections.setdefault(collection, [])

    def _locate(self, entity: LabeledModel) -> dict[str, Any]:
        if not entity.is_persisted:
            raise NotFoundError(f"{type(entity).__name__} has not been stored", family=type(entity).__name__)

        for document in self._documents(entity.store_collection):
            if document["_key"] == entity.store_key:
                return document

        raise NotFoundError(
            f"{type(entity).__name__} {entity.store_key} not found in {entity.store_collection}",
            family=type(entity).__name__,
            code=entity.get_system_label(),
        )

    def find(
        self,
        family: type[M],
        collection: str,
        scope: Mapping[str, Any],
        field: str,
        value: object,
    ) -> M | None:
        self.query_count += 1
        for document in self._documents(collection):
            if document.get(field) == value and _in_scope(document, scope):
                return row_to_entity(family, collection, document)
        return None

    def find_first(
        self,
        family: type[M],
        collection: str,
        scope: Mapping[str, Any],
        ordering_field: str | None = None,
    ) -> M | None:
        rows = self.find_all(family, collection, scope, ordering_field)
        return rows[0] if rows else None

    def find_all(
        self,
        family: type[M],
        collection: str,
        scope: Mapping[str, Any],
        ordering_field: str | None = None,
    ) -> list[M]:
        self.query_count += 1
        matching = [doc for doc in self._documents(collection) if _in_scope(doc, scope)]
        return [row_to_entity(family, collection, doc) for doc in _ordered(matching, ordering_field)]

    def insert(self, collection: str, entity: M) -> M:
        """
        Insert a new entity.

        Args:
            collection: Name of the collection
            entity: The entity to store

        Returns:
            The same entity, now marked persisted
        """
        key = uuid4().hex
        document = entity.model_dump()
        document.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        document["_key"] = key

        self._documents(collection).append(document)
        entity.mark_persisted(key, collection)
        logger.debug("Inserted %s %s into %s", type(entity).__name__, key, collection)
        return entity

    def update(self, entity: M, attributes: Mapping[str, Any]) -> M:
        document = self._locate(entity)
        document.update(writable_attributes(entity, attributes))
        return entity

    def delete(self, entity: LabeledModel) -> None:
        document = self._locate(entity)
        self._documents(entity.store_collection).remove(document)
        logger.debug("Deleted %s %s from %s", type(entity).__name__, entity.store_key, entity.store_collection)

    def clear(self) -> None:
        """Drop every collection."""
        self._collections.clear()
