"""
ArangoDB label store.

This module provides a label store backed by ArangoDB using the
python-arango driver. Each label store collection maps to one ArangoDB
document collection, created on first use.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Mapping, TypeVar
from uuid import uuid4

from arango import ArangoClient
from arango.exceptions import (
    ArangoError,
    CollectionCreateError,
    DocumentDeleteError,
    DocumentInsertError,
    DocumentUpdateError,
)

from ..config import LabelConfig
from ..errors import NotFoundError
from ..models import LabeledModel
from .base import row_to_entity, writable_attributes

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=LabeledModel)


def _scope_filter(scope: Mapping[str, Any], bind_vars: dict[str, object]) -> str:
    """
    Build the AQL filter for a scope, adding its bind variables.

    Field names are bound too, so nothing from the scope is interpolated
    into the query text.
    """
    conditions = []
    for i, (name, value) in enumerate(scope.items()):
        conditions.append(f"doc[@scope_field{i}] == @scope_value{i}")
        bind_vars[f"scope_field{i}"] = name
        bind_vars[f"scope_value{i}"] = value
    return " AND ".join(conditions) if conditions else "true"


def _sort_clause(ordering_field: str | None, bind_vars: dict[str, object]) -> str:
    if ordering_field is None:
        return "SORT doc.created_at, doc._key"
    bind_vars["ordering_field"] = ordering_field
    return "SORT doc[@ordering_field]"


class ArangoLabelStore:
    """
    Label store for ArangoDB.

    Connection settings come from LabelConfig (``database.*``). Driver
    errors are logged and propagated to the caller unchanged.
    """

    def __init__(self, client: ArangoClient | None = None) -> None:
        """
        Initialize the ArangoDB label store.

        Args:
            client: Optional preconfigured ArangoClient; one is created
                from the configured database URL when omitted
        """
        db_config = LabelConfig.get_database_credentials()
        db_url = LabelConfig.get_database_url()

        self.client = client or ArangoClient(hosts=db_url)
        self._known_collections: set[str] = set()

        # Last timestamp handed out by _next_key
        self._last_key_ns = 0

        try:
            self.db = self.client.db(
                name=db_config["database"],
                username=db_config["username"],
                password=db_config["password"],
                auth_method="basic",
                verify=True,
            )
        except ArangoError as e:
            logger.error("Failed to connect to ArangoDB at %s: %s", db_url, e)
            raise

    def _collection(self, name: str):
        """
        Get a collection, creating it if it doesn't exist.

        Args:
            name: Name of the collection
        """
        if name not in self._known_collections:
            try:
                if not self.db.has_collection(name):
                    logger.info("Creating collection: %s", name)
                    self.db.create_collection(name)
            except CollectionCreateError as e:
                logger.error("Failed to create collection %s: %s", name, e)
                raise
            self._known_collections.add(name)

        return self.db.collection(name)

    def _next_key(self) -> str:
        """
        Generate a document key that sorts in insertion order.

        Keys start with a nanosecond timestamp that strictly increases
        within this store; the random suffix keeps keys from different
        processes apart.
        """
        self._last_key_ns = max(time.time_ns(), self._last_key_ns + 1)
        return f"{self._last_key_ns:020d}-{uuid4().hex[:12]}"

    def _execute(self, query: str, bind_vars: dict[str, object]) -> list[dict[str, Any]]:
        try:
            cursor = self.db.aql.execute(query, bind_vars=bind_vars, batch_size=1000)
            return list(cursor)
        except ArangoError as e:
            logger.error("Query failed: %s", e)
            raise

    def find(
        self,
        family: type[M],
        collection: str,
        scope: Mapping[str, Any],
        field: str,
        value: object,
    ) -> M | None:
        """
        Find the row whose ``field`` equals ``value`` within ``scope``.

        Args:
            family: Model class to build the row with
            collection: Name of the collection
            scope: Equality constraints restricting the search
            field: Attribute to match
            value: Value to match

        Returns:
            The matching entity, or None
        """
        self._collection(collection)
        bind_vars: dict[str, object] = {
            "@collection": collection,
            "field": field,
            "value": value,
        }
        scope_clause = _scope_filter(scope, bind_vars)

        query = f"""
        FOR doc IN @@collection
        FILTER doc[@field] == @value
        AND {scope_clause}
        LIMIT 1
        RETURN doc
        """

        results = self._execute(query, bind_vars)
        if not results:
            return None
        return row_to_entity(family, collection, results[0])

    def find_all(
        self,
        family: type[M],
        collection: str,
        scope: Mapping[str, Any],
        ordering_field: str | None = None,
        limit: int | None = None,
    ) -> list[M]:
        """
        Find every row within ``scope``.

        Without an ordering field rows are ordered by insertion time.
        """
        self._collection(collection)
        bind_vars: dict[str, object] = {"@collection": collection}
        scope_clause = _scope_filter(scope, bind_vars)
        sort_clause = _sort_clause(ordering_field, bind_vars)

        limit_clause = ""
        if limit is not None:
            bind_vars["limit"] = limit
            limit_clause = "LIMIT @limit"

        query = f"""
        FOR doc IN @@collection
        FILTER {scope_clause}
        {sort_clause}
        {limit_clause}
        RETURN doc
        """

        return [row_to_entity(family, collection, doc) for doc in self._execute(query, bind_vars)]

    def find_first(
        self,
        family: type[M],
        collection: str,
        scope: Mapping[str, Any],
        ordering_field: str | None = None,
    ) -> M | None:
        rows = self.find_all(family, collection, scope, ordering_field, limit=1)
        return rows[0] if rows else None

    def insert(self, collection: str, entity: M) -> M:
        """
        Insert an entity into the database.

        Args:
            collection: Name of the collection
            entity: The entity to store

        Returns:
            The same entity, marked persisted under its new document key
        """
        key = self._next_key()
        document = entity.model_dump(mode="json")
        document.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        document["_key"] = key

        try:
            self._collection(collection).insert(document)
        except DocumentInsertError as e:
            logger.error("Failed to insert %s into %s: %s", type(entity).__name__, collection, e)
            raise

        entity.mark_persisted(key, collection)
        return entity

    def update(self, entity: M, attributes: Mapping[str, Any]) -> M:
        """
        Update a stored entity.

        The system label is dropped from ``attributes``; it is written
        once, at insert.
        """
        if not entity.is_persisted:
            raise NotFoundError(f"{type(entity).__name__} has not been stored", family=type(entity).__name__)

        changes = writable_attributes(entity, attributes)
        if not changes:
            return entity

        try:
            self._collection(entity.store_collection).update({"_key": entity.store_key, **changes})
        except DocumentUpdateError as e:
            logger.error("Failed to update %s %s: %s", type(entity).__name__, entity.store_key, e)
            raise

        return entity

    def delete(self, entity: LabeledModel) -> None:
        """
        Delete a stored entity.

        Raises:
            NotFoundError: If the document no longer exists
        """
        if not entity.is_persisted:
            raise NotFoundError(f"{type(entity).__name__} has not been stored", family=type(entity).__name__)

        try:
            self._collection(entity.store_collection).delete(entity.store_key)
        except DocumentDeleteError as e:
            if e.http_code == 404:
                raise NotFoundError(
                    f"{type(entity).__name__} {entity.store_key} not found",
                    family=type(entity).__name__,
                    code=entity.get_system_label(),
                ) from e
            logger.error("Failed to delete %s %s: %s", type(entity).__name__, entity.store_key, e)
            raise

    def close(self) -> None:
        """Close the database connection."""
        self.client.close()
