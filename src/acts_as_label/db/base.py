"""
Label store contract.

A label store owns durability for labeled entities. The registry only
reads through ``find``/``find_first``/``find_all``; the write methods are
used by LabelService, which validates and normalizes before calling them.
"""

from typing import Any, Mapping, Protocol, TypeVar

from ..models import LabeledModel

M = TypeVar("M", bound=LabeledModel)


class LabelStore(Protocol):
    """Persistence operations for labeled entities."""

    def find(
        self,
        family: type[M],
        collection: str,
        scope: Mapping[str, Any],
        field: str,
        value: object,
    ) -> M | None:
        """Return the single row of ``collection`` within ``scope`` whose ``field`` equals ``value``."""

    def find_first(
        self,
        family: type[M],
        collection: str,
        scope: Mapping[str, Any],
        ordering_field: str | None = None,
    ) -> M | None:
        """Return the first row within ``scope``, by ``ordering_field`` or insertion order."""

    def find_all(
        self,
        family: type[M],
        collection: str,
        scope: Mapping[str, Any],
        ordering_field: str | None = None,
    ) -> list[M]:
        """Return every row within ``scope``, ordered like ``find_first``."""

    def insert(self, collection: str, entity: M) -> M:
        """Store a new entity and mark it persisted."""

    def update(self, entity: M, attributes: Mapping[str, Any]) -> M:
        """Write ``attributes`` of a persisted entity. The system label is never rewritten."""

    def delete(self, entity: LabeledModel) -> None:
        """Remove a persisted entity."""


def writable_attributes(entity: LabeledModel, attributes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Drop the system label from an update payload.

    Stores persist the system label once, at insert, and silently ignore
    it afterwards.
    """
    system_label_field = type(entity).label_fields()[0]
    return {name: value for name, value in attributes.items() if name != system_label_field}


def row_to_entity(family: type[M], collection: str, document: Mapping[str, Any]) -> M:
    """
    Build a persisted entity from a stored document.

    Underscore-prefixed keys are store metadata and are not passed to the
    model; ``_key`` becomes the entity's store key.
    """
    data = {name: value for name, value in document.items() if not name.startswith("_")}
    entity = family.model_validate(data)
    entity.mark_persisted(str(document["_key"]), collection)
    return entity
