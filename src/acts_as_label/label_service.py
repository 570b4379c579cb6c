# label_service.py - write path for labeled entities

"""
This module defines the service that owns writes to label stores.

Every insert, update and delete of a labeled entity goes through
LabelService so that system labels are normalized exactly once, both
fields are validated, system labels stay unique within a family's scope,
and the registry cache is invalidated after each change.
"""

import logging
from typing import Any, Iterable, Mapping, TypeVar

from pydantic import ValidationError as PydanticValidationError

from .codes import canonicalize
from .errors import ValidationError
from .models import LabeledModel
from .registry import LabelRegistry

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=LabeledModel)


class LabelService:
    """
    Service for creating, updating and deleting labeled entities.

    The service writes through the registry's label store and keeps the
    registry cache consistent with it.
    """

    def __init__(self, registry: LabelRegistry) -> None:
        """
        Initialize the label service.

        Args:
            registry: Registry whose store and cache this service maintains
        """
        self.registry = registry
        self.store = registry.store

    def build(self, family: type[M], **attributes: Any) -> M:
        """
        Build an unsaved entity, filling in the family's scope values.

        Raises:
            ValidationError: If the attributes contradict the scope or do
                not fit the model
        """
        binding = self.registry.options_for(family)

        for name, value in binding.scope.items():
            if name in attributes and attributes[name] != value:
                raise ValidationError(
                    f"{name} must be {value!r} for {binding.name}", field=name, value=attributes[name]
                )

        try:
            return family(**{**binding.scope, **attributes})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {binding.name}: {e}") from e

    def create(self, family: type[M], **attributes: Any) -> M:
        """
        Create and store a new entity.

        Args:
            family: The family model class
            **attributes: Field values, e.g. ``system_label="monthly", label="Monthly"``

        Returns:
            The stored entity
        """
        return self.save(self.build(family, **attributes))

    def save(self, entity: M) -> M:
        """
        Store a new entity.

        Args:
            entity: An entity that has not been stored yet

        Returns:
            The same entity, now persisted with a read-only system label

        Raises:
            ValidationError: If the entity is already stored, invalid, or its
                system label is taken within the family's scope
        """
        binding = self.registry.options_for(type(entity))

        if entity.is_persisted:
            raise ValidationError(f"{binding.name} {entity.store_key} is already stored; use update()")

        errors = self.registry.validate(entity)
        if errors:
            raise errors[0]

        code = canonicalize(getattr(entity, binding.system_label_field))
        existing = self.store.find(
            binding.model, binding.collection, binding.scope, binding.system_label_field, code
        )
        if existing is not None:
            raise ValidationError(
                f"{binding.system_label_field} {code!r} has already been taken in {binding.name}",
                field=binding.system_label_field,
                value=code,
            )

        self.registry.normalize_on_write(entity)
        try:
            self.store.insert(binding.collection, entity)
        except Exception:
            # Nothing was written; leave the entity savable again
            entity._system_label_locked = False
            logger.error("Failed to store %s %s", binding.name, code)
            raise

        self.registry.invalidate(binding.model, code)

        logger.info("Created %s %s", binding.name, code)
        return entity

    def update(self, entity: M, **attributes: Any) -> M:
        """
        Update a stored entity.

        The system label is write-once: passing a different value for it
        raises ValidationError. Scope attributes cannot change either.

        Args:
            entity: A stored entity
            **attributes: Field values to change

        Returns:
            The updated entity
        """
        binding = self.registry.options_for(type(entity))

        if not entity.is_persisted:
            raise ValidationError(f"{binding.name} has not been stored; use save()")

        field = binding.system_label_field
        if field in attributes:
            if canonicalize(attributes[field]) != getattr(entity, field):
                raise ValidationError(f"{field} cannot be changed once written", field=field, value=attributes[field])
            attributes = {name: value for name, value in attributes.items() if name != field}

        for name, value in binding.scope.items():
            if name in attributes and attributes[name] != value:
                raise ValidationError(f"{name} of {binding.name} cannot change", field=name, value=attributes[name])

        # Validate a copy so a rejected update leaves the entity untouched
        candidate = entity.model_copy(update=attributes)
        errors = self.registry.validate(candidate)
        if errors:
            raise errors[0]

        self.store.update(entity, attributes)
        for name, value in attributes.items():
            setattr(entity, name, value)

        self.registry.invalidate(binding.model, getattr(entity, field))
        return entity

    def delete(self, entity: LabeledModel) -> None:
        """
        Delete a stored entity and drop its cached resolution.

        Raises:
            NotFoundError: If the entity is not in the store
        """
        binding = self.registry.options_for(type(entity))
        self.store.delete(entity)
        self.registry.invalidate(binding.model, entity.get_system_label())
        logger.info("Deleted %s %s", binding.name, entity.get_system_label())

    def seed(self, family: type[M], rows: Iterable[Mapping[str, Any]]) -> list[M]:
        """
        Create or refresh a family's rows.

        Rows whose system label already exists get their other fields
        updated; new system labels are created.

        Args:
            family: The family model class
            rows: Field values for each row

        Returns:
            The stored entities, in the order given
        """
        binding = self.registry.options_for(family)
        entities = []
        for row in rows:
            attributes = dict(row)
            code = canonicalize(attributes.get(binding.system_label_field))
            existing = self.store.find(
                binding.model, binding.collection, binding.scope, binding.system_label_field, code
            )
            if existing is None:
                entities.append(self.create(family, **attributes))
            else:
                changes = {
                    name: value
                    for name, value in attributes.items()
                    if name != binding.system_label_field and name not in binding.scope
                }
                entities.append(self.update(existing, **changes))
        return entities
