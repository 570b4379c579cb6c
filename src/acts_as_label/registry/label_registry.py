"""
Label registry for resolving entities by system label.

This module provides the registry that maps label families (model
classes) and normalized codes to stored entities. Resolutions are looked
up in the label store on first use and cached until invalidated.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from .. import codes
from ..config import LabelConfig
from ..db.base import LabelStore
from ..errors import ConfigurationError, NotFoundError, ValidationError
from ..models import LabeledModel
from .accessor import LabelFamilyAccessor
from .options import LabelFamily, LabelOptions, scope_key

logger = logging.getLogger(__name__)

# Marks an omitted cache_ttl, since None means "never expire"
_CONFIGURED = object()


@dataclass(frozen=True)
class LabelRegistryEntry:
    """A cached resolution of one normalized code."""

    code: str
    entity: LabeledModel
    cached_at: float


class LabelRegistry:
    """
    Registry of label families and their resolved entities.

    Create one registry per application and pass it to the code that
    needs lookups. The owner of write operations (normally LabelService)
    must call invalidate() or invalidate_all() after changing the store.
    """

    def __init__(self, store: LabelStore, cache_ttl: float | None | object = _CONFIGURED) -> None:
        """
        Initialize the registry.

        Args:
            store: Label store used to resolve cache misses
            cache_ttl: Seconds a resolution stays cached, or None to keep
                entries for the lifetime of the process; defaults to
                ``registry.cache_ttl`` from the configuration
        """
        self.store = store
        self._cache_ttl = LabelConfig.get_cache_ttl() if cache_ttl is _CONFIGURED else cache_ttl

        self._families: dict[type[LabeledModel], LabelFamily] = {}

        # (family, scope key, code) -> entry
        self._cache: dict[tuple, LabelRegistryEntry] = {}

    def configure(
        self,
        family: type[LabeledModel],
        options: LabelOptions | Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> LabelFamily:
        """
        Register a label family.

        Options may be given as a LabelOptions, a mapping, or keyword
        arguments. Configuring a family again replaces its configuration
        and drops its cached entries.

        Args:
            family: The model class of the family
            options: Family options
            **kwargs: Family options as keyword arguments

        Returns:
            The resolved family configuration

        Raises:
            ConfigurationError: If the options are malformed or inconsistent
        """
        if not isinstance(family, type) or not issubclass(family, LabeledModel):
            raise ConfigurationError(f"{family!r} is not a LabeledModel subclass")

        if options is not None and kwargs:
            raise ConfigurationError("Pass family options either as an object or as keywords, not both")

        try:
            if isinstance(options, LabelOptions):
                resolved = options
            else:
                resolved = LabelOptions(**dict(options or kwargs))
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid options for {family.__name__}: {e}") from e

        binding = self._bind(family, resolved)

        # Fix the field names on a class that does not declare them, so the
        # write guard and __str__ agree with the registry
        if family.__system_label_field__ is None:
            family.__system_label_field__ = binding.system_label_field
        if family.__label_field__ is None:
            family.__label_field__ = binding.label_field

        self._families[family] = binding
        self.invalidate_all(family)

        logger.info(
            "Configured label family %s (collection=%s, scope=%s, default=%s)",
            binding.name,
            binding.collection,
            binding.scope,
            binding.default_code,
        )
        return binding

    def _bind(self, family: type[LabeledModel], options: LabelOptions) -> LabelFamily:
        # Field names belong to the model class: every registry sharing the
        # class must agree on them
        for option, current in (
            (options.system_label_field, family.__system_label_field__),
            (options.label_field, family.__label_field__),
        ):
            if option is not None and current is not None and option != current:
                raise ConfigurationError(
                    f"{family.__name__} already uses field {current!r}; cannot configure it with {option!r}"
                )

        default_system_label, default_label = LabelConfig.get_default_fields()
        system_label_field = options.system_label_field or family.__system_label_field__ or default_system_label
        label_field = options.label_field or family.__label_field__ or default_label

        if system_label_field == label_field:
            raise ConfigurationError(
                f"{family.__name__}: system label field and label field are both {label_field!r}"
            )

        declared = family.model_fields
        for name in (system_label_field, label_field, *options.scope):
            if name not in declared:
                raise ConfigurationError(f"{family.__name__} has no field {name!r}")

        try:
            key = scope_key(options.scope)
        except TypeError as e:
            raise ConfigurationError(f"{family.__name__}: scope values must be hashable") from e

        default_code = None
        if options.default_code is not None:
            if options.default_resolver is not None:
                raise ConfigurationError(
                    f"{family.__name__}: default_code and default_resolver are mutually exclusive"
                )
            try:
                default_code = codes.normalize(options.default_code)
            except ValidationError as e:
                raise ConfigurationError(f"{family.__name__}: invalid default code: {e}") from e

        return LabelFamily(
            model=family,
            system_label_field=system_label_field,
            label_field=label_field,
            collection=options.collection or family.__name__,
            scope=dict(options.scope),
            scope_key=key,
            default_code=default_code,
            ordering_field=options.ordering_field,
            default_resolver=options.default_resolver,
        )

    def options_for(self, family: type[LabeledModel]) -> LabelFamily:
        """
        Get the configuration of a family.

        Subclasses of a configured family resolve to the nearest configured
        ancestor.

        Raises:
            ConfigurationError: If neither the class nor an ancestor is configured
        """
        for cls in getattr(family, "__mro__", ()):
            binding = self._families.get(cls)
            if binding is not None:
                return binding
        raise ConfigurationError(f"Label family {getattr(family, '__name__', family)!r} is not configured")

    def families(self) -> list[str]:
        """Names of all configured families, in configuration order."""
        return [binding.name for binding in self._families.values()]

    def get_family(self, name: str) -> type[LabeledModel]:
        """
        Look up a configured family class by name.

        Raises:
            ConfigurationError: If no configured family has that name
        """
        for family, binding in self._families.items():
            if binding.name == name:
                return family
        raise ConfigurationError(f"Label family {name!r} is not configured")

    def family(self, family: type[LabeledModel]) -> LabelFamilyAccessor:
        """
        Get an accessor for attribute-style lookups on a family.

        ``registry.family(Role).superuser`` resolves the ``SUPERUSER`` role.
        """
        self.options_for(family)
        return LabelFamilyAccessor(self, family)

    def normalize(self, raw_code: object) -> str:
        """
        Normalize a raw code into a system label.

        Raises:
            ValidationError: If the code is empty, too long or malformed
        """
        return codes.normalize(raw_code)

    def _lookup(self, binding: LabelFamily, code: str) -> LabeledModel:
        key = (binding.model, binding.scope_key, code)

        # Check the cache first
        entry = self._cache.get(key)
        if entry is not None:
            if self._cache_ttl is None or time.monotonic() - entry.cached_at < self._cache_ttl:
                return entry.entity
            self._cache.pop(key, None)

        logger.debug("Cache miss for %s %s", binding.name, code)
        entity = self.store.find(
            binding.model, binding.collection, binding.scope, binding.system_label_field, code
        )
        if entity is None:
            raise NotFoundError(
                f"No {binding.name} with {binding.system_label_field} {code!r}",
                family=binding.name,
                code=code,
            )

        # Concurrent misses agree on whichever entry lands first
        entry = self._cache.setdefault(key, LabelRegistryEntry(code, entity, time.monotonic()))
        return entry.entity

    def resolve(self, family: type[LabeledModel], raw_code: object) -> LabeledModel:
        """
        Resolve the entity of a family with the given system label.

        Args:
            family: The family model class
            raw_code: The requested code; normalized before lookup

        Returns:
            The matching entity

        Raises:
            ConfigurationError: If the family is not configured
            ValidationError: If the code is not a valid system label
            NotFoundError: If no row has that system label
        """
        binding = self.options_for(family)
        return self._lookup(binding, codes.normalize(raw_code))

    def resolve_dynamic(self, family: type[LabeledModel], identifier: str) -> LabeledModel:
        """
        Resolve an entity from a code spelled as a Python identifier.

        ``resolve_dynamic(Framework, "ruby_on_rails")`` is equivalent to
        ``resolve(Framework, "RUBY_ON_RAILS")``.

        Raises:
            ValidationError: If ``identifier`` is not a valid identifier
            NotFoundError: If no row has the corresponding system label
        """
        if not isinstance(identifier, str) or not identifier.isidentifier():
            raise ValidationError(f"{identifier!r} is not an identifier", field="identifier", value=identifier)
        return self.resolve(family, identifier.upper())

    def default(self, family: type[LabeledModel]) -> LabeledModel:
        """
        Get the default entity of a family.

        A configured ``default_resolver`` wins, then ``default_code``;
        otherwise the first row of the family is returned, ordered by
        ``ordering_field`` or by insertion.

        Raises:
            NotFoundError: If there is no such row
        """
        binding = self.options_for(family)

        if binding.default_resolver is not None:
            return binding.default_resolver(self)

        if binding.default_code is not None:
            return self._lookup(binding, binding.default_code)

        entity = self.store.find_first(binding.model, binding.collection, binding.scope, binding.ordering_field)
        if entity is None:
            raise NotFoundError(f"{binding.name} has no rows to pick a default from", family=binding.name)
        return entity

    def all(self, family: type[LabeledModel]) -> list[LabeledModel]:
        """Every entity of a family, in default ordering. Not cached."""
        binding = self.options_for(family)
        return self.store.find_all(binding.model, binding.collection, binding.scope, binding.ordering_field)

    def validate(self, entity: LabeledModel) -> list[ValidationError]:
        """
        Check an entity's system label and label without touching the store.

        Returns:
            List of validation errors, empty when the entity is valid
        """
        binding = self.options_for(type(entity))
        return [
            *codes.check_system_label(getattr(entity, binding.system_label_field, None), binding.system_label_field),
            *codes.check_label(getattr(entity, binding.label_field, None), binding.label_field),
        ]

    def normalize_on_write(self, entity: LabeledModel) -> None:
        """
        Normalize an entity's system label before it is first stored.

        Locks the system label afterwards, so this runs once per entity.

        Raises:
            ValidationError: If the system label has already been written
        """
        binding = self.options_for(type(entity))
        field = binding.system_label_field

        if entity.system_label_locked:
            raise ValidationError(f"{field} of {binding.name} has already been written", field=field)

        setattr(entity, field, codes.canonicalize(getattr(entity, field, None)))
        entity.lock_system_label()

    def invalidate(self, family: type[LabeledModel], code: object, scope: Mapping[str, Any] | None = None) -> None:
        """
        Drop the cached resolution of one code.

        Args:
            family: The family model class
            code: The code to drop; unknown codes are ignored
            scope: Scope of the entry; defaults to the family's scope
        """
        binding = self.options_for(family)
        key = binding.scope_key if scope is None else scope_key(dict(scope))
        if self._cache.pop((binding.model, key, codes.canonicalize(code)), None) is not None:
            logger.debug("Invalidated %s %s", binding.name, code)

    def invalidate_all(self, family: type[LabeledModel]) -> None:
        """Drop every cached resolution of a family."""
        model = self.options_for(family).model
        stale = [key for key in list(self._cache) if key[0] is model]
        for key in stale:
            self._cache.pop(key, None)
        if stale:
            logger.debug("Invalidated %d entries of %s", len(stale), model.__name__)

    def clear_cache(self) -> None:
        """Clear all cached resolutions."""
        self._cache.clear()
