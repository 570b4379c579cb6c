"""
Base labeled model implementation.

This module provides the foundation for models carrying a system label
(an uppercase, write-once code) and a friendly label (display text).
The attribute names of both are configurable per model class.
"""

from typing import ClassVar, Iterable

from pydantic import BaseModel, ConfigDict, PrivateAttr, create_model, model_validator

from ..codes import canonicalize
from ..config import LabelConfig
from ..errors import ValidationError


class LabeledModel(BaseModel):
    """
    Base class for models with a system label and a friendly label.

    Assigning the system label strips and uppercases the value. Once the
    entity has been written (normalized for insert, or loaded from a label
    store) the system label can no longer be changed; attempts to assign a
    different value raise ValidationError.

    Subclasses name their fields through ``__system_label_field__`` and
    ``__label_field__``. When left unset, the names configured on the
    registry (or the library defaults) are used.
    """

    # Allow arbitrary types so families can carry their own domain values
    model_config = ConfigDict(arbitrary_types_allowed=True)

    __system_label_field__: ClassVar[str | None] = None
    __label_field__: ClassVar[str | None] = None

    _store_key: str | None = PrivateAttr(default=None)
    _store_collection: str | None = PrivateAttr(default=None)
    _system_label_locked: bool = PrivateAttr(default=False)

    @classmethod
    def label_fields(cls) -> tuple[str, str]:
        """
        Get the attribute names of the system label and label.

        Returns:
            Tuple of (system_label_field, label_field)
        """
        default_system_label, default_label = LabelConfig.get_default_fields()
        return (
            cls.__system_label_field__ or default_system_label,
            cls.__label_field__ or default_label,
        )

    @model_validator(mode="before")
    @classmethod
    def canonicalize_system_label(cls, data: object) -> object:
        if isinstance(data, dict):
            field = cls.label_fields()[0]
            if field in data:
                data = {**data, field: canonicalize(data[field])}
        return data

    def __setattr__(self, name: str, value: object) -> None:
        if name == self.label_fields()[0]:
            value = canonicalize(value)
            if self._system_label_locked and value != getattr(self, name, None):
                raise ValidationError(
                    f"{name} cannot be changed once written", field=name, value=value
                )
        super().__setattr__(name, value)

    def get_system_label(self) -> str | None:
        """Return the value of the system label field."""
        return getattr(self, self.label_fields()[0], None)

    def get_label(self) -> str | None:
        """Return the value of the friendly label field."""
        return getattr(self, self.label_fields()[1], None)

    @property
    def is_persisted(self) -> bool:
        """True once the entity has been stored in, or loaded from, a label store."""
        return self._store_key is not None

    @property
    def store_key(self) -> str | None:
        return self._store_key

    @property
    def store_collection(self) -> str | None:
        return self._store_collection

    @property
    def system_label_locked(self) -> bool:
        return self._system_label_locked

    def lock_system_label(self) -> None:
        """Make the system label read-only from now on."""
        self._system_label_locked = True

    def mark_persisted(self, key: str, collection: str) -> None:
        """
        Record where the entity lives in its label store.

        Label stores call this after inserting or loading an entity.

        Args:
            key: The store's key for the row
            collection: The store collection holding the row
        """
        self._store_key = key
        self._store_collection = collection
        self._system_label_locked = True

    def to_symbol(self) -> str:
        """
        Return the lowercase system label.

        Useful for role checks, e.g. ``user.role.to_symbol() == "superuser"``.
        """
        return (self.get_system_label() or "").lower()

    def __str__(self) -> str:
        label = self.get_label()
        return "" if label is None else str(label)


class Label(LabeledModel):
    """
    Labeled model with the conventional ``system_label`` and ``label`` fields.

    The optional ``type`` attribute discriminates sub-variants that share
    one store, e.g. ``BillingFrequency`` and ``TaxFrequency`` rows kept in
    a single ``labels`` collection.
    """

    __system_label_field__ = "system_label"
    __label_field__ = "label"

    system_label: str
    label: str
    type: str | None = None


def define_family(
    name: str,
    system_label_field: str = "system_label",
    label_field: str = "label",
    extra_fields: Iterable[str] = (),
) -> type[LabeledModel]:
    """
    Create a labeled model class at runtime.

    Used when label families are declared in data (for example a seed
    file) rather than in code.

    Args:
        name: Class name of the family
        system_label_field: Attribute name of the system label
        label_field: Attribute name of the friendly label
        extra_fields: Additional optional string attributes, typically
            scope discriminators such as ``type``

    Returns:
        A new LabeledModel subclass
    """
    fields: dict[str, object] = {
        system_label_field: (str, ...),
        label_field: (str, ...),
    }
    for extra in extra_fields:
        if extra not in fields:
            fields[extra] = (str | None, None)

    model = create_model(name, __base__=LabeledModel, **fields)
    model.__system_label_field__ = system_label_field
    model.__label_field__ = label_field
    return model
