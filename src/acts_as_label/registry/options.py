"""
Label family configuration records.

LabelOptions is what callers pass to LabelRegistry.configure();
LabelFamily is the resolved, immutable record the registry keeps for each
configured family.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from ..models import LabeledModel


class LabelOptions(BaseModel):
    """
    Options accepted by LabelRegistry.configure().

    Attributes:
        system_label_field: Attribute holding the system label
        label_field: Attribute holding the friendly label
        scope: Equality constraints selecting the family's rows within a
            shared store, e.g. ``{"type": "BillingFrequency"}``
        default_code: System label of the default entity
        collection: Name of the store collection; defaults to the class name
        ordering_field: Attribute ordering rows when no default code is
            configured; None means store insertion order
        default_resolver: Callable receiving the registry and returning the
            default entity, for families that pick their default in code
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    system_label_field: str | None = None
    label_field: str | None = None
    scope: dict[str, Any] = Field(default_factory=dict)
    default_code: str | None = None
    collection: str | None = None
    ordering_field: str | None = None
    default_resolver: Callable[..., Any] | None = None


@dataclass(frozen=True)
class LabelFamily:
    """Resolved configuration of one label family."""

    model: type[LabeledModel]
    system_label_field: str
    label_field: str
    collection: str
    scope: dict[str, Any] = field(default_factory=dict)
    scope_key: tuple = ()
    default_code: str | None = None
    ordering_field: str | None = None
    default_resolver: Callable[..., Any] | None = None

    @property
    def name(self) -> str:
        return self.model.__name__


def scope_key(scope: dict[str, Any]) -> tuple:
    """
    Turn a scope mapping into a hashable cache key component.

    Raises:
        TypeError: If a scope value is not hashable
    """
    key = tuple(sorted(scope.items()))
    hash(key)
    return key
