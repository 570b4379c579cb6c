"""
Attribute-style access to a label family.

    roles = registry.family(Role)
    roles.superuser          # resolve_dynamic(Role, "superuser")
    roles["GUEST"]           # resolve(Role, "GUEST")
    roles.default()

Names that collide with the accessor's own methods (``default``, ``find``,
``all``) are reachable through item access only.
"""

from typing import TYPE_CHECKING

from ..errors import NotFoundError, ValidationError
from ..models import LabeledModel

if TYPE_CHECKING:
    from .label_registry import LabelRegistry


class LabelFamilyAccessor:
    """Resolve entities of one family through a registry."""

    def __init__(self, registry: "LabelRegistry", family: type[LabeledModel]) -> None:
        self._registry = registry
        self._family = family

    def __getattr__(self, name: str) -> LabeledModel:
        # Only called for names that are not real attributes
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._registry.resolve_dynamic(self._family, name)
        except (NotFoundError, ValidationError) as e:
            raise AttributeError(f"{self._family.__name__} has no label {name!r}") from e

    def __getitem__(self, code: str) -> LabeledModel:
        return self._registry.resolve(self._family, code)

    def __iter__(self):
        return iter(self.all())

    def __repr__(self) -> str:
        return f"<LabelFamilyAccessor {self._family.__name__}>"

    def default(self) -> LabeledModel:
        return self._registry.default(self._family)

    def find(self, code: str) -> LabeledModel | None:
        """Resolve ``code``, returning None instead of raising NotFoundError."""
        try:
            return self._registry.resolve(self._family, code)
        except NotFoundError:
            return None

    def all(self) -> list[LabeledModel]:
        return self._registry.all(self._family)
