"""
Seed label families from a YAML file.

The file lists families by class name with their options and rows:

    families:
      Framework:
        system_label_field: system_name
        label_field: name
        default_code: ruby_on_rails
        labels:
          - {system_name: RUBY_ON_RAILS, name: Rails}
          - {system_name: DJANGO, name: Django}
      BillingFrequency:
        collection: labels
        scope: {type: BillingFrequency}
        labels:
          - {system_label: MONTHLY, label: Monthly}

Families already configured on the registry keep their model class;
others get one generated with define_family().
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError
from .label_service import LabelService
from .models import LabeledModel, define_family

logger = logging.getLogger(__name__)


def _family_class(service: LabelService, name: str, options: dict[str, Any]) -> type[LabeledModel]:
    if name in service.registry.families():
        return service.registry.get_family(name)

    return define_family(
        name,
        system_label_field=options.get("system_label_field") or "system_label",
        label_field=options.get("label_field") or "label",
        extra_fields=list((options.get("scope") or {}).keys()),
    )


def seed_families(service: LabelService, definitions: dict[str, Any]) -> dict[str, type[LabeledModel]]:
    """
    Configure and seed the families described by ``definitions``.

    Args:
        service: Label service to write through
        definitions: Mapping of family name to options plus a ``labels`` list

    Returns:
        Mapping of family name to model class

    Raises:
        ConfigurationError: If a definition is malformed
    """
    families: dict[str, type[LabeledModel]] = {}

    for name, definition in definitions.items():
        if not isinstance(definition, dict):
            raise ConfigurationError(f"Family {name!r} must be a mapping")

        options = {key: value for key, value in definition.items() if key != "labels"}
        rows = definition.get("labels") or []

        family = _family_class(service, name, options)
        service.registry.configure(family, options)
        entities = service.seed(family, rows)

        logger.info("Seeded %d %s labels", len(entities), name)
        families[name] = family

    return families


def load_seed_file(service: LabelService, path: str) -> dict[str, type[LabeledModel]]:
    """
    Load a YAML seed file and seed every family in it.

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    seed_path = Path(path)
    if not seed_path.exists():
        raise ConfigurationError(f"Seed file not found: {path}")

    try:
        with open(seed_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Error loading seed file {path}: {e}") from e

    definitions = data.get("families") if isinstance(data, dict) else None
    if not isinstance(definitions, dict):
        raise ConfigurationError(f"Seed file {path} must contain a 'families' mapping")

    return seed_families(service, definitions)
