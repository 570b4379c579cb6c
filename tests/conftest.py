"""
Pytest configuration for acts_as_label tests.
"""

import os
from typing import Generator

import pytest

from acts_as_label.config import LabelConfig
from acts_as_label.db import InMemoryLabelStore
from acts_as_label.label_service import LabelService
from acts_as_label.models import Label, LabeledModel
from acts_as_label.registry import LabelRegistry

ENV_KEYS = [
    "ACTS_AS_LABEL_STORE",
    "ACTS_AS_LABEL_CACHE_TTL",
    "ACTS_AS_LABEL_DB_URL",
    "ACTS_AS_LABEL_DB_NAME",
    "ACTS_AS_LABEL_DB_USERNAME",
    "ACTS_AS_LABEL_DB_PASSWORD",
    "ACTS_AS_LABEL_LOG_LEVEL",
    "ACTS_AS_LABEL_LOG_FORMAT",
]


# Label families shared by the tests (STI-style variants of Label)
class Role(Label):
    """Roles; the default is chosen in code."""


class BillingFrequency(Label):
    """Billing frequencies; no default configured."""


class TaxFrequency(Label):
    """Tax frequencies; reuses billing system labels."""


class Framework(LabeledModel):
    """Stand-alone family with custom field names."""

    __system_label_field__ = "system_name"
    __label_field__ = "name"

    system_name: str
    name: str


@pytest.fixture(autouse=True)
def clean_config() -> Generator[None, None, None]:
    """
    Reset the configuration and environment around every test.

    Each test starts from the built-in defaults; any ACTS_AS_LABEL_*
    variables set by the test are removed afterwards.
    """
    original_env = {key: os.environ.pop(key, None) for key in ENV_KEYS}
    LabelConfig._config = {}
    LabelConfig._initialized = False

    yield

    for key, value in original_env.items():
        if value is not None:
            os.environ[key] = value
        else:
            os.environ.pop(key, None)
    LabelConfig._config = {}
    LabelConfig._initialized = False


@pytest.fixture
def store() -> InMemoryLabelStore:
    return InMemoryLabelStore()


@pytest.fixture
def registry(store: InMemoryLabelStore) -> LabelRegistry:
    """A registry with Role, BillingFrequency, TaxFrequency and Framework configured."""
    registry = LabelRegistry(store)
    registry.configure(
        Role,
        collection="labels",
        scope={"type": "Role"},
        default_resolver=lambda reg: reg.resolve(Role, "GUEST"),
    )
    registry.configure(BillingFrequency, collection="labels", scope={"type": "BillingFrequency"})
    registry.configure(TaxFrequency, collection="labels", scope={"type": "TaxFrequency"})
    registry.configure(
        Framework,
        system_label_field="system_name",
        label_field="name",
        default_code="ruby_on_rails",
    )
    return registry


@pytest.fixture
def service(registry: LabelRegistry) -> LabelService:
    return LabelService(registry)


@pytest.fixture
def seeded(service: LabelService) -> LabelService:
    """The service with the standard rows created."""
    service.create(Role, system_label="SUPERUSER", label="Admin")
    service.create(Role, system_label="EMPLOYEE", label="Employee")
    service.create(Role, system_label="GUEST", label="Guest")

    for family in (BillingFrequency, TaxFrequency):
        service.create(family, system_label="MONTHLY", label="Monthly")
        service.create(family, system_label="QUARTERLY", label="Quarterly")
        service.create(family, system_label="YEARLY", label="Yearly")

    service.create(Framework, system_name="RUBY_ON_RAILS", name="Rails")
    service.create(Framework, system_name="DJANGO", name="Django")
    return service
