"""
Tests for the LabelService class.
"""

from unittest.mock import patch

import pytest

from acts_as_label.db import InMemoryLabelStore
from acts_as_label.errors import NotFoundError, ValidationError
from acts_as_label.label_service import LabelService
from acts_as_label.registry import LabelRegistry

from conftest import BillingFrequency, Framework, Role, TaxFrequency


class TestCreate:
    """Tests for build(), create() and save()."""

    def test_create_normalizes_and_locks(self, service: LabelService) -> None:
        role = service.create(Role, system_label=" customer ", label="Client")

        assert role.system_label == "CUSTOMER"
        assert role.type == "Role"
        assert role.is_persisted
        assert role.system_label_locked

    def test_build_fills_scope(self, service: LabelService) -> None:
        frequency = service.build(BillingFrequency, system_label="WEEKLY", label="Weekly")
        assert frequency.type == "BillingFrequency"
        assert not frequency.is_persisted

    def test_build_rejects_other_scope(self, service: LabelService) -> None:
        with pytest.raises(ValidationError) as excinfo:
            service.build(BillingFrequency, system_label="WEEKLY", label="Weekly", type="TaxFrequency")
        assert excinfo.value.field == "type"

    def test_build_missing_field(self, service: LabelService) -> None:
        with pytest.raises(ValidationError):
            service.build(Role, system_label="CUSTOMER")

    @pytest.mark.parametrize("code", ["", "SUPER-USER", "x" * 256])
    def test_invalid_system_label(self, service: LabelService, store: InMemoryLabelStore, code: str) -> None:
        with pytest.raises(ValidationError):
            service.create(Role, system_label=code, label="Bad")
        assert store.find_all(Role, "labels", {"type": "Role"}) == []

    def test_blank_label(self, service: LabelService) -> None:
        with pytest.raises(ValidationError) as excinfo:
            service.create(Framework, system_name="FLASK", name="  ")
        assert excinfo.value.field == "name"

    def test_duplicate_system_label(self, seeded: LabelService) -> None:
        with pytest.raises(ValidationError) as excinfo:
            seeded.create(Role, system_label="superuser", label="Root")
        assert excinfo.value.field == "system_label"
        assert excinfo.value.value == "SUPERUSER"

    def test_same_code_in_other_scope(self, service: LabelService, registry: LabelRegistry) -> None:
        service.create(BillingFrequency, system_label="WEEKLY", label="Weekly")
        service.create(TaxFrequency, system_label="WEEKLY", label="Weekly")

        assert registry.resolve(BillingFrequency, "WEEKLY").type == "BillingFrequency"
        assert registry.resolve(TaxFrequency, "WEEKLY").type == "TaxFrequency"

    def test_save_twice(self, service: LabelService) -> None:
        role = service.create(Role, system_label="CUSTOMER", label="Client")
        with pytest.raises(ValidationError):
            service.save(role)

    def test_save_after_failed_insert(self, service: LabelService, store: InMemoryLabelStore) -> None:
        """A store failure leaves the entity unsaved and savable again."""
        frequency = service.build(BillingFrequency, system_label=" weekly ", label="Weekly")

        with patch.object(store, "insert", side_effect=RuntimeError("connection dropped")):
            with pytest.raises(RuntimeError):
                service.save(frequency)

        assert not frequency.is_persisted
        assert not frequency.system_label_locked

        service.save(frequency)
        assert frequency.is_persisted
        assert frequency.system_label == "WEEKLY"
        assert service.registry.resolve(BillingFrequency, "WEEKLY") == frequency

    def test_create_after_failed_lookup(self, seeded: LabelService, registry: LabelRegistry) -> None:
        with pytest.raises(NotFoundError):
            registry.resolve(Role, "CUSTOMER")

        created = seeded.create(Role, system_label="CUSTOMER", label="Client")
        assert registry.resolve(Role, "CUSTOMER") == created


class TestUpdate:
    """Tests for update()."""

    def test_update_label(self, seeded: LabelService, registry: LabelRegistry) -> None:
        cached = registry.resolve(Role, "SUPERUSER")
        seeded.update(cached, label="Administrator")

        fresh = registry.resolve(Role, "SUPERUSER")
        assert fresh is not cached
        assert fresh.label == "Administrator"

    def test_system_label_is_immutable(self, seeded: LabelService, registry: LabelRegistry) -> None:
        record = registry.resolve(Framework, "DJANGO")

        with pytest.raises(ValidationError):
            seeded.update(record, system_name="DJANGO_REST")
        with pytest.raises(ValidationError):
            record.system_name = "DJANGO_REST"

        assert record.system_name == "DJANGO"
        assert registry.resolve(Framework, "DJANGO").system_name == "DJANGO"
        with pytest.raises(NotFoundError):
            registry.resolve(Framework, "DJANGO_REST")

    def test_same_system_label_is_allowed(self, seeded: LabelService, registry: LabelRegistry) -> None:
        record = registry.resolve(Framework, "DJANGO")
        seeded.update(record, system_name="django", name="Django REST")
        assert registry.resolve(Framework, "DJANGO").name == "Django REST"

    def test_scope_cannot_change(self, seeded: LabelService, registry: LabelRegistry) -> None:
        monthly = registry.resolve(BillingFrequency, "MONTHLY")
        with pytest.raises(ValidationError):
            seeded.update(monthly, type="TaxFrequency")

    def test_invalid_label_leaves_entity_untouched(self, seeded: LabelService, registry: LabelRegistry) -> None:
        guest = registry.resolve(Role, "GUEST")
        with pytest.raises(ValidationError):
            seeded.update(guest, label="")
        assert guest.label == "Guest"
        assert registry.resolve(Role, "GUEST").label == "Guest"

    def test_update_unsaved(self, service: LabelService) -> None:
        role = service.build(Role, system_label="CUSTOMER", label="Client")
        with pytest.raises(ValidationError):
            service.update(role, label="Customer")


class TestDelete:
    """Tests for delete()."""

    def test_delete_invalidates(self, seeded: LabelService, registry: LabelRegistry) -> None:
        guest = registry.resolve(Role, "GUEST")
        seeded.delete(guest)

        with pytest.raises(NotFoundError):
            registry.resolve(Role, "GUEST")

    def test_delete_twice(self, seeded: LabelService, registry: LabelRegistry) -> None:
        guest = registry.resolve(Role, "GUEST")
        seeded.delete(guest)
        with pytest.raises(NotFoundError):
            seeded.delete(guest)


class TestSeed:
    """Tests for seed()."""

    def test_seed_creates_and_updates(self, seeded: LabelService, registry: LabelRegistry) -> None:
        entities = seeded.seed(
            Role,
            [
                {"system_label": "guest", "label": "Visitor"},
                {"system_label": "customer", "label": "Client"},
            ],
        )

        assert [entity.system_label for entity in entities] == ["GUEST", "CUSTOMER"]
        assert registry.resolve(Role, "GUEST").label == "Visitor"
        assert registry.resolve(Role, "CUSTOMER").label == "Client"
        assert len(registry.all(Role)) == 4

    def test_seed_is_idempotent(self, service: LabelService, registry: LabelRegistry) -> None:
        rows = [{"system_name": "FLASK", "name": "Flask"}]
        service.seed(Framework, rows)
        service.seed(Framework, rows)
        assert [framework.system_name for framework in registry.all(Framework)] == ["FLASK"]
