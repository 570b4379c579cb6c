"""
Tests for the InMemoryLabelStore class.
"""

import pytest

from acts_as_label.db import InMemoryLabelStore
from acts_as_label.errors import NotFoundError

from conftest import BillingFrequency, Role, TaxFrequency


@pytest.fixture
def filled(store: InMemoryLabelStore) -> InMemoryLabelStore:
    store.insert("labels", BillingFrequency(system_label="YEARLY", label="Yearly", type="BillingFrequency"))
    store.insert("labels", BillingFrequency(system_label="MONTHLY", label="Monthly", type="BillingFrequency"))
    store.insert("labels", TaxFrequency(system_label="MONTHLY", label="Monthly", type="TaxFrequency"))
    return store


class TestInMemoryLabelStore:
    """Tests for the InMemoryLabelStore class."""

    def test_insert_marks_persisted(self, store: InMemoryLabelStore) -> None:
        role = Role(system_label="GUEST", label="Guest")
        stored = store.insert("roles", role)

        assert stored is role
        assert role.is_persisted
        assert role.store_collection == "roles"
        assert role.system_label_locked

    def test_find_builds_new_entity(self, store: InMemoryLabelStore) -> None:
        role = store.insert("roles", Role(system_label="GUEST", label="Guest"))
        found = store.find(Role, "roles", {}, "system_label", "GUEST")

        assert found is not role
        assert found == role
        assert found.store_key == role.store_key
        assert found.system_label_locked

    def test_find_respects_scope(self, filled: InMemoryLabelStore) -> None:
        tax = filled.find(TaxFrequency, "labels", {"type": "TaxFrequency"}, "system_label", "MONTHLY")
        assert isinstance(tax, TaxFrequency)
        assert tax.type == "TaxFrequency"

        assert filled.find(TaxFrequency, "labels", {"type": "TaxFrequency"}, "system_label", "YEARLY") is None
        assert filled.find(Role, "missing", {}, "system_label", "GUEST") is None

    def test_find_all_insertion_order(self, filled: InMemoryLabelStore) -> None:
        rows = filled.find_all(BillingFrequency, "labels", {"type": "BillingFrequency"})
        assert [row.system_label for row in rows] == ["YEARLY", "MONTHLY"]

    def test_find_all_with_ordering_field(self, filled: InMemoryLabelStore) -> None:
        rows = filled.find_all(BillingFrequency, "labels", {"type": "BillingFrequency"}, "system_label")
        assert [row.system_label for row in rows] == ["MONTHLY", "YEARLY"]

    def test_missing_ordering_values_sort_last(self, store: InMemoryLabelStore) -> None:
        store.insert("labels", Role(system_label="A", label="A"))
        store.insert("labels", Role(system_label="B", label="B", type="x"))
        rows = store.find_all(Role, "labels", {}, "type")
        assert [row.system_label for row in rows] == ["B", "A"]

    def test_find_first(self, filled: InMemoryLabelStore) -> None:
        first = filled.find_first(BillingFrequency, "labels", {"type": "BillingFrequency"})
        assert first.system_label == "YEARLY"
        assert filled.find_first(Role, "labels", {"type": "Role"}) is None

    def test_query_count(self, filled: InMemoryLabelStore) -> None:
        filled.find(BillingFrequency, "labels", {}, "system_label", "YEARLY")
        filled.find_first(BillingFrequency, "labels", {})
        assert filled.query_count == 2

    def test_update_ignores_system_label(self, store: InMemoryLabelStore) -> None:
        role = store.insert("roles", Role(system_label="GUEST", label="Guest"))
        store.update(role, {"system_label": "VISITOR", "label": "Visitor"})

        assert store.find(Role, "roles", {}, "system_label", "VISITOR") is None
        found = store.find(Role, "roles", {}, "system_label", "GUEST")
        assert found.label == "Visitor"

    def test_delete(self, store: InMemoryLabelStore) -> None:
        role = store.insert("roles", Role(system_label="GUEST", label="Guest"))
        store.delete(role)
        assert store.find(Role, "roles", {}, "system_label", "GUEST") is None

        with pytest.raises(NotFoundError):
            store.delete(role)

    def test_delete_unsaved(self, store: InMemoryLabelStore) -> None:
        with pytest.raises(NotFoundError):
            store.delete(Role(system_label="GUEST", label="Guest"))

    def test_clear(self, filled: InMemoryLabelStore) -> None:
        filled.clear()
        assert filled.find_all(BillingFrequency, "labels", {}) == []
