"""
Tests for the LabeledModel class.
"""

import pytest

from acts_as_label.config import LabelConfig
from acts_as_label.errors import ValidationError
from acts_as_label.models import Label, LabeledModel, define_family

from conftest import Framework, Role


class TestLabeledModel:
    """Tests for the LabeledModel class."""

    def test_system_label_uppercased_on_construction(self) -> None:
        role = Role(system_label=" Customer ", label="Client")
        assert role.system_label == "CUSTOMER"

    def test_system_label_uppercased_on_assignment(self) -> None:
        role = Role(system_label="CUSTOMER", label="Client")
        role.system_label = "client"
        assert role.system_label == "CLIENT"

    def test_label_is_not_normalized(self) -> None:
        role = Role(system_label="CUSTOMER", label=" Client ")
        assert role.label == " Client "

    def test_str_returns_label(self) -> None:
        role = Role(system_label="SUPERUSER", label="Admin")
        assert str(role) == "Admin"

    def test_to_symbol(self) -> None:
        role = Role(system_label="SUPERUSER", label="Admin")
        assert role.to_symbol() == "superuser"

    def test_locked_system_label_is_read_only(self) -> None:
        role = Role(system_label="CUSTOMER", label="Client")
        role.lock_system_label()

        with pytest.raises(ValidationError) as excinfo:
            role.system_label = "CLIENT"
        assert excinfo.value.field == "system_label"
        assert role.system_label == "CUSTOMER"

        # Re-assigning the same value is harmless
        role.system_label = "customer"
        assert role.system_label == "CUSTOMER"

        # The friendly label stays writable
        role.label = "Customer"
        assert role.label == "Customer"

    def test_mark_persisted(self) -> None:
        role = Role(system_label="GUEST", label="Guest")
        assert not role.is_persisted
        assert not role.system_label_locked

        role.mark_persisted("abc", "labels")

        assert role.is_persisted
        assert role.store_key == "abc"
        assert role.store_collection == "labels"
        assert role.system_label_locked

    def test_custom_field_names(self) -> None:
        framework = Framework(system_name="ruby_on_rails", name="Rails")
        assert framework.system_name == "RUBY_ON_RAILS"
        assert framework.get_system_label() == "RUBY_ON_RAILS"
        assert framework.get_label() == "Rails"
        assert str(framework) == "Rails"
        assert framework.to_symbol() == "ruby_on_rails"

    def test_default_field_names_come_from_config(self) -> None:
        class Unstamped(LabeledModel):
            code: str
            title: str

        LabelConfig.initialize()
        LabelConfig._config["registry"]["system_label_field"] = "code"
        LabelConfig._config["registry"]["label_field"] = "title"

        assert Unstamped.label_fields() == ("code", "title")
        assert Unstamped(code="a", title="A").code == "A"
        assert Label.label_fields() == ("system_label", "label")

    def test_str_with_missing_label(self) -> None:
        role = Role(system_label="GUEST", label="Guest")
        role.label = None
        assert str(role) == ""


def test_define_family() -> None:
    """Test creating a family model at runtime."""
    Color = define_family("Color", system_label_field="code", label_field="title", extra_fields=["type"])

    assert issubclass(Color, LabeledModel)
    assert Color.__name__ == "Color"
    assert Color.label_fields() == ("code", "title")
    assert set(Color.model_fields) == {"code", "title", "type"}

    red = Color(code="red", title="Red")
    assert red.code == "RED"
    assert red.type is None
    assert str(red) == "Red"
