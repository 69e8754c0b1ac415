"""Tests for parent/child model reconciliation."""

import pytest

from csharp_oas_generator.parser.inheritance import dedupe_properties, reconcile, reconcile_inline_enums
from csharp_oas_generator.parser.models import Discriminator, EnumVar, Model, ParsedSpec, Property


def make_property(name: str, data_type: str = "string", **kwargs: object) -> Property:
    return Property(name=name, var_name=name.capitalize(), abstract_type="string", data_type=data_type, **kwargs)


def make_enum_property(name: str, values: list[str]) -> Property:
    enum_name = f"{name.capitalize()}Enum"
    return make_property(
        name,
        data_type=enum_name,
        is_enum=True,
        enum_name=enum_name,
        enum_values=list(values),
        enum_vars=[EnumVar(name=value.capitalize(), value=value) for value in values],
    )


def make_model(name: str, props: list[Property], parent: str | None = None) -> Model:
    model = Model(name=name, class_name=name, vars=props, parent=parent)
    model.refresh_var_views()
    return model


class TestReconcileInlineEnums:
    def test_identical_enum_is_removed(self) -> None:
        parent = make_model("Pet", [make_enum_property("status", ["a", "b"])])
        child = make_model("Dog", [make_property("bark"), make_enum_property("status", ["a", "b"])], parent="Pet")

        reconcile_inline_enums(child, parent)

        assert [p.name for p in child.vars] == ["bark"]
        assert [p.name for p in child.read_write_vars] == ["bark"]

    def test_different_enum_is_kept(self) -> None:
        parent = make_model("Pet", [make_enum_property("status", ["a", "b"])])
        child = make_model("Dog", [make_enum_property("status", ["a", "b", "c"])], parent="Pet")

        reconcile_inline_enums(child, parent)

        assert [p.name for p in child.vars] == ["status"]

    def test_parent_without_enums_leaves_child_alone(self) -> None:
        parent = make_model("Pet", [make_property("name")])
        status = make_enum_property("status", ["a"])
        child = make_model("Dog", [status], parent="Pet")

        reconcile_inline_enums(child, parent)

        assert child.vars == [status]


class TestReconcile:
    def test_missing_parent_leaves_child_unchanged(self) -> None:
        child = make_model("Dog", [make_property("bark")], parent="Unknown")

        result = reconcile(child, None)

        assert result is child
        assert child.parent_vars == []
        assert [p.name for p in child.vars] == ["bark"]

    def test_parent_vars_are_independent_copies(self) -> None:
        parent = make_model("Pet", [make_property("id", "long"), make_property("name")])
        child = make_model("Dog", [make_property("bark", "bool"), make_property("name")], parent="Pet")

        reconcile(child, parent)

        assert [p.name for p in child.parent_vars] == ["id"]
        inherited = child.parent_vars[0]
        assert inherited.is_inherited
        assert inherited is not parent.vars[0]

        inherited.description = "changed"
        assert parent.vars[0].description is None
        assert not parent.vars[0].is_inherited

    def test_discriminator_default_is_set_on_child(self) -> None:
        parent = make_model("Pet", [make_property("petType")])
        parent.discriminator = Discriminator(property_name="petType")
        child = make_model("Dog", [make_property("petType"), make_property("bark")], parent="Pet")

        reconcile(child, parent)

        assert child.vars[0].default_value == '"Dog"'
        assert child.vars[1].default_value is None

    def test_discriminator_default_is_set_on_inherited_copy(self) -> None:
        parent = make_model("Pet", [make_property("name"), make_property("petType")])
        parent.discriminator = Discriminator(property_name="petType")
        child = make_model("Cat", [make_property("hunts", "bool")], parent="Pet")

        reconcile(child, parent)

        defaults = {p.name: p.default_value for p in child.parent_vars}
        assert defaults == {"name": None, "petType": '"Cat"'}
        assert parent.vars[1].default_value is None

    def test_read_only_discriminator_gets_no_default(self) -> None:
        parent = make_model("Pet", [make_property("petType", is_read_only=True)])
        parent.discriminator = Discriminator(property_name="petType")
        child = make_model("Cat", [], parent="Pet")

        reconcile(child, parent)

        assert child.parent_vars[0].default_value is None

    def test_existing_default_is_not_overwritten(self) -> None:
        parent = make_model("Pet", [make_property("petType")])
        parent.discriminator = Discriminator(property_name="petType")
        child = make_model("Dog", [make_property("petType", default_value='"dog"')], parent="Pet")

        reconcile(child, parent)

        assert child.vars[0].default_value == '"dog"'

    def test_grandparent_properties_reach_grandchild(self) -> None:
        animal = make_model("Animal", [make_property("id", "long")])
        pet = make_model("Pet", [make_property("name")], parent="Animal")
        dog = make_model("Dog", [make_property("bark", "bool")], parent="Pet")

        reconcile(pet, animal)
        reconcile(dog, pet)

        assert [p.name for p in dog.parent_vars] == ["name", "id"]
        assert all(p.is_inherited for p in dog.parent_vars)

    def test_grandparent_enum_is_removed_from_grandchild(self) -> None:
        animal = make_model("Animal", [make_enum_property("status", ["a", "b"])])
        pet = make_model("Pet", [make_property("name")], parent="Animal")
        dog = make_model("Dog", [make_enum_property("status", ["a", "b"])], parent="Pet")

        reconcile(pet, animal)
        reconcile(dog, pet)

        assert dog.vars == []
        assert [p.name for p in dog.parent_vars] == ["name", "status"]

    def test_read_write_duplicates_are_removed(self) -> None:
        parent = make_model("Pet", [make_property("name")])
        child = make_model("Dog", [make_property("bark")], parent="Pet")
        child.read_write_vars.append(make_property("bark"))

        reconcile(child, parent)

        assert [p.name for p in child.read_write_vars] == ["bark"]


class TestDedupeProperties:
    def test_keeps_first_occurrence(self) -> None:
        first = make_property("name", description="first")
        properties = [first, make_property("id"), make_property("name", description="first")]

        assert dedupe_properties(properties) == [first, make_property("id")]
        assert dedupe_properties(properties)[0] is first

    def test_distinct_definitions_are_kept(self) -> None:
        properties = [make_property("name", description="a"), make_property("name", description="b")]
        assert len(dedupe_properties(properties)) == 2


class TestPetstoreInheritance:
    def test_child_models(self, petstore_spec: ParsedSpec) -> None:
        pet = petstore_spec.models["Pet"]
        dog = petstore_spec.models["Dog"]
        cat = petstore_spec.models["Cat"]

        assert pet.children == ["Dog", "Cat"]
        assert dog.parent == "Pet"
        assert cat.parent == "Pet"

    def test_inherited_enum_removed_from_dog(self, petstore_spec: ParsedSpec) -> None:
        dog = petstore_spec.models["Dog"]

        assert [p.name for p in dog.vars] == ["bark", "petType"]
        assert not dog.has_enums
        assert "status" in [p.name for p in dog.parent_vars]

    def test_discriminator_default(self, petstore_spec: ParsedSpec) -> None:
        dog = petstore_spec.models["Dog"]
        pet_type = next(p for p in dog.vars if p.name == "petType")

        assert pet_type.default_value == '"Dog"'

    def test_inherited_discriminator_default(self, petstore_spec: ParsedSpec) -> None:
        cat = petstore_spec.models["Cat"]
        pet = petstore_spec.models["Pet"]

        assert "petType" not in [p.name for p in cat.vars]
        inherited = next(p for p in cat.parent_vars if p.name == "petType")
        assert inherited.default_value == '"Cat"'
        assert next(p for p in pet.vars if p.name == "petType").default_value is None

    @pytest.mark.parametrize("name", ["Dog", "Cat"])
    def test_all_vars_are_parent_vars_then_own(self, petstore_spec: ParsedSpec, name: str) -> None:
        model = petstore_spec.models[name]

        assert model.all_vars == model.parent_vars + model.vars
        assert all(p.is_inherited for p in model.parent_vars)
