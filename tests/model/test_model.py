# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""High-level tests demonstrating how to construct the Perspectives entity model."""

import pytest
from pydantic import TypeAdapter, ValidationError

from perspectives.model import (
    BinnenRol,
    BoolValue,
    Context,
    DataType,
    Entity,
    IntValue,
    NamedEntityCollection,
    Rol,
    SimpleValue,
    StringValue,
    TypeDeclaration,
)


def test_rol_defaults() -> None:
    """A free-standing role has no binding, no context and no properties."""
    rol = Rol(id="jan", psp_type=":Persoon")
    assert rol.kind == "rol"
    assert rol.binding is None
    assert rol.context == ""
    assert rol.properties == {}
    assert rol.filled_roles == {}
    assert rol.occurrence is None


def test_default_collections_are_not_shared() -> None:
    """Each role gets its own property map."""
    first = Rol(id="a", psp_type=":T")
    second = Rol(id="b", psp_type=":T")
    first.properties[":p"] = ["1"]
    assert second.properties == {}


def test_context_with_inner_and_outer_role() -> None:
    """A context names its outer role and embeds its inner role."""
    ctx = Context(
        id="A1",
        psp_type=":Aangifte",
        inner_role=BinnenRol(id="A1_binnenRol", binding="A1_buitenRol", properties={":notitie": ["x"]}),
        outer_role="A1_buitenRol",
        roles_in_context=["r1"],
    )
    assert ctx.kind == "context"
    assert ctx.inner_role.binding == ctx.outer_role


def test_collection_entities_discriminated_by_kind() -> None:
    """Entities given as plain dicts are validated into Rol or Context by their kind."""
    collection = NamedEntityCollection.model_validate(
        {
            "name": "A1",
            "entities": {
                "r1": {"kind": "rol", "id": "r1", "psp_type": ":aangever"},
                "A1": {
                    "kind": "context",
                    "id": "A1",
                    "psp_type": ":Aangifte",
                    "inner_role": {"id": "A1_binnenRol"},
                    "outer_role": "A1_buitenRol",
                },
            },
        }
    )
    assert isinstance(collection.entities["r1"], Rol)
    assert isinstance(collection.entities["A1"], Context)


def test_unknown_entity_kind_rejected() -> None:
    with pytest.raises(ValidationError):
        TypeAdapter(Entity).validate_python({"kind": "perspectief", "id": "p", "psp_type": ":P"})


@pytest.mark.parametrize(
    ("data", "expected_type"),
    [
        ({"kind": "string", "value": "x"}, StringValue),
        ({"kind": "int", "value": 3}, IntValue),
        ({"kind": "bool", "value": True}, BoolValue),
    ],
)
def test_simple_value_union(data: dict, expected_type: type) -> None:
    assert isinstance(TypeAdapter(SimpleValue).validate_python(data), expected_type)


def test_data_type_names() -> None:
    assert [d.value for d in DataType] == ["Number", "String", "Bool", "Date"]


def test_type_declaration() -> None:
    decl = TypeDeclaration(instance_name=":jan", type_name=":Persoon")
    assert decl.instance_name == ":jan"
