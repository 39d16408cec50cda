# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Indentation-sensitive parser for Perspectives context/role sources (.psp files).

A source defines contexts and roles::

    :Aangifte1 :Aangifte
      public :status = "voltooid"
      private :aantekening = "bla die bla"
      :aangever => :Jansen
        :betrouwbaarheid = 6

Each definition line names an instance followed by its type. Indented below a
context come its public properties, its private properties and its role
bindings, in that order. The result is a flat
:class:`~perspectives.model.entities.NamedEntityCollection` of every context
and role found.
"""

from __future__ import annotations

import uuid
from typing import Any

from perspectives.model.entities import BinnenRol, Context, NamedEntityCollection, Properties, Rol
from perspectives.model.types import BoolValue, DataType, IntValue, SimpleValue, StringValue, TypeDeclaration
from perspectives.parser.core import (
    ParseError,
    Parser,
    alpha_num,
    attempt,
    char,
    eof,
    fail,
    furthest,
    label,
    lazy,
    letter,
    lower,
    many,
    one_of,
    option,
    pure,
    seq,
    string,
    upper,
)
from perspectives.parser.indent import (
    block,
    indented,
    indented_block,
    run_indent_parser,
    same_line,
    same_or_indented,
    with_pos,
)
from perspectives.parser.token import LanguageDef, make_token_parser

__all__ = [
    "BUITEN_ROL_TYPE",
    "PERSPECTIVES_DEF",
    "ParseError",
    "context",
    "data_type",
    "definition",
    "domein_name",
    "format_value",
    "link_filled_roles",
    "local_name",
    "local_property_name",
    "new_guid",
    "parse",
    "prefix",
    "prefixed_property_name",
    "prefixed_resource_name",
    "private_context_property_assignment",
    "property_name",
    "public_context_property_assignment",
    "qualified_property_name",
    "qualified_resource_name",
    "resource_name",
    "role",
    "role_binding",
    "role_property_assignment",
    "simple_value",
    "source_file",
    "text",
    "token",
    "type_declaration",
]

# ###############
# Public Interface
# ###############

PERSPECTIVES_DEF = LanguageDef(
    comment_start="{-",
    comment_end="-}",
    comment_line="--",
    nested_comments=True,
    ident_start=letter,
    ident_letter=alpha_num | one_of("_'"),
    reserved_names=("Text", "false", "private", "public", "true"),
    reserved_op_names=("=", "=>"),
    case_sensitive=True,
)

token = make_token_parser(PERSPECTIVES_DEF)

BUITEN_ROL_TYPE = "model:Perspectives#BuitenRol"


def new_guid() -> str:
    """Return a fresh identifier for a role bound without a declared name.

    Uniqueness is probabilistic (random UUIDs); collisions are not checked.
    """
    return str(uuid.uuid4())


def local_name(name: str) -> str:
    """Strip the prefix (``psp:``, ``:``, ``$``) or domain (``model:Domain#``) from *name*."""
    if "#" in name:
        return name.rsplit("#", 1)[1]
    return name.split(":", 1)[-1].removeprefix("$")


def format_value(value: SimpleValue | DataType) -> str:
    """Render a property value the way it is stored in a property map."""
    if isinstance(value, DataType):
        return value.value
    if isinstance(value, BoolValue):
        return "true" if value.value else "false"
    if isinstance(value, IntValue):
        return str(value.value)
    return value.value


def _join(*parsers: Parser[Any]) -> Parser[str]:
    """Run *parsers* in order and concatenate their characters."""

    def concat(parts: tuple[Any, ...]) -> str:
        return "".join(part if isinstance(part, str) else "".join(part) for part in parts)

    return seq(*parsers).map(concat)


_ident_letter = PERSPECTIVES_DEF.ident_letter

# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------

# "$" is a prefix of its own: $Aangifte, $aantekening.
prefix: Parser[str] = _join(many(lower), char(":")) | string("$")

local_property_name: Parser[str] = _join(lower, many(_ident_letter))

domein_name: Parser[str] = _join(string("model:"), upper, many(_ident_letter), char("#"))

qualified_property_name: Parser[str] = label(
    token.lexeme(attempt(_join(domein_name, local_property_name))), "qualified property name"
)

prefixed_property_name: Parser[str] = label(
    token.lexeme(attempt(_join(prefix, local_property_name))), "prefixed property name"
)

property_name: Parser[str] = label(qualified_property_name | prefixed_property_name, "property name")

_local_resource_name = _join(upper, many(_ident_letter))

qualified_resource_name: Parser[str] = token.lexeme(attempt(_join(domein_name, _local_resource_name)))

prefixed_resource_name: Parser[str] = token.lexeme(attempt(_join(prefix, _local_resource_name)))

resource_name: Parser[str] = label(qualified_resource_name | prefixed_resource_name, "resource name")

# Instance names may start with either case: ":myRole", ":Aangifte1".
_local_instance_name = _join(letter, many(_ident_letter))

instance_name: Parser[str] = label(
    token.lexeme(attempt(_join(domein_name, _local_instance_name)))
    | token.lexeme(attempt(_join(prefix, _local_instance_name))),
    "instance name",
)

type_declaration: Parser[TypeDeclaration] = with_pos(seq(instance_name, same_line >> resource_name)).map(
    lambda names: TypeDeclaration(instance_name=names[0], type_name=names[1])
)

# ---------------------------------------------------------------------------
# Values and property assignments
# ---------------------------------------------------------------------------

simple_value: Parser[SimpleValue] = label(
    token.string_literal.map(lambda text: StringValue(value=text))
    | token.integer.map(lambda number: IntValue(value=number))
    | token.reserved("true").result(BoolValue(value=True))
    | token.reserved("false").result(BoolValue(value=False)),
    "simple value",
)


def _check_data_type(name: str) -> Parser[DataType]:
    if name in {member.value for member in DataType}:
        return pure(DataType(name))
    return fail(f"Unknown data type {name!r}")


data_type: Parser[DataType] = label(attempt(token.identifier.bind(_check_data_type)), "data type")

_property_value = label(simple_value | data_type, "value").map(format_value)


def _assignment(name: Parser[str]) -> Parser[tuple[str, str]]:
    parts = seq(name, same_or_indented >> token.reserved_op("="), same_or_indented >> _property_value)
    return parts.map(lambda p: (p[0], p[2]))


role_property_assignment: Parser[tuple[str, str]] = with_pos(_assignment(property_name))

_context_property_name = property_name | token.identifier

public_context_property_assignment: Parser[tuple[str, str]] = with_pos(
    token.reserved("public") >> _assignment(_context_property_name)
)

private_context_property_assignment: Parser[tuple[str, str]] = with_pos(
    token.reserved("private") >> _assignment(_context_property_name)
)

# ---------------------------------------------------------------------------
# Roles and contexts
# ---------------------------------------------------------------------------

_role_occurrence = same_line >> token.parens(token.natural)

# A binding target is a bare name on the line of "=>", or a definition on an
# indented line below it; both yield (binding id, entities defined inline).
_bare_target = (same_line >> instance_name).map(lambda name: (local_name(name), {}))
_nested_target = (indented >> lazy(lambda: attempt(context) | role)).map(lambda nested: _bound_definition(nested))
_binding_target = _bare_target | _nested_target


def role_binding(context_id: str) -> Parser[NamedEntityCollection]:
    """Parse ``roleName [(n)] => target`` plus the role's indented property assignments.

    The bound role gets a generated id; the collection holds it and every
    entity defined inline as its binding target.
    """
    parts = seq(
        property_name,
        option(None, _role_occurrence),
        same_or_indented >> token.reserved_op("=>") >> _binding_target,
        indented_block(role_property_assignment),
    )
    return with_pos(parts).map(lambda p: _build_role_binding(context_id, *p))


def _context_body(declaration: TypeDeclaration) -> Parser[NamedEntityCollection]:
    context_id = local_name(declaration.instance_name)
    parts = seq(
        indented_block(public_context_property_assignment),
        indented_block(private_context_property_assignment),
        indented_block(role_binding(context_id)),
    )
    return parts.map(lambda p: _build_context(declaration, *p))


context: Parser[NamedEntityCollection] = with_pos(type_declaration.bind(_context_body))

role: Parser[NamedEntityCollection] = with_pos(
    type_declaration.bind(
        lambda declaration: indented_block(role_property_assignment).map(
            lambda assignments: _build_role(declaration, assignments)
        )
    )
)

definition: Parser[NamedEntityCollection] = furthest(context, role)

text: Parser[NamedEntityCollection] = with_pos(
    seq(token.reserved("Text") >> instance_name, block(definition)).map(lambda p: _build_text(*p))
)

# Input left over at the column of a lone definition is a body line that is
# not indented.
_end_of_definition: Parser[None] = eof | (indented >> eof)

source_file: Parser[NamedEntityCollection] = token.white_space >> ((text << eof) | (definition << _end_of_definition))


def parse(source: str) -> NamedEntityCollection:
    """Parse a complete Perspectives source into a NamedEntityCollection.

    Args:
        source: The full text of a .psp file.

    Returns:
        The collection of every context and role defined in *source*, named
        after the ``Text`` header or the single top-level definition.

    Raises:
        ParseError: If *source* does not match the grammar.
    """
    collection = run_indent_parser(source, source_file)
    link_filled_roles(collection)
    return collection


def link_filled_roles(collection: NamedEntityCollection) -> None:
    """Record on each bound role which roles it fills, keyed by the filler's type.

    A binding that names a context is recorded on that context's outer role.
    Bindings to ids outside *collection* are left alone.
    """
    for entity in list(collection.entities.values()):
        if not isinstance(entity, Rol) or entity.binding is None:
            continue
        target = collection.entities.get(entity.binding)
        if isinstance(target, Context):
            target = collection.entities.get(target.outer_role)
        if isinstance(target, Rol):
            filled = target.filled_roles.setdefault(entity.psp_type, [])
            if entity.id not in filled:
                filled.append(entity.id)


# ################
# Implementation
# ################


def _collect(assignments: list[tuple[str, str]]) -> Properties:
    properties: Properties = {}
    for name, value in assignments:
        properties.setdefault(name, []).append(value)
    return properties


def _bound_definition(nested: NamedEntityCollection) -> tuple[str, dict[str, Any]]:
    """Return the id a role binds to when its target is defined inline."""
    entity = nested.entities[nested.name]
    binding = entity.outer_role if isinstance(entity, Context) else entity.id
    return binding, nested.entities


def _build_role_binding(
    context_id: str,
    role_name: str,
    occurrence: int | None,
    target: tuple[str, dict[str, Any]],
    assignments: list[tuple[str, str]],
) -> NamedEntityCollection:
    binding, nested = target
    rol_id = new_guid()
    entities = dict(nested)
    entities[rol_id] = Rol(
        id=rol_id,
        psp_type=role_name,
        binding=binding,
        context=context_id,
        properties=_collect(assignments),
        occurrence=occurrence,
    )
    return NamedEntityCollection(name=rol_id, entities=entities)


def _build_context(
    declaration: TypeDeclaration,
    public: list[tuple[str, str]],
    private: list[tuple[str, str]],
    bindings: list[NamedEntityCollection],
) -> NamedEntityCollection:
    context_id = local_name(declaration.instance_name)
    buiten_rol_id = f"{context_id}_buitenRol"
    entities: dict[str, Any] = {}
    for bound in bindings:
        entities.update(bound.entities)
    entities[buiten_rol_id] = Rol(
        id=buiten_rol_id,
        psp_type=BUITEN_ROL_TYPE,
        context=context_id,
        properties=_collect(public),
    )
    entities[context_id] = Context(
        id=context_id,
        psp_type=declaration.type_name,
        inner_role=BinnenRol(
            id=f"{context_id}_binnenRol",
            binding=buiten_rol_id,
            properties=_collect(private),
        ),
        outer_role=buiten_rol_id,
        roles_in_context=[bound.name for bound in bindings],
    )
    return NamedEntityCollection(name=context_id, entities=entities)


def _build_role(declaration: TypeDeclaration, assignments: list[tuple[str, str]]) -> NamedEntityCollection:
    rol_id = local_name(declaration.instance_name)
    rol = Rol(id=rol_id, psp_type=declaration.type_name, properties=_collect(assignments))
    return NamedEntityCollection(name=rol_id, entities={rol_id: rol})


def _build_text(header: str, definitions: list[NamedEntityCollection]) -> NamedEntityCollection:
    entities: dict[str, Any] = {}
    for collection in definitions:
        entities.update(collection.entities)
    return NamedEntityCollection(name=local_name(header), entities=entities)
