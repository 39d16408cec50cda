# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Contexts and roles produced by the context/role parser."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############

# Property name -> values, in source order.
Properties = dict[str, list[str]]


class Rol(BaseModel):
    """A role instance.

    Attributes:
        id: Declared or generated identifier.
        psp_type: The role type (for role bindings, the role name).
        binding: Id of the role or outer role that fills this role.
        context: Id of the context the role belongs to ('' for free-standing roles).
        properties: Property values of the role.
        filled_roles: Ids of roles bound to this role, keyed by their role type.
        occurrence: Optional index written after the role name, e.g. ``:aangever (1)``.
    """

    kind: Literal["rol"] = "rol"
    id: str
    psp_type: str
    binding: str | None = None
    context: str = ""
    properties: Properties = _Field(default_factory=dict)
    filled_roles: dict[str, list[str]] = _Field(default_factory=dict)
    occurrence: int | None = None


class BinnenRol(BaseModel):
    """The inner role of a context, holding its private properties."""

    id: str
    binding: str | None = None
    properties: Properties = _Field(default_factory=dict)


class Context(BaseModel):
    """A context instance with its inner role, outer role and bound roles."""

    kind: Literal["context"] = "context"
    id: str
    psp_type: str
    inner_role: BinnenRol
    outer_role: str
    roles_in_context: list[str] = _Field(default_factory=list)


Entity = Annotated[Context | Rol, _Field(discriminator="kind")]


class NamedEntityCollection(BaseModel):
    """Every entity found in a parse, keyed by id, plus the id of the top-level entity."""

    name: str
    entities: dict[str, Entity] = _Field(default_factory=dict)
