# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model for parsed Perspectives sources (contexts, roles, values)."""

from perspectives.model.entities import (
    BinnenRol,
    Context,
    Entity,
    NamedEntityCollection,
    Properties,
    Rol,
)
from perspectives.model.types import (
    BoolValue,
    DataType,
    IntValue,
    SimpleValue,
    StringValue,
    TypeDeclaration,
)

__all__ = [
    # Values
    "BoolValue",
    "DataType",
    "IntValue",
    "SimpleValue",
    "StringValue",
    "TypeDeclaration",
    # Entities
    "BinnenRol",
    "Context",
    "Entity",
    "NamedEntityCollection",
    "Properties",
    "Rol",
]
