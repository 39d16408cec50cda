# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Value types for the Perspectives context/role model."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class DataType(Enum):
    """Data types a property can be declared with instead of a value."""

    NUMBER = "Number"
    STRING = "String"
    BOOL = "Bool"
    DATE = "Date"


class StringValue(BaseModel):
    """A quoted string literal."""

    kind: Literal["string"] = "string"
    value: str


class IntValue(BaseModel):
    """An integer literal."""

    kind: Literal["int"] = "int"
    value: int


class BoolValue(BaseModel):
    """The literal ``true`` or ``false``."""

    kind: Literal["bool"] = "bool"
    value: bool


# A leaf value on the right-hand side of a property assignment.
SimpleValue = Annotated[StringValue | IntValue | BoolValue, _Field(discriminator="kind")]


class TypeDeclaration(BaseModel):
    """The header line of a definition: the instance name followed by its type name."""

    instance_name: str
    type_name: str
