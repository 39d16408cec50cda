# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Consistency checks for parsed entity collections.

The parser guarantees structural validity of a single source. These checks
look at the collection as a whole: references between entities, contexts that
carry no information, and binding chains that loop back on themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from perspectives.model.entities import Context, NamedEntityCollection, Rol

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal issue: the collection is usable but probably incomplete.

    Attributes:
        message: Human-readable description of the warning.
    """

    message: str


@dataclass(frozen=True)
class ValidationError:
    """A fatal inconsistency in the collection.

    Attributes:
        message: Human-readable description of the error.
    """

    message: str


@dataclass
class ValidationResult:
    """Result of running the consistency checks.

    Attributes:
        warnings: Non-fatal issues found during validation.
        errors: Fatal inconsistencies.
    """

    warnings: list[ValidationWarning] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Return True if any fatal validation errors were found."""
        return len(self.errors) > 0


def validate(collection: NamedEntityCollection) -> ValidationResult:
    """Run all consistency checks on *collection*.

    Checks performed:

    1. **External bindings** (warning): a role is bound to an id that is not
       part of the collection. Such bindings point at entities defined in
       another source and cannot be checked here.

    2. **Empty contexts** (warning): a context with no roles, no public and
       no private properties.

    3. **Missing roles** (error): a context lists a role, or names an outer
       role, that is not in the collection.

    4. **Binding cycles** (error): following bindings from a role leads back
       to that role. A binding to a context continues at its outer role.

    Returns:
        A :class:`ValidationResult`; empty when the collection is consistent.
    """
    warnings: list[ValidationWarning] = []
    errors: list[ValidationError] = []

    warnings.extend(_check_external_bindings(collection))
    warnings.extend(_check_empty_contexts(collection))
    errors.extend(_check_missing_roles(collection))
    errors.extend(_check_binding_cycles(collection))

    return ValidationResult(warnings=warnings, errors=errors)


# ################
# Implementation
# ################


def _roles(collection: NamedEntityCollection) -> list[Rol]:
    return [e for e in collection.entities.values() if isinstance(e, Rol)]


def _contexts(collection: NamedEntityCollection) -> list[Context]:
    return [e for e in collection.entities.values() if isinstance(e, Context)]


def _check_external_bindings(collection: NamedEntityCollection) -> list[ValidationWarning]:
    return [
        ValidationWarning(
            message=f"Role '{rol.id}' ({rol.psp_type}) is bound to '{rol.binding}', which is not defined here"
        )
        for rol in _roles(collection)
        if rol.binding is not None and rol.binding not in collection.entities
    ]


def _check_empty_contexts(collection: NamedEntityCollection) -> list[ValidationWarning]:
    warnings = []
    for context in _contexts(collection):
        outer = collection.entities.get(context.outer_role)
        has_public = isinstance(outer, Rol) and bool(outer.properties)
        if not context.roles_in_context and not has_public and not context.inner_role.properties:
            warnings.append(ValidationWarning(message=f"Context '{context.id}' has no roles and no properties"))
    return warnings


def _check_missing_roles(collection: NamedEntityCollection) -> list[ValidationError]:
    errors = []
    for context in _contexts(collection):
        if context.outer_role not in collection.entities:
            errors.append(
                ValidationError(message=f"Context '{context.id}' refers to missing outer role '{context.outer_role}'")
            )
        for role_id in context.roles_in_context:
            if not isinstance(collection.entities.get(role_id), Rol):
                errors.append(ValidationError(message=f"Context '{context.id}' refers to missing role '{role_id}'"))
    return errors


def _next_role(collection: NamedEntityCollection, rol: Rol) -> Rol | None:
    """Return the role *rol* is bound to within *collection*, if any."""
    if rol.binding is None:
        return None
    target = collection.entities.get(rol.binding)
    if isinstance(target, Context):
        target = collection.entities.get(target.outer_role)
    return target if isinstance(target, Rol) else None


def _check_binding_cycles(collection: NamedEntityCollection) -> list[ValidationError]:
    """Report each binding cycle once, starting from the role first reached.

    Every role binds at most one other role, so the chain from any role either
    ends or enters exactly one cycle.
    """
    errors = []
    finished: set[str] = set()
    for start in _roles(collection):
        chain: list[str] = []
        on_chain: set[str] = set()
        current: Rol | None = start
        while current is not None and current.id not in finished:
            if current.id in on_chain:
                cycle = chain[chain.index(current.id) :] + [current.id]
                errors.append(ValidationError(message=f"Binding cycle: {' -> '.join(cycle)}"))
                break
            chain.append(current.id)
            on_chain.add(current.id)
            current = _next_role(collection, current)
        finished.update(chain)
    return errors
