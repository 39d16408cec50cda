# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization and deserialization of parsed entity collections.

Artifacts are JSON documents: compact by default, indented when rendered for a
reader. The format is versioned so future schema changes can be detected.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from perspectives.model.entities import BinnenRol, Context, Entity, NamedEntityCollection, Rol

# ###############
# Public Interface
# ###############

ARTIFACT_FORMAT_VERSION = "1"
ARTIFACT_SUFFIX = ".psp.json"


class ArtifactError(ValueError):
    """Raised when an artifact cannot be decoded."""


def serialize(collection: NamedEntityCollection, indent: int | None = None) -> str:
    """Serialize a NamedEntityCollection to JSON.

    Args:
        collection: The parse result to render.
        indent: Pretty-print with this indentation; compact when ``None``.
    """
    if indent is None:
        return json.dumps(_collection_to_dict(collection), separators=(",", ":"))
    return json.dumps(_collection_to_dict(collection), indent=indent, ensure_ascii=False)


def deserialize(data: str) -> NamedEntityCollection:
    """Deserialize a NamedEntityCollection from a JSON string.

    Args:
        data: JSON string produced by :func:`serialize`.

    Returns:
        The reconstructed :class:`NamedEntityCollection`.

    Raises:
        ArtifactError: If the data is not valid JSON, the format version is not
            recognised, or an entity record is malformed.
    """
    try:
        obj = json.loads(data)
    except json.JSONDecodeError as exc:
        raise ArtifactError(f"Invalid artifact: {exc}") from exc
    if not isinstance(obj, dict):
        raise ArtifactError("Invalid artifact: expected a JSON object")
    version = obj.get("v")
    if version != ARTIFACT_FORMAT_VERSION:
        raise ArtifactError(f"Unsupported artifact format version: {version!r}")
    try:
        return _collection_from_dict(obj)
    except (KeyError, TypeError) as exc:
        raise ArtifactError(f"Malformed artifact entry: {exc}") from exc


def write_artifact(collection: NamedEntityCollection, path: Path) -> None:
    """Write a parsed collection to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(collection), encoding="utf-8")


def read_artifact(path: Path) -> NamedEntityCollection:
    """Read and deserialize an artifact from *path*."""
    return deserialize(path.read_text(encoding="utf-8"))


# ################
# Implementation
# ################


def _collection_to_dict(collection: NamedEntityCollection) -> dict[str, Any]:
    return {
        "v": ARTIFACT_FORMAT_VERSION,
        "name": collection.name,
        "entities": [_entity_to_dict(e) for e in collection.entities.values()],
    }


def _collection_from_dict(obj: dict[str, Any]) -> NamedEntityCollection:
    entities: dict[str, Entity] = {}
    for item in obj.get("entities", []):
        entity = _entity_from_dict(item)
        entities[entity.id] = entity
    return NamedEntityCollection(name=obj["name"], entities=entities)


def _entity_to_dict(entity: Entity) -> dict[str, Any]:
    if isinstance(entity, Context):
        return _context_to_dict(entity)
    return _rol_to_dict(entity)


def _entity_from_dict(obj: dict[str, Any]) -> Entity:
    kind = obj["kind"]
    if kind == "context":
        return _context_from_dict(obj)
    if kind == "rol":
        return _rol_from_dict(obj)
    raise ArtifactError(f"Unknown entity kind: {kind!r}")


def _rol_to_dict(rol: Rol) -> dict[str, Any]:
    d: dict[str, Any] = {
        "kind": "rol",
        "id": rol.id,
        "type": rol.psp_type,
        "context": rol.context,
        "properties": rol.properties,
        "filled_roles": rol.filled_roles,
    }
    if rol.binding is not None:
        d["binding"] = rol.binding
    if rol.occurrence is not None:
        d["occurrence"] = rol.occurrence
    return d


def _rol_from_dict(obj: dict[str, Any]) -> Rol:
    return Rol(
        id=obj["id"],
        psp_type=obj["type"],
        binding=obj.get("binding"),
        context=obj.get("context", ""),
        properties=obj.get("properties", {}),
        filled_roles=obj.get("filled_roles", {}),
        occurrence=obj.get("occurrence"),
    )


def _binnen_rol_to_dict(rol: BinnenRol) -> dict[str, Any]:
    d: dict[str, Any] = {"id": rol.id, "properties": rol.properties}
    if rol.binding is not None:
        d["binding"] = rol.binding
    return d


def _binnen_rol_from_dict(obj: dict[str, Any]) -> BinnenRol:
    return BinnenRol(id=obj["id"], binding=obj.get("binding"), properties=obj.get("properties", {}))


def _context_to_dict(context: Context) -> dict[str, Any]:
    return {
        "kind": "context",
        "id": context.id,
        "type": context.psp_type,
        "inner_role": _binnen_rol_to_dict(context.inner_role),
        "outer_role": context.outer_role,
        "roles": context.roles_in_context,
    }


def _context_from_dict(obj: dict[str, Any]) -> Context:
    return Context(
        id=obj["id"],
        psp_type=obj["type"],
        inner_role=_binnen_rol_from_dict(obj["inner_role"]),
        outer_role=obj["outer_role"],
        roles_in_context=obj.get("roles", []),
    )
