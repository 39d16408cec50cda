# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Incremental compile workflow for .psp files.

Implements a CMake-style cache: an artifact is reused when it already exists
and is strictly newer than the corresponding source file. Artifacts live under
the build directory, mirroring the layout of the sources below the source root
(``models/aangifte.psp`` -> ``build/models/aangifte.psp.json``).
"""

from __future__ import annotations

import logging
from pathlib import Path

from perspectives.compiler.artifact import ARTIFACT_SUFFIX, ArtifactError, read_artifact, write_artifact
from perspectives.compiler.parser import ParseError, parse
from perspectives.model.entities import NamedEntityCollection

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

SOURCE_SUFFIX = ".psp"


class CompilerError(Exception):
    """Raised when a source file cannot be read or parsed."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


def compile_files(
    files: list[Path],
    build_dir: Path,
    source_root: Path,
) -> dict[str, NamedEntityCollection]:
    """Compile a list of .psp source files.

    For each file, the compiler:
    1. Checks whether an up-to-date, readable artifact already exists (cache hit).
    2. Otherwise parses the source file and writes the artifact to *build_dir*.

    Args:
        files: Paths to the .psp source files to compile.
        build_dir: Root directory for artifacts.
        source_root: Directory the canonical keys are computed against.

    Returns:
        A mapping from canonical keys (the path below *source_root* without
        suffix, e.g. ``"models/aangifte"``) to the parsed collections.

    Raises:
        CompilerError: If a file is outside *source_root*, cannot be read, or
            does not parse.
    """
    compiled: dict[str, NamedEntityCollection] = {}
    for source_file in files:
        key = source_key(source_file, source_root)
        if key in compiled:
            continue
        compiled[key] = _compile_file(source_file, artifact_path(key, build_dir))
    return compiled


def source_key(source_file: Path, source_root: Path) -> str:
    """Return the canonical key for *source_file*: its path below *source_root* without suffix.

    Raises:
        CompilerError: If *source_file* is not under *source_root*.
    """
    try:
        rel = source_file.resolve().relative_to(source_root.resolve())
    except ValueError:
        raise CompilerError(f"Source file '{source_file}' is not under '{source_root}'") from None
    return str(rel.with_suffix("")).replace("\\", "/")


def artifact_path(key: str, build_dir: Path) -> Path:
    """Return the artifact path for a canonical key."""
    parts = key.split("/")
    artifact_dir = build_dir
    for part in parts[:-1]:
        artifact_dir = artifact_dir / part
    return artifact_dir / (parts[-1] + ARTIFACT_SUFFIX)


def find_sources(root: Path, exclude: list[Path] | None = None) -> list[Path]:
    """Return every .psp file below *root*, sorted, skipping the *exclude* directories."""
    excluded = [path.resolve() for path in exclude or []]
    found = []
    for path in sorted(root.rglob(f"*{SOURCE_SUFFIX}")):
        resolved = path.resolve()
        if any(resolved.is_relative_to(directory) for directory in excluded):
            continue
        found.append(path)
    return found


# ################
# Implementation
# ################


def _is_up_to_date(source_file: Path, artifact: Path) -> bool:
    """Return True if *artifact* exists and is strictly newer than *source_file*."""
    if not artifact.exists():
        return False
    return artifact.stat().st_mtime > source_file.stat().st_mtime


def _compile_file(source_file: Path, artifact: Path) -> NamedEntityCollection:
    if _is_up_to_date(source_file, artifact):
        try:
            collection = read_artifact(artifact)
        except (ArtifactError, OSError) as exc:
            logger.warning("Discarding unreadable artifact %s: %s", artifact, exc)
        else:
            logger.debug("Up to date: %s", source_file)
            return collection

    try:
        source_text = source_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise CompilerError(f"Cannot read source file '{source_file}': {exc}") from exc

    logger.info("Parsing %s", source_file)
    try:
        collection = parse(source_text)
    except ParseError as exc:
        raise CompilerError(f"Parse error in '{source_file}': {exc}") from exc

    write_artifact(collection, artifact)
    logger.debug("Wrote %s", artifact)
    return collection
