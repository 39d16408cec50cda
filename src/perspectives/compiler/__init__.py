# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compile pipeline for .psp files: loading, parsing, and artifacts."""

from perspectives.compiler.artifact import (
    ARTIFACT_SUFFIX,
    ArtifactError,
    deserialize,
    read_artifact,
    serialize,
    write_artifact,
)
from perspectives.compiler.build import CompilerError, compile_files, find_sources
from perspectives.compiler.parser import ParseError, parse
from perspectives.compiler.sources import SourceError, fetch_remote_sources, load_source

__all__ = [
    "parse",
    "ParseError",
    "serialize",
    "deserialize",
    "write_artifact",
    "read_artifact",
    "ArtifactError",
    "ARTIFACT_SUFFIX",
    "compile_files",
    "find_sources",
    "CompilerError",
    "load_source",
    "fetch_remote_sources",
    "SourceError",
]
