# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the Perspectives workspace configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

# ###############
# Public Interface
# ###############

WORKSPACE_CONFIG_FILENAME = ".psp-workspace.yaml"
DEFAULT_REMOTE_SYNC_DIRECTORY = ".psp-remotes"


class WorkspaceConfigError(Exception):
    """Raised when a workspace configuration file is invalid or cannot be loaded."""


@dataclass
class RemoteSource:
    """A .psp source published over HTTP, fetched into the workspace by name."""

    name: str
    url: str


@dataclass
class WorkspaceConfig:
    """The parsed configuration for a Perspectives workspace.

    Attributes:
        build_directory: Relative path (from the workspace root) for parse artifacts.
        remote_sync_directory: Relative path where remote sources are downloaded.
        remote_sources: Named remote sources to fetch.
    """

    build_directory: str
    remote_sync_directory: str = DEFAULT_REMOTE_SYNC_DIRECTORY
    remote_sources: list[RemoteSource] = field(default_factory=list)


def load_workspace_config(path: Path) -> WorkspaceConfig:
    """Load and parse a Perspectives workspace configuration file.

    Args:
        path: Path to the `.psp-workspace.yaml` file.

    Returns:
        A WorkspaceConfig instance populated from the file.

    Raises:
        WorkspaceConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise WorkspaceConfigError(f"Workspace config file not found: {path}") from None
    except OSError as exc:
        raise WorkspaceConfigError(f"Cannot read workspace config file: {exc}") from exc

    return parse_workspace_config(text, source_label=str(path))


def parse_workspace_config(text: str, source_label: str = "<string>") -> WorkspaceConfig:
    """Parse workspace config YAML text into a WorkspaceConfig.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Raises:
        WorkspaceConfigError: If the YAML is invalid or required fields are missing.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise WorkspaceConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if not isinstance(data, dict):
        raise WorkspaceConfigError(f"{source_label}: workspace config must be a YAML mapping")

    build_directory = _require_string(data, "build-directory", source_label)

    remote_sync_directory = DEFAULT_REMOTE_SYNC_DIRECTORY
    if "remote-sync-directory" in data:
        remote_sync_directory = _require_string(data, "remote-sync-directory", source_label)

    remote_sources: list[RemoteSource] = []
    if "remote-sources" in data:
        raw_sources = data["remote-sources"]
        if not isinstance(raw_sources, list):
            raise WorkspaceConfigError(f"{source_label}: 'remote-sources' must be a list")
        for index, entry in enumerate(raw_sources):
            remote_sources.append(_parse_remote_source(entry, index, source_label))

    names = [source.name for source in remote_sources]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise WorkspaceConfigError(f"{source_label}: duplicate remote source names: {', '.join(duplicates)}")

    return WorkspaceConfig(
        build_directory=build_directory,
        remote_sync_directory=remote_sync_directory,
        remote_sources=remote_sources,
    )


def render_workspace_config(config: WorkspaceConfig) -> str:
    """Render *config* as YAML text that :func:`parse_workspace_config` accepts."""
    data: dict[str, object] = {"build-directory": config.build_directory}
    if config.remote_sync_directory != DEFAULT_REMOTE_SYNC_DIRECTORY:
        data["remote-sync-directory"] = config.remote_sync_directory
    if config.remote_sources:
        data["remote-sources"] = [{"name": s.name, "url": s.url} for s in config.remote_sources]
    return yaml.safe_dump(data, sort_keys=False)


# ################
# Implementation
# ################


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a required string field from a mapping, raising WorkspaceConfigError if missing."""
    if key not in mapping:
        raise WorkspaceConfigError(f"{source_label}: missing required field '{key}'")
    value = mapping[key]
    if not isinstance(value, str):
        raise WorkspaceConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _parse_remote_source(entry: object, index: int, source_label: str) -> RemoteSource:
    location = f"{source_label}: remote-sources[{index}]"

    if not isinstance(entry, dict):
        raise WorkspaceConfigError(f"{location} must be a YAML mapping")

    name = _require_string(entry, "name", location)
    url = _require_string(entry, "url", location)
    if not url.startswith(("http://", "https://")):
        raise WorkspaceConfigError(f"{location} '{name}': 'url' must be an http(s) URL")
    return RemoteSource(name=name, url=url)
