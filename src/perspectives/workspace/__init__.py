# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Workspace configuration for Perspectives projects."""

from perspectives.workspace.config import (
    DEFAULT_REMOTE_SYNC_DIRECTORY,
    WORKSPACE_CONFIG_FILENAME,
    RemoteSource,
    WorkspaceConfig,
    WorkspaceConfigError,
    load_workspace_config,
    parse_workspace_config,
    render_workspace_config,
)

__all__ = [
    "DEFAULT_REMOTE_SYNC_DIRECTORY",
    "WORKSPACE_CONFIG_FILENAME",
    "RemoteSource",
    "WorkspaceConfig",
    "WorkspaceConfigError",
    "load_workspace_config",
    "parse_workspace_config",
    "render_workspace_config",
]
